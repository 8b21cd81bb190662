from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List
import logging

from aayutrace.middleware.transaction_handler import transactional
from aayutrace.models.category import Category
from aayutrace.models.product import Product
from aayutrace.models.user import User
from aayutrace.schemas.category import CategoryCreate, CategoryUpdate
from aayutrace.utils.exceptions import StaleReferenceError, CategoryInUseError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    {"name": "Food", "icon": "🍎", "color": "#22c55e"},
    {"name": "Medicine", "icon": "💊", "color": "#ef4444"},
    {"name": "Electronics", "icon": "📱", "color": "#3b82f6"},
    {"name": "Cosmetics", "icon": "💄", "color": "#ec4899"},
    {"name": "Household", "icon": "🏠", "color": "#f59e0b"},
)


class CategoryService:
    """
    Catégories de produits

    Les catégories par défaut (user_id NULL) sont visibles par tous et
    non modifiables. Une catégorie utilisée par un produit ne peut pas
    être supprimée.
    """

    def __init__(self, db: Session):
        self.db = db

    @transactional
    def ensure_default_categories(self) -> int:
        existing = {
            name
            for (name,) in self.db.query(Category.name)
            .filter(Category.user_id.is_(None))
            .all()
        }

        created = 0
        for data in DEFAULT_CATEGORIES:
            if data["name"] not in existing:
                self.db.add(Category(user_id=None, **data))
                created += 1

        if created:
            logger.info(f"Seeded {created} default categories")
        return created

    def list_categories(self, user: User) -> List[Category]:
        return (
            self.db.query(Category)
            .filter(or_(Category.user_id.is_(None), Category.user_id == user.id))
            .order_by(Category.name)
            .all()
        )

    def get_accessible_category(self, user: User, category_id: int) -> Category:
        category = (
            self.db.query(Category)
            .filter(
                Category.id == category_id,
                or_(Category.user_id.is_(None), Category.user_id == user.id),
            )
            .first()
        )
        if not category:
            raise StaleReferenceError("category", category_id)
        return category

    def _get_owned_category(self, user: User, category_id: int) -> Category:
        category = self.get_accessible_category(user, category_id)
        if category.user_id is None:
            raise ValueError("Default categories cannot be modified")
        return category

    @transactional
    def create_category(self, user: User, data: CategoryCreate) -> Category:
        category = Category(
            user_id=user.id, name=data.name, icon=data.icon, color=data.color
        )
        self.db.add(category)
        self.db.flush()

        logger.info(f"Category created: {category.id} - {category.name}")
        return category

    @transactional
    def update_category(self, user: User, category_id: int, data: CategoryUpdate) -> Category:
        category = self._get_owned_category(user, category_id)

        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(category, key, value)

        return category

    @transactional
    def delete_category(self, user: User, category_id: int) -> None:
        category = self._get_owned_category(user, category_id)

        product_count = (
            self.db.query(Product).filter(Product.category_id == category.id).count()
        )
        if product_count:
            raise CategoryInUseError(category.id, product_count)

        self.db.delete(category)
        logger.info(f"Category deleted: {category_id}")
