from sqlalchemy.orm import Session, Query, joinedload
from sqlalchemy import or_
from typing import Optional, List, Tuple, Dict, Any
from datetime import date, timedelta
import logging

from aayutrace.middleware.transaction_handler import transactional
from aayutrace.models.product import Product
from aayutrace.models.family import FamilyMember
from aayutrace.models.user import User
from aayutrace.core.config import settings
from aayutrace.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from aayutrace.services.category_service import CategoryService
from aayutrace.services.notification_service import NotificationService
from aayutrace.services.reminder_service import ReminderService
from aayutrace.utils.date_helpers import classify_date
from aayutrace.utils.exceptions import StaleReferenceError
from aayutrace.utils.validators import sanitize_search_query

logger = logging.getLogger(__name__)

REMINDER_WARNING = "Product saved, but reminders could not be scheduled. They will be retried on the next save."


def serialize_product(product: Product, today: Optional[date] = None) -> Dict[str, Any]:
    """Produit + statut d'urgence de chaque date suivie"""
    data = ProductResponse.model_validate(product).model_dump()

    for field, status_field in (
        ("expiry_date", "expiry_status"),
        ("warranty_date", "warranty_status"),
    ):
        status = classify_date(getattr(product, field), today)
        data[status_field] = (
            {
                "status": status.status,
                "days_remaining": status.days_remaining,
                "days_past": status.days_past,
            }
            if status
            else None
        )

    return data


class ProductService:
    """
    Inventaire de produits

    - Un produit est visible par son propriétaire et, s'il est partagé,
      par les membres de sa famille
    - Seul le propriétaire peut le modifier ou le supprimer
    - Chaque enregistrement resynchronise les rappels (best-effort)
    """

    def __init__(self, db: Session):
        self.db = db

    def get_family_id(self, user_id: int) -> Optional[int]:
        membership = (
            self.db.query(FamilyMember).filter(FamilyMember.user_id == user_id).first()
        )
        return membership.family_id if membership else None

    def visible_products_query(self, user: User) -> Query:
        family_id = self.get_family_id(user.id)

        query = self.db.query(Product).options(joinedload(Product.category))
        if family_id is None:
            return query.filter(Product.user_id == user.id)

        return query.filter(
            or_(Product.user_id == user.id, Product.family_id == family_id)
        )

    def list_products(
        self,
        user: User,
        search: Optional[str] = None,
        category_id: Optional[int] = None,
        status: str = "all",
        today: Optional[date] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Product]:
        today = today or date.today()
        query = self.visible_products_query(user)

        search = sanitize_search_query(search) if search else None
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Product.name.ilike(pattern),
                    Product.brand.ilike(pattern),
                    Product.barcode.ilike(pattern),
                    Product.store.ilike(pattern),
                )
            )

        if category_id:
            query = query.filter(Product.category_id == category_id)

        if status == "active":
            query = query.filter(Product.is_consumed == False)
        elif status == "consumed":
            query = query.filter(Product.is_consumed == True)
        elif status == "expired":
            query = query.filter(Product.expiry_date < today)
        elif status == "expiring_soon":
            horizon = today + timedelta(days=settings.UPCOMING_WINDOW_DAYS)
            query = query.filter(
                Product.is_consumed == False,
                Product.expiry_date >= today,
                Product.expiry_date <= horizon,
            )

        return (
            query.order_by(Product.created_at.desc(), Product.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_product(self, user: User, product_id: int) -> Product:
        product = (
            self.visible_products_query(user).filter(Product.id == product_id).first()
        )
        if not product:
            raise StaleReferenceError("product", product_id)
        return product

    def get_owned_product(self, user: User, product_id: int) -> Product:
        product = (
            self.db.query(Product)
            .filter(Product.id == product_id, Product.user_id == user.id)
            .first()
        )
        if not product:
            raise StaleReferenceError("product", product_id)
        return product

    def _resolve_family_id(self, user: User, share_with_family: bool) -> Optional[int]:
        if not share_with_family:
            return None

        family_id = self.get_family_id(user.id)
        if family_id is None:
            raise ValueError("You must belong to a family to share a product")
        return family_id

    def create_product(self, user: User, data: ProductCreate) -> Tuple[Product, List[str]]:
        """
        Crée un produit puis planifie ses rappels

        L'échec de la planification n'annule pas la création : il est
        renvoyé comme avertissement.
        """
        if data.category_id:
            CategoryService(self.db).get_accessible_category(user, data.category_id)

        values = data.model_dump(exclude={"share_with_family"})
        product = Product(
            user_id=user.id,
            family_id=self._resolve_family_id(user, data.share_with_family),
            is_consumed=False,
            **values,
        )

        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        logger.info(f"Product created: {product.id} - {product.name}")

        warnings = self.schedule_reminders(product)
        return product, warnings

    def update_product(
        self, user: User, product_id: int, data: ProductUpdate
    ) -> Tuple[Product, List[str]]:
        product = self.get_owned_product(user, product_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("category_id"):
            CategoryService(self.db).get_accessible_category(user, changes["category_id"])

        if "share_with_family" in changes:
            share = changes.pop("share_with_family")
            if share is not None:
                product.family_id = self._resolve_family_id(user, share)

        for key, value in changes.items():
            if key in ("name", "is_consumed") and value is None:
                continue
            setattr(product, key, value)

        if (
            product.purchase_date
            and product.expiry_date
            and product.expiry_date < product.purchase_date
        ):
            self.db.rollback()
            raise ValueError("Expiry date cannot be before the purchase date")

        self.db.commit()
        self.db.refresh(product)
        logger.info(f"Product updated: {product.id}")

        warnings = self.schedule_reminders(product)
        return product, warnings

    def schedule_reminders(self, product: Product) -> List[str]:
        try:
            user_settings = NotificationService(self.db).get_or_create_settings(
                product.user_id
            )
            ReminderService(self.db).schedule_for_product(
                product,
                user_settings.expiry_reminder_days,
                user_settings.warranty_reminder_days,
            )
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Reminder scheduling failed for product {product.id}: {e}")
            return [REMINDER_WARNING]

        return []

    @transactional
    def delete_product(self, user: User, product_id: int) -> None:
        product = self.get_owned_product(user, product_id)
        self.db.delete(product)
        logger.info(f"Product deleted: {product_id}")

    @transactional
    def bulk_delete(self, user: User, product_ids: List[int]) -> int:
        products = (
            self.db.query(Product)
            .filter(Product.id.in_(product_ids), Product.user_id == user.id)
            .all()
        )
        for product in products:
            self.db.delete(product)

        logger.info(f"Bulk deleted {len(products)} product(s) for user {user.id}")
        return len(products)

    @transactional
    def bulk_mark_consumed(self, user: User, product_ids: List[int]) -> int:
        products = (
            self.db.query(Product)
            .filter(
                Product.id.in_(product_ids),
                Product.user_id == user.id,
                Product.is_consumed == False,
            )
            .all()
        )
        for product in products:
            product.is_consumed = True

        logger.info(f"Marked {len(products)} product(s) as consumed for user {user.id}")
        return len(products)
