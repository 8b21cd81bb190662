from sqlalchemy.orm import Session
from typing import List, Optional, Dict, Any, Tuple
from datetime import date
import logging

from aayutrace.middleware.transaction_handler import transactional
from aayutrace.models.shopping_list import ShoppingList, ShoppingListItem
from aayutrace.models.product import Product
from aayutrace.models.user import User
from aayutrace.schemas.shopping_list import (
    ShoppingListCreate,
    ShoppingListUpdate,
    ShoppingListItemCreate,
    ShoppingListItemUpdate,
)
from aayutrace.services.category_service import CategoryService
from aayutrace.utils.date_helpers import is_expired
from aayutrace.utils.exceptions import StaleReferenceError

logger = logging.getLogger(__name__)

RESTOCK_LIST_NAME = "Recommended Restock"
RESTOCK_LIST_DESCRIPTION = "Auto-generated based on consumed and expired products"


def list_estimated_total(shopping_list: ShoppingList) -> float:
    """Somme des prix estimés (x quantité) des articles non cochés"""
    return round(
        sum(
            float(item.estimated_price or 0) * item.quantity
            for item in shopping_list.items
            if not item.is_completed
        ),
        2,
    )


class ShoppingService:
    def __init__(self, db: Session):
        self.db = db

    def list_lists(self, user: User) -> List[ShoppingList]:
        return (
            self.db.query(ShoppingList)
            .filter(ShoppingList.user_id == user.id)
            .order_by(ShoppingList.created_at.desc(), ShoppingList.id.desc())
            .all()
        )

    def get_list(self, user: User, list_id: int) -> ShoppingList:
        shopping_list = (
            self.db.query(ShoppingList)
            .filter(ShoppingList.id == list_id, ShoppingList.user_id == user.id)
            .first()
        )
        if not shopping_list:
            raise StaleReferenceError("shopping_list", list_id)
        return shopping_list

    def _get_item(self, user: User, list_id: int, item_id: int) -> ShoppingListItem:
        shopping_list = self.get_list(user, list_id)
        item = (
            self.db.query(ShoppingListItem)
            .filter(
                ShoppingListItem.id == item_id,
                ShoppingListItem.shopping_list_id == shopping_list.id,
            )
            .first()
        )
        if not item:
            raise StaleReferenceError("shopping_list_item", item_id)
        return item

    @transactional
    def create_list(self, user: User, data: ShoppingListCreate) -> ShoppingList:
        shopping_list = ShoppingList(
            user_id=user.id,
            name=data.name,
            description=data.description,
            generated_by="manual",
        )
        self.db.add(shopping_list)
        self.db.flush()

        logger.info(f"Shopping list created: {shopping_list.id} - {shopping_list.name}")
        return shopping_list

    @transactional
    def update_list(self, user: User, list_id: int, data: ShoppingListUpdate) -> ShoppingList:
        shopping_list = self.get_list(user, list_id)

        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(shopping_list, key, value)

        return shopping_list

    @transactional
    def delete_list(self, user: User, list_id: int) -> None:
        shopping_list = self.get_list(user, list_id)
        self.db.delete(shopping_list)
        logger.info(f"Shopping list deleted: {list_id}")

    @transactional
    def add_item(self, user: User, list_id: int, data: ShoppingListItemCreate) -> ShoppingListItem:
        shopping_list = self.get_list(user, list_id)

        if data.category_id:
            CategoryService(self.db).get_accessible_category(user, data.category_id)

        item = ShoppingListItem(shopping_list_id=shopping_list.id, **data.model_dump())
        self.db.add(item)
        self.db.flush()
        return item

    @transactional
    def update_item(
        self, user: User, list_id: int, item_id: int, data: ShoppingListItemUpdate
    ) -> ShoppingListItem:
        item = self._get_item(user, list_id, item_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("category_id"):
            CategoryService(self.db).get_accessible_category(user, changes["category_id"])

        for key, value in changes.items():
            if key in ("product_name", "quantity", "priority", "is_completed") and value is None:
                continue
            setattr(item, key, value)

        return item

    @transactional
    def toggle_item(self, user: User, list_id: int, item_id: int) -> ShoppingListItem:
        item = self._get_item(user, list_id, item_id)
        item.is_completed = not item.is_completed
        return item

    @transactional
    def delete_item(self, user: User, list_id: int, item_id: int) -> None:
        item = self._get_item(user, list_id, item_id)
        self.db.delete(item)

    @transactional
    def mark_list_as_completed(self, user: User, list_id: int) -> Tuple[int, int]:
        shopping_list = self.get_list(user, list_id)

        updated_count = 0
        for item in shopping_list.items:
            if not item.is_completed:
                item.is_completed = True
                updated_count += 1

        shopping_list.is_completed = True
        return updated_count, len(shopping_list.items)

    def _merge_item(self, items_dict: Dict, item_data: Dict):
        key = (item_data["product_name"].lower(), (item_data["brand"] or "").lower())

        if key in items_dict:
            items_dict[key]["quantity"] += item_data["quantity"]
        else:
            items_dict[key] = item_data

    def _restock_candidates(self, user: User, today: date) -> List[Product]:
        products = self.db.query(Product).filter(Product.user_id == user.id).all()
        return [
            p
            for p in products
            if p.is_consumed or is_expired(p.expiry_date, today)
        ]

    @transactional
    def generate_restock_list(self, user: User, today: Optional[date] = None) -> ShoppingList:
        """
        Liste de réapprovisionnement à partir des produits consommés ou périmés

        Les doublons (même nom et marque) sont fusionnés en additionnant
        les quantités.
        """
        today = today or date.today()
        candidates = self._restock_candidates(user, today)

        if not candidates:
            raise ValueError("No consumed or expired products to restock")

        items_dict: Dict[Any, Dict[str, Any]] = {}
        for product in candidates:
            self._merge_item(
                items_dict,
                {
                    "product_name": product.name,
                    "brand": product.brand,
                    "category_id": product.category_id,
                    "quantity": 1,
                    "priority": "medium",
                    "estimated_price": product.price,
                },
            )

        shopping_list = ShoppingList(
            user_id=user.id,
            name=RESTOCK_LIST_NAME,
            description=RESTOCK_LIST_DESCRIPTION,
            generated_by="restock",
        )
        self.db.add(shopping_list)
        self.db.flush()

        for item_data in items_dict.values():
            self.db.add(ShoppingListItem(shopping_list_id=shopping_list.id, **item_data))

        self.db.flush()
        self.db.refresh(shopping_list)

        logger.info(
            f"Generated restock list {shopping_list.id} with {len(items_dict)} items "
            f"from {len(candidates)} products"
        )
        return shopping_list
