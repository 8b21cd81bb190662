from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Dict

from aayutrace.core.database import get_db
from aayutrace.core.dependencies import get_current_user
from aayutrace.models.user import User
from aayutrace.models.shopping_list import ShoppingList, ShoppingListItem
from aayutrace.schemas.shopping_list import (
    ShoppingListResponse,
    ShoppingListCreate,
    ShoppingListUpdate,
    ShoppingListItemCreate,
    ShoppingListItemUpdate,
    ShoppingListItemResponse,
)
from aayutrace.services.shopping_service import ShoppingService, list_estimated_total

router = APIRouter(prefix="/shopping-lists", tags=["Shopping Lists"])


def _enrich_item(item: ShoppingListItem) -> Dict:
    return ShoppingListItemResponse.model_validate(item).model_dump()


def _enrich_shopping_list_response(shopping_list: ShoppingList) -> Dict:
    """Ajoute les articles sérialisés et le total estimé"""
    return {
        "id": shopping_list.id,
        "user_id": shopping_list.user_id,
        "name": shopping_list.name,
        "description": shopping_list.description,
        "is_completed": shopping_list.is_completed,
        "generated_by": shopping_list.generated_by,
        "created_at": shopping_list.created_at,
        "items": [_enrich_item(item) for item in shopping_list.items],
        "estimated_total": list_estimated_total(shopping_list),
    }


@router.get("", response_model=List[ShoppingListResponse])
def list_shopping_lists(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    lists = ShoppingService(db).list_lists(current_user)
    return [_enrich_shopping_list_response(sl) for sl in lists]


@router.post("", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
def create_shopping_list(
    request: ShoppingListCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    shopping_list = ShoppingService(db).create_list(current_user, request)
    return _enrich_shopping_list_response(shopping_list)


@router.post(
    "/generate-restock",
    response_model=ShoppingListResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_restock_list(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Liste générée depuis les produits consommés ou périmés"""
    shopping_list = ShoppingService(db).generate_restock_list(current_user)
    return _enrich_shopping_list_response(shopping_list)


@router.get("/{list_id}", response_model=ShoppingListResponse)
def get_shopping_list(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    shopping_list = ShoppingService(db).get_list(current_user, list_id)
    return _enrich_shopping_list_response(shopping_list)


@router.put("/{list_id}", response_model=ShoppingListResponse)
def update_shopping_list(
    list_id: int,
    request: ShoppingListUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    shopping_list = ShoppingService(db).update_list(current_user, list_id, request)
    return _enrich_shopping_list_response(shopping_list)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shopping_list(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ShoppingService(db).delete_list(current_user, list_id)
    return None


@router.post("/{list_id}/complete")
def complete_shopping_list(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Coche tous les articles et clôt la liste"""
    updated, total = ShoppingService(db).mark_list_as_completed(current_user, list_id)
    return {"updated_items": updated, "total_items": total}


@router.post(
    "/{list_id}/items",
    response_model=ShoppingListItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_item(
    list_id: int,
    request: ShoppingListItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ShoppingService(db).add_item(current_user, list_id, request)


@router.put("/{list_id}/items/{item_id}", response_model=ShoppingListItemResponse)
def update_item(
    list_id: int,
    item_id: int,
    request: ShoppingListItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ShoppingService(db).update_item(current_user, list_id, item_id, request)


@router.post("/{list_id}/items/{item_id}/toggle", response_model=ShoppingListItemResponse)
def toggle_item(
    list_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ShoppingService(db).toggle_item(current_user, list_id, item_id)


@router.delete("/{list_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    list_id: int,
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ShoppingService(db).delete_item(current_user, list_id, item_id)
    return None
