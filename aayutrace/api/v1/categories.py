from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from aayutrace.core.database import get_db
from aayutrace.core.dependencies import get_current_user
from aayutrace.models.user import User
from aayutrace.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from aayutrace.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryResponse])
def list_categories(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Catégories par défaut + catégories de l'utilisateur"""
    return CategoryService(db).list_categories(current_user)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    request: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CategoryService(db).create_category(current_user, request)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    request: CategoryUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return CategoryService(db).update_category(current_user, category_id, request)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Refusé (409) tant qu'un produit référence la catégorie"""
    CategoryService(db).delete_category(current_user, category_id)
    return None
