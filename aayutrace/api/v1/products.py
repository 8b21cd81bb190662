from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from aayutrace.core.database import get_db
from aayutrace.core.dependencies import get_current_user
from aayutrace.models.user import User
from aayutrace.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductSaveResponse,
    BulkProductRequest,
    BulkActionResponse,
    PRODUCT_STATUS_FILTERS,
)
from aayutrace.schemas.reminder import ReminderResponse
from aayutrace.services.product_service import ProductService, serialize_product
from aayutrace.services.reminder_service import ReminderService

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[ProductResponse])
def list_products(
    search: Optional[str] = Query(None, max_length=200),
    category_id: Optional[int] = Query(None, gt=0),
    status_filter: str = Query("all", alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Produits visibles (les siens + ceux partagés par la famille)

    Filtres : recherche texte, catégorie, statut
    (all, active, consumed, expired, expiring_soon)
    """
    if status_filter not in PRODUCT_STATUS_FILTERS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"status must be one of {', '.join(PRODUCT_STATUS_FILTERS)}",
        )

    products = ProductService(db).list_products(
        current_user,
        search=search,
        category_id=category_id,
        status=status_filter,
        skip=skip,
        limit=limit,
    )
    return [serialize_product(p) for p in products]


@router.post("", response_model=ProductSaveResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    request: ProductCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Crée un produit et planifie ses rappels (avertissement si échec)"""
    product, warnings = ProductService(db).create_product(current_user, request)
    return {"product": serialize_product(product), "warnings": warnings}


@router.post("/bulk-delete", response_model=BulkActionResponse)
def bulk_delete_products(
    request: BulkProductRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    affected = ProductService(db).bulk_delete(current_user, request.product_ids)
    return {"affected": affected}


@router.post("/bulk-consume", response_model=BulkActionResponse)
def bulk_consume_products(
    request: BulkProductRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    affected = ProductService(db).bulk_mark_consumed(current_user, request.product_ids)
    return {"affected": affected}


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product = ProductService(db).get_product(current_user, product_id)
    return serialize_product(product)


@router.put("/{product_id}", response_model=ProductSaveResponse)
def update_product(
    product_id: int,
    request: ProductUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product, warnings = ProductService(db).update_product(
        current_user, product_id, request
    )
    return {"product": serialize_product(product), "warnings": warnings}


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Supprime le produit ; ses rappels suivent en cascade"""
    ProductService(db).delete_product(current_user, product_id)
    return None


@router.get("/{product_id}/reminders", response_model=List[ReminderResponse])
def get_product_reminders(
    product_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    product = ProductService(db).get_product(current_user, product_id)
    return ReminderService(db).get_product_reminders(product.id)
