from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from aayutrace.schemas.category import CategorySummary
from aayutrace.utils.validators import validate_barcode

PRODUCT_STATUS_FILTERS = ("all", "active", "consumed", "expired", "expiring_soon")


class ProductBase(BaseModel):
    brand: Optional[str] = Field(None, max_length=100)
    category_id: Optional[int] = Field(None, gt=0)
    batch_number: Optional[str] = Field(None, max_length=100)
    purchase_date: Optional[date] = None
    expiry_date: Optional[date] = None
    warranty_date: Optional[date] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    store: Optional[str] = Field(None, max_length=100)
    barcode: Optional[str] = Field(None, max_length=512)
    image_url: Optional[str] = Field(None, max_length=500)
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("barcode")
    @classmethod
    def validate_barcode(cls, v):
        if not validate_barcode(v):
            raise ValueError("Barcode contains unprintable characters")
        return v


class ProductCreate(ProductBase):
    name: str = Field(..., min_length=1, max_length=200)
    share_with_family: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Product name cannot be blank")
        return v.strip()

    @model_validator(mode="after")
    def validate_dates(self):
        if (
            self.purchase_date
            and self.expiry_date
            and self.expiry_date < self.purchase_date
        ):
            raise ValueError("Expiry date cannot be before the purchase date")
        return self


class ProductUpdate(ProductBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    is_consumed: Optional[bool] = None
    share_with_family: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Product name cannot be blank")
        return v.strip() if v else v


class DateStatusResponse(BaseModel):
    status: str
    days_remaining: int
    days_past: int


class ProductResponse(BaseModel):
    id: int
    user_id: int
    family_id: Optional[int]
    name: str
    brand: Optional[str]
    category_id: Optional[int]
    category: Optional[CategorySummary] = None
    batch_number: Optional[str]
    purchase_date: Optional[date]
    expiry_date: Optional[date]
    warranty_date: Optional[date]
    price: Optional[float]
    store: Optional[str]
    barcode: Optional[str]
    image_url: Optional[str]
    notes: Optional[str]
    is_consumed: bool
    created_at: datetime
    updated_at: datetime

    expiry_status: Optional[DateStatusResponse] = None
    warranty_status: Optional[DateStatusResponse] = None

    class Config:
        from_attributes = True


class ProductSaveResponse(BaseModel):
    """Produit enregistré + avertissements non bloquants (rappels, etc.)"""

    product: ProductResponse
    warnings: List[str] = []


class BulkProductRequest(BaseModel):
    product_ids: List[int] = Field(..., min_length=1, max_length=500)


class BulkActionResponse(BaseModel):
    affected: int
