from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Literal
from datetime import datetime
from decimal import Decimal

from aayutrace.schemas.category import CategorySummary

Priority = Literal["low", "medium", "high"]


class ShoppingListCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("List name cannot be blank")
        return v.strip()


class ShoppingListUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_completed: Optional[bool] = None


class ShoppingListItemCreate(BaseModel):
    product_name: str = Field(..., min_length=1, max_length=200)
    brand: Optional[str] = Field(None, max_length=100)
    quantity: int = Field(1, ge=1, le=10000)
    category_id: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=500)
    priority: Priority = "medium"
    estimated_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

    @field_validator("product_name")
    @classmethod
    def validate_product_name(cls, v):
        if not v.strip():
            raise ValueError("Product name cannot be blank")
        return v.strip()


class ShoppingListItemUpdate(BaseModel):
    product_name: Optional[str] = Field(None, min_length=1, max_length=200)
    brand: Optional[str] = Field(None, max_length=100)
    quantity: Optional[int] = Field(None, ge=1, le=10000)
    category_id: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=500)
    priority: Optional[Priority] = None
    estimated_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    is_completed: Optional[bool] = None


class ShoppingListItemResponse(BaseModel):
    id: int
    shopping_list_id: int
    product_name: str
    brand: Optional[str]
    quantity: int
    category_id: Optional[int]
    category: Optional[CategorySummary] = None
    notes: Optional[str]
    priority: str
    estimated_price: Optional[float]
    is_completed: bool

    class Config:
        from_attributes = True


class ShoppingListResponse(BaseModel):
    id: int
    user_id: int
    name: str
    description: Optional[str]
    is_completed: bool
    generated_by: Optional[str]
    created_at: datetime
    items: List[ShoppingListItemResponse] = []
    estimated_total: float = 0.0

    class Config:
        from_attributes = True
