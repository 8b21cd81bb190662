from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from aayutrace.utils.validators import validate_hex_color


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = Field(None, max_length=16)
    color: Optional[str] = Field(None, max_length=7)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Category name cannot be blank")
        return v.strip() if v else v

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        if not validate_hex_color(v):
            raise ValueError("Color must be a hex value such as #22c55e")
        return v


class CategoryUpdate(CategoryCreate):
    name: Optional[str] = Field(None, min_length=1, max_length=100)


class CategoryResponse(BaseModel):
    id: int
    user_id: Optional[int]
    name: str
    icon: Optional[str]
    color: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class CategorySummary(BaseModel):
    id: int
    name: str
    icon: Optional[str]
    color: Optional[str]

    class Config:
        from_attributes = True
