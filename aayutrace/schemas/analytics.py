import datetime as dt
from pydantic import BaseModel
from typing import Optional, List

from aayutrace.schemas.category import CategorySummary
from aayutrace.schemas.product import ProductResponse


class TimelineEntry(BaseModel):
    id: str
    product_id: int
    product_name: str
    brand: Optional[str]
    category: Optional[CategorySummary]
    date: dt.date
    type: str
    days_remaining: int
    status: str
    label: str


class SpendingBucket(BaseModel):
    month: str
    label: str
    amount: float
    count: int


class CategoryBreakdownEntry(BaseModel):
    id: Optional[int]
    name: str
    color: str
    count: int
    spending: float


class WasteStats(BaseModel):
    expired: int
    consumed: int
    active: int
    total: int
    waste_rate: float


class AnalyticsSummary(BaseModel):
    months: int
    total_spending: float
    total_products: int
    average_monthly_spending: float
    spending: List[SpendingBucket]
    categories: List[CategoryBreakdownEntry]
    waste: WasteStats


class DashboardResponse(BaseModel):
    total_products: int
    active_products: int
    expiring_soon: int
    warranties_ending: int
    expired: int
    unread_notifications: int
    recent_products: List[ProductResponse]
