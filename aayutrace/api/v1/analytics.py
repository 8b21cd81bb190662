from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from aayutrace.core.database import get_db
from aayutrace.core.dependencies import get_current_user
from aayutrace.models.user import User
from aayutrace.schemas.analytics import (
    TimelineEntry,
    SpendingBucket,
    CategoryBreakdownEntry,
    WasteStats,
    AnalyticsSummary,
    DashboardResponse,
)
from aayutrace.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _months_query():
    return Query(6, description="Trailing window in calendar months (6 or 12)")


@router.get("/timeline", response_model=List[TimelineEntry])
def get_timeline(
    entry_type: str = Query("all", alias="type", pattern="^(all|expiry|warranty)$"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Dates de péremption et de garantie à venir, triées par date"""
    return AnalyticsService(db).get_timeline(current_user, entry_type)


@router.get("/summary", response_model=AnalyticsSummary)
def get_summary(
    months: int = _months_query(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).get_summary(current_user, months)


@router.get("/spending", response_model=List[SpendingBucket])
def get_spending_trend(
    months: int = _months_query(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).get_summary(current_user, months)["spending"]


@router.get("/categories", response_model=List[CategoryBreakdownEntry])
def get_category_breakdown(
    months: int = _months_query(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).get_summary(current_user, months)["categories"]


@router.get("/waste", response_model=WasteStats)
def get_waste_stats(
    months: int = _months_query(),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return AnalyticsService(db).get_summary(current_user, months)["waste"]


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return AnalyticsService(db).get_dashboard(current_user)
