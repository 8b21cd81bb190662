from sqlalchemy.orm import Session
from typing import List, Dict, Any, Iterable, Optional
from datetime import date, timedelta
from collections import OrderedDict
import logging

from aayutrace.models.product import Product
from aayutrace.models.user import User
from aayutrace.core.config import settings
from aayutrace.services.product_service import ProductService, serialize_product
from aayutrace.services.notification_service import NotificationService
from aayutrace.utils.date_helpers import (
    classify_date,
    describe_days,
    is_expired,
    to_calendar_date,
    month_start,
    month_key,
)

logger = logging.getLogger(__name__)

TIMELINE_TYPES = ("all", "expiry", "warranty")
ANALYTICS_WINDOWS = (6, 12)
UNCATEGORIZED = "Uncategorized"
UNCATEGORIZED_COLOR = "#94a3b8"


def _category_summary(category) -> Optional[Dict[str, Any]]:
    if category is None:
        return None
    return {
        "id": category.id,
        "name": category.name,
        "icon": category.icon,
        "color": category.color,
    }


def bucket_date(product) -> date:
    """Date de rattachement mensuel : achat, sinon création"""
    if product.purchase_date is not None:
        return to_calendar_date(product.purchase_date)
    return to_calendar_date(product.created_at)


def window_bounds(today: date, months: int):
    """[premier jour du mois le plus ancien, premier jour du mois suivant)"""
    return month_start(today, -(months - 1)), month_start(today, 1)


def products_in_window(products: Iterable, today: date, months: int) -> List:
    start, end = window_bounds(today, months)
    return [p for p in products if start <= bucket_date(p) < end]


def build_timeline(
    products: Iterable,
    today: Optional[date] = None,
    entry_type: str = "all",
    critical_days: Optional[int] = None,
    warning_days: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Une entrée par date suivie des produits non consommés

    Triées par date croissante ; `entry_type` restreint à expiry ou warranty.
    """
    if entry_type not in TIMELINE_TYPES:
        raise ValueError(f"Unknown timeline type: {entry_type}")

    today = today or date.today()
    entries = []

    for product in products:
        if product.is_consumed:
            continue

        for kind, tracked in (
            ("expiry", product.expiry_date),
            ("warranty", product.warranty_date),
        ):
            if tracked is None or entry_type not in ("all", kind):
                continue

            status = classify_date(tracked, today, critical_days, warning_days)
            entries.append(
                {
                    "id": f"{product.id}-{kind}",
                    "product_id": product.id,
                    "product_name": product.name,
                    "brand": product.brand,
                    "category": _category_summary(product.category),
                    "date": to_calendar_date(tracked),
                    "type": kind,
                    "days_remaining": status.days_remaining,
                    "status": status.status,
                    "label": describe_days(status.days_remaining),
                }
            )

    entries.sort(key=lambda e: (e["date"], e["product_id"], e["type"]))
    return entries


def spending_trend(products: Iterable, today: Optional[date] = None, months: int = 6) -> List[Dict[str, Any]]:
    """
    Dépenses par mois calendaire sur la fenêtre glissante

    Série dense : chaque mois de la fenêtre apparaît, même sans achat.
    Un prix absent compte pour 0 mais le produit est compté.
    """
    today = today or date.today()
    start, _ = window_bounds(today, months)

    buckets = OrderedDict()
    for offset in range(months):
        first_day = month_start(start, offset)
        buckets[month_key(first_day)] = {
            "month": month_key(first_day),
            "label": first_day.strftime("%b %Y"),
            "amount": 0.0,
            "count": 0,
        }

    for product in products_in_window(products, today, months):
        bucket = buckets[month_key(bucket_date(product))]
        bucket["amount"] += float(product.price or 0)
        bucket["count"] += 1

    for bucket in buckets.values():
        bucket["amount"] = round(bucket["amount"], 2)

    return list(buckets.values())


def category_breakdown(products: Iterable, today: Optional[date] = None, months: int = 6) -> List[Dict[str, Any]]:
    today = today or date.today()
    groups: Dict[Optional[int], Dict[str, Any]] = {}

    for product in products_in_window(products, today, months):
        category = product.category
        category_id = category.id if category else None

        group = groups.get(category_id)
        if group is None:
            group = groups[category_id] = {
                "id": category_id,
                "name": category.name if category else UNCATEGORIZED,
                "color": (category.color if category else None) or UNCATEGORIZED_COLOR,
                "count": 0,
                "spending": 0.0,
            }
        group["count"] += 1
        group["spending"] += float(product.price or 0)

    result = sorted(groups.values(), key=lambda g: (-g["spending"], g["name"], g["id"] or 0))
    for group in result:
        group["spending"] = round(group["spending"], 2)
    return result


def waste_stats(products: Iterable, today: Optional[date] = None, months: int = 6) -> Dict[str, Any]:
    """
    Taux de gaspillage = produits périmés non consommés / produits de la fenêtre

    Comparaison au jour près : un produit qui périme aujourd'hui est actif.
    """
    today = today or date.today()
    window = products_in_window(products, today, months)

    expired = consumed = active = 0
    for product in window:
        if product.is_consumed:
            consumed += 1
            continue

        if is_expired(product.expiry_date, today):
            expired += 1
        else:
            active += 1

    total = len(window)
    return {
        "expired": expired,
        "consumed": consumed,
        "active": active,
        "total": total,
        "waste_rate": expired / total if total else 0.0,
    }


class AnalyticsService:
    """
    Vues en lecture seule recalculées depuis les produits visibles

    Aucun état persistant : chaque appel relit la collection et
    applique les fonctions pures ci-dessus.
    """

    def __init__(self, db: Session):
        self.db = db
        self.product_service = ProductService(db)

    def _visible_products(self, user: User) -> List[Product]:
        return self.product_service.visible_products_query(user).all()

    def get_timeline(self, user: User, entry_type: str = "all", today: Optional[date] = None) -> List[Dict[str, Any]]:
        return build_timeline(
            self._visible_products(user),
            today,
            entry_type,
            settings.CRITICAL_THRESHOLD_DAYS,
            settings.WARNING_THRESHOLD_DAYS,
        )

    def get_summary(self, user: User, months: int = 6, today: Optional[date] = None) -> Dict[str, Any]:
        if months not in ANALYTICS_WINDOWS:
            raise ValueError(f"Analytics window must be one of {ANALYTICS_WINDOWS} months")

        today = today or date.today()
        products = self._visible_products(user)

        spending = spending_trend(products, today, months)
        total_spending = round(sum(b["amount"] for b in spending), 2)

        return {
            "months": months,
            "total_spending": total_spending,
            "total_products": sum(b["count"] for b in spending),
            "average_monthly_spending": round(total_spending / months, 2),
            "spending": spending,
            "categories": category_breakdown(products, today, months),
            "waste": waste_stats(products, today, months),
        }

    def get_dashboard(self, user: User, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        horizon = today + timedelta(days=settings.UPCOMING_WINDOW_DAYS)
        products = self._visible_products(user)
        active = [p for p in products if not p.is_consumed]

        recent = sorted(products, key=lambda p: (p.created_at, p.id), reverse=True)[:5]

        return {
            "total_products": len(products),
            "active_products": len(active),
            "expiring_soon": sum(
                1 for p in active if p.expiry_date and today <= p.expiry_date <= horizon
            ),
            "warranties_ending": sum(
                1 for p in active if p.warranty_date and today <= p.warranty_date <= horizon
            ),
            "expired": sum(1 for p in active if p.expiry_date and p.expiry_date < today),
            "unread_notifications": NotificationService(self.db)
            .fetch_recent(user.id)
            .unread_count,
            "recent_products": [serialize_product(p, today) for p in recent],
        }
