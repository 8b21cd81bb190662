from dataclasses import dataclass
from datetime import datetime, date
from typing import Optional, Union

from aayutrace.core.config import settings

EXPIRED = "expired"
CRITICAL = "critical"
WARNING = "warning"
GOOD = "good"


DateLike = Union[date, datetime]


@dataclass(frozen=True)
class DateStatus:
    """Niveau d'urgence d'une date suivie par rapport à aujourd'hui"""

    status: str
    days_remaining: int

    @property
    def days_past(self) -> int:
        return -self.days_remaining if self.days_remaining < 0 else 0

    @property
    def is_expired(self) -> bool:
        return self.status == EXPIRED


def to_calendar_date(value: DateLike) -> date:
    """
    Normalise une valeur en date calendaire

    L'heure éventuelle est ignorée : toutes les comparaisons se font
    au jour près.
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def days_until(target_date: Optional[DateLike], today: Optional[DateLike] = None) -> Optional[int]:
    if target_date is None:
        return None

    reference = to_calendar_date(today) if today is not None else date.today()
    return (to_calendar_date(target_date) - reference).days


def classify_date(
    target_date: Optional[DateLike],
    today: Optional[DateLike] = None,
    critical_days: Optional[int] = None,
    warning_days: Optional[int] = None,
) -> Optional[DateStatus]:
    """
    Classe une date (péremption ou garantie) dans un niveau d'urgence

    Règles évaluées dans l'ordre, la première qui correspond l'emporte :
    - jours restants < 0            -> expired
    - jours restants <= critical    -> critical
    - jours restants <= warning     -> warning
    - sinon                         -> good

    Fonction pure : dépend uniquement de (target_date - today).
    Retourne None si aucune date n'est fournie.
    """
    if target_date is None:
        return None

    if critical_days is None:
        critical_days = settings.CRITICAL_THRESHOLD_DAYS
    if warning_days is None:
        warning_days = settings.WARNING_THRESHOLD_DAYS

    remaining = days_until(target_date, today)

    if remaining < 0:
        status = EXPIRED
    elif remaining <= critical_days:
        status = CRITICAL
    elif remaining <= warning_days:
        status = WARNING
    else:
        status = GOOD

    return DateStatus(status=status, days_remaining=remaining)


def is_expired(expiry_date: Optional[DateLike], today: Optional[DateLike] = None) -> bool:
    remaining = days_until(expiry_date, today)
    return remaining is not None and remaining < 0


def describe_days(days_remaining: int) -> str:
    if days_remaining < 0:
        return f"{abs(days_remaining)} days ago"
    if days_remaining == 0:
        return "Today"
    return f"{days_remaining} days left"


def month_start(value: date, offset: int = 0) -> date:
    """Premier jour du mois de `value`, décalé de `offset` mois"""
    month_index = value.year * 12 + (value.month - 1) + offset
    return date(month_index // 12, month_index % 12 + 1, 1)


def month_key(value: DateLike) -> str:
    return to_calendar_date(value).strftime("%Y-%m")
