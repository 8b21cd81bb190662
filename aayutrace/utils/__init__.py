from aayutrace.utils.date_helpers import (
    DateStatus,
    classify_date,
    days_until,
    is_expired,
    to_calendar_date,
    month_start,
    month_key,
)
from aayutrace.utils.validators import (
    validate_barcode,
    validate_hex_color,
    sanitize_search_query,
)
from aayutrace.utils.exceptions import (
    StaleReferenceError,
    CategoryInUseError,
    AlreadyInFamilyError,
    FamilyPermissionError,
)

__all__ = [
    "DateStatus",
    "classify_date",
    "days_until",
    "is_expired",
    "to_calendar_date",
    "month_start",
    "month_key",
    "validate_barcode",
    "validate_hex_color",
    "sanitize_search_query",
    "StaleReferenceError",
    "CategoryInUseError",
    "AlreadyInFamilyError",
    "FamilyPermissionError",
]
