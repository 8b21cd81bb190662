from aayutrace.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    RefreshRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)
from aayutrace.schemas.user import UserResponse, UserUpdateRequest, PasswordChangeRequest
from aayutrace.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategorySummary,
)
from aayutrace.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductSaveResponse,
    DateStatusResponse,
    BulkProductRequest,
    BulkActionResponse,
)
from aayutrace.schemas.reminder import ReminderResponse
from aayutrace.schemas.notification import (
    NotificationResponse,
    NotificationFeedResponse,
    NotificationReadResponse,
    NotificationDeleteResponse,
    NotificationReadAllResponse,
    NotificationSettingsResponse,
    NotificationSettingsUpdate,
)
from aayutrace.schemas.analytics import (
    TimelineEntry,
    SpendingBucket,
    CategoryBreakdownEntry,
    WasteStats,
    AnalyticsSummary,
    DashboardResponse,
)
from aayutrace.schemas.family import (
    FamilyCreate,
    FamilyResponse,
    FamilyMemberResponse,
    InvitationCreate,
    InvitationResponse,
    InvitationSentResponse,
    InvitationPreviewResponse,
    JoinFamilyRequest,
)
from aayutrace.schemas.shopping_list import (
    ShoppingListCreate,
    ShoppingListUpdate,
    ShoppingListResponse,
    ShoppingListItemCreate,
    ShoppingListItemUpdate,
    ShoppingListItemResponse,
)

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "RefreshRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UserResponse",
    "UserUpdateRequest",
    "PasswordChangeRequest",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategorySummary",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductSaveResponse",
    "DateStatusResponse",
    "BulkProductRequest",
    "BulkActionResponse",
    "ReminderResponse",
    "NotificationResponse",
    "NotificationFeedResponse",
    "NotificationReadResponse",
    "NotificationDeleteResponse",
    "NotificationReadAllResponse",
    "NotificationSettingsResponse",
    "NotificationSettingsUpdate",
    "TimelineEntry",
    "SpendingBucket",
    "CategoryBreakdownEntry",
    "WasteStats",
    "AnalyticsSummary",
    "DashboardResponse",
    "FamilyCreate",
    "FamilyResponse",
    "FamilyMemberResponse",
    "InvitationCreate",
    "InvitationResponse",
    "InvitationSentResponse",
    "InvitationPreviewResponse",
    "JoinFamilyRequest",
    "ShoppingListCreate",
    "ShoppingListUpdate",
    "ShoppingListResponse",
    "ShoppingListItemCreate",
    "ShoppingListItemUpdate",
    "ShoppingListItemResponse",
]
