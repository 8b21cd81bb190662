"""
Business logic services
"""

from aayutrace.services.email_service import EmailService
from aayutrace.services.user_service import UserService
from aayutrace.services.category_service import CategoryService
from aayutrace.services.notification_service import NotificationService, NotificationFeed
from aayutrace.services.reminder_service import ReminderService, plan_reminders
from aayutrace.services.product_service import ProductService
from aayutrace.services.analytics_service import AnalyticsService
from aayutrace.services.family_service import FamilyService
from aayutrace.services.shopping_service import ShoppingService

__all__ = [
    "EmailService",
    "UserService",
    "CategoryService",
    "NotificationService",
    "NotificationFeed",
    "ReminderService",
    "plan_reminders",
    "ProductService",
    "AnalyticsService",
    "FamilyService",
    "ShoppingService",
]
