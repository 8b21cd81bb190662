from aayutrace.models.user import User
from aayutrace.models.category import Category
from aayutrace.models.family import Family, FamilyMember, FamilyInvitation
from aayutrace.models.product import Product
from aayutrace.models.reminder import Reminder
from aayutrace.models.notification import Notification, NotificationSettings
from aayutrace.models.shopping_list import ShoppingList, ShoppingListItem

__all__ = [
    "User",
    "Category",
    "Family",
    "FamilyMember",
    "FamilyInvitation",
    "Product",
    "Reminder",
    "Notification",
    "NotificationSettings",
    "ShoppingList",
    "ShoppingListItem",
]
