"""
API v1 routes
"""

from aayutrace.api.v1 import (
    auth,
    users,
    categories,
    products,
    notifications,
    analytics,
    families,
    shopping_lists,
    realtime,
)

routers = [
    auth.router,
    users.router,
    categories.router,
    products.router,
    notifications.router,
    analytics.router,
    families.router,
    shopping_lists.router,
    realtime.router,
]

__all__ = ["routers"]
