"""API routes package"""

from . import (
    health,
    users,
    fridge,
    history,
    recipes,
    assistant,
    cart,
    orders,
    wallet,
    courses,
    admin_recipes,
    admin_courses,
    admin_settings,
    admin_users,
)

__all__ = [
    "health",
    "users",
    "fridge",
    "history",
    "recipes",
    "assistant",
    "cart",
    "orders",
    "wallet",
    "courses",
    "admin_recipes",
    "admin_courses",
    "admin_settings",
    "admin_users",
]
