# Importing every model registers it on Base.metadata (Alembic, create_all)
from foodhub.models.user import ProviderProfile, User, UserRole, UserStatus
from foodhub.models.meal import Category, Meal
from foodhub.models.order import Order, OrderItem, OrderStatus
from foodhub.models.review import Review

__all__ = [
    "Category",
    "Meal",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ProviderProfile",
    "Review",
    "User",
    "UserRole",
    "UserStatus",
]
