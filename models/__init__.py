from .user import User, UserRole
from .restaurant import Restaurant
from .menu_item import MenuItem
from .order import Order, OrderItem, OrderStatus, CancelledBy

__all__ = [
    "User", "UserRole",
    "Restaurant",
    "MenuItem",
    "Order", "OrderItem", "OrderStatus", "CancelledBy",
]
