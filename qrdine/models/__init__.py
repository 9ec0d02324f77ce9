# qrdine/models/__init__.py
from .tenant import Tenant
from .account import Customer, KitchenMember, Role, StaffMember
from .menu import MenuItem
from .order import Order, OrderStatus
from .rating import Rating
from .processed_event import ProcessedEvent

# Export all models
__all__ = [
    "Customer",
    "KitchenMember",
    "MenuItem",
    "Order",
    "OrderStatus",
    "ProcessedEvent",
    "Rating",
    "Role",
    "StaffMember",
    "Tenant",
]
