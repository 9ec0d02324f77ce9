from enum import Enum
from tortoise import fields, models


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"  # Initial state, waiting for the payment event
    PAID = "PAID"  # Payment confirmed, waiting for the kitchen
    IN_PROGRESS = "IN_PROGRESS"  # Cooking
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    SERVED = "SERVED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        """Raises ValueError for anything outside the enum."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


# Orders in these states count toward revenue and order totals
REVENUE_STATUSES = (
    OrderStatus.PAID,
    OrderStatus.IN_PROGRESS,
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.SERVED,
)


class Order(models.Model):
    id = fields.IntField(primary_key=True)
    tenant = fields.ForeignKeyField("models.Tenant", related_name="orders", on_delete=fields.CASCADE)
    table_id = fields.CharField(max_length=50)
    customer = fields.ForeignKeyField(
        "models.Customer", related_name="orders", null=True, on_delete=fields.SET_NULL
    )
    # Quoted line items, immutable after creation:
    # [{"menu_item_id": 1, "name": "...", "price": "10.00", "quantity": 2}, ...]
    line_items = fields.JSONField()
    total_amount = fields.DecimalField(max_digits=10, decimal_places=2)
    status = fields.CharEnumField(OrderStatus, default=OrderStatus.PENDING_PAYMENT)
    payment_reference = fields.CharField(max_length=255, null=True)
    customer_name = fields.CharField(max_length=255, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("tenant_id",),              # Restaurant order queries
            ("status",),                 # Status-based filtering
            ("customer_id",),            # Customer order history
            ("table_id",),
            ("created_at",),             # Time-based queries
            ("tenant_id", "status", "created_at"),  # Composite: analytics windows
        ]
