from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from qrdine.models.order import OrderStatus


class LineItem(BaseModel):
    """A quoted line: price and name are what the customer saw at checkout."""
    menu_item_id: int
    name: str = ""
    price: Decimal
    quantity: int = 1


class OrderRequest(BaseModel):
    """Schema for the full order placement request body."""
    tenant_id: int
    table_id: str
    items: List[LineItem]
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    """
    Schema for updating an order status. `status` is a plain string on purpose:
    unknown values are rejected by the ledger with InvalidStatus.
    """
    status: str
    tenant_id: int
    payment_reference: Optional[str] = None


class PaymentEvent(BaseModel):
    """External payment confirmation, delivered at least once."""
    event_id: str
    payment_reference: str


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    table_id: str
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    line_items: List[LineItem] = Field(default_factory=list)
    total_amount: Decimal
    status: OrderStatus
    payment_reference: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
