import logging
from fastapi import APIRouter, status
from typing import Optional

from qrdine.consumers.payment_consumer import handle_payment_confirmed
from qrdine.schemas.order import OrderRequest, OrderResponse, OrderStatusUpdate, PaymentEvent
from qrdine.schemas.response import SuccessResponse
from qrdine.services.order_service import (
    create_order,
    get_order,
    list_orders_for_customer,
    list_orders_for_tenant,
    update_order_status,
)

router = APIRouter()
log = logging.getLogger("uvicorn")


def _order_out(order) -> dict:
    return OrderResponse.model_validate(order).model_dump(mode="json")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(request_data: OrderRequest):
    """
    Places a new order from a table session. The order starts in
    PENDING_PAYMENT and is moved to PAID by the payment event.
    """
    order = await create_order(
        tenant_id=request_data.tenant_id,
        table_id=request_data.table_id,
        line_items=request_data.items,
        customer_id=request_data.customer_id,
        customer_name=request_data.customer_name,
    )
    log.info(f"Order {order.id} placed at table {order.table_id}.")
    return SuccessResponse(data=_order_out(order))


@router.get("/tenant/{tenant_id}", response_model=SuccessResponse)
async def list_tenant_orders_endpoint(tenant_id: int, status: Optional[str] = None):
    """Restaurant orders, newest first, optionally filtered by status."""
    orders = await list_orders_for_tenant(tenant_id, status)
    return SuccessResponse.of_list([_order_out(o) for o in orders])


@router.get("/customer/{customer_id}", response_model=SuccessResponse)
async def list_customer_orders_endpoint(customer_id: int, status: Optional[str] = None):
    orders = await list_orders_for_customer(customer_id, status)
    return SuccessResponse.of_list([_order_out(o) for o in orders])


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: int, tenant_id: int):
    """Fetches details for a specific order of the calling restaurant."""
    order = await get_order(order_id, tenant_id)
    return SuccessResponse(data=_order_out(order))


@router.patch("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(order_id: int, payload: OrderStatusUpdate):
    """
    Updates status (e.g. 'IN_PROGRESS', 'READY_FOR_PICKUP', 'SERVED').
    """
    order = await update_order_status(
        order_id, payload.status, payload.tenant_id, payment_reference=payload.payment_reference
    )
    return SuccessResponse(data=_order_out(order))


@router.post("/{order_id}/payment", response_model=SuccessResponse)
async def payment_event_endpoint(order_id: int, payload: PaymentEvent):
    """
    Receives the payment provider's confirmation. Safe to redeliver: the same
    event_id is applied once.
    """
    order = await handle_payment_confirmed(
        {"order_id": order_id, "payment_reference": payload.payment_reference},
        payload.event_id,
    )
    return SuccessResponse(data=_order_out(order))
