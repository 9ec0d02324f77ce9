import logging
from tortoise.transactions import in_transaction
from qrdine.core.errors import NotFound, ValidationError, translate_db_errors
from qrdine.models.order import Order, OrderStatus
from qrdine.models.processed_event import ProcessedEvent
from typing import Dict, Any

log = logging.getLogger("payment_consumer")

PAYMENT_CONFIRMED = "payment.confirmed.v1"


@translate_db_errors
async def handle_payment_confirmed(event_payload: Dict[str, Any], event_id: str) -> Order:
    """
    Consumer logic for 'payment.confirmed.v1' sent by the external payment provider.
    Moves the Order from PENDING_PAYMENT to PAID and records the payment reference.
    Redelivered events (same event_id) are acknowledged without side effects.
    """
    order_id = event_payload.get("order_id")
    payment_reference = event_payload.get("payment_reference")
    event_id_str = str(event_id or "").strip()
    if not order_id or not payment_reference or not event_id_str:
        raise ValidationError("order_id, payment_reference and event id are required")

    log.info(f"Payment event {event_id_str} received for Order {order_id}.")

    async with in_transaction() as conn:
        order = await Order.filter(id=order_id).using_db(conn).select_for_update().first()
        if not order:
            raise NotFound("Order not found")

        # Idempotency Check
        if await ProcessedEvent.filter(event_id=event_id_str).using_db(conn).exists():
            log.info(f"Idempotency: Event {event_id_str} already processed.")
            return order

        # Only the initial state is moved; kitchen progress is never rolled back by a late event
        if order.status == OrderStatus.PENDING_PAYMENT:
            order.status = OrderStatus.PAID
            order.payment_reference = payment_reference
            await order.save(update_fields=['status', 'payment_reference', 'updated_at'], using_db=conn)
            log.info(f"Status UPDATE: Order {order.id} moved to PAID (payment {payment_reference}).")
        else:
            log.warning(f"Payment event {event_id_str} for Order {order.id} ignored, order is {order.status.value}.")

        await ProcessedEvent.create(event_id=event_id_str, event_type=PAYMENT_CONFIRMED, using_db=conn)

    return order
