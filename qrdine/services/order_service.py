import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as SchemaError
from tortoise.transactions import in_transaction

from qrdine.core.errors import Forbidden, InvalidStatus, NotFound, ValidationError, translate_db_errors
from qrdine.models.account import Customer
from qrdine.models.order import Order, OrderStatus
from qrdine.schemas.order import LineItem
from qrdine.services.tenant_service import resolve_tenant

log = logging.getLogger("order_service")

CENTS = Decimal("0.01")
# Largest value Order.total_amount can hold (max_digits=10, decimal_places=2)
MAX_TOTAL = Decimal("99999999.99")


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus.parse(value)
    except ValueError:
        raise InvalidStatus(f"Unrecognized order status: {value}")


def _parse_line_items(items: Iterable[Union[Dict, LineItem]]) -> List[LineItem]:
    if not items:
        raise ValidationError("Order must contain items.")
    parsed = []
    for raw in items:
        try:
            line = raw if isinstance(raw, LineItem) else LineItem.model_validate(raw)
        except SchemaError as e:
            raise ValidationError(f"Invalid line item: {e.errors()[0]['msg']}")
        if line.quantity < 1:
            raise ValidationError("Line item quantity must be at least 1")
        if not line.price.is_finite() or line.price < 0:
            raise ValidationError("Line item price must be a non-negative amount")
        parsed.append(line)
    return parsed


def order_total(items: Iterable[LineItem]) -> Decimal:
    """Sum of price x quantity over the quoted items, never re-priced."""
    total = sum((line.price * line.quantity for line in items), Decimal("0"))
    if total > MAX_TOTAL:
        raise ValidationError(f"Order total cannot exceed {MAX_TOTAL}")
    return total.quantize(CENTS)


@translate_db_errors
async def create_order(
    tenant_id,
    table_id: str,
    line_items: Iterable[Union[Dict, LineItem]],
    customer_id: Optional[int] = None,
    customer_name: Optional[str] = None,
) -> Order:
    """
    Creates an order in PENDING_PAYMENT from the items the customer was quoted.
    """
    if tenant_id is None or str(tenant_id).strip() == "":
        raise ValidationError("Restaurant ID is required")
    if table_id is None or str(table_id).strip() == "":
        raise ValidationError("Table ID is required")
    items = _parse_line_items(line_items)
    total = order_total(items)

    tenant = await resolve_tenant(tenant_id)

    customer = None
    if customer_id is not None:
        customer = await Customer.get_or_none(id=customer_id)
        if not customer:
            log.warning(f"Customer {customer_id} not found, creating order without a customer.")

    order = await Order.create(
        tenant=tenant,
        table_id=str(table_id).strip(),
        customer=customer,
        line_items=[line.model_dump(mode="json") for line in items],
        total_amount=total,
        status=OrderStatus.PENDING_PAYMENT,
        customer_name=customer_name or None,
    )
    log.info(f"Order {order.id} created for tenant {tenant.id}, table {order.table_id}, total {order.total_amount}.")
    return order


async def _owned_order(order_id, tenant_id: int, conn=None) -> Order:
    query = Order.filter(id=order_id)
    if conn is not None:
        query = query.using_db(conn)
    order = await query.first()
    if not order:
        raise NotFound("Order not found")
    if order.tenant_id != tenant_id:
        log.warning(f"AUDIT: tenant {tenant_id} attempted to access order {order_id} of another tenant.")
        raise Forbidden()
    return order


@translate_db_errors
async def get_order(order_id, tenant_id) -> Order:
    tenant = await resolve_tenant(tenant_id)
    return await _owned_order(order_id, tenant.id)


@translate_db_errors
async def update_order_status(
    order_id,
    new_status,
    tenant_id,
    payment_reference: Optional[str] = None,
) -> Order:
    """
    Sets the order status. Last write wins; the only rule enforced on the
    transition itself is that nothing returns to PENDING_PAYMENT.
    """
    status = parse_status(new_status)
    tenant = await resolve_tenant(tenant_id)

    async with in_transaction() as conn:
        order = await _owned_order(order_id, tenant.id, conn)

        old_status = order.status
        if status == OrderStatus.PENDING_PAYMENT and old_status != OrderStatus.PENDING_PAYMENT:
            raise InvalidStatus(f"Order {order.id} cannot return to {status.value} from {old_status.value}")

        order.status = status
        update_fields = ["status", "updated_at"]
        if payment_reference:
            order.payment_reference = payment_reference
            update_fields.append("payment_reference")
        await order.save(update_fields=update_fields, using_db=conn)

    log.info(f"Order {order.id} moved {old_status.value} -> {status.value}.")
    return order


@translate_db_errors
async def list_orders_for_tenant(tenant_id, status=None) -> List[Order]:
    tenant = await resolve_tenant(tenant_id)
    query = Order.filter(tenant_id=tenant.id)
    if status:
        query = query.filter(status=parse_status(status))
    return await query.order_by("-created_at", "-id")


@translate_db_errors
async def list_orders_for_customer(customer_id, status=None) -> List[Order]:
    if customer_id is None:
        raise ValidationError("Customer ID is required")
    query = Order.filter(customer_id=customer_id)
    if status:
        query = query.filter(status=parse_status(status))
    return await query.order_by("-created_at", "-id")
