import pytest
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from qrdine.core.errors import Forbidden, InvalidStatus, TenantNotFound, ValidationError
from qrdine.models.order import Order, OrderStatus
from qrdine.schemas.order import LineItem
from qrdine.services.order_service import (
    create_order,
    get_order,
    list_orders_for_customer,
    list_orders_for_tenant,
    order_total,
    update_order_status,
)
from factories import make_customer, make_order, make_tenant

# --- CORE MOCKING UTILITIES ---

class AsyncContextManagerMock:
    """Mocks 'async with in_transaction() as conn:' to fulfill the async context manager protocol."""
    async def __aenter__(self):
        return object()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


def create_mock_queryset(final_return_value):
    """
    Chainable stand-in for Order.filter(...): using_db() returns the same
    mock and first() resolves to the given order.
    """
    chainable_mock = MagicMock()
    chainable_mock.using_db.return_value = chainable_mock
    chainable_mock.first = AsyncMock(return_value=final_return_value)
    return chainable_mock


def mock_order(status, tenant_id=1):
    order = MagicMock()
    order.id = 42
    order.tenant_id = tenant_id
    order.status = status
    order.payment_reference = None
    order.save = AsyncMock()
    return order

# --- PURE HELPERS ---

def test_order_total_uses_quoted_prices():
    items = [
        LineItem(menu_item_id=1, name="Paneer Tikka", price=Decimal("10.00"), quantity=2),
        LineItem(menu_item_id=2, name="Masala Chai", price=Decimal("5.00"), quantity=1),
    ]
    assert order_total(items) == Decimal("25.00")


def test_order_total_rounds_to_cents():
    items = [LineItem(menu_item_id=1, price=Decimal("0.333"), quantity=3)]
    assert order_total(items) == Decimal("1.00")


def test_order_total_must_fit_the_amount_column():
    at_limit = [LineItem(menu_item_id=1, price=Decimal("99999999.99"), quantity=1)]
    assert order_total(at_limit) == Decimal("99999999.99")

    with pytest.raises(ValidationError):
        order_total([LineItem(menu_item_id=1, price=Decimal("99999999.99"), quantity=1000)])

# --- STATE MACHINE (mocked ORM) ---

@pytest.mark.parametrize("old, new", [
    (OrderStatus.PAID, OrderStatus.IN_PROGRESS),
    (OrderStatus.IN_PROGRESS, OrderStatus.READY_FOR_PICKUP),
    (OrderStatus.READY_FOR_PICKUP, OrderStatus.SERVED),
    (OrderStatus.SERVED, OrderStatus.IN_PROGRESS),  # staff override is allowed
])
@patch('qrdine.services.order_service.resolve_tenant', new_callable=AsyncMock)
@patch('qrdine.services.order_service.in_transaction', new_callable=MagicMock)
async def test_successful_status_transition(mock_in_transaction, mock_resolve, old, new):
    order = mock_order(old)
    mock_resolve.return_value = SimpleNamespace(id=1)
    mock_in_transaction.return_value = AsyncContextManagerMock()

    with patch.object(Order, 'filter', MagicMock(return_value=create_mock_queryset(order))):
        updated = await update_order_status(order.id, new.value, 1)

    assert updated.status == new
    order.save.assert_called_once()
    assert order.save.call_args.kwargs["update_fields"] == ["status", "updated_at"]


@patch('qrdine.services.order_service.resolve_tenant', new_callable=AsyncMock)
@patch('qrdine.services.order_service.in_transaction', new_callable=MagicMock)
async def test_cannot_return_to_pending_payment(mock_in_transaction, mock_resolve):
    order = mock_order(OrderStatus.PAID)
    mock_resolve.return_value = SimpleNamespace(id=1)
    mock_in_transaction.return_value = AsyncContextManagerMock()

    with patch.object(Order, 'filter', MagicMock(return_value=create_mock_queryset(order))):
        with pytest.raises(InvalidStatus):
            await update_order_status(order.id, "PENDING_PAYMENT", 1)

    order.save.assert_not_called()


@patch('qrdine.services.order_service.resolve_tenant', new_callable=AsyncMock)
async def test_unknown_status_is_rejected_before_lookup(mock_resolve):
    with pytest.raises(InvalidStatus):
        await update_order_status(42, "DELIVERED", 1)
    mock_resolve.assert_not_called()


@patch('qrdine.services.order_service.resolve_tenant', new_callable=AsyncMock)
@patch('qrdine.services.order_service.in_transaction', new_callable=MagicMock)
async def test_status_update_of_other_tenant_is_forbidden(mock_in_transaction, mock_resolve):
    order = mock_order(OrderStatus.PAID, tenant_id=2)
    mock_resolve.return_value = SimpleNamespace(id=1)
    mock_in_transaction.return_value = AsyncContextManagerMock()

    with patch.object(Order, 'filter', MagicMock(return_value=create_mock_queryset(order))):
        with pytest.raises(Forbidden):
            await update_order_status(order.id, "SERVED", 1)

    order.save.assert_not_called()

# --- DATABASE-BACKED ---

async def test_create_order_starts_pending_payment(db):
    tenant = await make_tenant()
    order = await create_order(
        tenant.id,
        "T4",
        [
            {"menu_item_id": 1, "name": "Paneer Tikka", "price": "10.00", "quantity": 2},
            {"menu_item_id": 2, "name": "Masala Chai", "price": "5.00", "quantity": 1},
        ],
        customer_name="Asha",
    )

    stored = await Order.get(id=order.id)
    assert stored.status == OrderStatus.PENDING_PAYMENT
    assert stored.total_amount == Decimal("25.00")
    assert stored.tenant_id == tenant.id
    assert stored.table_id == "T4"
    assert stored.line_items[0]["name"] == "Paneer Tikka"
    assert stored.customer_id is None


async def test_create_order_ignores_unknown_customer(db):
    tenant = await make_tenant()
    order = await create_order(tenant.id, "T1", [{"menu_item_id": 1, "price": "3.50"}], customer_id=999)
    assert order.customer_id is None


async def test_create_order_validation(db):
    tenant = await make_tenant()
    with pytest.raises(ValidationError):
        await create_order(tenant.id, "T1", [])
    with pytest.raises(ValidationError):
        await create_order(tenant.id, "", [{"menu_item_id": 1, "price": "3.50"}])
    with pytest.raises(ValidationError):
        await create_order(tenant.id, "T1", [{"menu_item_id": 1, "price": "3.50", "quantity": 0}])
    with pytest.raises(ValidationError):
        await create_order(tenant.id, "T1", [{"menu_item_id": 1, "price": "-1"}])
    with pytest.raises(ValidationError):
        await create_order(tenant.id, "T1", [{"menu_item_id": 1, "price": "99999999.99", "quantity": 1000}])
    assert await Order.all().count() == 0


async def test_create_order_unknown_tenant(db):
    with pytest.raises(TenantNotFound):
        await create_order(999, "T1", [{"menu_item_id": 1, "price": "3.50"}])


async def test_status_update_sets_payment_reference(db):
    tenant = await make_tenant()
    order = await make_order(tenant, status=OrderStatus.PENDING_PAYMENT)

    await update_order_status(order.id, "paid", tenant.id, payment_reference="pay_123")

    stored = await Order.get(id=order.id)
    assert stored.status == OrderStatus.PAID
    assert stored.payment_reference == "pay_123"


async def test_orders_are_isolated_per_tenant(db):
    mine = await make_tenant("Spice Route")
    other = await make_tenant("Curry House")
    order = await make_order(other)

    with pytest.raises(Forbidden):
        await get_order(order.id, mine.id)
    with pytest.raises(Forbidden):
        await update_order_status(order.id, "SERVED", mine.id)

    assert (await Order.get(id=order.id)).status == OrderStatus.PAID
    assert await list_orders_for_tenant(mine.id) == []


async def test_list_orders_newest_first_with_status_filter(db):
    tenant = await make_tenant()
    customer = await make_customer()
    first = await make_order(tenant, customer=customer)
    second = await make_order(tenant, status=OrderStatus.SERVED, customer=customer)

    assert [o.id for o in await list_orders_for_tenant(tenant.id)] == [second.id, first.id]
    assert [o.id for o in await list_orders_for_tenant(tenant.id, "served")] == [second.id]
    assert [o.id for o in await list_orders_for_customer(customer.id, "PAID")] == [first.id]

    with pytest.raises(InvalidStatus):
        await list_orders_for_tenant(tenant.id, "LOST")
