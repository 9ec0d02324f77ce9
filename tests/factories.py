"""Record builders shared by the database-backed tests."""
from decimal import Decimal

from qrdine.models import Customer, MenuItem, Order, OrderStatus, Tenant


async def make_tenant(name="Spice Route", email=None, table_count=None):
    email = email or f"{name.lower().replace(' ', '.')}@example.com"
    return await Tenant.create(display_name=name, email=email, table_count=table_count)


async def make_item(tenant, name="Paneer Tikka", price="10.00", category="Starters", **extra):
    return await MenuItem.create(tenant=tenant, name=name, price=Decimal(price), category=category, **extra)


async def make_customer(name="Asha", email=None):
    return await Customer.create(name=name, email=email or f"{name.lower()}@example.com")


async def make_order(tenant, total="10.00", status=OrderStatus.PAID, created_at=None, customer=None, items=None):
    order = await Order.create(
        tenant=tenant,
        table_id="T1",
        customer=customer,
        line_items=items or [],
        total_amount=Decimal(total),
        status=status,
    )
    if created_at is not None:
        # Queryset updates write the value as given, bypassing auto_now_add
        await Order.filter(id=order.id).update(created_at=created_at)
        order = await Order.get(id=order.id)
    return order
