import pytest
from decimal import Decimal

from qrdine.core.errors import Forbidden, NotFound, TenantNotFound, ValidationError
from qrdine.models import MenuItem
from qrdine.services.menu_service import (
    create_menu_item,
    delete_menu_item,
    list_menu,
    open_table_session,
    set_out_of_stock,
    update_menu_item,
)
from factories import make_item, make_tenant


async def test_menu_is_sorted_by_category_then_name(db):
    tenant = await make_tenant()
    await make_item(tenant, name="Lassi", category="Drinks")
    await make_item(tenant, name="Samosa", category="Starters")
    await make_item(tenant, name="Biryani", category="Mains")
    await make_item(tenant, name="Aloo Tikki", category="Starters")
    await make_item(tenant, name="Raita", category="Sides")
    await make_item(tenant, name="Kulfi", category="Desserts")

    names = [item.name for item in await list_menu(tenant.id)]
    assert names == ["Aloo Tikki", "Samosa", "Biryani", "Kulfi", "Lassi", "Raita"]


async def test_menu_only_lists_own_items(db):
    mine = await make_tenant("Spice Route")
    other = await make_tenant("Curry House")
    await make_item(mine, name="Samosa")
    await make_item(other, name="Dosa")

    assert [item.name for item in await list_menu(mine.id)] == ["Samosa"]
    with pytest.raises(TenantNotFound):
        await list_menu(999)


async def test_create_menu_item_validates(db):
    tenant = await make_tenant()
    item = await create_menu_item(tenant.id, {"name": " Samosa ", "price": "4.5", "category": "Starters"})
    assert item.name == "Samosa"
    assert item.price == Decimal("4.50")
    assert item.rating_count == 0

    with pytest.raises(ValidationError):
        await create_menu_item(tenant.id, {"name": "Samosa", "category": "Starters"})
    with pytest.raises(ValidationError):
        await create_menu_item(tenant.id, {"name": "Samosa", "price": "-1", "category": "Starters"})
    with pytest.raises(ValidationError):
        await create_menu_item(tenant.id, {"name": "Samosa", "price": "abc", "category": "Starters"})


async def test_update_ignores_rating_fields(db):
    tenant = await make_tenant()
    item = await make_item(tenant)

    updated = await update_menu_item(item.id, tenant.id, {"price": "12.00", "rating_average": 5, "rating_count": 9})

    assert updated.price == Decimal("12.00")
    stored = await MenuItem.get(id=item.id)
    assert stored.rating_count == 0
    assert stored.rating_average == Decimal("0")


async def test_cross_tenant_writes_are_forbidden(db):
    mine = await make_tenant("Spice Route")
    other = await make_tenant("Curry House")
    item = await make_item(other, price="8.00")

    with pytest.raises(Forbidden):
        await update_menu_item(item.id, mine.id, {"price": "1.00"})
    with pytest.raises(Forbidden):
        await set_out_of_stock(item.id, mine.id, True)
    with pytest.raises(Forbidden):
        await delete_menu_item(item.id, mine.id)

    stored = await MenuItem.get(id=item.id)
    assert stored.price == Decimal("8.00")
    assert stored.is_out_of_stock is False


async def test_stock_toggle_and_delete(db):
    tenant = await make_tenant()
    item = await make_item(tenant)

    await set_out_of_stock(item.id, tenant.id, True)
    assert (await MenuItem.get(id=item.id)).is_out_of_stock is True

    await delete_menu_item(item.id, tenant.id)
    assert not await MenuItem.filter(id=item.id).exists()
    with pytest.raises(NotFound):
        await delete_menu_item(item.id, tenant.id)


async def test_table_session_returns_orderable_menu(db):
    tenant = await make_tenant(table_count=10)
    await make_item(tenant, name="Samosa")
    await make_item(tenant, name="Kheer", category="Desserts", is_out_of_stock=True)

    session = await open_table_session(tenant.id, "T3")

    assert session.table_number == 3
    assert [item.name for item in session.menu] == ["Samosa"]


async def test_table_session_checks_table_bounds(db):
    tenant = await make_tenant(table_count=10)
    default = await make_tenant("Curry House")

    for table_id in ("T0", "11", "patio", ""):
        with pytest.raises(ValidationError):
            await open_table_session(tenant.id, table_id)

    assert (await open_table_session(default.id, "20")).table_number == 20
    with pytest.raises(ValidationError):
        await open_table_session(default.id, "21")


async def test_flags_must_be_booleans(db):
    tenant = await make_tenant()
    item = await make_item(tenant)

    with pytest.raises(ValidationError):
        await update_menu_item(item.id, tenant.id, {"is_spicy": "false"})
    with pytest.raises(ValidationError):
        await set_out_of_stock(item.id, tenant.id, "false")
    with pytest.raises(ValidationError):
        await create_menu_item(tenant.id, {"name": "Samosa", "price": "4", "category": "Starters", "is_vegetarian": 1})

    stored = await MenuItem.get(id=item.id)
    assert stored.is_spicy is False
    assert stored.is_out_of_stock is False


async def test_price_must_fit_the_price_column(db):
    tenant = await make_tenant()
    with pytest.raises(ValidationError):
        await create_menu_item(tenant.id, {"name": "Caviar", "price": "100000000", "category": "Starters"})
    assert await MenuItem.filter(tenant_id=tenant.id).count() == 0
