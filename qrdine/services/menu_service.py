import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from tortoise.transactions import in_transaction

from qrdine.core.errors import Forbidden, NotFound, ValidationError, translate_db_errors
from qrdine.models.menu import MenuItem
from qrdine.models.tenant import Tenant
from qrdine.services.tenant_service import effective_table_count, parse_table_number, resolve_tenant

log = logging.getLogger("menu_service")

# Fields staff may write. Rating fields belong to the rating aggregator.
EDITABLE_FIELDS = (
    "name", "description", "price", "category", "image",
    "is_vegetarian", "is_spicy", "is_out_of_stock",
)

# MenuItem.price is DecimalField(max_digits=10, decimal_places=2)
MAX_PRICE = Decimal("99999999.99")


@dataclass
class TableSession:
    tenant: Tenant
    table_id: str
    table_number: int
    menu: List[MenuItem]


def _clean_item_data(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Keeps editable fields only and validates the ones present."""
    cleaned = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}

    if not partial:
        for required in ("name", "price", "category"):
            if cleaned.get(required) in (None, ""):
                raise ValidationError(f"Menu item {required} is required")

    for text_field in ("name", "category"):
        if text_field in cleaned:
            value = cleaned[text_field]
            if value is None or not str(value).strip():
                raise ValidationError(f"Menu item {text_field} cannot be blank")
            cleaned[text_field] = str(value).strip()

    if "price" in cleaned:
        try:
            price = Decimal(str(cleaned["price"]))
        except (InvalidOperation, ValueError):
            raise ValidationError("Price must be a number")
        if not price.is_finite() or price < 0:
            raise ValidationError("Price must be a non-negative amount")
        if price > MAX_PRICE:
            raise ValidationError(f"Price cannot exceed {MAX_PRICE}")
        cleaned["price"] = price.quantize(Decimal("0.01"))

    if "description" in cleaned and cleaned["description"] is None:
        cleaned["description"] = ""
    for flag in ("is_vegetarian", "is_spicy", "is_out_of_stock"):
        if flag in cleaned and not isinstance(cleaned[flag], bool):
            raise ValidationError(f"Menu item {flag} must be true or false")
    return cleaned


async def menu_for_tenant(tenant: Tenant, include_out_of_stock: bool = True) -> List[MenuItem]:
    query = MenuItem.filter(tenant_id=tenant.id)
    if not include_out_of_stock:
        query = query.filter(is_out_of_stock=False)
    items = await query
    # Starters, Mains, Desserts, Drinks, then the rest; name within a category
    return sorted(items, key=MenuItem.sort_key)


@translate_db_errors
async def list_menu(tenant_id, include_out_of_stock: bool = True) -> List[MenuItem]:
    tenant = await resolve_tenant(tenant_id)
    return await menu_for_tenant(tenant, include_out_of_stock=include_out_of_stock)


@translate_db_errors
async def open_table_session(tenant_id, table_id) -> TableSession:
    """
    Entry point of a QR table scan: validates the table against the tenant's
    table count and returns the orderable menu.
    """
    if table_id is None or str(table_id).strip() == "":
        raise ValidationError("Table ID is required")
    tenant = await resolve_tenant(tenant_id)
    number = parse_table_number(table_id)
    bound = effective_table_count(tenant)
    if not 1 <= number <= bound:
        raise ValidationError(f"Invalid table number. Must be between 1 and {bound}")

    menu = await menu_for_tenant(tenant, include_out_of_stock=False)
    return TableSession(tenant=tenant, table_id=str(table_id).strip(), table_number=number, menu=menu)


async def _owned_item(item_id, tenant: Tenant, conn=None) -> MenuItem:
    """Loads an item for writing; a row of another tenant is Forbidden, not NotFound."""
    query = MenuItem.filter(id=item_id)
    if conn is not None:
        query = query.using_db(conn).select_for_update()
    item = await query.first()
    if not item:
        raise NotFound("Menu item not found")
    if item.tenant_id != tenant.id:
        log.warning(f"AUDIT: tenant {tenant.id} attempted to modify menu item {item_id} of another tenant.")
        raise Forbidden()
    return item


@translate_db_errors
async def create_menu_item(tenant_id, data: Dict[str, Any]) -> MenuItem:
    tenant = await resolve_tenant(tenant_id)
    cleaned = _clean_item_data(data)
    item = await MenuItem.create(tenant=tenant, **cleaned)
    log.info(f"Menu item {item.id} '{item.name}' added for tenant {tenant.id}.")
    return item


@translate_db_errors
async def update_menu_item(item_id, tenant_id, data: Dict[str, Any]) -> MenuItem:
    tenant = await resolve_tenant(tenant_id)
    cleaned = _clean_item_data(data, partial=True)
    async with in_transaction() as conn:
        item = await _owned_item(item_id, tenant, conn)
        if not cleaned:
            return item
        for field, value in cleaned.items():
            setattr(item, field, value)
        await item.save(update_fields=list(cleaned) + ["updated_at"], using_db=conn)
    return item


@translate_db_errors
async def set_out_of_stock(item_id, tenant_id, is_out_of_stock: bool) -> MenuItem:
    return await update_menu_item(item_id, tenant_id, {"is_out_of_stock": is_out_of_stock})


@translate_db_errors
async def delete_menu_item(item_id, tenant_id) -> None:
    tenant = await resolve_tenant(tenant_id)
    async with in_transaction() as conn:
        item = await _owned_item(item_id, tenant, conn)
        await item.delete(using_db=conn)
    log.info(f"Menu item {item_id} deleted by tenant {tenant.id}.")
