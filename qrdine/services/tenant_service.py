import logging
import re
from typing import Optional

from qrdine.core.config import DEFAULT_TABLE_COUNT
from qrdine.core.errors import Conflict, TenantNotFound, ValidationError, translate_db_errors
from qrdine.models.tenant import Tenant

log = logging.getLogger("tenant_service")

_TABLE_ID = re.compile(r"^[Tt]?(\d+)$")


def _parse_tenant_id(tenant_id) -> int:
    if tenant_id is None or str(tenant_id).strip() == "":
        raise ValidationError("Restaurant ID is required")
    try:
        return int(tenant_id)
    except (TypeError, ValueError):
        # A malformed id can never resolve; answer like any unknown tenant.
        raise TenantNotFound()


@translate_db_errors
async def resolve_tenant(tenant_id) -> Tenant:
    """Entry guard for every tenant-scoped operation."""
    tenant = await Tenant.get_or_none(id=_parse_tenant_id(tenant_id))
    if not tenant:
        raise TenantNotFound()
    return tenant


def effective_table_count(tenant: Tenant) -> int:
    return tenant.table_count or DEFAULT_TABLE_COUNT


async def table_count(tenant_id) -> int:
    tenant = await resolve_tenant(tenant_id)
    return effective_table_count(tenant)


@translate_db_errors
async def create_tenant(display_name: str, email: str, table_count: Optional[int] = None) -> Tenant:
    if not display_name or not display_name.strip():
        raise ValidationError("Restaurant name is required")
    if not email or not email.strip():
        raise ValidationError("Email is required")
    if table_count is not None and table_count < 1:
        raise ValidationError("Number of tables must be a positive integer")

    email = email.strip().lower()
    if await Tenant.filter(email=email).exists():
        raise Conflict("A restaurant with this email already exists")

    tenant = await Tenant.create(display_name=display_name.strip(), email=email, table_count=table_count)
    log.info(f"Tenant {tenant.id} created ({tenant.display_name}).")
    return tenant


def parse_table_number(table_id) -> int:
    match = _TABLE_ID.match(str(table_id or "").strip())
    if not match:
        raise ValidationError("Invalid table number")
    return int(match.group(1))

