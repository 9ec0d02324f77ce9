import logging
from typing import List, Tuple

from tortoise.models import Model

from qrdine.core.errors import Conflict, ValidationError, translate_db_errors
from qrdine.models.account import MEMBER_MODELS, Role
from qrdine.services.tenant_service import resolve_tenant

log = logging.getLogger("staff_service")


def parse_member_role(value) -> Role:
    """Resolves the role once at the boundary; only STAFF and KITCHEN can be added by a restaurant."""
    try:
        role = value if isinstance(value, Role) else Role(str(value).strip().upper())
    except ValueError:
        role = None
    if role not in MEMBER_MODELS:
        raise ValidationError("Invalid role. Only STAFF and KITCHEN can be added.")
    return role


@translate_db_errors
async def add_member(tenant_id, name: str, email: str, role) -> Tuple[Model, Role]:
    if not name or not name.strip() or not email or not email.strip():
        raise ValidationError("All fields are required")
    role = parse_member_role(role)
    tenant = await resolve_tenant(tenant_id)

    model = MEMBER_MODELS[role]
    email = email.strip().lower()
    if await model.filter(email=email, tenant_id=tenant.id).exists():
        raise Conflict("Staff member with this email already exists for your restaurant")

    member = await model.create(tenant=tenant, email=email, name=name.strip())
    log.info(f"{role.value} member {member.id} added to tenant {tenant.id}.")
    return member, role


@translate_db_errors
async def list_members(tenant_id) -> List[Tuple[Model, Role]]:
    """Staff first, then kitchen; newest first within each role."""
    tenant = await resolve_tenant(tenant_id)
    members = []
    for role, model in MEMBER_MODELS.items():
        rows = await model.filter(tenant_id=tenant.id).order_by("-created_at", "-id")
        members.extend((row, role) for row in rows)
    return members
