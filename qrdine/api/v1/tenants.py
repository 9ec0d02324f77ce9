from fastapi import APIRouter, status

from qrdine.models.tenant import Tenant
from qrdine.schemas.menu import MenuItemResponse
from qrdine.schemas.response import SuccessResponse
from qrdine.schemas.tenant import (
    MemberRequest,
    MemberResponse,
    TableSessionResponse,
    TenantRequest,
    TenantResponse,
)
from qrdine.services.menu_service import open_table_session
from qrdine.services.staff_service import add_member, list_members
from qrdine.services.tenant_service import create_tenant, effective_table_count, resolve_tenant

router = APIRouter()


def _tenant_out(tenant: Tenant) -> TenantResponse:
    return TenantResponse(
        id=tenant.id,
        display_name=tenant.display_name,
        table_count=effective_table_count(tenant),
    )


def _member_out(member, role) -> dict:
    return MemberResponse(id=member.id, name=member.name, email=member.email, role=role).model_dump(mode="json")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_tenant_endpoint(payload: TenantRequest):
    """Creates a restaurant record (approval workflows live outside this service)."""
    tenant = await create_tenant(payload.display_name, payload.email, payload.table_count)
    return SuccessResponse(data=_tenant_out(tenant).model_dump())


@router.get("/{tenant_id}", response_model=SuccessResponse)
async def get_tenant_endpoint(tenant_id: int):
    tenant = await resolve_tenant(tenant_id)
    return SuccessResponse(data=_tenant_out(tenant).model_dump())


@router.get("/{tenant_id}/tables/{table_id}", response_model=SuccessResponse)
async def table_session_endpoint(tenant_id: int, table_id: str):
    """
    Landing call of a QR scan. Validates the table number and returns the
    orderable (in-stock) menu in display order.
    """
    session = await open_table_session(tenant_id, table_id)
    data = TableSessionResponse(
        tenant=_tenant_out(session.tenant),
        table_id=session.table_id,
        menu=[MenuItemResponse.model_validate(item) for item in session.menu],
    ).model_dump(mode="json")
    return SuccessResponse(data=data)


@router.post("/{tenant_id}/staff", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_member_endpoint(tenant_id: int, payload: MemberRequest):
    member, role = await add_member(tenant_id, payload.name, payload.email, payload.role)
    return SuccessResponse(data=_member_out(member, role))


@router.get("/{tenant_id}/staff", response_model=SuccessResponse)
async def list_members_endpoint(tenant_id: int):
    members = await list_members(tenant_id)
    return SuccessResponse.of_list([_member_out(member, role) for member, role in members])
