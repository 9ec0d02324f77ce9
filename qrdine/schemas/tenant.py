from pydantic import BaseModel, ConfigDict
from typing import List, Optional

from qrdine.models.account import Role
from qrdine.schemas.menu import MenuItemResponse


class TenantRequest(BaseModel):
    display_name: str
    email: str
    table_count: Optional[int] = None


class TenantResponse(BaseModel):
    id: int
    display_name: str
    table_count: int


class TableSessionResponse(BaseModel):
    tenant: TenantResponse
    table_id: str
    menu: List[MenuItemResponse]


class MemberRequest(BaseModel):
    name: str
    email: str
    role: str


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
