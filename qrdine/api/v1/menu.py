from fastapi import APIRouter, status

from qrdine.schemas.menu import MenuItemRequest, MenuItemResponse, StockUpdate
from qrdine.schemas.response import SuccessResponse
from qrdine.services.menu_service import (
    create_menu_item,
    delete_menu_item,
    list_menu,
    set_out_of_stock,
    update_menu_item,
)

router = APIRouter()


def _item_out(item) -> dict:
    return MenuItemResponse.model_validate(item).model_dump(mode="json")


@router.get("/{tenant_id}", response_model=SuccessResponse)
async def list_menu_endpoint(tenant_id: int, include_out_of_stock: bool = True):
    """Menu of one restaurant: Starters, Mains, Desserts, Drinks, then other categories."""
    items = await list_menu(tenant_id, include_out_of_stock=include_out_of_stock)
    return SuccessResponse.of_list([_item_out(item) for item in items])


@router.post("/{tenant_id}/items", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_menu_item_endpoint(tenant_id: int, payload: MenuItemRequest):
    item = await create_menu_item(tenant_id, payload.model_dump())
    return SuccessResponse(data=_item_out(item))


@router.put("/{tenant_id}/items/{item_id}", response_model=SuccessResponse)
async def update_menu_item_endpoint(tenant_id: int, item_id: int, payload: MenuItemRequest):
    item = await update_menu_item(item_id, tenant_id, payload.model_dump())
    return SuccessResponse(data=_item_out(item))


@router.patch("/{tenant_id}/items/{item_id}/stock", response_model=SuccessResponse)
async def set_stock_endpoint(tenant_id: int, item_id: int, payload: StockUpdate):
    item = await set_out_of_stock(item_id, tenant_id, payload.is_out_of_stock)
    return SuccessResponse(data={"id": item.id, "is_out_of_stock": item.is_out_of_stock})


@router.delete("/{tenant_id}/items/{item_id}", response_model=SuccessResponse)
async def delete_menu_item_endpoint(tenant_id: int, item_id: int):
    await delete_menu_item(item_id, tenant_id)
    return SuccessResponse(data={"id": item_id, "message": "Menu item deleted successfully"})
