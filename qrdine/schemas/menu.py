from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from decimal import Decimal


class MenuItemRequest(BaseModel):
    """Create/replace payload. Rating fields are not accepted here."""
    name: str
    description: str = ""
    price: Decimal
    category: str
    image: Optional[str] = None
    is_vegetarian: bool = False
    is_spicy: bool = False
    is_out_of_stock: bool = False


class StockUpdate(BaseModel):
    is_out_of_stock: bool


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    name: str
    description: str
    price: Decimal
    category: str
    image: Optional[str] = None
    is_vegetarian: bool
    is_spicy: bool
    is_out_of_stock: bool
    rating_average: Decimal
    rating_count: int
    updated_at: Optional[datetime] = None
