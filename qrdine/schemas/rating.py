from pydantic import BaseModel
from typing import Dict, List, Optional


class RatingEntry(BaseModel):
    menu_item_id: int
    rating: int
    review: Optional[str] = None


class RatingSubmission(BaseModel):
    order_id: int
    tenant_id: int
    customer_id: Optional[int] = None
    ratings: List[RatingEntry]


class RatingValue(BaseModel):
    rating: int
    review: Optional[str] = None


class OrderRatingsResponse(BaseModel):
    order_id: int
    ratings: Dict[int, RatingValue]
