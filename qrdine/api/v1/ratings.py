from fastapi import APIRouter, status

from qrdine.schemas.rating import OrderRatingsResponse, RatingSubmission
from qrdine.schemas.response import SuccessResponse
from qrdine.services.rating_service import get_ratings_for_order, submit_ratings

router = APIRouter()


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def submit_ratings_endpoint(payload: RatingSubmission):
    """Rates the items of one order. Resubmitting updates the earlier ratings."""
    saved = await submit_ratings(
        payload.order_id,
        payload.tenant_id,
        payload.ratings,
        customer_id=payload.customer_id,
    )
    return SuccessResponse(data={"order_id": payload.order_id, "rated_items": len(saved),
                                 "message": "Ratings submitted successfully"})


@router.get("/order/{order_id}", response_model=SuccessResponse)
async def order_ratings_endpoint(order_id: int, tenant_id: int):
    ratings = await get_ratings_for_order(order_id, tenant_id)
    data = OrderRatingsResponse(order_id=order_id, ratings=ratings).model_dump(mode="json")
    return SuccessResponse(data=data)
