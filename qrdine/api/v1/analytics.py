from fastapi import APIRouter

from qrdine.schemas.response import SuccessResponse
from qrdine.services.analytics_service import compute_dashboard

router = APIRouter()


@router.get("/{tenant_id}", response_model=SuccessResponse)
async def dashboard_endpoint(tenant_id: int, range: str = "Week"):
    """Revenue, orders and rating for Today / Week / Month / Year, with the change against the previous period."""
    dashboard = await compute_dashboard(tenant_id, range)
    return SuccessResponse(data=dashboard.model_dump(mode="json"))
