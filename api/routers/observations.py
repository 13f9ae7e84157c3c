from typing import List, Optional

from fastapi import APIRouter, Depends

from api.deps import get_context, query_date
from app.context import AppContext
from app.reconciler import RequestedRange, resolve_observations
from app.schemas import Observation


router = APIRouter()


@router.get("/v0/observations", response_model=List[Observation])
async def get_observations(
    series_id: str,
    observation_start: Optional[str] = None,
    observation_end: Optional[str] = None,
    realtime_start: Optional[str] = None,
    realtime_end: Optional[str] = None,
    ctx: AppContext = Depends(get_context),
):
    # Dates arrive as strings so that "" can mean "not provided".
    requested = RequestedRange(
        series_id=series_id,
        observation_start=query_date("observation_start", observation_start),
        observation_end=query_date("observation_end", observation_end),
        realtime_start=query_date("realtime_start", realtime_start),
        realtime_end=query_date("realtime_end", realtime_end),
    )
    result = await resolve_observations(ctx, requested)
    return result.observations
