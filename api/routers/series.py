from fastapi import APIRouter, Depends

from api.deps import get_context
from app.context import AppContext
from app.schemas import SeriesMetadata


router = APIRouter()


@router.get("/v0/series", response_model=SeriesMetadata)
async def get_series(series_id: str, ctx: AppContext = Depends(get_context)):
    return await ctx.refresher.refresh(series_id)
