from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from api.routers import health, observations, series
from app.context import AppContext
from app.errors import SeriesNotFound, StorageError, UpstreamError
from app.settings import settings


logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    if not settings.fred_api_key:
        logger.warning("fred_api_key_missing")
    context = AppContext.build(settings)
    context.store.initialize()
    app.state.context = context
    logger.info("Starting FRED proxy", env=settings.app_env, db=settings.fred_observations_db)
    yield
    await context.aclose()
    logger.info("Shutting down FRED proxy")


app = FastAPI(title="fred-web-proxy", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(health.router)
app.include_router(observations.router)
app.include_router(series.router)


@app.exception_handler(UpstreamError)
async def upstream_error_handler(_request: Request, exc: UpstreamError) -> JSONResponse:
    status = exc.status_code if exc.status_code and 400 <= exc.status_code <= 599 else 503
    logger.warning("upstream_error", status_code=status, message=exc.message)
    return JSONResponse(status_code=status, content={"detail": exc.message or ""})


@app.exception_handler(StorageError)
async def storage_error_handler(_request: Request, exc: StorageError) -> JSONResponse:
    logger.error("storage_error", error=str(exc))
    return JSONResponse(status_code=500, content={"detail": "local cache unavailable"})


@app.exception_handler(SeriesNotFound)
async def not_found_handler(_request: Request, exc: SeriesNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})
