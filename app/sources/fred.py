from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from app.dates import format_date
from app.errors import SeriesNotFound, UpstreamError
from app.schemas import Observation, ObservationsPage, ProviderError, SeriesMetadata, SeriesPage


logger = structlog.get_logger()

FRED_BASE = "https://api.stlouisfed.org/fred"
PAGE_SIZE = 10_000

M = TypeVar("M", bound=BaseModel)


class FredClient:
    """Thin async client for the FRED series and observations endpoints.

    Holds no state between calls besides the connection pool. Every failure
    (transport, HTTP status, or an error payload served with HTTP 200) is
    raised as UpstreamError; nothing is retried here.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = FRED_BASE,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            r = await self._http.get(url, params=params)
        except httpx.TimeoutException as e:
            logger.warning("fred_request_timeout", path=path, error=str(e))
            raise UpstreamError(503, "FRED request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("fred_request_failed", path=path, error=str(e))
            raise UpstreamError(None, str(e)) from e

        try:
            payload = r.json()
        except ValueError:
            payload = None

        # FRED can report errors in the body of a 200 response.
        if isinstance(payload, dict) and "error_code" in payload:
            err = _validate(ProviderError, payload)
            logger.warning("fred_provider_error", path=path, status_code=err.error_code, message=err.error_message)
            raise UpstreamError(err.error_code, err.error_message)
        if r.is_error:
            logger.warning("fred_http_error", path=path, status_code=r.status_code)
            raise UpstreamError(r.status_code, r.reason_phrase or None)
        if not isinstance(payload, dict):
            raise UpstreamError(502, "FRED returned a body that is not a JSON object")
        return payload

    async def fetch_observations(
        self,
        series_id: str,
        observation_start: Optional[date] = None,
        observation_end: Optional[date] = None,
        realtime_start: Optional[date] = None,
        realtime_end: Optional[date] = None,
    ) -> List[Observation]:
        params: Dict[str, Any] = {
            "api_key": self.api_key or "",
            "file_type": "json",
            "limit": PAGE_SIZE,
            "sort_order": "asc",
            "series_id": series_id,
        }
        bounds = {
            "observation_start": observation_start,
            "observation_end": observation_end,
            "realtime_start": realtime_start,
            "realtime_end": realtime_end,
        }
        for key, value in bounds.items():
            if value is not None:
                params[key] = format_date(value)

        observations: List[Observation] = []
        offset = 0
        while True:
            page_params = dict(params)
            if offset > 0:
                page_params["offset"] = offset
            payload = await self._get_json("/series/observations", page_params)
            page = _validate(ObservationsPage, payload)
            observations.extend(page.observations)
            logger.debug("fred_page_fetched", series_id=series_id, offset=offset, rows=len(page.observations))
            if page.observations and len(page.observations) >= (page.limit or PAGE_SIZE):
                offset += len(page.observations)
            else:
                break
        return observations

    async def fetch_series(self, series_id: str) -> SeriesMetadata:
        # See: https://fred.stlouisfed.org/docs/api/fred/series.html
        params = {
            "api_key": self.api_key or "",
            "file_type": "json",
            "series_id": series_id,
        }
        payload = await self._get_json("/series", params)
        page = _validate(SeriesPage, payload)
        if not page.seriess:
            raise SeriesNotFound(series_id)
        return page.seriess[0]


def _validate(model: Type[M], payload: Dict[str, Any]) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise UpstreamError(502, f"unexpected FRED payload: {e.error_count()} validation error(s)") from e
