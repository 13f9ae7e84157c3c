from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from app.errors import StorageError
from app.schemas import SeriesMetadata

if TYPE_CHECKING:
    from app.cache_store import CacheStore
    from app.sources.fred import FredClient


logger = structlog.get_logger()


class SeriesMetadataRefresher:
    """Fetch series metadata from FRED and keep the cached copy from regressing.

    The response always reflects what FRED just returned; the cache is only
    written when it has no record or an older ``last_updated``. Cache
    failures are logged and otherwise ignored.
    """

    def __init__(self, client: "FredClient", store: "CacheStore") -> None:
        self.client = client
        self.store = store

    async def refresh(self, series_id: str) -> SeriesMetadata:
        fresh = await self.client.fetch_series(series_id)
        try:
            stored = await asyncio.to_thread(self.store.get_series, series_id)
            if stored is None or stored.last_updated < fresh.last_updated:
                await asyncio.to_thread(self.store.put_series, fresh)
                logger.info("series_metadata_stored", series_id=series_id, last_updated=str(fresh.last_updated))
            else:
                logger.debug("series_metadata_current", series_id=series_id)
        except StorageError as e:
            logger.warning("series_metadata_store_failed", series_id=series_id, error=str(e))
        return fresh
