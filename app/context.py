from __future__ import annotations

from dataclasses import dataclass

from app.cache_store import CacheStore
from app.reconciler import Reconciler
from app.refresher import SeriesMetadataRefresher
from app.settings import Settings
from app.sources.fred import FredClient


@dataclass(frozen=True)
class AppContext:
    """Everything a request needs; built once at startup and never mutated."""

    settings: Settings
    client: FredClient
    store: CacheStore
    reconciler: Reconciler
    refresher: SeriesMetadataRefresher

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        client: FredClient | None = None,
        store: CacheStore | None = None,
    ) -> "AppContext":
        client = client or FredClient(
            settings.fred_api_key,
            base_url=settings.fred_base_url,
            timeout_seconds=settings.upstream_timeout_seconds,
        )
        store = store or CacheStore.from_url(settings.database_url)
        return cls(
            settings=settings,
            client=client,
            store=store,
            reconciler=Reconciler(
                client,
                store,
                verify_left_boundary=settings.verify_left_boundary,
                refetch_on_gap=settings.refetch_on_gap,
            ),
            refresher=SeriesMetadataRefresher(client, store),
        )

    async def aclose(self) -> None:
        await self.client.aclose()
        self.store.dispose()
