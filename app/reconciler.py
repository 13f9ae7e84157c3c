"""Serve observation ranges from the local cache, filling gaps from FRED.

A request for ``[start, end]`` (either bound may be open) is classified
against the cached rows inside that window:

* full miss: nothing cached in range, fetch the whole window once;
* exact hit: cached rows reach both requested bounds (or probing the gaps
  beyond them returns nothing), no upstream call beyond the probes, no write;
* incomplete refetch: a probed gap returned rows, so the whole window is
  fetched again in one call and that result is stored and returned;
* gap fill: as above but with re-fetching disabled, the gap rows are merged
  with the cached rows instead.

Realtime ("as of") requests never touch the cache; see ``resolve_observations``.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional

import structlog

from app.schemas import Observation

if TYPE_CHECKING:
    from app.cache_store import CacheStore
    from app.context import AppContext
    from app.sources.fred import FredClient


logger = structlog.get_logger()


class CacheDecision(str, Enum):
    FULL_MISS = "full_miss"
    EXACT_HIT = "exact_hit"
    GAP_FILL = "gap_fill"
    INCOMPLETE_REFETCH = "incomplete_refetch"
    REALTIME_BYPASS = "realtime_bypass"


@dataclass(frozen=True)
class Gap:
    start: date
    end: date


@dataclass(frozen=True)
class RequestedRange:
    series_id: str
    observation_start: Optional[date] = None
    observation_end: Optional[date] = None
    realtime_start: Optional[date] = None
    realtime_end: Optional[date] = None

    @property
    def is_realtime(self) -> bool:
        return self.realtime_start is not None or self.realtime_end is not None


@dataclass(frozen=True)
class Reconciliation:
    decision: CacheDecision
    observations: List[Observation]


def plan_gaps(
    cached: List[Observation],
    start: Optional[date],
    end: Optional[date],
    *,
    verify_left: bool = True,
) -> List[Gap]:
    """Return the sub-intervals of ``[start, end]`` outside the cached rows.

    ``cached`` must already be restricted to the requested window and sorted
    by date. An open bound never produces a gap on that side.
    """
    if not cached:
        return []
    first, last = cached[0], cached[-1]
    gaps: List[Gap] = []
    if verify_left and start is not None and first.date > start:
        gaps.append(Gap(start, first.date - timedelta(days=1)))
    if end is not None and last.date < end:
        gaps.append(Gap(last.date + timedelta(days=1), end))
    return gaps


def sort_unique(rows: Iterable[Observation]) -> List[Observation]:
    # later rows win on a duplicate date
    by_date = {r.date: r for r in rows}
    return [by_date[d] for d in sorted(by_date)]


class Reconciler:
    def __init__(
        self,
        client: "FredClient",
        store: "CacheStore",
        *,
        verify_left_boundary: bool = True,
        refetch_on_gap: bool = True,
    ) -> None:
        self.client = client
        self.store = store
        self.verify_left_boundary = verify_left_boundary
        self.refetch_on_gap = refetch_on_gap

    async def reconcile(
        self,
        series_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Reconciliation:
        cached = await asyncio.to_thread(self.store.get_observations, series_id, start, end)

        if not cached:
            fresh = await self.client.fetch_observations(series_id, start, end)
            return await self._commit(series_id, CacheDecision.FULL_MISS, fresh)

        gaps = plan_gaps(cached, start, end, verify_left=self.verify_left_boundary)
        gap_rows: List[Observation] = []
        for gap in gaps:
            rows = await self.client.fetch_observations(series_id, gap.start, gap.end)
            logger.debug("cache_gap_probed", series_id=series_id, start=str(gap.start), end=str(gap.end), rows=len(rows))
            gap_rows.extend(rows)

        if not gap_rows:
            logger.info("cache_exact_hit", series_id=series_id, rows=len(cached), probes=len(gaps))
            return Reconciliation(CacheDecision.EXACT_HIT, cached)

        if self.refetch_on_gap:
            fresh = await self.client.fetch_observations(series_id, start, end)
            return await self._commit(series_id, CacheDecision.INCOMPLETE_REFETCH, fresh)

        return await self._commit(series_id, CacheDecision.GAP_FILL, [*cached, *gap_rows])

    async def _commit(self, series_id: str, decision: CacheDecision, rows: List[Observation]) -> Reconciliation:
        ordered = sort_unique(rows)
        await asyncio.to_thread(self.store.put_observations, series_id, ordered)
        logger.info("cache_updated", series_id=series_id, decision=decision.value, rows=len(ordered))
        return Reconciliation(decision, ordered)


async def resolve_observations(context: "AppContext", requested: RequestedRange) -> Reconciliation:
    if requested.is_realtime:
        # Revisions for the same date would overwrite each other in the cache.
        rows = await context.client.fetch_observations(
            requested.series_id,
            requested.observation_start,
            requested.observation_end,
            requested.realtime_start,
            requested.realtime_end,
        )
        logger.info("cache_bypassed_realtime", series_id=requested.series_id, rows=len(rows))
        return Reconciliation(CacheDecision.REALTIME_BYPASS, rows)
    return await context.reconciler.reconcile(
        requested.series_id,
        requested.observation_start,
        requested.observation_end,
    )
