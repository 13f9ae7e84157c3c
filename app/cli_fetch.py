"""Warm the local cache for a handful of series without going through HTTP.

    python -m app.cli_fetch SP500 WALCL --observation-start 2020-01-01
"""
from __future__ import annotations

import argparse
import asyncio
import time
from datetime import date
from typing import List, Optional

from app.context import AppContext
from app.dates import parse_optional_date
from app.errors import ProxyError
from app.settings import settings


async def warm_series(
    ctx: AppContext,
    series_id: str,
    observation_start: Optional[date] = None,
    observation_end: Optional[date] = None,
) -> bool:
    t = time.time()
    try:
        meta = await ctx.refresher.refresh(series_id)
        result = await ctx.reconciler.reconcile(series_id, observation_start, observation_end)
    except ProxyError as e:
        print(f"[fetch] {series_id} failed: {e}", flush=True)
        return False
    print(
        f"[fetch] {series_id} ({meta.frequency_short}, updated {meta.last_updated:%Y-%m-%d}): "
        f"{len(result.observations)} rows, {result.decision.value} in {time.time()-t:0.1f}s",
        flush=True,
    )
    return True


async def fetch_all(series_ids: List[str], observation_start: Optional[date], observation_end: Optional[date]) -> int:
    t0 = time.time()
    ctx = AppContext.build(settings)
    ctx.store.initialize()
    try:
        results = await asyncio.gather(
            *(warm_series(ctx, sid, observation_start, observation_end) for sid in series_ids)
        )
    finally:
        await ctx.aclose()
    failed = sum(1 for ok in results if not ok)
    print(f"[fetch] All done in {time.time()-t0:0.1f}s ({failed} failed)", flush=True)
    return failed


def _date_arg(s: str) -> Optional[date]:
    try:
        return parse_optional_date(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {s!r}; use YYYY-MM-DD")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="fred-proxy-fetch", description="Prefetch FRED series into the local cache.")
    parser.add_argument("series_ids", nargs="+", metavar="SERIES")
    parser.add_argument("--observation-start", type=_date_arg, default=None)
    parser.add_argument("--observation-end", type=_date_arg, default=None)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    failed = asyncio.run(fetch_all(args.series_ids, args.observation_start, args.observation_end))
    raise SystemExit(1 if failed else 0)


if __name__ == "__main__":
    main()
