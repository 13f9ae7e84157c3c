from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from app.settings import settings


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fred-web-proxy",
        description="Caching HTTP proxy for the FRED economic data API.",
    )
    parser.add_argument("-p", "--port", type=int, default=settings.port, help="Port the HTTP server listens on")
    parser.add_argument(
        "--sqlite-db",
        metavar="FILE",
        default=settings.fred_observations_db,
        help="Embedded database storing previously-fetched FRED data (env FRED_OBSERVATIONS_DB)",
    )
    parser.add_argument(
        "-f",
        "--fred-api-key",
        default=settings.fred_api_key,
        help="Free API key from https://fred.stlouisfed.org (env FRED_API_KEY)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    settings.port = args.port
    settings.fred_observations_db = args.sqlite_db
    settings.fred_api_key = args.fred_api_key

    from api.main import app

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
