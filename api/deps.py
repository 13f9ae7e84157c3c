from datetime import date
from typing import Optional

from fastapi import HTTPException, Request

from app.context import AppContext
from app.dates import parse_optional_date


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def query_date(name: str, raw: Optional[str]) -> Optional[date]:
    try:
        return parse_optional_date(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name}; use YYYY-MM-DD")
