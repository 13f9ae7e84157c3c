from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from app.dates import as_utc, format_fred_timestamp, parse_fred_timestamp


class Observation(BaseModel):
    # value is FRED's raw text; "." marks a missing point and is kept as-is
    date: dt.date
    value: str


class SeriesMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore", from_attributes=True)

    id: str
    last_updated: dt.datetime
    observation_start: dt.date
    observation_end: dt.date
    realtime_start: dt.date
    realtime_end: dt.date
    title: str
    frequency: str
    frequency_short: str
    units: str
    units_short: str
    seasonal_adjustment: str
    seasonal_adjustment_short: str
    popularity: int = 0
    notes: str = ""

    @field_validator("last_updated", mode="before")
    @classmethod
    def _parse_last_updated(cls, v):
        if isinstance(v, str):
            return parse_fred_timestamp(v)
        if isinstance(v, dt.datetime):
            return as_utc(v)
        return v

    @field_validator("notes", mode="before")
    @classmethod
    def _none_notes(cls, v):
        return "" if v is None else v

    @field_serializer("last_updated")
    def _format_last_updated(self, v: dt.datetime) -> str:
        return format_fred_timestamp(v)


class ProviderError(BaseModel):
    error_code: int
    error_message: Optional[str] = None


class ObservationsPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    limit: Optional[int] = None
    offset: int = 0
    count: Optional[int] = None
    observations: List[Observation]


class SeriesPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    seriess: List[SeriesMetadata]
