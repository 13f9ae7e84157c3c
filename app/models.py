from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.types import TypeDecorator

from .db import Base


class UTCDateTime(TypeDecorator):
    """Stores aware datetimes as naive UTC and hands them back as aware UTC."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class ObservationRow(Base):
    __tablename__ = "observations"

    series_id = Column(String, primary_key=True)
    date = Column(Date, primary_key=True)
    value = Column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "date > '1776-07-04' AND date < '9999-12-31'",
            name="ck_observations_date_window",
        ),
    )


class SeriesRow(Base):
    __tablename__ = "series"

    id = Column(String, primary_key=True)
    last_updated = Column(UTCDateTime, nullable=False)
    observation_start = Column(Date, nullable=False)
    observation_end = Column(Date, nullable=False)
    realtime_start = Column(Date, nullable=False)
    realtime_end = Column(Date, nullable=False)
    title = Column(Text, nullable=False)
    frequency = Column(String, nullable=False)
    frequency_short = Column(String, nullable=False)
    units = Column(String, nullable=False)
    units_short = Column(String, nullable=False)
    seasonal_adjustment = Column(String, nullable=False)
    seasonal_adjustment_short = Column(String, nullable=False)
    popularity = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=False, default="")
    stored_at = Column(UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
