from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional, Sequence

import structlog
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine

from app.db import Base, make_engine, make_session_factory
from app.errors import StorageError
from app.models import ObservationRow, SeriesRow
from app.schemas import Observation, SeriesMetadata


logger = structlog.get_logger()

MIN_DATE = date.min
MAX_DATE = date.max

_SERIES_FIELDS = [name for name in SeriesMetadata.model_fields]


class CacheStore:
    """SQLite-backed storage for FRED observations and series metadata.

    Observations are keyed by (series_id, date) and written with
    last-write-wins upserts. Series metadata is keyed by id; whether a write
    should happen at all is decided by the caller.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = make_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "CacheStore":
        return cls(make_engine(database_url))

    def initialize(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StorageError(f"schema creation failed: {e}") from e

    def dispose(self) -> None:
        self._engine.dispose()

    def get_observations(
        self,
        series_id: str,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> List[Observation]:
        since = since or MIN_DATE
        until = until or MAX_DATE
        try:
            with self._session_factory() as s:
                rows = (
                    s.query(ObservationRow.date, ObservationRow.value)
                    .filter(
                        ObservationRow.series_id == series_id,
                        ObservationRow.date >= since,
                        ObservationRow.date <= until,
                    )
                    .order_by(ObservationRow.date.asc())
                    .all()
                )
        except (SQLAlchemyError, ValueError) as e:
            # ValueError: a stored date that no longer parses
            raise StorageError(f"reading observations for {series_id} failed: {e}") from e
        return [Observation(date=r.date, value=r.value) for r in rows]

    def put_observations(self, series_id: str, rows: Sequence[Observation]) -> int:
        if not rows:
            return 0
        params = [{"series_id": series_id, "date": r.date, "value": r.value} for r in rows]
        stmt = sqlite_insert(ObservationRow)
        stmt = stmt.on_conflict_do_update(
            index_elements=[ObservationRow.series_id, ObservationRow.date],
            set_={"value": stmt.excluded["value"]},
        )
        try:
            with self._session_factory() as s, s.begin():
                s.execute(stmt, params)
        except SQLAlchemyError as e:
            raise StorageError(f"writing observations for {series_id} failed: {e}") from e
        logger.debug("observations_stored", series_id=series_id, rows=len(params))
        return len(params)

    def get_series(self, series_id: str) -> Optional[SeriesMetadata]:
        try:
            with self._session_factory() as s:
                row = s.get(SeriesRow, series_id)
                if row is None:
                    return None
                return SeriesMetadata.model_validate(row)
        except SQLAlchemyError as e:
            raise StorageError(f"reading series {series_id} failed: {e}") from e

    def put_series(self, metadata: SeriesMetadata) -> None:
        payload = {name: getattr(metadata, name) for name in _SERIES_FIELDS}
        payload["stored_at"] = datetime.now(timezone.utc)
        stmt = sqlite_insert(SeriesRow).values(**payload)
        stmt = stmt.on_conflict_do_update(
            index_elements=[SeriesRow.id],
            set_={k: stmt.excluded[k] for k in payload if k != "id"},
        )
        try:
            with self._session_factory() as s, s.begin():
                s.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"writing series {metadata.id} failed: {e}") from e
