from datetime import date, datetime, timedelta, timezone

import pytest

from app.dates import format_date, format_fred_timestamp, parse_fred_timestamp, parse_optional_date
from app.schemas import SeriesMetadata


def test_parse_fred_timestamp_two_digit_offset_normalizes_to_utc():
    ts = parse_fred_timestamp("2013-07-31 09:26:16-05")
    assert ts == datetime(2013, 7, 31, 14, 26, 16, tzinfo=timezone.utc)
    assert ts.utcoffset() == timedelta(0)


@pytest.mark.parametrize(
    "raw",
    ["2013-07-31 20:56:16+05:30", "2013-07-31 20:56:16+0530", "2013-07-31T20:56:16+05:30"],
)
def test_parse_fred_timestamp_accepts_minute_offsets(raw):
    assert parse_fred_timestamp(raw) == datetime(2013, 7, 31, 15, 26, 16, tzinfo=timezone.utc)


def test_parse_fred_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_fred_timestamp("yesterday")


def test_format_fred_timestamp_keeps_wire_shape():
    ts = datetime(2013, 7, 31, 9, 26, 16, tzinfo=timezone(timedelta(hours=-5)))
    assert format_fred_timestamp(ts) == "2013-07-31 14:26:16+00"
    assert parse_fred_timestamp(format_fred_timestamp(ts)) == ts


def test_parse_optional_date():
    assert parse_optional_date(None) is None
    assert parse_optional_date("") is None
    assert parse_optional_date("  ") is None
    assert parse_optional_date("2020-02-29") == date(2020, 2, 29)
    with pytest.raises(ValueError):
        parse_optional_date("2020-02-30")


def test_format_date():
    assert format_date(date(1999, 1, 4)) == "1999-01-04"


def test_series_metadata_from_fred_payload_ignores_extra_fields():
    meta = SeriesMetadata.model_validate(
        {
            "id": "GNPCA",
            "realtime_start": "2013-08-14",
            "realtime_end": "2013-08-14",
            "title": "Real Gross National Product",
            "observation_start": "1929-01-01",
            "observation_end": "2012-01-01",
            "frequency": "Annual",
            "frequency_short": "A",
            "units": "Billions of Chained 2009 Dollars",
            "units_short": "Bil. of Chn. 2009 $",
            "seasonal_adjustment": "Not Seasonally Adjusted",
            "seasonal_adjustment_short": "NSA",
            "last_updated": "2013-07-31 09:26:16-05",
            "popularity": 39,
            "group_popularity": 39,
        }
    )
    assert meta.notes == ""
    dumped = meta.model_dump(mode="json")
    assert dumped["last_updated"] == "2013-07-31 14:26:16+00"
    assert dumped["observation_start"] == "1929-01-01"
    assert "group_popularity" not in dumped
