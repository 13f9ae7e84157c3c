from datetime import date

import pytest

from api.__main__ import parse_args as parse_serve_args
from app.cli_fetch import parse_args as parse_fetch_args, warm_series
from app.errors import UpstreamError
from fakes import daily, series_meta


def test_fetch_args_parse_series_and_dates():
    args = parse_fetch_args(["SP500", "WALCL", "--observation-start", "2020-01-01", "--observation-end", ""])
    assert args.series_ids == ["SP500", "WALCL"]
    assert args.observation_start == date(2020, 1, 1)
    assert args.observation_end is None


def test_fetch_args_reject_bad_date():
    with pytest.raises(SystemExit):
        parse_fetch_args(["SP500", "--observation-start", "2020/01/01"])


def test_serve_args():
    args = parse_serve_args(["--port", "9100", "--sqlite-db", "/tmp/fred.db", "--fred-api-key", "abc"])
    assert args.port == 9100
    assert args.sqlite_db == "/tmp/fred.db"
    assert args.fred_api_key == "abc"


@pytest.mark.asyncio
async def test_warm_series_fills_cache(ctx, fake_fred, store, capsys):
    fake_fred.series["SP500"] = series_meta()
    fake_fred.observations["SP500"] = daily("2020-01-01", "2020-01-05")

    ok = await warm_series(ctx, "SP500", date(2020, 1, 1), date(2020, 1, 5))

    assert ok
    assert len(store.get_observations("SP500")) == 5
    assert store.get_series("SP500") is not None
    out = capsys.readouterr().out
    assert "SP500" in out and "5 rows" in out and "full_miss" in out


@pytest.mark.asyncio
async def test_warm_series_reports_failure(ctx, fake_fred, capsys):
    fake_fred.error = UpstreamError(500, "Internal Server Error")

    ok = await warm_series(ctx, "SP500")

    assert not ok
    assert "failed" in capsys.readouterr().out
