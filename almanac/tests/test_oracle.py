"""Tests for position oracles and time conversion."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

import almanac.oracle as oracle_mod
from almanac.oracle import FunctionOracle, SwissEphemerisOracle, datetime_to_jd, jd_to_datetime


class FakeSwe:
    FLG_SWIEPH = 1
    FLG_SPEED = 2
    FLG_MOSEPH = 4

    def __init__(self, fail_flags: set[int] | None = None):
        self.fail_flags = fail_flags or set()
        self.calls: list[tuple[float, int, int]] = []
        self.ephe_path = "unset"

    def set_ephe_path(self, path):
        self.ephe_path = path

    def calc_ut(self, jd: float, body_id: int, flags: int):
        self.calls.append((jd, body_id, flags))
        if (flags & (self.FLG_SWIEPH | self.FLG_MOSEPH)) in self.fail_flags:
            raise RuntimeError("missing ephemeris file")
        return (365.5, 1.2, 1.0, -0.25, 0.0, 0.0), flags


def test_swiss_oracle_returns_normalized_sample(monkeypatch):
    """Test Swiss samples are normalized and carry the speed."""
    fake = FakeSwe()
    monkeypatch.setattr(oracle_mod, "swe", fake)

    oracle = SwissEphemerisOracle(ephe_path="")
    sample = oracle.sample("mercury", 2460000.5)

    assert fake.ephe_path is None
    assert fake.calls == [(2460000.5, 2, FakeSwe.FLG_SWIEPH | FakeSwe.FLG_SPEED)]
    assert sample.body == "mercury"
    assert sample.longitude == pytest.approx(5.5)
    assert sample.speed == -0.25
    assert sample.retrograde is True


def test_swiss_oracle_uses_configured_path(monkeypatch):
    """Test the ephemeris path comes from SWISSEPH_EPHE_PATH."""
    fake = FakeSwe()
    monkeypatch.setattr(oracle_mod, "swe", fake)
    monkeypatch.setenv("SWISSEPH_EPHE_PATH", "/srv/ephe")

    SwissEphemerisOracle()
    assert fake.ephe_path == "/srv/ephe"


def test_swiss_oracle_falls_back_to_moshier(monkeypatch):
    """Test a Swiss file failure retries with Moshier."""
    fake = FakeSwe(fail_flags={FakeSwe.FLG_SWIEPH})
    monkeypatch.setattr(oracle_mod, "swe", fake)

    sample = SwissEphemerisOracle(ephe_path="").sample("moon", 2460000.5)
    assert [flags for _, _, flags in fake.calls] == [
        FakeSwe.FLG_SWIEPH | FakeSwe.FLG_SPEED,
        FakeSwe.FLG_MOSEPH | FakeSwe.FLG_SPEED,
    ]
    assert sample.body == "moon"


def test_swiss_oracle_raises_when_ephemeris_unavailable(monkeypatch):
    """Test RuntimeError when both ephemerides fail."""
    fake = FakeSwe(fail_flags={FakeSwe.FLG_SWIEPH, FakeSwe.FLG_MOSEPH})
    monkeypatch.setattr(oracle_mod, "swe", fake)

    with pytest.raises(RuntimeError, match="ephemeris unavailable for pluto"):
        SwissEphemerisOracle(ephe_path="").sample("pluto", 2460000.5)


def test_swiss_oracle_rejects_unknown_body(monkeypatch):
    """Test unknown bodies raise KeyError."""
    monkeypatch.setattr(oracle_mod, "swe", FakeSwe())
    with pytest.raises(KeyError):
        SwissEphemerisOracle(ephe_path="").sample("vulcan", 2460000.5)


def test_function_oracle_normalizes():
    """Test function tracks are normalized and keyed case-insensitively."""
    oracle = FunctionOracle({"sun": lambda t: (-10.0 + t, 1.0)})
    sample = oracle.sample("Sun", 5.0)
    assert sample.longitude == pytest.approx(355.0)
    assert sample.time == 5.0
    assert sample.retrograde is False


def test_function_oracle_unknown_track():
    """Test a missing track raises KeyError."""
    with pytest.raises(KeyError):
        FunctionOracle({}).sample("sun", 0.0)


def test_julian_day_round_trip():
    """Test datetime to Julian Day and back."""
    j2000 = datetime(2000, 1, 1, 12, 0, tzinfo=UTC)
    assert datetime_to_jd(j2000) == pytest.approx(2451545.0)

    dt = datetime(2026, 2, 20, 3, 0, tzinfo=UTC)
    back = jd_to_datetime(datetime_to_jd(dt))
    assert abs((back - dt).total_seconds()) < 1.0
