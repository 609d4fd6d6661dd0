"""Tests for body presets and sign arithmetic."""

import pytest

from almanac.bodies import (
    MODERN_BODIES,
    RETROGRADE_TARGETS,
    SIGNS,
    TRADITIONAL_BODIES,
    VOID_ASPECT_TARGETS_MODERN,
    VOID_ASPECT_TARGETS_TRADITIONAL,
    default_step_days,
    degree_in_sign,
    get_body,
    longitude_to_sign,
    normalize,
    sign_index,
    sign_name,
    sign_position,
    wrap180,
)


def test_longitude_to_sign():
    """Test longitude to sign conversion."""
    assert longitude_to_sign(0.0) == ("Aries", 0.0)
    assert longitude_to_sign(30.0) == ("Taurus", 0.0)
    assert longitude_to_sign(90.0) == ("Cancer", 0.0)
    assert longitude_to_sign(180.0) == ("Libra", 0.0)
    assert longitude_to_sign(270.0) == ("Capricorn", 0.0)

    sign, degree = longitude_to_sign(45.5)
    assert sign == "Taurus"
    assert abs(degree - 15.5) < 0.001

    # Wraparound
    sign, _ = longitude_to_sign(359.0)
    assert sign == "Pisces"
    sign, _ = longitude_to_sign(-1.0)
    assert sign == "Pisces"
    sign, _ = longitude_to_sign(725.0)
    assert sign == "Aries"


def test_sign_index_and_degree_stay_in_range():
    """Sign index in [0, 11], degree in [0, 30), and together they rebuild the longitude."""
    longitudes = [x * 7.3 - 800.0 for x in range(400)] + [
        -1e-15,
        -1e-12,
        359.99999999999994,
        29.999999999999996,
        360.0,
        720.0,
    ]
    for lon in longitudes:
        idx = sign_index(lon)
        deg = degree_in_sign(lon)
        assert 0 <= idx <= 11, lon
        assert 0.0 <= deg < 30.0, lon
        assert idx * 30.0 + deg == pytest.approx(normalize(lon), abs=1e-9)


def test_normalize_never_returns_360():
    """Test normalize folds 360 back to 0."""
    assert normalize(-1e-15) == 0.0
    assert normalize(360.0) == 0.0
    assert normalize(-90.0) == 270.0


def test_wrap180():
    """Test angle differences wrap into [-180, 180]."""
    assert wrap180(190.0) == pytest.approx(-170.0)
    assert wrap180(-190.0) == pytest.approx(170.0)
    assert wrap180(10.0) == pytest.approx(10.0)
    assert -180.0 <= wrap180(180.0) <= 180.0


def test_sign_position():
    """Test the sign position record for a negative longitude."""
    pos = sign_position(-15.0)
    assert pos.sign_index == 11
    assert pos.degree_in_sign == pytest.approx(15.0)
    assert pos.model_dump(by_alias=True) == {"signIndex": 11, "degreeInSign": pytest.approx(15.0)}


def test_sign_name():
    """Test sign names by index."""
    assert sign_name(0) == "Aries"
    assert sign_name(11) == "Pisces"
    assert len(SIGNS) == 12


def test_presets():
    """Test body presets select the right categories."""
    modern = {b.key for b in MODERN_BODIES}
    traditional = {b.key for b in TRADITIONAL_BODIES}
    assert traditional < modern
    assert {"uranus", "neptune", "pluto"} == modern - traditional
    assert "north_node" not in modern
    assert "mean_node" not in modern

    assert {b.key for b in RETROGRADE_TARGETS} == modern - {"sun", "moon"}
    assert "moon" not in {b.key for b in VOID_ASPECT_TARGETS_MODERN}
    assert "moon" not in {b.key for b in VOID_ASPECT_TARGETS_TRADITIONAL}
    assert len(VOID_ASPECT_TARGETS_MODERN) == 9


def test_get_body():
    """Test body lookup by key."""
    mercury = get_body("Mercury")
    assert mercury.id == 2
    assert mercury.retrograde_notice == 10
    assert get_body(mercury) is mercury
    assert get_body("north_node").id == 11
    mean_node = get_body("mean_node")
    assert mean_node.id == 10
    assert mean_node.category == "node"
    assert mean_node.retrograde_notice is None
    with pytest.raises(KeyError):
        get_body("vulcan")


def test_default_step_days():
    """Test scan steps by body category."""
    assert default_step_days(get_body("mars")) == 0.5
    assert default_step_days(get_body("saturn")) == 1.0
    assert default_step_days(get_body("pluto")) == 2.0
    assert default_step_days(get_body("sun")) == 1.0
