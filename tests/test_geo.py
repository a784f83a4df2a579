import math

import pytest

from localfinder.core import geo
from localfinder.models import Coordinate, ProviderRecord

HYDERABAD = Coordinate(17.3850, 78.4867)
NEARBY = Coordinate(17.3860, 78.4870)


def _record(name, coordinate=None):
    return ProviderRecord(name=name, coordinate=coordinate)


def test_distance_short_hop():
    km = geo.distance_km(HYDERABAD, NEARBY)

    assert 0.11 < km < 0.12
    assert geo.format_distance(km) == "116 m"


def test_distance_london_paris():
    km = geo.distance_km(Coordinate(51.5074, -0.1278), Coordinate(48.8566, 2.3522))
    assert km == pytest.approx(343.5, abs=1.5)


def test_distance_is_symmetric_and_zero_for_same_point():
    assert geo.distance_km(HYDERABAD, HYDERABAD) == 0
    assert geo.distance_km(HYDERABAD, NEARBY) == pytest.approx(geo.distance_km(NEARBY, HYDERABAD))


def test_distance_antipodal_points():
    km = geo.distance_km(Coordinate(0, 0), Coordinate(0, 180))
    assert km == pytest.approx(math.pi * geo.EARTH_RADIUS_KM)


@pytest.mark.parametrize(
    "km,expected",
    [
        (0, "0 m"),
        (0.35, "350 m"),
        (0.9994, "999 m"),
        (1, "1.0 km"),
        (1.234, "1.2 km"),
        (23.96, "24.0 km"),
    ],
)
def test_format_distance(km, expected):
    assert geo.format_distance(km) == expected


def test_format_distance_rejects_negative():
    with pytest.raises(ValueError):
        geo.format_distance(-0.1)


def test_coordinate_rejects_out_of_range():
    with pytest.raises(ValueError):
        Coordinate(91, 0)
    with pytest.raises(ValueError):
        Coordinate(0, -181)


def test_validate_radius():
    presets = (2.0, 5.0, 10.0)
    assert geo.validate_radius(5, presets) == 5.0
    with pytest.raises(ValueError):
        geo.validate_radius(7, presets)


def test_within_radius_keeps_order_and_boundary():
    far = _record("far", Coordinate(17.6000, 78.4867))
    near = _record("near", NEARBY)
    mid = _record("mid", Coordinate(17.4200, 78.4867))
    boundary_km = geo.distance_km(HYDERABAD, mid.coordinate)

    kept = geo.within_radius(HYDERABAD, [mid, far, near], boundary_km)

    assert [r.name for r in kept] == ["mid", "near"]


def test_within_radius_unlocated_records():
    records = [_record("nowhere"), _record("near", NEARBY)]

    assert [r.name for r in geo.within_radius(HYDERABAD, records, 2)] == ["near"]
    assert [r.name for r in geo.within_radius(HYDERABAD, records, 2, include_unlocated=True)] == ["nowhere", "near"]


def test_rank_by_distance():
    records = [
        _record("far", Coordinate(17.6000, 78.4867)),
        _record("nowhere"),
        _record("near", NEARBY),
    ]

    assert [r.name for r in geo.rank_by_distance(HYDERABAD, records)] == ["near", "far"]
    assert [r.name for r in geo.rank_by_distance(HYDERABAD, records, include_unlocated=True)] == [
        "near",
        "far",
        "nowhere",
    ]


@pytest.mark.parametrize("km", [float("nan"), float("inf")])
def test_format_distance_rejects_non_finite(km):
    with pytest.raises(ValueError):
        geo.format_distance(km)
