"""
Unit tests for distance, bounding box and quantization helpers
"""
import math

import pytest

from app.core.geo import bounding_box, haversine_m, quantize


def test_haversine_zero_distance():
    assert haversine_m(5.3261, -4.0200, 5.3261, -4.0200) == 0.0


def test_haversine_one_degree_latitude():
    # 2 * pi * R / 360
    assert haversine_m(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_194.9, abs=1.0)


def test_haversine_is_symmetric():
    a = haversine_m(5.3261, -4.0200, 5.2950, -3.9980)
    b = haversine_m(5.2950, -3.9980, 5.3261, -4.0200)
    assert a == pytest.approx(b)


def test_haversine_antipodal_points_do_not_fail():
    d = haversine_m(0.0, 0.0, 0.0, 180.0)
    assert d == pytest.approx(math.pi * 6_371_000.0, rel=1e-9)


def test_bounding_box_contains_radius_circle():
    box = bounding_box(5.3261, -4.0200, 10.0)
    assert box.max_lat - 5.3261 == pytest.approx(10.0 / 111.32)
    # a point 9.9 km due east is inside the box
    east_lng = -4.0200 + 9.9 / (111.32 * math.cos(math.radians(5.3261)))
    assert box.contains(5.3261, east_lng)


def test_bounding_box_longitude_floor_near_pole():
    box = bounding_box(89.9, 0.0, 10.0)
    # cos(89.9 deg) is ~0.0017, the 0.2 floor keeps the span finite
    assert box.max_lng == pytest.approx(10.0 / (111.32 * 0.2))


def test_quantize_rounds_half_up():
    assert quantize(5.32616) == pytest.approx(5.3262)
    assert quantize(-4.02004) == pytest.approx(-4.0200)
    assert quantize(-4.02006) == pytest.approx(-4.0201)


def test_quantize_absorbs_sub_threshold_jitter():
    assert quantize(5.32612) == quantize(5.32614)
