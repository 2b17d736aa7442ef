"""Tests for 3D gear solid generation."""

import math

import pytest
from shapely.geometry import Point

from geartrain.errors import InvalidGearError
from geartrain.gears import (
    Gear,
    GearType,
    RenderConfig,
    extrude_profile,
    gear_clearance,
    gear_lightened,
    gear_solid,
)
from geartrain.gears.solid import ring_blank_radius

FAST = RenderConfig(resolution=4)


@pytest.fixture
def geartype():
    return GearType.create(1.0, 4)


def bbox(wp):
    return wp.val().BoundingBox()


def volume(wp):
    return wp.val().Volume()


class TestExtrudeProfile:
    """Tests for extruding shapely polygons."""

    def test_polygon_with_hole(self):
        washer = Point(0, 0).buffer(5, quad_segs=8).difference(Point(0, 0).buffer(2, quad_segs=8))
        solid = extrude_profile(washer, 3)
        assert volume(solid) == pytest.approx(washer.area * 3, rel=1e-3)

    def test_offset(self):
        solid = extrude_profile(Point(0, 0).buffer(1, quad_segs=4), 2, z=5)
        box = bbox(solid)
        assert box.zmin == pytest.approx(5, abs=1e-5)
        assert box.zmax == pytest.approx(7, abs=1e-5)

    def test_empty(self):
        with pytest.raises(InvalidGearError):
            extrude_profile(Point(0, 0).buffer(1).difference(Point(0, 0).buffer(2)), 1)


class TestSpurSolid:
    """Tests for spur gear solids."""

    def test_bounds(self, geartype):
        gear = Gear(geartype, 16)
        box = bbox(gear_solid(gear, FAST))
        assert box.zmin == pytest.approx(0, abs=1e-5)
        assert box.zmax == pytest.approx(4, abs=1e-5)
        assert gear.pitch_radius < box.xmax <= gear.outer_radius + 1e-6

    def test_volume_between_root_and_tip(self, geartype):
        gear = Gear(geartype, 16)
        v = volume(gear_solid(gear, FAST))
        assert math.pi * (gear.inner_radius - 0.1) ** 2 * 4 < v < math.pi * gear.outer_radius ** 2 * 4

    def test_height_override(self, geartype):
        box = bbox(gear_solid(Gear(geartype, 16), FAST, height=2))
        assert box.zmax == pytest.approx(2, abs=1e-5)

    def test_invalid_height(self, geartype):
        with pytest.raises(InvalidGearError):
            gear_solid(Gear(geartype, 16), FAST, height=0)

    def test_bore_removes_material(self, geartype):
        gear = Gear(geartype, 16)
        plain = volume(gear_solid(gear, FAST))
        bored = volume(gear_solid(gear, FAST, bore=3))
        assert plain - bored == pytest.approx(math.pi * 1.5 ** 2 * 4, rel=0.05)

    def test_enlarge(self, geartype):
        gear = Gear(geartype, 16)
        assert volume(gear_solid(gear, FAST, enlarge=0.2)) > volume(gear_solid(gear, FAST))
        assert volume(gear_solid(gear, FAST, enlarge=-0.2)) < volume(gear_solid(gear, FAST))

    def test_bevel_removes_material(self, geartype):
        gear = Gear(geartype, 16)
        assert volume(gear_solid(gear, FAST, bevel=0.5)) < volume(gear_solid(gear, FAST))

    def test_lightened(self):
        gear = Gear(GearType.create(1.0, 4), 48)
        plain = volume(gear_solid(gear, FAST, bore=3))
        light = volume(gear_lightened(gear, FAST, hub_diameter=8, pockets=5, bore=3))
        assert light < plain

    def test_lightened_small_gear_unchanged(self, geartype):
        gear = Gear(geartype, 10)
        plain = volume(gear_solid(gear, FAST))
        light = volume(gear_lightened(gear, FAST, hub_diameter=8))
        assert light == pytest.approx(plain)

    def test_lightened_ring_rejected(self, geartype):
        with pytest.raises(InvalidGearError):
            gear_lightened(Gear.ring(geartype, 40), FAST)


class TestRingSolid:
    """Tests for ring gear solids."""

    def test_bounds(self, geartype):
        ring = Gear.ring(geartype, 40)
        box = bbox(gear_solid(ring, FAST, rim=2))
        assert box.xmax == pytest.approx(ring_blank_radius(ring, 2), rel=1e-3)
        assert box.zmin == pytest.approx(0, abs=1e-5)
        assert box.zmax == pytest.approx(4, abs=1e-5)

    def test_volume(self, geartype):
        ring = Gear.ring(geartype, 40)
        blank = ring_blank_radius(ring, 2)
        v = volume(gear_solid(ring, FAST, rim=2))
        assert v < math.pi * (blank ** 2 - ring.outer_radius ** 2) * 4
        assert v > math.pi * (blank ** 2 - (ring.inner_radius + 0.1) ** 2) * 4

    def test_bevel_removes_material(self, geartype):
        ring = Gear.ring(geartype, 40)
        assert volume(gear_solid(ring, FAST, bevel=0.5)) < volume(gear_solid(ring, FAST))


class TestClearance:
    """Tests for swept clearance envelopes."""

    def test_spur_envelope(self, geartype):
        gear = Gear(geartype, 16)
        box = bbox(gear_clearance(gear, radial=0.5, axial=1))
        assert box.xmax == pytest.approx(gear.outer_radius + 0.5, rel=1e-3)
        assert box.zmin == pytest.approx(-1, abs=1e-5)
        assert box.zmax == pytest.approx(5, abs=1e-5)

    def test_ring_envelope(self, geartype):
        ring = Gear.ring(geartype, 40)
        box = bbox(gear_clearance(ring, radial=0.5, rim=2))
        assert box.xmax == pytest.approx(ring_blank_radius(ring, 2) + 0.5, rel=1e-3)
