"""Tests for 2D tooth profile synthesis."""

import math

import pytest
from shapely.geometry import Point

from geartrain.errors import InvalidGearError
from geartrain.gears import Gear, GearProfile2D, GearType, RenderConfig, gear_profile


@pytest.fixture
def geartype():
    return GearType.create(0.8, 10)


def polar(radius, degrees):
    rad = math.radians(degrees)
    return Point(radius * math.cos(rad), radius * math.sin(rad))


def annulus(inner, outer, resolution=64):
    return Point(0, 0).buffer(outer, quad_segs=resolution).difference(
        Point(0, 0).buffer(inner, quad_segs=resolution)
    )


class TestRenderConfig:
    """Tests for RenderConfig."""

    def test_defaults(self):
        cfg = RenderConfig()
        assert cfg.render_teeth is True
        assert cfg.tooth_clearance == 0.1
        assert cfg.rounding_radius == 0.2

    @pytest.mark.parametrize(
        "kwargs",
        [{"tooth_clearance": -0.1}, {"rounding_radius": -1}, {"resolution": 0}],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            RenderConfig(**kwargs)


class TestStations:
    """Tests for the radial stations of one tooth."""

    def test_stations_span_root_to_tip(self, geartype):
        gear = Gear(geartype, 20)
        (r0, h0), (r1, h1), (r2, h2) = GearProfile2D(gear).stations()
        assert r0 < gear.inner_radius < r1 < gear.outer_radius < r2
        assert r1 == pytest.approx(gear.pitch_radius)
        assert h1 == pytest.approx(geartype.circular_pitch / 4)

    def test_tooth_narrows_toward_tip(self, geartype):
        (_, h0), (_, h1), (_, h2) = GearProfile2D(Gear(geartype, 30)).stations()
        assert h0 > h1 > h2 > 0

    def test_root_width_limited_for_small_gears(self, geartype):
        gear = Gear(geartype, 5)
        (r0, h0), _, _ = GearProfile2D(gear).stations()
        assert h0 <= r0 * math.tan(math.radians(gear.tooth_angle / 2)) + 1e-9

    def test_ring_tooth_offset_half_tooth(self, geartype):
        ring = Gear.ring(geartype, 40)
        tooth = GearProfile2D(ring).tooth_polygon(0)
        c = tooth.centroid
        assert math.degrees(math.atan2(c.y, c.x)) == pytest.approx(ring.tooth_angle / 2, abs=1e-6)


class TestSpurProfile:
    """Tests for spur gear boundaries."""

    def test_profile_within_tip_circle(self, geartype):
        gear = Gear(geartype, 20)
        profile = gear_profile(gear)
        minx, miny, maxx, maxy = profile.bounds
        assert max(abs(minx), abs(miny), abs(maxx), abs(maxy)) <= gear.outer_radius + 1e-6

    def test_area_between_root_and_tip_discs(self, geartype):
        gear = Gear(geartype, 20)
        area = gear_profile(gear).area
        assert math.pi * (gear.inner_radius - 0.1) ** 2 < area < math.pi * gear.outer_radius ** 2

    @pytest.mark.parametrize("teeth", [8, 13, 20, 41])
    def test_tooth_count(self, geartype, teeth):
        gear = Gear(geartype, teeth)
        band = annulus(gear.pitch_radius - 0.05, gear.pitch_radius + 0.05)
        crossing = gear_profile(gear).intersection(band)
        assert len(crossing.geoms) == teeth

    def test_tooth_centred_on_x_axis(self, geartype):
        gear = Gear(geartype, 20)
        profile = gear_profile(gear)
        assert profile.contains(polar(gear.pitch_radius, 0))
        assert not profile.contains(polar(gear.pitch_radius, gear.tooth_angle / 2))

    def test_clearance_shrinks_profile(self, geartype):
        gear = Gear(geartype, 20)
        tight = gear_profile(gear, RenderConfig(tooth_clearance=0))
        loose = gear_profile(gear, RenderConfig(tooth_clearance=0.2))
        assert loose.area < tight.area
        assert tight.contains(loose.buffer(-1e-6))

    def test_no_rounding(self, geartype):
        gear = Gear(geartype, 20)
        profile = gear_profile(gear, RenderConfig(rounding_radius=0))
        assert profile.is_valid
        assert not profile.is_empty

    def test_deterministic(self, geartype):
        gear = Gear(geartype, 17)
        first = gear_profile(gear)
        second = gear_profile(gear)
        assert first.equals_exact(second, 0.0)

    def test_pitch_circle_only(self, geartype):
        gear = Gear(geartype, 20)
        profile = gear_profile(gear, RenderConfig(render_teeth=False))
        assert profile.area == pytest.approx(math.pi * gear.pitch_radius ** 2, rel=1e-2)

    def test_invalid_tooth_count(self, geartype):
        with pytest.raises(InvalidGearError):
            gear_profile(Gear(geartype, -12))


class TestRingProfile:
    """Tests for ring gear cutting shapes."""

    def test_cutter_reaches_ring_root(self, geartype):
        ring = Gear.ring(geartype, 64)
        cutter = gear_profile(ring)
        maxx = cutter.bounds[2]
        assert ring.pitch_radius < maxx <= ring.inner_radius + 0.05 + 1e-6

    def test_ring_tooth_centred_on_x_axis(self, geartype):
        ring = Gear.ring(geartype, 64)
        cutter = gear_profile(ring)
        assert not cutter.contains(polar(ring.pitch_radius, 0))
        assert cutter.contains(polar(ring.pitch_radius, ring.tooth_angle / 2))

    def test_clearance_grows_cutter(self, geartype):
        ring = Gear.ring(geartype, 64)
        tight = gear_profile(ring, RenderConfig(tooth_clearance=0))
        loose = gear_profile(ring, RenderConfig(tooth_clearance=0.2))
        assert loose.area > tight.area

    def test_tooth_count(self, geartype):
        ring = Gear.ring(geartype, 48)
        band = annulus(ring.pitch_radius - 0.05, ring.pitch_radius + 0.05)
        crossing = gear_profile(ring).intersection(band)
        assert len(crossing.geoms) == 48
