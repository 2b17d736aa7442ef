"""Tests for planetary gear plane meshing and timing."""

import math
import warnings

import pytest

from geartrain.errors import AssemblyWarning, InvalidGearError, InvalidGeartrainError
from geartrain.gears import GearPlane, GearType


@pytest.fixture
def geartype():
    return GearType.create(0.8, 8)


@pytest.fixture
def plane(geartype):
    return GearPlane(geartype, sun_teeth=40, planet_teeth=12, planet_count=3)


def is_half_tooth(phase):
    """True if ``phase`` (in teeth) is a whole number plus one half."""
    return math.isclose(math.cos(2 * math.pi * phase), -1.0, abs_tol=1e-9)


class TestGearPlaneDerived:
    """Tests for derived tooth counts and ratios."""

    def test_scenario_ring_and_ratio(self, plane):
        assert plane.ring_teeth == 64
        assert plane.ratio_ring_fixed == pytest.approx(2.6)

    def test_orbit_radius(self, plane):
        assert plane.orbit_radius == pytest.approx(0.8 * 52 / 2)
        sun, planet, ring = plane.gears()
        assert sun.mesh_distance(planet) == pytest.approx(plane.orbit_radius)
        assert ring.mesh_distance(planet) == pytest.approx(plane.orbit_radius)

    def test_gears(self, plane):
        sun, planet, ring = plane.gears()
        assert (sun.teeth, planet.teeth, ring.teeth) == (40, 12, 64)
        assert ring.is_ring and not sun.is_ring and not planet.is_ring

    def test_constraint_angle(self, plane):
        assert plane.constraint_angle == pytest.approx(360 / 104)

    def test_even_spacing_condition(self, geartype):
        assert not GearPlane(geartype, 40, 12, 3).is_evenly_spaced
        assert GearPlane(geartype, 40, 12, 4).is_evenly_spaced

    def test_zero_sun(self, geartype):
        with pytest.raises(InvalidGeartrainError, match=r"gearplane\(sun=0, planet=12") as err:
            GearPlane(geartype, 0, 12, 3)
        assert err.value.message.startswith("sun has zero teeth")

    def test_no_planets(self, geartype):
        with pytest.raises(InvalidGeartrainError):
            GearPlane(geartype, 40, 12, 0)

    def test_invalid_planet(self, geartype):
        with pytest.raises(InvalidGearError):
            GearPlane(geartype, 40, 0, 3)

    def test_negative_sun_not_buildable(self, geartype):
        plane = GearPlane(geartype, -6, 12, 3)
        assert plane.ring_teeth == 18
        with pytest.raises(InvalidGearError):
            plane.sun_gear


class TestPlanetPlacement:
    """Tests for planet snapping and spin."""

    def test_scenario_snapped_angles(self, plane):
        step = 360 / 104
        assert plane.planet_angles() == pytest.approx([0.0, 35 * step, 69 * step])

    def test_evenly_spaced_plane_not_snapped(self, geartype):
        plane = GearPlane(geartype, 40, 12, 4)
        assert plane.planet_angles() == pytest.approx([0, 90, 180, 270])

    @pytest.mark.parametrize("sun", [7, 12, 19, 30, 41])
    @pytest.mark.parametrize("planet", [8, 11, 14])
    @pytest.mark.parametrize("count", [1, 2])
    def test_one_or_two_planets_evenly_spaced(self, geartype, sun, planet, count):
        plane = GearPlane(geartype, sun, planet, count)
        expected = [360.0 * i / count for i in range(count)]
        assert plane.planet_angles() == pytest.approx(expected, abs=1e-9)

    @pytest.mark.parametrize("sun,planet,count", [(40, 12, 3), (40, 12, 4), (17, 9, 5), (30, 15, 3)])
    def test_every_planet_meshes_with_sun_and_ring(self, geartype, sun, planet, count):
        plane = GearPlane(geartype, sun, planet, count)
        for pl in plane.planet_placements():
            # Phase, in teeth, of the tooth pattern at each contact point
            sun_phase = (pl.angle - plane.sun_spin) / (360 / sun)
            planet_to_sun = (pl.angle + 180 - pl.spin) / (360 / planet)
            planet_to_ring = (pl.angle - pl.spin) / (360 / planet)
            ring_phase = pl.angle / (360 / plane.ring_teeth)
            assert is_half_tooth(sun_phase + planet_to_sun)
            assert is_half_tooth(ring_phase - planet_to_ring)

    @pytest.mark.parametrize("angle", [0, 13.7, 95, 200.5])
    def test_planet_spin_meshes_with_ring_off_grid(self, plane, angle):
        spin = plane.planet_spin(angle)
        planet_to_ring = (angle - spin) / (360 / plane.planet_teeth)
        ring_phase = angle / (360 / plane.ring_teeth)
        assert is_half_tooth(ring_phase - planet_to_ring)

    def test_first_planet_spin(self, plane):
        assert plane.planet_spin(0) == pytest.approx(180 / 12)

    def test_sun_spin_depends_on_planet_parity(self, geartype):
        assert GearPlane(geartype, 40, 12, 3).sun_spin == 0
        assert GearPlane(geartype, 40, 11, 3).sun_spin == pytest.approx(180 / 40)

    def test_placement_positions(self, plane):
        for pl in plane.planet_placements():
            assert math.hypot(pl.x, pl.y) == pytest.approx(plane.orbit_radius)
            assert math.degrees(math.atan2(pl.y, pl.x)) % 360 == pytest.approx(pl.angle % 360)

    def test_deviation(self, plane):
        placements = plane.planet_placements()
        assert placements[1].deviation == pytest.approx(35 * 360 / 104 - 120)

    def test_tolerance_warning(self, plane):
        with pytest.warns(AssemblyWarning, match="from even spacing"):
            plane.planet_placements(tolerance=0.5)

    def test_within_tolerance_no_warning(self, plane):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            plane.planet_placements(tolerance=2.0)

    def test_overlapping_planets_warn(self, geartype):
        plane = GearPlane(geartype, 10, 30, 4)
        with pytest.warns(AssemblyWarning, match="overlap"):
            assert plane.check_planet_clearance() is False

    def test_clear_planets(self, geartype):
        assert GearPlane(geartype, 10, 30, 3).check_planet_clearance() is True


class TestSummary:
    """Tests for the calibration summary."""

    def test_summary_lists_counts(self, plane):
        text = plane.summary()
        assert "Sun:    40 teeth" in text
        assert "Planet: 12 teeth x 3" in text
        assert "Ring:   64 teeth" in text
        assert "0.8000" in text
        assert "snapped" in text

    def test_print_summary(self, plane, capsys):
        plane.print_summary()
        assert "Ring:   64 teeth" in capsys.readouterr().out

    def test_describe(self, plane):
        assert plane.describe() == "gearplane(sun=40, planet=12, ring=64, n=3)"
