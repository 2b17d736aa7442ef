"""Tests for build specification parsing and validation."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from geartrain.gears import GearKind
from geartrain.models.spec import (
    BuildSpec,
    GearboxSpec,
    GearSpec,
    GearTypeSpec,
    RenderSpec,
    StageSpec,
    SteppedSpec,
)

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


class TestGearTypeSpec:
    """Tests for GearTypeSpec."""

    def test_explicit(self):
        gt = GearTypeSpec(pitch=0.8, height=10, addendum=0.3).to_geartype()
        assert gt.diametral_pitch == 0.8
        assert gt.addendum_ratio == 0.3

    def test_preset(self):
        gt = GearTypeSpec(preset="1.0mm").to_geartype()
        assert gt.diametral_pitch == 1.0

    def test_preset_with_override(self):
        gt = GearTypeSpec(preset="1.0mm", height=4).to_geartype()
        assert gt.height == 4
        assert gt.diametral_pitch == 1.0

    def test_unknown_preset(self):
        with pytest.raises(ValidationError, match="unknown gear type preset"):
            GearTypeSpec(preset="9mm")

    def test_missing_height(self):
        with pytest.raises(ValidationError, match="preset or both pitch and height"):
            GearTypeSpec(pitch=0.8)

    def test_pressure_angle_range(self):
        with pytest.raises(ValidationError):
            GearTypeSpec(pitch=0.8, height=10, pressure_angle=40)


class TestSectionSpecs:
    """Tests for the per-kind sections."""

    def test_render_to_config(self):
        cfg = RenderSpec(render_teeth=False, resolution=8).to_config()
        assert cfg.render_teeth is False
        assert cfg.resolution == 8
        assert cfg.tooth_clearance == 0.1

    def test_ring_gear_spec(self):
        spec = GearSpec(teeth=64, kind="ring")
        assert spec.kind is GearKind.RING

    def test_lightened_ring_rejected(self):
        with pytest.raises(ValidationError, match="spur gears only"):
            GearSpec(teeth=64, kind="ring", lightened=True)

    def test_hub_must_exceed_bore(self):
        with pytest.raises(ValidationError, match="hub_diameter"):
            GearSpec(teeth=20, bore=8, hub_diameter=6)

    def test_zero_delta(self):
        with pytest.raises(ValidationError, match="non-zero"):
            SteppedSpec(delta=0)

    def test_ring_stage_needs_larger_big(self):
        with pytest.raises(ValidationError, match="ring stage"):
            StageSpec(big=10, lil=12, ring=True)

    def test_unknown_motor(self):
        with pytest.raises(ValidationError, match="unknown motor"):
            GearboxSpec(stages=[{"big": 40, "lil": 12}], motor="v8")

    def test_empty_gearbox(self):
        with pytest.raises(ValidationError):
            GearboxSpec(stages=[])

    def test_stage_geartype_override(self):
        spec = GearboxSpec(stages=[
            {"big": 40, "lil": 12},
            {"big": 30, "lil": 10, "geartype": {"pitch": 1.5, "height": 8}},
        ])
        gb = spec.to_gearbox(GearTypeSpec(pitch=1.0, height=5).to_geartype())
        assert gb.stages[0].geartype.diametral_pitch == 1.0
        assert gb.stages[1].geartype.diametral_pitch == 1.5


class TestBuildSpec:
    """Tests for full BuildSpec validation."""

    @pytest.fixture
    def gearplane_data(self):
        return {
            "name": "demo",
            "kind": "gearplane",
            "geartype": {"pitch": 0.8, "height": 8},
            "gearplane": {"sun": 40, "planet": 12, "count": 3},
        }

    def test_gearplane(self, gearplane_data):
        spec = BuildSpec.model_validate(gearplane_data)
        plane = spec.to_plane()
        assert plane.ring_teeth == 64
        assert plane.ratio_ring_fixed == pytest.approx(2.6)

    def test_stepped(self, gearplane_data):
        gearplane_data["kind"] = "stepped"
        gearplane_data["gearplane"]["count"] = 2
        gearplane_data["stepped"] = {"delta": 1}
        spec = BuildSpec.model_validate(gearplane_data)
        assert spec.to_stepped().ratio == pytest.approx(85.8)

    def test_missing_section(self, gearplane_data):
        gearplane_data["kind"] = "stepped"
        with pytest.raises(ValidationError, match="requires sections: stepped"):
            BuildSpec.model_validate(gearplane_data)

    def test_unknown_kind(self, gearplane_data):
        gearplane_data["kind"] = "worm"
        with pytest.raises(ValidationError):
            BuildSpec.model_validate(gearplane_data)

    def test_gearbox(self):
        spec = BuildSpec.model_validate({
            "name": "box",
            "kind": "gearbox",
            "geartype": {"pitch": 1.0, "height": 5},
            "gearbox": {"stages": [{"big": 40, "lil": 12}, {"big": 52, "lil": 10}]},
        })
        assert spec.to_gearbox().ratio() == pytest.approx((40 / 12) * (52 / 10))

    def test_defaults(self, gearplane_data):
        spec = BuildSpec.model_validate(gearplane_data)
        assert spec.render.rounding_radius == 0.2
        assert spec.tolerances.shaft_clearance == 0.2

    @pytest.mark.parametrize("example", sorted(EXAMPLES_DIR.glob("*.yaml")), ids=lambda p: p.stem)
    def test_examples_validate(self, example):
        with open(example) as f:
            spec = BuildSpec.model_validate(yaml.safe_load(f))
        assert spec.name == example.stem
