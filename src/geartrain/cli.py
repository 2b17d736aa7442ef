"""CLI entry point for the geartrain generator."""

import logging
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError

from .errors import GeartrainError

app = typer.Typer(
    name="geartrain",
    help="Parametric gear generator - converts geartrain specs to 3D-printable CAD files",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_spec(spec_file: Path):
    from .models import BuildSpec

    if not spec_file.exists():
        typer.echo(f"Error: Specification file not found: {spec_file}", err=True)
        raise typer.Exit(1)

    with open(spec_file) as f:
        spec_data = yaml.safe_load(f)

    try:
        return BuildSpec.model_validate(spec_data)
    except ValidationError as e:
        typer.echo(f"Validation error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def build(
    spec_file: Path = typer.Argument(..., help="Path to YAML specification file"),
    output_dir: Path = typer.Option(
        Path("output"), "-o", "--output", help="Output directory for generated files"
    ),
    formats: str = typer.Option(
        "stl,step", "--formats", help="Comma-separated export formats (stl,step)"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log debug output"),
) -> None:
    """Build parts and assembly from a specification file."""
    from .assembly import AssemblyBuilder
    from .export import Exporter

    _configure_logging(verbose)
    typer.echo(f"Loading specification from {spec_file}...")
    spec = _load_spec(spec_file)
    typer.echo(f"Building {spec.kind}: {spec.name}")

    export_formats = [fmt.strip().lower() for fmt in formats.split(",") if fmt.strip()]
    try:
        builder = AssemblyBuilder(spec)
        assembly = builder.build()
        exporter = Exporter(output_dir, export_formats)
        exporter.export(assembly, builder.parts, builder.metadata, builder.layout)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Assembly exported to {output_dir}")


@app.command()
def validate(
    spec_file: Path = typer.Argument(..., help="Path to YAML specification file"),
) -> None:
    """Validate a specification file and print derived quantities without building."""
    typer.echo(f"Validating specification from {spec_file}...")
    spec = _load_spec(spec_file)

    try:
        geartype = spec.to_geartype()
        typer.echo(f"Specification valid: {spec.name}")
        typer.echo(f"  Kind: {spec.kind}")
        typer.echo(
            f"  Gear type: pitch {geartype.diametral_pitch} mm/tooth, "
            f"height {geartype.height} mm, pressure angle {geartype.pressure_angle} deg"
        )
        if spec.kind == "gear":
            gear = spec.gear.to_gear(geartype)
            typer.echo(f"  {gear}: pitch diameter {gear.pitch_diameter:.3f} mm, "
                       f"tip {gear.outer_diameter:.3f} mm, root {gear.inner_diameter:.3f} mm")
        elif spec.kind == "gearplane":
            typer.echo(spec.to_plane().summary())
        elif spec.kind == "stepped":
            typer.echo(spec.to_stepped().summary())
        else:
            gearbox = spec.to_gearbox()
            for i, stage in enumerate(gearbox.stages):
                frame = gearbox.frame(i)
                typer.echo(
                    f"  Stage {i}: {stage.big_gear} / {stage.lil_gear}, "
                    f"axle at ({frame.x:.2f}, {frame.y:.2f}, {frame.z:.2f})"
                )
            typer.echo(f"  Total ratio: {gearbox.ratio():.4f}")
    except GeartrainError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def summary(
    sun: int = typer.Option(..., "--sun", help="Sun tooth count"),
    planet: int = typer.Option(..., "--planet", help="Planet tooth count"),
    count: int = typer.Option(3, "--count", help="Number of planets"),
    pitch: float = typer.Option(0.8, "--pitch", help="Diametral pitch in mm per tooth"),
    height: float = typer.Option(10.0, "--height", help="Face width in mm"),
    delta: int = typer.Option(0, "--delta", help="Print a stepped planetary with this delta"),
) -> None:
    """Print the calibration summary of a gear plane."""
    from .gears import GearPlane, GearType, SteppedPlanetary

    try:
        plane = GearPlane(GearType.create(pitch, height), sun, planet, count)
        if delta:
            typer.echo(SteppedPlanetary(plane, delta).summary())
        else:
            typer.echo(plane.summary())
    except GeartrainError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def list_presets() -> None:
    """List the named gear types and motors."""
    from .gears import PRESETS
    from .generators import MOTORS

    typer.echo("Gear type presets:\n")
    for name, geartype in PRESETS.items():
        typer.echo(
            f"  {name:<14} pitch {geartype.diametral_pitch:<5} height {geartype.height:<5} "
            f"pressure {geartype.pressure_angle}"
        )

    typer.echo("\nMotors:\n")
    for name, params in MOTORS.items():
        typer.echo(
            f"  {name:<14} shaft {params.shaft_diameter} mm, "
            f"{params.bolt_count} bolts on {params.bolt_circle_diameter} mm"
        )


if __name__ == "__main__":
    app()
