"""3D gear solids built from 2D tooth profiles.

Spur gears are straight extrusions of their profile. Ring gears are a blank
disc with the cutting profile subtracted. Tip bevels use solids of
revolution: for spur gears the convex hull of two coaxial cylinders
(a cylinder with chamfered edges), for ring gears a cone at each face.
"""

import logging
import math
from typing import Optional

import cadquery as cq
from shapely import affinity
from shapely.geometry.base import BaseGeometry

from ..errors import InvalidGearError
from .gear import Gear
from .profile import DEFAULT_CONFIG, RenderConfig, disc, gear_profile

logger = logging.getLogger(__name__)

# Radial wall left outside the root circle of a ring gear.
DEFAULT_RING_RIM = 3.0

# Drops near-duplicate vertices that would make zero-length edges.
SIMPLIFY_TOLERANCE = 1e-4


def extrude_profile(shape: BaseGeometry, height: float, z: float = 0.0) -> cq.Workplane:
    """Extrude a shapely polygon (holes included) along +Z."""
    polygons = list(shape.geoms) if hasattr(shape, "geoms") else [shape]
    result = None
    for poly in polygons:
        poly = poly.simplify(SIMPLIFY_TOLERANCE, preserve_topology=True)
        if poly.is_empty:
            continue
        wp = (
            cq.Workplane("XY")
            .workplane(offset=z)
            .polyline(list(poly.exterior.coords)[:-1])
            .close()
        )
        for interior in poly.interiors:
            wp = wp.polyline(list(interior.coords)[:-1]).close()
        solid = wp.extrude(height)
        result = solid if result is None else result.union(solid)

    if result is None:
        raise InvalidGearError("profile is empty, nothing to extrude")
    return result


def _chamfered_cylinder(radius: float, height: float, bevel: float) -> cq.Workplane:
    """Cylinder whose top and bottom edges are chamfered by ``bevel``."""
    bevel = min(bevel, height / 2, radius)
    points = [
        (0, 0),
        (radius - bevel, 0),
        (radius, bevel),
        (radius, height - bevel),
        (radius - bevel, height),
        (0, height),
    ]
    return cq.Workplane("XZ").polyline(points).close().revolve(360, (0, 0, 0), (0, 1, 0))


def ring_blank_radius(gear: Gear, rim: float = DEFAULT_RING_RIM) -> float:
    return gear.profile_radii[1] + rim


def gear_solid(
    gear: Gear,
    config: RenderConfig = DEFAULT_CONFIG,
    height: Optional[float] = None,
    enlarge: float = 0.0,
    bevel: float = 0.0,
    bore: float = 0.0,
    rim: float = DEFAULT_RING_RIM,
) -> cq.Workplane:
    """Build a gear solid from Z=0 to Z=height.

    Args:
        gear: The gear to build.
        config: Profile synthesis options.
        height: Face width; defaults to the gear type height.
        enlarge: Grow (positive) or shrink (negative) the teeth in mm.
        bevel: Chamfer depth at the tooth tips on both faces.
        bore: Diameter of the central hole (spur gears only).
        rim: Wall outside the root circle (ring gears only).

    Returns:
        CadQuery Workplane containing the gear.
    """
    height = gear.geartype.height if height is None else height
    if not height > 0:
        raise InvalidGearError(f"gear height must be positive, got {height}")

    profile = gear_profile(gear, config)

    if gear.is_ring:
        cutter = profile.buffer(-enlarge, quad_segs=config.resolution) if enlarge else profile
        blank = cq.Workplane("XY").circle(ring_blank_radius(gear, rim)).extrude(height)
        solid = blank.cut(extrude_profile(cutter, height + 2, z=-1))
        if bevel > 0:
            tip_r = gear.profile_radii[0]
            bottom = cq.Solid.makeCone(
                tip_r + bevel, tip_r, bevel, cq.Vector(0, 0, 0), cq.Vector(0, 0, 1)
            )
            top = cq.Solid.makeCone(
                tip_r + bevel, tip_r, bevel, cq.Vector(0, 0, height), cq.Vector(0, 0, -1)
            )
            solid = solid.cut(bottom).cut(top)
    else:
        if enlarge:
            profile = profile.buffer(enlarge, quad_segs=config.resolution)
        solid = extrude_profile(profile, height)
        if bevel > 0:
            tip_r = max(abs(v) for v in profile.bounds)
            solid = solid.intersect(_chamfered_cylinder(tip_r, height, bevel))
        if bore > 0:
            hole = cq.Workplane("XY").circle(bore / 2).extrude(height + 2).translate((0, 0, -1))
            solid = solid.cut(hole)

    logger.debug(f"Built solid for {gear}: height={height}, enlarge={enlarge}, bevel={bevel}")
    return solid


def lightening_pockets(
    gear: Gear,
    hub_diameter: float,
    pockets: int,
    config: RenderConfig = DEFAULT_CONFIG,
) -> Optional[BaseGeometry]:
    """Round pockets on the circle midway between hub and root circle.

    Returns None when the web between hub and root is too thin for pockets.
    """
    hub_r = hub_diameter / 2
    root_r = gear.profile_radii[0]
    web = root_r - hub_r
    if pockets < 1 or web <= 0:
        return None

    mid_r = hub_r + web / 2
    pocket_r = 0.4 * web
    if pockets > 1:
        pocket_r = min(pocket_r, 0.8 * mid_r * math.sin(math.pi / pockets))
    if pocket_r < 0.5:
        return None

    holes = None
    for i in range(pockets):
        angle = 2 * math.pi * i / pockets
        hole = affinity.translate(
            disc(pocket_r, config.resolution),
            mid_r * math.cos(angle),
            mid_r * math.sin(angle),
        )
        holes = hole if holes is None else holes.union(hole)
    return holes


def gear_lightened(
    gear: Gear,
    config: RenderConfig = DEFAULT_CONFIG,
    height: Optional[float] = None,
    hub_diameter: float = 8.0,
    pockets: int = 5,
    bevel: float = 0.0,
    bore: float = 0.0,
) -> cq.Workplane:
    """Spur gear with round pockets cut through the web to save material."""
    if gear.is_ring:
        raise InvalidGearError("lightening pockets apply to spur gears only")
    height = gear.geartype.height if height is None else height

    solid = gear_solid(gear, config, height=height, bevel=bevel, bore=bore)
    holes = lightening_pockets(gear, hub_diameter, pockets, config)
    if holes is None:
        logger.debug(f"No room for lightening pockets on {gear}")
        return solid
    return solid.cut(extrude_profile(holes, height + 2, z=-1))


def gear_clearance(
    gear: Gear,
    radial: float = 0.5,
    axial: float = 0.5,
    height: Optional[float] = None,
    rim: float = DEFAULT_RING_RIM,
) -> cq.Workplane:
    """Swept envelope of a turning gear plus clearance, for cutting housings.

    Spans Z=-axial to Z=height+axial.
    """
    height = gear.geartype.height if height is None else height
    if gear.is_ring:
        radius = ring_blank_radius(gear, rim) + radial
    else:
        radius = gear.profile_radii[1] + radial
    return (
        cq.Workplane("XY")
        .circle(radius)
        .extrude(height + 2 * axial)
        .translate((0, 0, -axial))
    )
