"""Write geartrain parts and assemblies to STL/STEP plus JSON sidecars.

Output layout::

    <output_dir>/
        parts/<solid>.<fmt>          one file per distinct solid
        assembly/full_assembly.<fmt>
        bom.json
        assembly_manifest.json       placements and axles
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import cadquery as cq

from ..models.geometry import AssemblyModel, PartMetadata

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("stl", "step")

# Assembly axes, millimetres, Z along the sun / output axle
COORDINATE_FRAME = {
    "units": "mm",
    "origin": [0, 0, 0],
    "x_axis": [1, 0, 0],
    "y_axis": [0, 1, 0],
    "z_axis": [0, 0, 1],
}


def _write_json(path: Path, data: Any) -> Path:
    path.write_text(json.dumps(data, indent=2))
    logger.debug(f"Wrote {path}")
    return path


class Exporter:
    """Writes a built geartrain to disk."""

    def __init__(self, output_dir: Path, formats: Optional[Iterable[str]] = None):
        """Set up the output directory tree.

        Args:
            output_dir: Root directory for everything written.
            formats: Any of ``stl`` and ``step``; both when omitted.

        Raises:
            ValueError: If a format is not supported.
        """
        self.formats = list(formats) if formats else list(SUPPORTED_FORMATS)
        bad = sorted(set(self.formats) - set(SUPPORTED_FORMATS))
        if bad:
            raise ValueError(
                f"Unsupported format: {', '.join(bad)} (expected {', '.join(SUPPORTED_FORMATS)})"
            )

        self.output_dir = Path(output_dir)
        self.parts_dir = self.output_dir / "parts"
        self.assembly_dir = self.output_dir / "assembly"
        for directory in (self.parts_dir, self.assembly_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def export(
        self,
        assembly: cq.Assembly,
        parts: Dict[str, cq.Workplane],
        metadata: Optional[Dict[str, PartMetadata]] = None,
        layout: Optional[AssemblyModel] = None,
    ) -> Dict[str, Path]:
        """Write every solid, the assembly and the JSON sidecars.

        Returns:
            Written paths keyed ``<solid>.<fmt>``, ``assembly.<fmt>``,
            ``bom.json`` and ``assembly_manifest.json``.
        """
        written: Dict[str, Path] = {}
        for fmt in self.formats:
            for solid_id, solid in parts.items():
                written[f"{solid_id}.{fmt}"] = self.write_part(solid_id, solid, fmt)
            written[f"assembly.{fmt}"] = self.write_assembly(assembly, fmt)

        if metadata:
            written["bom.json"] = _write_json(
                self.output_dir / "bom.json",
                {"parts": [meta.bom_row() for meta in metadata.values()]},
            )
        written["assembly_manifest.json"] = _write_json(
            self.output_dir / "assembly_manifest.json",
            self.manifest(assembly.name, parts, layout),
        )

        logger.info(f"Exported {len(written)} files to {self.output_dir}")
        return written

    def write_part(self, solid_id: str, solid: cq.Workplane, fmt: str) -> Path:
        path = self.parts_dir / f"{solid_id}.{fmt}"
        cq.exporters.export(solid, str(path), exportType=fmt.upper())
        logger.debug(f"Wrote {path}")
        return path

    def write_assembly(self, assembly: cq.Assembly, fmt: str) -> Path:
        path = self.assembly_dir / f"full_assembly.{fmt}"
        if fmt == "step":
            assembly.save(str(path))
        else:
            # STL keeps no hierarchy, so the placed parts are merged
            cq.exporters.export(assembly.toCompound(), str(path), exportType="STL")
        logger.debug(f"Wrote {path}")
        return path

    def _files(self, solid_id: str) -> Dict[str, str]:
        return {fmt: f"parts/{solid_id}.{fmt}" for fmt in self.formats}

    def manifest(
        self,
        name: str,
        parts: Dict[str, cq.Workplane],
        layout: Optional[AssemblyModel] = None,
    ) -> Dict[str, Any]:
        """Where each part instance sits and which solid file it uses.

        Without a layout every solid is listed once at the origin.
        """
        if layout is None:
            placed = {solid_id: {"file": self._files(solid_id)} for solid_id in parts}
            axles = []
        else:
            placed = {
                part_id: {
                    "type": p.part_type.value,
                    "origin": list(p.origin),
                    "rotation_z": p.rotation,
                    "file": self._files(p.source),
                }
                for part_id, p in layout.parts.items()
            }
            axles = [
                {"id": s.axis_id, "origin": list(s.origin), "parts": list(s.parts)}
                for s in layout.shafts
            ]
        return {
            "name": name,
            "coordinate_frame": COORDINATE_FRAME,
            "parts": placed,
            "axles": axles,
        }
