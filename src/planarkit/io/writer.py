"""Mesh writer for saving triangulation results.

This module provides the MeshWriter class for writing tessellated shapes
as a JSON mesh file.
"""

import json
from pathlib import Path
from typing import Any

from planarkit.domain import Triangle
from planarkit.exceptions import ShapeSaveError
from planarkit.io.converter import mesh_to_record


class MeshWriter:
    """Collects tessellated shapes and writes them as ``{"meshes": [...]}``.

    Example:
        writer = MeshWriter(Path("shapes-mesh.json"))
        writer.add_mesh("square", triangles, 1.0)
        writer.save()
    """

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path
        self._meshes: list[dict[str, Any]] = []

    @property
    def mesh_count(self) -> int:
        return len(self._meshes)

    def add_mesh(self, name: str, triangles: list[Triangle], area: float) -> None:
        """Queue one shape's triangles for output."""
        self._meshes.append(mesh_to_record(name, triangles, area))

    def add_record(self, record: dict[str, Any]) -> None:
        """Queue an already serialized mesh record (as produced by workers)."""
        self._meshes.append(
            {"name": record["name"], "triangles": record["triangles"], "area": record["area"]}
        )

    def save(self) -> None:
        """Write all queued meshes, sorted by shape name.

        Raises:
            ShapeSaveError: If the file cannot be written
        """
        meshes = sorted(self._meshes, key=lambda m: m["name"])
        try:
            self._output_path.write_text(
                json.dumps({"meshes": meshes}, indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise ShapeSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_mesh_path(input_path: Path) -> Path:
        """Generate the default output path for a shape file.

        Converts: shapes.json -> shapes-mesh.json

        Args:
            input_path: Shape file path

        Returns:
            Path with -mesh suffix before the extension
        """
        return input_path.parent / f"{input_path.stem}-mesh{input_path.suffix or '.json'}"
