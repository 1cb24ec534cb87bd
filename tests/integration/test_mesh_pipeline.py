"""End-to-end test that tessellates a shape file and verifies the mesh file."""

import json
from pathlib import Path

import pytest

from planarkit.config import KernelSettings, ProcessingConfig
from planarkit.core.processor import TessellationProcessor
from planarkit.io.converter import record_to_triangles

SHAPES = {
    "shapes": [
        {
            "name": "arrow",
            "outer": [[0, 0], [3, 2], [0, 4], [1, 2]],
        },
        {
            "name": "frame",
            "outer": [[0, 0], [4, 0], [4, 4], [0, 4]],
            "holes": [[[1, 1], [1, 3], [3, 3], [3, 1]]],
        },
        {
            "name": "bowtie",
            "outer": [[0, 0], [2, 2], [2, 0], [0, 2]],
        },
        {
            "name": "lens",
            "paths": [
                {
                    "start": [0, 0],
                    "segments": [
                        {"curve": [4, 0], "control": [2, -2]},
                        {"curve": [0, 0], "control": [2, 2]},
                    ],
                }
            ],
        },
        {"name": "blank", "paths": []},
        {"name": "broken", "outer": [[0, 0], [1, 0], [float("nan"), 1]]},
    ]
}


@pytest.fixture
def shape_file(tmp_path: Path) -> Path:
    path = tmp_path / "shapes.json"
    path.write_text(json.dumps(SHAPES), encoding="utf-8")
    return path


def read_meshes(path: Path) -> dict[str, dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return {record["name"]: record for record in data["meshes"]}


class TestMeshPipeline:
    """Run the full pipeline on a small shape file."""

    @pytest.mark.parametrize("workers", [1, 2])
    def test_mesh_file(self, shape_file, workers):
        settings = KernelSettings(processing=ProcessingConfig(max_workers=workers))
        processor = TessellationProcessor(settings, quiet=True)

        stats = processor.process(shape_file)

        assert stats.processed_count == 4
        assert stats.skipped_count == 1
        assert stats.error_count == 1
        assert stats.errors[0][0] == "broken"

        meshes = read_meshes(shape_file.parent / "shapes-mesh.json")
        assert sorted(meshes) == ["arrow", "bowtie", "frame", "lens"]
        assert meshes["arrow"]["area"] == pytest.approx(4.0)
        assert meshes["frame"]["area"] == pytest.approx(12.0)
        assert meshes["bowtie"]["area"] == pytest.approx(2.0)
        assert len(meshes["frame"]["triangles"]) == 8

    def test_triangles_are_counter_clockwise(self, shape_file, tmp_path):
        """Test output winding is the same for holes given in either direction."""
        output = tmp_path / "mesh.json"
        settings = KernelSettings(processing=ProcessingConfig(max_workers=1))
        TessellationProcessor(settings, quiet=True).process(shape_file, output_path=output)

        for record in read_meshes(output).values():
            triangles = record_to_triangles(record)
            assert triangles
            assert all(t.signed_area > 0 for t in triangles)
            assert sum(t.area for t in triangles) == pytest.approx(record["area"])

    def test_lens_area_is_inscribed(self, shape_file):
        """Test the flattened lens lies inside the curved lens."""
        settings = KernelSettings(processing=ProcessingConfig(max_workers=1))
        TessellationProcessor(settings, quiet=True).process(shape_file)

        lens = read_meshes(shape_file.parent / "shapes-mesh.json")["lens"]
        # Two parabolic segments, each 2/3 of a control triangle of area 4
        assert 0.0 < lens["area"] < 2 * (2.0 / 3.0) * 4.0

    def test_without_resolving_crossings(self, shape_file):
        """Test the other shapes still tessellate when crossings are left in place."""
        settings = KernelSettings(
            processing=ProcessingConfig(max_workers=1, resolve_self_intersections=False)
        )
        stats = TessellationProcessor(settings, quiet=True).process(shape_file)

        meshes = read_meshes(shape_file.parent / "shapes-mesh.json")
        assert "arrow" in meshes
        assert stats.processed_count == 4
        assert stats.error_count == 1
        assert stats.rejected_count == 1
        assert meshes["bowtie"]["triangles"] == []
