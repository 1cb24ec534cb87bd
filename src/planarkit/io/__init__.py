"""Shape and mesh file I/O for planarkit.

This module handles reading JSON shape files and writing JSON mesh files,
keeping the file layout out of the kernel and the domain models.

Key classes:
- ShapeReader: Load shape files and yield Shape models
- MeshWriter: Save tessellated shapes
"""

from planarkit.io.reader import ShapeReader
from planarkit.io.writer import MeshWriter

__all__ = [
    "MeshWriter",
    "ShapeReader",
]
