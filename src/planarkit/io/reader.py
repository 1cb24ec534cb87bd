"""Shape reader for loading JSON shape files.

This module provides the ShapeReader class for loading shape files
and converting their records into domain models.
"""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from planarkit.domain import Shape
from planarkit.exceptions import ShapeFormatError, ShapeLoadError
from planarkit.io.converter import record_to_shape


class ShapeReader:
    """Loads JSON shape files and yields Shape domain models.

    The file holds a single object with a ``shapes`` list; see
    ``record_to_shape`` for the record layouts.

    Example:
        with ShapeReader(Path("shapes.json")) as reader:
            for shape in reader.iter_shapes():
                print(shape.name)
    """

    def __init__(self, path: Path) -> None:
        """Initialize the shape reader.

        Args:
            path: Path to the JSON shape file
        """
        self._path = path
        self._records: list[Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Read and decode the shape file.

        Raises:
            ShapeLoadError: If the file is missing, unreadable or not JSON
            ShapeFormatError: If the top level is not ``{"shapes": [...]}``
        """
        if not self._path.exists():
            raise ShapeLoadError(str(self._path), "file not found")

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ShapeLoadError(str(self._path), str(e)) from e
        except json.JSONDecodeError as e:
            raise ShapeLoadError(str(self._path), f"invalid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("shapes"), list):
            raise ShapeFormatError(str(self._path), "expected an object with a 'shapes' list")
        self._records = data["shapes"]

    def _require_loaded(self) -> list[Any]:
        if self._records is None:
            raise RuntimeError("Shapes not loaded. Call load() first.")
        return self._records

    @property
    def shape_count(self) -> int:
        """Number of shape records in the file.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        return len(self._require_loaded())

    def iter_shapes(self) -> Iterator[Shape]:
        """Iterate over all shapes in file order.

        Yields:
            Shape domain models

        Raises:
            RuntimeError: If the file has not been loaded yet
            ShapeFormatError: If a record is malformed
        """
        for index, record in enumerate(self._require_loaded()):
            try:
                yield record_to_shape(record, index)
            except (ValueError, KeyError, TypeError) as e:
                raise ShapeFormatError(str(self._path), str(e)) from e

    def get_shape(self, name: str) -> Shape | None:
        """Get a shape by name, or None if no record has that name."""
        for shape in self.iter_shapes():
            if shape.name == name:
                return shape
        return None

    def close(self) -> None:
        self._records = None

    def __enter__(self) -> "ShapeReader":
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        self.close()
