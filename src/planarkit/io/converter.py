"""Conversion between JSON records and domain models.

Shape files hold plain JSON records; this module checks their structure and
turns them into domain objects (and meshes back into records). Structural
problems raise ``ValueError`` with a message naming the offending field, which
the reader wraps into ``ShapeFormatError``.
"""

from typing import Any

from planarkit.domain import Shape, Triangle


def _check_point(value: Any, where: str) -> None:
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or not all(isinstance(c, (int, float)) and not isinstance(c, bool) for c in value)
    ):
        raise ValueError(f"{where}: expected [x, y], got {value!r}")


def _check_ring(value: Any, where: str) -> None:
    if not isinstance(value, list):
        raise ValueError(f"{where}: expected a list of points")
    for i, point in enumerate(value):
        _check_point(point, f"{where}[{i}]")


def _check_pathline(value: Any, where: str) -> None:
    if not isinstance(value, dict) or "start" not in value:
        raise ValueError(f"{where}: expected an object with a 'start' point")
    _check_point(value["start"], f"{where}.start")
    for i, segment in enumerate(value.get("segments", [])):
        if not isinstance(segment, dict):
            raise ValueError(f"{where}.segments[{i}]: expected an object")
        if "line" in segment:
            _check_point(segment["line"], f"{where}.segments[{i}].line")
        elif "curve" in segment and "control" in segment:
            _check_point(segment["curve"], f"{where}.segments[{i}].curve")
            _check_point(segment["control"], f"{where}.segments[{i}].control")
        else:
            raise ValueError(f"{where}.segments[{i}]: expected 'line' or 'curve' + 'control'")


def record_to_shape(record: Any, index: int = 0) -> Shape:
    """Convert a shape record to a domain Shape.

    A record is either ``{"name", "outer", "holes"}`` with point lists or
    ``{"name", "paths"}`` with pathline objects. A missing name becomes
    ``shape_<index>``.

    Args:
        record: Decoded JSON object
        index: Position of the record in the file, for naming and messages

    Returns:
        Shape domain model

    Raises:
        ValueError: If the record does not have one of the two layouts
    """
    where = f"shapes[{index}]"
    if not isinstance(record, dict):
        raise ValueError(f"{where}: expected an object")

    if "paths" in record:
        if not isinstance(record["paths"], list):
            raise ValueError(f"{where}.paths: expected a list")
        for i, path in enumerate(record["paths"]):
            _check_pathline(path, f"{where}.paths[{i}]")
    elif "outer" in record:
        _check_ring(record["outer"], f"{where}.outer")
        holes = record.get("holes", [])
        if not isinstance(holes, list):
            raise ValueError(f"{where}.holes: expected a list of rings")
        for i, hole in enumerate(holes):
            _check_ring(hole, f"{where}.holes[{i}]")
    else:
        raise ValueError(f"{where}: expected 'outer' or 'paths'")

    data = dict(record)
    data["name"] = str(record.get("name") or f"shape_{index}")
    return Shape.from_dict(data)


def shape_to_record(shape: Shape) -> dict[str, Any]:
    return shape.to_dict()


def mesh_to_record(name: str, triangles: list[Triangle], area: float) -> dict[str, Any]:
    """Build the output record of one tessellated shape."""
    return {
        "name": name,
        "triangles": [t.to_list() for t in triangles],
        "area": area,
    }


def record_to_triangles(record: dict[str, Any]) -> list[Triangle]:
    return [Triangle.from_list(t) for t in record.get("triangles", [])]
