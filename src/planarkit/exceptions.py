"""Exception hierarchy for planarkit."""


class PlanarKitError(Exception):
    """Base exception for all planarkit errors."""

    pass


class GeometryError(PlanarKitError):
    """Errors in geometric calculations."""

    pass


class InvalidGeometryError(GeometryError):
    """Input coordinates are not finite (NaN or infinity)."""

    def __init__(self, what: str, value: float) -> None:
        self.what = what
        self.value = value
        super().__init__(f"Invalid {what}: expected a finite number, got {value!r}")


class MalformedPolygonError(GeometryError):
    """A polygon broke an invariant of the monotone decomposition.

    Raised by the sweep when a vertex has no helper or no active edge to its
    left, and by the post-check when a traced face is not y-monotone. Callers
    drop the offending face (or shape) and carry on with the rest.
    """

    def __init__(self, reason: str, point_count: int | None = None) -> None:
        self.reason = reason
        self.point_count = point_count
        if point_count is None:
            super().__init__(f"Malformed polygon: {reason}")
        else:
            super().__init__(f"Malformed polygon ({point_count} points): {reason}")


class ShapeError(PlanarKitError):
    """Errors related to reading or writing shape files."""

    pass


class ShapeLoadError(ShapeError):
    """Error loading a shape file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load shapes '{path}': {reason}")


class ShapeSaveError(ShapeError):
    """Error saving a mesh file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save mesh '{path}': {reason}")


class ShapeFormatError(ShapeError):
    """Shape data does not follow the expected layout."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid shape data '{path}': {details}")


class ProcessingCancelledError(PlanarKitError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
