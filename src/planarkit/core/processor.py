"""Parallel processing orchestration for the tessellation pipeline.

This module runs the full kernel pipeline (flatten, resolve crossings,
decompose into monotone pieces, triangulate) over a batch of shapes, one
shape per task, using ProcessPoolExecutor.

Key components:
- process_shape: Top-level picklable function for parallel execution
- TessellationProcessor: Orchestrator for shape files and shape batches
"""

import logging
import time
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from planarkit.config import FlatteningConfig, KernelSettings, ToleranceConfig
from planarkit.core.monotone import decompose
from planarkit.core.path import shape_to_topolygon, validate_pathline
from planarkit.core.polygon import (
    contains_point,
    has_self_intersections,
    resolve_self_intersections,
)
from planarkit.core.triangulator import triangles_area, triangulate
from planarkit.domain import Polygon, Shape, Topolygon, Triangle
from planarkit.exceptions import MalformedPolygonError, ProcessingCancelledError
from planarkit.io import MeshWriter, ShapeReader
from planarkit.utils import ProcessingLogger, ProcessingStats, configure_logging

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str, bool], None]


def _split_faces(topolygon: Topolygon, tolerance: ToleranceConfig) -> list[Topolygon]:
    """Resolve a self-crossing outer ring into simple faces.

    Each hole goes to the first face that contains its first vertex; holes
    outside every face are dropped.
    """
    faces = [Topolygon(face) for face in resolve_self_intersections(topolygon.outer, tolerance)]
    if not topolygon.holes:
        return faces
    holes: list[list[Polygon]] = [[] for _ in faces]
    for hole in topolygon.holes:
        if hole.is_empty:
            continue
        for k, face in enumerate(faces):
            if contains_point(face.outer, hole[0]):
                holes[k].append(hole)
                break
    return [Topolygon(face.outer, tuple(h)) for face, h in zip(faces, holes)]


def tessellate(
    shape: Shape,
    tolerance: ToleranceConfig,
    flattening: FlatteningConfig,
    resolve_crossings: bool = True,
) -> tuple[list[Triangle], int, int]:
    """Run the kernel pipeline on one shape.

    A face the decomposer cannot handle is logged and counted as rejected;
    the remaining faces are still triangulated.

    Args:
        shape: Shape to tessellate
        tolerance: Kernel tolerances
        flattening: Curve sampling parameters
        resolve_crossings: Split a self-crossing outer ring into simple faces
            before decomposing

    Returns:
        (triangles, monotone piece count, rejected face count)

    Raises:
        InvalidGeometryError: If the shape has non-finite coordinates
    """
    for contour in shape.contours:
        validate_pathline(contour)

    topolygon = shape_to_topolygon(shape, flattening, tolerance)
    if resolve_crossings and has_self_intersections(topolygon.outer):
        faces = _split_faces(topolygon, tolerance)
    else:
        faces = [topolygon]

    triangles: list[Triangle] = []
    pieces = 0
    rejected = 0
    for face in faces:
        try:
            decomposition = decompose(face, tolerance)
            face_triangles = [t for piece in decomposition.polygons for t in triangulate(piece)]
        except MalformedPolygonError as e:
            logger.warning("Skipping face with %d points: %s", len(face.outer), e)
            rejected += 1
            continue
        pieces += len(decomposition.polygons)
        rejected += decomposition.rejected
        triangles.extend(face_triangles)
    return triangles, pieces, rejected


def process_shape(
    shape_dict: dict[str, Any],
    tolerance_dict: dict[str, Any],
    flattening_dict: dict[str, Any],
    resolve_crossings: bool = True,
) -> dict[str, Any]:
    """Tessellate a single shape.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes the shape, runs the pipeline and returns a serialized result.

    Args:
        shape_dict: Serialized shape (from Shape.to_dict())
        tolerance_dict: Serialized tolerance configuration
        flattening_dict: Serialized flattening configuration
        resolve_crossings: Split self-crossing outer rings into faces

    Returns:
        Dictionary containing either:
        - Success: {"name", "triangles", "area", "pieces", "rejected", "duration_ms"}
        - Error: {"error": str, "shape_name": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        shape = Shape.from_dict(shape_dict)
        tolerance = ToleranceConfig(**tolerance_dict)
        flattening = FlatteningConfig(**flattening_dict)

        triangles, pieces, rejected = tessellate(shape, tolerance, flattening, resolve_crossings)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "name": shape.name,
            "triangles": [t.to_list() for t in triangles],
            "area": triangles_area(triangles),
            "pieces": pieces,
            "rejected": rejected,
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "error": str(e),
            "shape_name": shape_dict.get("name", "unknown"),
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class TessellationProcessor:
    """Orchestrates batch tessellation of shape files.

    Manages the complete workflow:
    1. Load the shape file
    2. Skip shapes without contours
    3. Tessellate shapes, in worker processes when there is more than one
    4. Collect results and update statistics
    5. Save the mesh file

    Example:
        processor = TessellationProcessor(get_default_settings())
        stats = processor.process(Path("shapes.json"), max_workers=4)
    """

    def __init__(self, config: KernelSettings, quiet: bool = False) -> None:
        """Initialize the processor with configuration.

        Args:
            config: Kernel settings (tolerances, flattening, processing, logging)
            quiet: Suppress console log output
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=quiet,
        )
        self.processing_logger = ProcessingLogger(self.logger)

    def process(
        self,
        input_path: Path,
        output_path: Path | None = None,
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> ProcessingStats:
        """Tessellate every shape of a shape file and write the meshes.

        Args:
            input_path: JSON shape file
            output_path: Mesh file path (``<stem>-mesh.json`` if None)
            max_workers: Maximum worker processes (None = config, then auto)
            progress_callback: Optional callback(completed, total, shape_name,
                success) for progress updates

        Returns:
            ProcessingStats with counts, timing and error details

        Raises:
            ShapeLoadError: If the shape file cannot be read
            ShapeFormatError: If the shape file is malformed
            ShapeSaveError: If the mesh file cannot be written
            ProcessingCancelledError: If processing is interrupted
        """
        if output_path is None:
            output_path = MeshWriter.get_mesh_path(input_path)

        self.logger.info(
            "Starting shape processing",
            input=str(input_path),
            output=str(output_path),
            max_workers=max_workers,
        )

        with ShapeReader(input_path) as reader:
            shapes = list(reader.iter_shapes())

        self.logger.info("Shapes loaded", shape_count=len(shapes))
        results, stats = self.process_shapes(shapes, max_workers, progress_callback)

        writer = MeshWriter(output_path)
        for result in results:
            writer.add_record(result)
        writer.save()
        self.logger.info("Meshes saved", output=str(output_path), mesh_count=writer.mesh_count)
        return stats

    def process_shapes(
        self,
        shapes: list[Shape],
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> tuple[list[dict[str, Any]], ProcessingStats]:
        """Tessellate a batch of shapes.

        Args:
            shapes: Shapes to tessellate
            max_workers: Maximum worker processes (None = config, then auto)
            progress_callback: Optional progress callback

        Returns:
            Successful result dicts (see ``process_shape``) in completion
            order, and the run statistics
        """
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        to_process: list[Shape] = []
        for shape in shapes:
            if not shape.contours:
                self.processing_logger.log_shape_skipped(shape.name, "no contours")
            else:
                to_process.append(shape)

        results: list[dict[str, Any]] = []
        if not to_process:
            self.logger.info("No shapes to process")
        elif max_workers == 1 or len(to_process) == 1:
            results = self._process_sequential(to_process, progress_callback)
        else:
            results = self._process_parallel(to_process, max_workers, progress_callback)

        stats.end_time = time.time()
        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            triangles=stats.triangle_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return results, stats

    def _task_args(self) -> tuple[dict[str, Any], dict[str, Any], bool]:
        return (
            self.config.tolerance.model_dump(),
            self.config.flattening.model_dump(),
            self.config.processing.resolve_self_intersections,
        )

    def _record_result(self, shape_name: str, result: dict[str, Any]) -> bool:
        """Update statistics from one result dict; True on success."""
        stats = self.processing_logger.stats
        duration_ms = result.get("duration_ms", 0.0)
        stats.shape_timings_ms.append(duration_ms)

        if "error" in result:
            self.processing_logger.log_shape_error(
                shape_name=result.get("shape_name", shape_name),
                error=Exception(result["error"]),
                traceback=result.get("traceback"),
            )
            return False

        self.processing_logger.log_shape_complete(
            shape_name=shape_name,
            triangle_count=len(result["triangles"]),
            piece_count=result["pieces"],
            duration_ms=duration_ms,
        )
        if result["rejected"]:
            self.processing_logger.log_rejected_faces(shape_name, result["rejected"])
        stats.total_area += result["area"]
        return True

    def _process_sequential(
        self,
        shapes: list[Shape],
        progress_callback: ProgressCallback | None,
    ) -> list[dict[str, Any]]:
        tolerance_dict, flattening_dict, resolve = self._task_args()
        results: list[dict[str, Any]] = []
        total = len(shapes)
        for completed, shape in enumerate(shapes, start=1):
            self.processing_logger.log_shape_start(shape.name)
            result = process_shape(shape.to_dict(), tolerance_dict, flattening_dict, resolve)
            success = self._record_result(shape.name, result)
            if success:
                results.append(result)
            if progress_callback is not None:
                progress_callback(completed, total, shape.name, success)
        return results

    def _process_parallel(
        self,
        shapes: list[Shape],
        max_workers: int | None,
        progress_callback: ProgressCallback | None,
    ) -> list[dict[str, Any]]:
        """Tessellate shapes in worker processes.

        Raises:
            ProcessingCancelledError: On KeyboardInterrupt, after cancelling
                the futures that have not started
        """
        tolerance_dict, flattening_dict, resolve = self._task_args()
        stats = self.processing_logger.stats
        results: list[dict[str, Any]] = []
        total = len(shapes)
        completed = 0

        self.logger.info(
            "Starting parallel processing",
            shape_count=total,
            max_workers=max_workers,
        )

        pending_futures: dict[Future[dict[str, Any]], str] = {}
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for shape in shapes:
                future = executor.submit(
                    process_shape,
                    shape.to_dict(),
                    tolerance_dict,
                    flattening_dict,
                    resolve,
                )
                pending_futures[future] = shape.name

            try:
                for future in as_completed(list(pending_futures)):
                    shape_name = pending_futures.pop(future)
                    success = False
                    try:
                        result = future.result()
                        success = self._record_result(shape_name, result)
                        if success:
                            results.append(result)
                    except Exception as e:
                        # Executor-level error (worker crash, pickling)
                        self.processing_logger.log_shape_error(
                            shape_name=shape_name,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, shape_name, success)

            except KeyboardInterrupt as e:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()
                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)
                executor.shutdown(wait=True, cancel_futures=True)
                raise ProcessingCancelledError(completed, len(pending_futures)) from e

        return results
