"""Tests for logging configuration and run statistics."""

import logging
from unittest.mock import Mock

from planarkit.utils import ProcessingLogger, ProcessingStats, configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_no_file_unless_requested(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        configure_logging(quiet=True)
        assert list(tmp_path.iterdir()) == []

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = configure_logging(log_file=log_file, file_level="INFO", quiet=True)
        logger.info("Shape tessellated", shape="square")
        logging.getLogger("planarkit.core.monotone").warning("non-monotone face")

        text = log_file.read_text(encoding="utf-8")
        assert "Shape tessellated" in text
        assert "non-monotone face" in text
        configure_logging(quiet=True)

    def test_repeated_calls_replace_handlers(self):
        root = logging.getLogger()
        before = len(root.handlers)
        configure_logging()
        configure_logging()
        assert len(root.handlers) == before + 1
        configure_logging(quiet=True)
        assert len(root.handlers) == before


class TestProcessingLogger:
    """Tests for ProcessingLogger statistics."""

    def test_counters(self):
        processing_logger = ProcessingLogger(Mock())
        processing_logger.log_shape_complete("a", triangle_count=4, piece_count=2, duration_ms=1.0)
        processing_logger.log_shape_complete("b", triangle_count=1, piece_count=1, duration_ms=1.0)
        processing_logger.log_shape_skipped("c", "no contours")
        processing_logger.log_shape_error("d", ValueError("bad point"))
        processing_logger.log_rejected_faces("a", 3)

        stats = processing_logger.stats
        assert stats.processed_count == 2
        assert stats.triangle_count == 5
        assert stats.piece_count == 3
        assert stats.skipped_count == 1
        assert stats.error_count == 1
        assert stats.errors == [("d", "bad point")]
        assert stats.rejected_count == 3

    def test_duration(self):
        assert ProcessingStats().duration_seconds == 0.0
        assert ProcessingStats(start_time=10.0, end_time=12.5).duration_seconds == 2.5
