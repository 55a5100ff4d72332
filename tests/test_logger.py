"""
Tests for logger functionality.
"""

import pytest
from issueannotator.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["api_calls"] == 0
        assert logger.metrics["annotations_inserted"] == 0

    def test_log_with_context(self, tmp_path):
        """Context kwargs are rendered as JSON after the message."""
        logger = StructuredLogger(name="test-context", log_dir=tmp_path, enable_console=False)

        logger.info("Issue resolved", issue="EP-1", status=200)

        content = next(tmp_path.glob("*.log")).read_text()
        assert 'Issue resolved | Context: {"issue": "EP-1", "status": 200}' in content

    def test_lookup_metrics(self, tmp_path):
        """Lookup outcomes should be tracked per project."""
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        logger.record_api_call()
        logger.record_api_call()
        logger.record_lookup_attempt("EP")
        logger.record_lookup_success("EP")
        logger.record_lookup_attempt("EP")
        logger.record_lookup_success("EP", found=False)
        logger.record_lookup_attempt("SP")
        logger.record_lookup_failure("SP", "RequestException")
        logger.record_annotations(2)

        metrics = logger.get_metrics()

        assert metrics["api_calls"] == 2
        assert metrics["lookups_attempted"] == 3
        assert metrics["lookups_resolved"] == 1
        assert metrics["lookups_not_found"] == 1
        assert metrics["lookups_failed"] == 1
        assert metrics["annotations_inserted"] == 2
        assert metrics["errors_by_type"]["RequestException"] == 1
        assert metrics["project_success_rate"]["EP"]["success_rate"] == 1.0
        assert metrics["project_success_rate"]["SP"]["success_rate"] == 0.0

    def test_success_rate_calculation(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        for _ in range(3):
            logger.record_lookup_attempt("EP")
        logger.record_lookup_success("EP")
        logger.record_lookup_success("EP")

        rate = logger.get_metrics()["project_success_rate"]["EP"]["success_rate"]
        assert rate == pytest.approx(0.667, rel=0.01)

    def test_metrics_summary_written(self, tmp_path):
        logger = StructuredLogger(name="test-summary", log_dir=tmp_path, enable_console=False)
        logger.record_lookup_attempt("EP")
        logger.record_lookup_failure("EP", "HTTPError_500")

        logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text()
        assert "=== Annotation Session Metrics ===" in content
        assert "Lookups: 0/1 (0.0% success)" in content
        assert "HTTPError_500: 1" in content

    def test_console_disabled_writes_file_only(self, tmp_path, capsys):
        logger = StructuredLogger(name="test-quiet", log_dir=tmp_path, enable_console=False)
        logger.warning("quiet")
        captured = capsys.readouterr()
        assert "quiet" not in captured.out
        assert "quiet" not in captured.err


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_api_call()

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)
        assert logger2 is not logger1
        assert logger2.metrics["api_calls"] == 0
