"""
Logging for annotation passes.

One process-wide logger writes human-readable lines to stderr and a dated
file under logs/, and counts what each pass did: tracker calls, lookup
outcomes per project key, and how many Title: lines were inserted.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Wraps a stdlib logger; keyword context is appended to the message as JSON.

    The metrics dict is cumulative for the lifetime of the instance, so a
    CLI run reports one pass while a long-lived host sees running totals.
    """

    def __init__(
        self,
        name: str = "issueannotator",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Args:
            name: stdlib logger name; existing handlers on it are replaced
            level: Console threshold (DEBUG, INFO, WARNING, ERROR)
            log_dir: Where the dated log file goes (default: logs/)
            enable_file: Write a file that always captures DEBUG and up
            enable_console: Echo to stderr so stdout stays command output
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "api_calls": 0,
            "lookups_attempted": 0,
            "lookups_resolved": 0,
            "lookups_not_found": 0,
            "lookups_failed": 0,
            "annotations_inserted": 0,
            "errors_by_type": {},
            "project_success_rate": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"issueannotator_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, /, **kwargs):
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, /, **kwargs):
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, /, **kwargs):
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, /, **kwargs):
        self._log(logging.ERROR, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    def record_api_call(self):
        """Count one HTTP request to the tracker."""
        self.metrics["api_calls"] += 1

    def record_lookup_attempt(self, project: str):
        """Count a lookup under its project key (the part before the hyphen)."""
        self.metrics["lookups_attempted"] += 1
        if project not in self.metrics["project_success_rate"]:
            self.metrics["project_success_rate"][project] = {
                "attempts": 0,
                "successes": 0
            }
        self.metrics["project_success_rate"][project]["attempts"] += 1

    def record_lookup_success(self, project: str, found: bool = True):
        """A lookup that got an answer; found=False for 404 or an empty summary."""
        if found:
            self.metrics["lookups_resolved"] += 1
        else:
            self.metrics["lookups_not_found"] += 1
        if project in self.metrics["project_success_rate"]:
            self.metrics["project_success_rate"][project]["successes"] += 1

    def record_lookup_failure(self, project: str, error_type: str):
        """Count a failed lookup; error_type is e.g. "HTTPError_503" or "RequestException"."""
        self.metrics["lookups_failed"] += 1
        errors = self.metrics["errors_by_type"]
        errors[error_type] = errors.get(error_type, 0) + 1

    def record_annotations(self, count: int):
        """Add to the inserted annotation counter."""
        self.metrics["annotations_inserted"] += count

    def get_metrics(self) -> dict:
        """Metrics with a success_rate filled in for every project seen."""
        metrics_copy = self.metrics.copy()
        for project, stats in metrics_copy["project_success_rate"].items():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(
                    stats["successes"] / stats["attempts"], 3
                )

        return metrics_copy

    def log_metrics_summary(self):
        """Log the end-of-pass summary at INFO."""
        metrics = self.get_metrics()

        total_attempts = metrics["lookups_attempted"]
        total_ok = metrics["lookups_resolved"] + metrics["lookups_not_found"]
        overall_rate = 0
        if total_attempts > 0:
            overall_rate = round(total_ok / total_attempts * 100, 1)

        self.info("=== Annotation Session Metrics ===")
        self.info(f"API Calls: {metrics['api_calls']}")
        self.info(f"Lookups: {total_ok}/{total_attempts} ({overall_rate}% success)")
        self.info(f"Not found: {metrics['lookups_not_found']}")
        self.info(f"Annotations inserted: {metrics['annotations_inserted']}")

        if metrics["project_success_rate"]:
            self.info("Project Success Rates:")
            for project, stats in metrics["project_success_rate"].items():
                rate = stats.get("success_rate", 0) * 100
                self.info(f"  {project}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "issueannotator",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Return the process-wide logger, creating it on first use.

    Arguments only take effect on that first call; later calls get the
    existing instance unchanged. Tests call reset_logger() to start over.
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Drop the process-wide logger so the next get_logger() builds a new one."""
    global _global_logger
    _global_logger = None
