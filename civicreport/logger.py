"""
Structured logging system for civicreport.

Provides centralized logging with console and file outputs, keyword
context on every message, and metrics tracking for monitoring how the
duplicate detector behaves in production.
"""

import copy
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks duplicate-detection metrics.
    """

    def __init__(
        self,
        name: str = "civicreport",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()  # Remove existing handlers

        self.metrics = {
            "checks_run": 0,
            "candidates_scored": 0,
            "matches_returned": 0,
            "duplicates_flagged": 0,
            "fetch_failures": 0,
            "errors_by_type": {},
            "category_stats": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
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

            log_file = log_dir / f"civicreport_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        """Internal logging method with context."""
        if context:
            # Enums and datetimes in context fall back to str()
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_check(self, category: str):
        """Record a duplicate check for a category."""
        self.metrics["checks_run"] += 1
        if category not in self.metrics["category_stats"]:
            self.metrics["category_stats"][category] = {
                "checks": 0,
                "duplicates": 0
            }
        self.metrics["category_stats"][category]["checks"] += 1

    def record_candidates_scored(self, count: int):
        """Add to the number of candidates scored."""
        self.metrics["candidates_scored"] += count

    def record_matches(self, count: int):
        """Add to the number of matches returned to callers."""
        self.metrics["matches_returned"] += count

    def record_duplicate(self, category: str):
        """Record a report flagged as a likely duplicate."""
        self.metrics["duplicates_flagged"] += 1
        if category in self.metrics["category_stats"]:
            self.metrics["category_stats"][category]["duplicates"] += 1

    def record_fetch_failure(self, error_type: str):
        """Record a candidate fetch that failed open."""
        self.metrics["fetch_failures"] += 1

        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = copy.deepcopy(self.metrics)
        for category, stats in metrics_copy["category_stats"].items():
            if stats["checks"] > 0:
                stats["duplicate_rate"] = round(
                    stats["duplicates"] / stats["checks"], 3
                )

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        total_checks = metrics["checks_run"]
        total_duplicates = metrics["duplicates_flagged"]
        overall_rate = 0
        if total_checks > 0:
            overall_rate = round(total_duplicates / total_checks * 100, 1)

        self.info("=== Duplicate Detection Metrics ===")
        self.info(f"Checks: {total_checks} ({metrics['candidates_scored']} candidates scored)")
        self.info(f"Duplicates flagged: {total_duplicates}/{total_checks} ({overall_rate}%)")
        self.info(f"Fetch failures: {metrics['fetch_failures']}")

        if metrics["category_stats"]:
            self.info("Category Duplicate Rates:")
            for category, stats in metrics["category_stats"].items():
                rate = stats.get("duplicate_rate", 0) * 100
                self.info(f"  {category}: {stats['duplicates']}/{stats['checks']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "civicreport",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
