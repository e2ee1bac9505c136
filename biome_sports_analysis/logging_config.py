"""
Centralized logging configuration for Biome Sports Analysis.

Provides both development and production (Cloud Logging) formatters, plus
the per-analysis trace that records stage timings and skipped metrics.
"""
import json
import logging
import sys
import os
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

# Extra fields copied into JSON log lines when present on the record
TRACE_FIELDS = ("session_id", "sport", "action", "stage", "duration_ms")


def setup_logger(
    name: str,
    level: Optional[str] = None,
) -> logging.Logger:
    """
    Configure and return a logger instance for development.

    Args:
        name: Logger name (usually __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
               Defaults to INFO or value from LOG_LEVEL env var

    Returns:
        Configured logger instance
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    return logger


class JsonFormatter(logging.Formatter):
    """Format logs as JSON for Cloud Logging."""

    def format(self, record):
        log_obj = {
            'timestamp': self.formatTime(record, '%Y-%m-%dT%H:%M:%S'),
            'severity': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        for field in TRACE_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)

        return json.dumps(log_obj)


def setup_cloud_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Setup JSON structured logging for Cloud Logging compatibility.

    Args:
        name: Logger name
        level: Log level (defaults to LOG_LEVEL env var or INFO)

    Returns:
        Configured logger instance with JSON formatting
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get appropriate logger based on environment.

    Uses Cloud Logging format if CLOUD_RUN env var is set,
    otherwise uses development format.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    is_cloud = os.getenv("CLOUD_RUN", "false").lower() == "true"

    if is_cloud:
        return setup_cloud_logger(name)
    else:
        return setup_logger(name)


class AnalysisTrace:
    """
    Observability hook for a single analysis run.

    Records how long each pipeline stage took and why individual metrics
    were skipped. Nothing in the pipeline reads the trace back, so results
    are identical with or without it.
    """

    def __init__(
        self,
        logger: logging.Logger,
        session_id: Optional[str] = None,
        sport: Optional[str] = None,
        action: Optional[str] = None,
    ):
        self.logger = logger
        self.context: Dict[str, Any] = {
            "session_id": session_id,
            "sport": sport,
            "action": action,
        }
        self.timings_ms: Dict[str, float] = {}
        self.skipped_metrics: Dict[str, str] = {}
        self.warnings: List[str] = []

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """Time a pipeline stage."""
        started = time.perf_counter()
        try:
            yield
        finally:
            elapsed = round((time.perf_counter() - started) * 1000, 3)
            self.timings_ms[name] = elapsed
            self.logger.debug(
                f"Stage {name} finished in {elapsed:.3f}ms",
                extra={**self.context, "stage": name, "duration_ms": elapsed},
            )

    def skip_metric(self, metric: str, reason: str) -> None:
        self.skipped_metrics[metric] = reason
        self.logger.debug(
            f"Metric {metric} skipped: {reason}",
            extra={**self.context, "stage": "metrics"},
        )

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        self.logger.warning(message, extra=dict(self.context))

    def finish(self) -> None:
        total = round(sum(self.timings_ms.values()), 3)
        self.logger.info(
            f"Analysis complete - sport: {self.context['sport']}, "
            f"action: {self.context['action']}, stages: {len(self.timings_ms)}, "
            f"skipped metrics: {len(self.skipped_metrics)}, total: {total:.3f}ms",
            extra={**self.context, "duration_ms": total},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timings_ms": dict(self.timings_ms),
            "skipped_metrics": dict(self.skipped_metrics),
            "warnings": list(self.warnings),
        }
