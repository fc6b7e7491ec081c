"""
Logging Utilities

Console and run-log handlers for the pipeline, plus a small structured logger
that prints stage boundaries, dataset shapes and stage summaries in one
consistent format.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional


_loggers: Dict[str, logging.Logger] = {}

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries whose INFO/DEBUG output drowns the stage messages
QUIET_LOGGERS = ("plotly", "urllib3", "sklearn")


def _level(name: str) -> int:
    return getattr(logging, str(name).upper())


def _console_handler(settings: Dict[str, Any], default_level: str,
                     formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_level(settings.get('level', default_level)))
    handler.setFormatter(formatter)
    return handler


def _run_log_handler(path: str, settings: Dict[str, Any],
                     formatter: logging.Formatter) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path,
        maxBytes=settings.get('max_bytes', 10 * 1024 * 1024),
        backupCount=settings.get('backup_count', 5),
        encoding='utf-8',
    )
    # The run log keeps everything; the console follows log_level
    handler.setLevel(_level(settings.get('level', 'DEBUG')))
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    config: Optional[Dict[str, Any]] = None,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    log_format: Optional[str] = None
) -> None:
    """
    Configure the root logger for a pipeline run.

    Replaces any handlers installed by a previous call, so calling it once
    per run is safe.

    Args:
        config: Optional dict with 'level', 'format' and 'handlers'
            ({'console': {...}, 'file': {...}}) keys
        log_level: Console level when config does not set one
        log_file: Run log path; enables the file handler
        log_format: Message format (DEFAULT_FORMAT when None)
    """
    config = config or {}
    log_level = config.get('level', log_level)
    formatter = logging.Formatter(
        config.get('format', log_format or DEFAULT_FORMAT), datefmt=DATE_FORMAT
    )
    handlers = config.get('handlers', {})

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(_level(log_level))

    console_settings = handlers.get('console', {'enabled': True})
    if console_settings.get('enabled', True):
        root_logger.addHandler(_console_handler(console_settings, log_level, formatter))

    file_settings = handlers.get('file', {})
    if log_file or file_settings.get('enabled', False):
        path = log_file or file_settings.get('path', 'logs/pipeline.log')
        file_handler = _run_log_handler(path, file_settings, formatter)
        root_logger.addHandler(file_handler)
        root_logger.setLevel(min(root_logger.level, file_handler.level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the (cached) logger called ``name``."""
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)
    return _loggers[name]


class PipelineLogger:
    """
    Structured logger for pipeline execution.

    Every message can carry a context prefix (for example the run id), and
    helper methods format stage boundaries, dataset shapes and stage results
    the same way across the pipeline.
    """

    def __init__(self, name: str):
        self.logger = get_logger(name)
        self._context: Dict[str, Any] = {}

    def set_context(self, **kwargs) -> None:
        """Add key=value pairs to the message prefix (e.g. run, stage)."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        self._context = {}

    def _format_message(self, message: str) -> str:
        if not self._context:
            return message
        prefix = " ".join(f"{k}={v}" for k, v in self._context.items())
        return f"[{prefix}] {message}"

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(self._format_message(message), **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(self._format_message(message), **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(self._format_message(message), **kwargs)

    def step_start(self, step_name: str) -> None:
        """Log the start of a pipeline stage."""
        self.info(f"{'='*20} Starting: {step_name} {'='*20}")

    def step_complete(self, step_name: str, duration: Optional[float] = None) -> None:
        """Log the end of a pipeline stage, with its duration when known."""
        timing = f" ({duration:.2f}s)" if duration is not None else ""
        self.info(f"{'='*20} Completed: {step_name}{timing} {'='*20}")

    def data_stats(self, name: str, count: int, columns: Optional[int] = None) -> None:
        """Log the shape of a dataset at a named point of the run."""
        shape = f"{count:,} rows" if columns is None else f"{count:,} rows, {columns} columns"
        self.info(f"DATA | {name}: {shape}")

    def stage_result(self, result: Any) -> None:
        """Log a StageResult: its summary, then column changes at DEBUG."""
        self.info(f"STEP | {result.summary()}")
        if result.added_columns:
            self.debug(f"STEP | {result.step_name} added {result.added_columns}")
        if result.removed_columns:
            self.debug(f"STEP | {result.step_name} removed {result.removed_columns}")
