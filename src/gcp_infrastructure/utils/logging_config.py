"""Logging configuration for the GCP infrastructure Terraformer bridge.

Provides:
- File-based logging with rotation
- Console output
- Timing helpers for the two collaborator round trips (render, state read)

Environment Variables:
    GCP_INFRA_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    GCP_INFRA_LOG_FILE: Path to log file (default: ~/.gcp-infra/gcp-infra.log)
    GCP_INFRA_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    GCP_INFRA_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from gcp_infrastructure.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("render_chart")
    def render(...):
        ...
"""
import functools
import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("gcp_infrastructure.perf")


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("GCP_INFRA_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".gcp-infra" / "gcp-infra.log"
    path_str = os.environ.get("GCP_INFRA_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging() -> None:
    """Configure logging for the package.

    Sets up:
    - Console handler (respects GCP_INFRA_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)
    - Performance logger for timing metrics
    """
    log_level = get_log_level()
    log_file = get_log_file()
    max_size_mb = int(os.environ.get("GCP_INFRA_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("GCP_INFRA_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-35s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    # perf logger is a child, records reach these handlers via propagation
    root_logger = logging.getLogger("gcp_infrastructure")
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    root_logger.info(f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}")


def _perf_line(operation: str, scope: Optional[str], elapsed: float, outcome: str) -> str:
    return f"{operation:20s} | {scope or 'N/A':20s} | {elapsed:8.2f}ms | {outcome}"


def timed(operation: str, scope: Optional[str] = None):
    """Decorator to log execution time of a function.

    Args:
        operation: Name of the operation (e.g., "render_chart", "read_state")
        scope: Optional identifier, e.g. the infrastructure namespace

    Failures are logged and re-raised unchanged.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(_perf_line(operation, scope, elapsed, f"FAIL: {e}"))
                raise
            elapsed = (time.perf_counter() - start) * 1000
            perf_logger.info(_perf_line(operation, scope, elapsed, "OK"))
            return result

        return wrapper

    return decorator


@contextmanager
def timed_section_sync(operation: str, scope: Optional[str] = None, **extra):
    """Context manager for timing code sections.

    Usage:
        with timed_section_sync("read_state", scope="shoot--foo--bar", keys=5):
            ...
    """
    start = time.perf_counter()
    extra_str = " | ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""

    try:
        yield
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        msg = _perf_line(operation, scope, elapsed, f"FAIL: {e}")
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.warning(msg)
        raise
    elapsed = (time.perf_counter() - start) * 1000
    msg = _perf_line(operation, scope, elapsed, "OK")
    if extra_str:
        msg += f" | {extra_str}"
    perf_logger.info(msg)
