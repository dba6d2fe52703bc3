"""Logging utilities for reference checking."""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime


def setup_logger(
    name: str = "labelref",
    log_file: Optional[str] = None,
    level: str = "INFO",
    format_str: Optional[str] = None,
    console: bool = True
) -> logging.Logger:
    """
    Set up a logger with file and console handlers.

    Args:
        name: Logger name
        log_file: Path to log file (optional)
        level: Logging level
        format_str: Log format string
        console: Whether to log to console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Clear existing handlers
    logger.handlers.clear()

    if format_str is None:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_str)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


class CheckerLogger:
    """Logger for reference checks with counters for the final summary."""

    def __init__(
        self,
        name: str = "labelref",
        log_dir: Optional[str] = None,
        level: str = "INFO",
        console: bool = True
    ):
        log_file = None
        if log_dir:
            self.log_dir = Path(log_dir)
            self.log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = str(self.log_dir / f"{name}_{timestamp}.log")
        else:
            self.log_dir = None

        self.logger = setup_logger(name, log_file, level=level, console=console)

        self.metrics = {
            "docs_checked": 0,
            "docs_failed": 0,
            "labels_indexed": 0,
            "markers_checked": 0,
            "broken_references": 0,
            "errors": []
        }

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str, exc: Optional[Exception] = None) -> None:
        self.logger.error(msg)
        self.metrics["errors"].append({
            "message": msg,
            "exception": str(exc) if exc else None,
            "timestamp": datetime.now().isoformat()
        })

    def debug(self, msg: str) -> None:
        self.logger.debug(msg)

    def update_metric(self, key: str, value: int = 1, increment: bool = True) -> None:
        """Update a metric value."""
        if key in self.metrics:
            if increment:
                self.metrics[key] += value
            else:
                self.metrics[key] = value

    def get_summary(self) -> dict:
        """Get metrics summary."""
        total = self.metrics["docs_checked"] + self.metrics["docs_failed"]
        return {
            **self.metrics,
            "success_rate": self.metrics["docs_checked"] / total if total > 0 else 0
        }

    def log_summary(self) -> None:
        """Log final metrics summary."""
        summary = self.get_summary()
        self.info("=" * 60)
        self.info("Reference Check Summary")
        self.info("=" * 60)
        self.info(f"Documents checked: {summary['docs_checked']}")
        self.info(f"Documents failed: {summary['docs_failed']}")
        self.info(f"Labels indexed: {summary['labels_indexed']}")
        self.info(f"Markers checked: {summary['markers_checked']}")
        self.info(f"Broken references: {summary['broken_references']}")
        self.info(f"Total errors: {len(summary['errors'])}")
        self.info("=" * 60)
