"""Utility modules for reference checking."""

from .config import Config
from .logging_utils import setup_logger, CheckerLogger
from .file_utils import ensure_dir, safe_json_dump, safe_json_load, read_text, get_document_files

__all__ = [
    "Config",
    "setup_logger",
    "CheckerLogger",
    "ensure_dir",
    "safe_json_dump",
    "safe_json_load",
    "read_text",
    "get_document_files",
]
