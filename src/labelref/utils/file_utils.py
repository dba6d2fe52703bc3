"""File operation utilities."""

import json
from pathlib import Path
from typing import Any, Iterable, List, Union


def ensure_dir(path: Union[str, Path]) -> Path:
    """Ensure directory exists, create if not."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def safe_json_dump(data: Any, filepath: Union[str, Path], indent: int = 2) -> bool:
    """
    Safely dump JSON to file with atomic write.

    Args:
        data: Data to serialize
        filepath: Target file path
        indent: JSON indentation

    Returns:
        True if successful
    """
    filepath = Path(filepath)
    temp_path = filepath.with_suffix('.tmp')

    try:
        ensure_dir(filepath.parent)
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=indent)
        temp_path.replace(filepath)
        return True
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def safe_json_load(filepath: Union[str, Path], default: Any = None) -> Any:
    """
    Safely load JSON from file.

    Args:
        filepath: Source file path
        default: Default value if file doesn't exist or is invalid

    Returns:
        Loaded data or default value
    """
    filepath = Path(filepath)

    if not filepath.exists():
        return default

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, IOError):
        return default


def read_text(filepath: Union[str, Path]) -> str:
    """Read a document as UTF-8, replacing undecodable bytes."""
    return Path(filepath).read_text(encoding='utf-8', errors='replace')


def get_document_files(
    directory: Union[str, Path],
    patterns: Iterable[str] = ("*.org",),
    recursive: bool = True
) -> List[Path]:
    """Get all document files in directory matching any of the patterns."""
    directory = Path(directory)
    found = set()
    for pattern in patterns:
        glob_pattern = f"**/{pattern}" if recursive else pattern
        found.update(p for p in directory.glob(glob_pattern) if p.is_file())
    return sorted(found)
