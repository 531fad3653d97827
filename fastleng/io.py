"""
fastleng I/O Utilities - Output validation and JSON serialization

Usage:
    from fastleng.io import check_writable, save_json, atomic_write

    # Fail before any input is read
    check_writable("report.json")

    # Later, write atomically
    save_json("report.json", stats)
"""

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Generator, Optional, Union

from .errors import OutputUnwritableError


# =============================================================================
# Output Validation
# =============================================================================

def check_writable(path: Union[str, Path]) -> Path:
    """
    Check that a file can be created at path without creating it.

    Args:
        path: Destination file path

    Returns:
        The path as a Path object

    Raises:
        OutputUnwritableError: if the parent directory is missing or not
            writable, or the path exists and is not a writable file
    """
    path = Path(path)
    parent = path.parent

    if path.exists():
        if path.is_dir():
            raise OutputUnwritableError(f"Output path is a directory: {path}", path=str(path))
        if not os.access(path, os.W_OK):
            raise OutputUnwritableError(f"Output file is not writable: {path}", path=str(path))
        return path

    if not parent.is_dir():
        raise OutputUnwritableError(
            f"Output directory does not exist: {parent}",
            path=str(path),
            suggestions=[f"mkdir -p {parent}"]
        )
    if not os.access(parent, os.W_OK | os.X_OK):
        raise OutputUnwritableError(
            f"Output directory is not writable: {parent}",
            path=str(path)
        )
    return path


# =============================================================================
# Safe File Operations
# =============================================================================

@contextmanager
def atomic_write(
    path: Union[str, Path],
    mode: str = "w",
    encoding: Optional[str] = "utf-8",
    suffix: str = ".tmp"
) -> Generator:
    """
    Context manager for atomic file writes.

    Writes to a temporary file in the destination directory and renames on
    success. The original file is preserved if an error occurs.

    Usage:
        with atomic_write("report.json") as f:
            json.dump(data, f)
    """
    path = Path(path)
    directory = path.parent

    try:
        fd, tmp_path = tempfile.mkstemp(
            suffix=suffix,
            dir=directory,
            prefix=f".{path.name}."
        )
    except OSError as e:
        raise OutputUnwritableError(
            f"Could not create output file {path}: {e}",
            path=str(path),
            cause=e
        ) from e

    try:
        if "b" in mode:
            with os.fdopen(fd, mode) as f:
                yield f
        else:
            with os.fdopen(fd, mode, encoding=encoding) as f:
                yield f

        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# =============================================================================
# JSON Operations
# =============================================================================

def to_json(data: Any, indent: Optional[int] = 2, default: Optional[Callable] = None) -> str:
    """Serialize data, converting objects that provide to_dict()."""
    def json_default(obj):
        if default:
            try:
                return default(obj)
            except TypeError:
                pass
        if isinstance(obj, Path):
            return str(obj)
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

    return json.dumps(data, indent=indent, default=json_default)


def save_json(
    path: Union[str, Path],
    data: Any,
    indent: Optional[int] = 2,
    encoding: str = "utf-8",
    default: Optional[Callable] = None
) -> None:
    """
    Save data to a JSON file atomically.

    Args:
        path: File path
        data: Data to save
        indent: JSON indentation
        encoding: File encoding
        default: JSON serializer for custom types
    """
    content = to_json(data, indent=indent, default=default)
    with atomic_write(path, mode="w", encoding=encoding) as f:
        f.write(content)
        f.write("\n")


def load_json(path: Union[str, Path], encoding: str = "utf-8") -> Any:
    """Load a JSON file."""
    with open(path, "r", encoding=encoding) as f:
        return json.load(f)
