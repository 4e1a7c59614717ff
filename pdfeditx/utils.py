"""Utilities shared by pdfeditx modules."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from .exceptions import InvalidOptionError

BytesSource = Union[bytes, bytearray, memoryview, str, Path]


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500.0 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"


def normalize_rotation(value: object, *, strict: bool = False) -> int:
    """Return ``value`` as one of 0, 90, 180 or 270.

    With ``strict`` only multiples of 90 are accepted; otherwise the value is
    snapped to the nearest right angle, as stored rotations in the wild are
    not always clean.
    """

    try:
        degrees = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as exc:
        raise InvalidOptionError(f"Rotation must be an integer, got {value!r}") from exc

    if degrees % 90:
        if strict:
            raise InvalidOptionError(
                f"Rotation must be a multiple of 90 degrees, got {degrees}"
            )
        degrees = int(round(degrees / 90.0)) * 90
    return degrees % 360


def read_bytes(source: BytesSource) -> bytes:
    """Return the raw bytes for an in-memory buffer or a file path."""

    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    return Path(source).expanduser().read_bytes()


__all__ = ["get_logger", "format_file_size", "normalize_rotation", "read_bytes"]
