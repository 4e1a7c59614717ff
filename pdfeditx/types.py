"""
Type definitions and dataclasses for pdfeditx.

This module defines data structures shared by the engine and handed back to
callers.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from PIL import Image

from .utils import format_file_size, normalize_rotation


class ArtifactKind(str, Enum):
    """Kind of output produced by an operation."""

    MERGED = "merged document"
    SPLIT = "split document"
    REORDERED = "reordered document"
    COMPRESSED = "compressed document"
    CONVERTED = "converted document"
    IMAGE_ARCHIVE = "converted archive"
    UNLOCKED = "unlocked document"
    PROTECTED = "protected document"


class FileKind(str, Enum):
    PDF = "pdf"
    IMAGE = "image"


@dataclass(frozen=True)
class PageGeometry:
    """
    Geometry of a single page.

    Attributes:
        width: Page width in points
        height: Page height in points
        rotation: Clockwise display rotation, one of 0, 90, 180 or 270
    """
    width: float
    height: float
    rotation: int = 0

    @property
    def display_size(self) -> Tuple[float, float]:
        """Width and height as the page is shown, rotation applied."""
        if self.rotation in (90, 270):
            return self.height, self.width
        return self.width, self.height


@dataclass
class RasterImage:
    """
    A decoded bitmap ready to be embedded or exported.

    Attributes:
        image: Pillow image in ``RGB`` or ``L`` mode
        source: Label of the originating file or page
        page_number: 1-based page number when rendered from a document
        page_size: Size in points of the page the bitmap stands for
    """
    image: Image.Image
    source: str = ""
    page_number: Optional[int] = None
    page_size: Optional[Tuple[float, float]] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


@dataclass
class FileItem:
    """
    Caller-supplied input file.

    The engine only reads ``data``, ``kind`` and ``rotation``.
    """
    name: str
    data: bytes
    kind: FileKind = FileKind.PDF
    rotation: int = 0

    def __post_init__(self) -> None:
        self.kind = FileKind(self.kind)
        self.rotation = normalize_rotation(self.rotation, strict=True)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class OutputArtifact:
    """Metadata record describing a finished output."""

    name: str
    kind: ArtifactKind
    size_bytes: int
    mime_type: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=_utc_now)

    @property
    def size(self) -> str:
        return format_file_size(self.size_bytes)

    def __str__(self) -> str:
        return f"{self.name} ({self.kind.value}, {self.size})"


@dataclass
class OperationResult:
    """
    Result of a public pdfeditx operation.

    Attributes:
        data: Output bytes (PDF document or ZIP archive)
        artifact: Metadata describing ``data``
        page_count: Number of pages in the output, when it is a document
        protection_applied: False when a protection request was not honoured
        warnings: Non-fatal notices raised while producing the output
    """
    data: bytes
    artifact: OutputArtifact
    page_count: Optional[int] = None
    protection_applied: bool = True
    warnings: List[str] = field(default_factory=list)


@dataclass
class DocumentInfo:
    """Summary of an opened document."""

    num_pages: int
    file_size: int
    pages: List[PageGeometry] = field(default_factory=list)
    title: Optional[str] = None
    author: Optional[str] = None
    producer: Optional[str] = None
    was_encrypted: bool = False
