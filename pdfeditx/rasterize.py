"""Page rasterization on top of PyMuPDF.

A :class:`RenderContext` is the drawing surface for one document: it owns
the PyMuPDF handle and the pixmap of the page rendered last. It is acquired
once per operation, used as a context manager and released on every exit
path. Pages go through it one at a time and in ascending order; each new
render replaces the previous pixmap, so callers receive a detached Pillow
copy in :class:`~pdfeditx.types.RasterImage`.
"""

from __future__ import annotations

import dataclasses
import io
import logging
import threading
from typing import Callable, Iterator, Optional

import pymupdf
from PIL import Image

from .config import EngineSettings, get_settings
from .document import PDFDocument
from .exceptions import (
    CredentialRequiredError,
    InvalidOptionError,
    RenderOrderError,
    SurfaceAcquisitionError,
)
from .types import RasterImage

LOGGER = logging.getLogger("pdfeditx.rasterize")

ProgressCallback = Callable[[int, int], None]


@dataclasses.dataclass(frozen=True)
class CompressionTier:
    """Resolution and JPEG settings picked from a continuous quality value."""

    name: str
    scale: float
    jpeg_quality: int


def _check_quality(quality: float) -> float:
    try:
        value = float(quality)
    except (TypeError, ValueError) as exc:
        raise InvalidOptionError(f"Quality must be a number, got {quality!r}") from exc
    if not 0.0 <= value <= 1.0:
        raise InvalidOptionError(f"Quality must be between 0 and 1, got {value}")
    return value


def scale_for_quality(quality: float) -> float:
    """Map ``quality`` in ``[0, 1]`` to a render scale."""

    value = _check_quality(quality)
    if value > 0.6:
        return 1.5
    if value > 0.3:
        return 1.0
    return 0.7


def compression_tier(
    quality: float, settings: Optional[EngineSettings] = None
) -> CompressionTier:
    settings = settings or get_settings()
    value = _check_quality(quality)
    scale = scale_for_quality(value)
    name = {1.5: "high", 1.0: "medium", 0.7: "low"}[scale]
    jpeg_quality = min(
        max(int(round(value * 100)), settings.min_jpeg_quality),
        settings.max_jpeg_quality,
    )
    return CompressionTier(name=name, scale=scale, jpeg_quality=jpeg_quality)


class RenderContext:
    """Scoped drawing surface for rendering the pages of one document."""

    def __init__(self, document: PDFDocument) -> None:
        self.document = document
        self._handle: Optional[pymupdf.Document] = None
        self._surface: Optional[pymupdf.Pixmap] = None
        self._last_index = -1
        self._lock = threading.Lock()
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> "RenderContext":
        if self._closed:
            raise SurfaceAcquisitionError("Render context has already been released")
        if self._handle is not None:
            return self

        try:
            handle = pymupdf.open(stream=self.document.raw_bytes, filetype="pdf")
        except Exception as exc:
            raise SurfaceAcquisitionError(
                f"Unable to open {self.document.name} for rendering: {exc}"
            ) from exc

        if handle.needs_pass and not handle.authenticate(self.document.password or ""):
            handle.close()
            raise CredentialRequiredError(
                f"Unable to authenticate {self.document.name} for rendering."
            )

        self._handle = handle
        LOGGER.debug("Acquired render surface for %s", self.document.name)
        return self

    def close(self) -> None:
        self._surface = None
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            LOGGER.debug("Released render surface for %s", self.document.name)
        self._closed = True

    def __enter__(self) -> "RenderContext":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(self, page_index: int, scale: float) -> RasterImage:
        """Render page ``page_index`` at ``scale`` times its size in points."""

        if scale <= 0:
            raise InvalidOptionError(f"Render scale must be positive, got {scale}")
        if not self._lock.acquire(blocking=False):
            raise SurfaceAcquisitionError(
                f"A render is already in progress on the surface for {self.document.name}"
            )
        try:
            return self._render_locked(page_index, scale)
        finally:
            self._lock.release()

    def _render_locked(self, page_index: int, scale: float) -> RasterImage:
        if self._handle is None:
            raise SurfaceAcquisitionError("Render context is not open")
        if not 0 <= page_index < self._handle.page_count:
            raise IndexError(
                f"Page index {page_index} is out of bounds for a "
                f"{self._handle.page_count}-page document"
            )
        if page_index <= self._last_index:
            raise RenderOrderError(
                f"Page {page_index + 1} requested after page {self._last_index + 1}"
            )

        try:
            page = self._handle.load_page(page_index)
            self._surface = page.get_pixmap(matrix=pymupdf.Matrix(scale, scale), alpha=False)
        except Exception as exc:
            self._surface = None
            raise SurfaceAcquisitionError(
                f"Unable to render page {page_index + 1} of {self.document.name}: {exc}"
            ) from exc

        self._last_index = page_index
        pixmap = self._surface
        mode = "L" if pixmap.n == 1 else "RGB"
        if pixmap.n not in (1, 3):
            image = Image.open(io.BytesIO(pixmap.tobytes("png"))).convert("RGB")
        else:
            image = Image.frombytes(mode, (pixmap.width, pixmap.height), pixmap.samples)

        LOGGER.debug(
            "Rendered page %d of %s at %.2fx (%dx%d)",
            page_index + 1,
            self.document.name,
            scale,
            pixmap.width,
            pixmap.height,
        )
        return RasterImage(
            image=image,
            source=f"{self.document.name} page {page_index + 1}",
            page_number=page_index + 1,
            page_size=(float(page.rect.width), float(page.rect.height)),
        )


def render_pages(
    document: PDFDocument,
    scale: float,
    progress_callback: Optional[ProgressCallback] = None,
) -> Iterator[RasterImage]:
    """Yield one raster per page, in ascending order, from a single surface."""

    total = document.page_count
    with RenderContext(document) as context:
        for index in range(total):
            yield context.render(index, scale)
            if progress_callback:
                progress_callback(index + 1, total)


def encode_jpeg(raster: RasterImage, quality: int) -> bytes:
    """Encode ``raster`` as a baseline JPEG."""

    image = raster.image
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    output = io.BytesIO()
    image.save(output, format="JPEG", quality=int(quality))
    return output.getvalue()


__all__ = [
    "CompressionTier",
    "RenderContext",
    "compression_tier",
    "encode_jpeg",
    "render_pages",
    "scale_for_quality",
]
