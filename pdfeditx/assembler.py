"""Build PDF documents out of raster images.

Each image becomes one page. The bitmap is JPEG encoded with Pillow and
embedded as a ``/DCTDecode`` image XObject that lives in the page's own
resource dictionary; the page content stream just scales the image onto the
page rectangle.
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from PIL import Image, UnidentifiedImageError
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    NumberObject,
    StreamObject,
)

from .config import EngineSettings, get_settings
from .exceptions import InvalidOptionError, UnsupportedImageError
from .rasterize import encode_jpeg
from .types import RasterImage
from .utils import normalize_rotation

LOGGER = logging.getLogger("pdfeditx.assembler")

ORIENTATIONS = ("portrait", "landscape")
PAGE_FORMATS = ("a4", "fit")

DEFAULT_JPEG_QUALITY = 92
IMAGE_NAME = "/Im0"

PageLayout = Tuple[RasterImage, float, float]


def load_image(data: bytes, *, rotation: int = 0, name: str = "") -> RasterImage:
    """Decode image bytes into an ``RGB`` or ``L`` raster.

    Transparency is flattened onto white and ``rotation`` is applied
    clockwise.
    """

    try:
        with Image.open(io.BytesIO(data)) as source:
            source.load()
            image = _flatten(source)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise UnsupportedImageError(f"Unable to decode image {name or '<bytes>'}: {exc}") from exc

    angle = normalize_rotation(rotation, strict=True)
    if angle:
        # Pillow rotates counter-clockwise.
        image = image.rotate(-angle, expand=True)
    return RasterImage(image=image, source=name)


def _flatten(image: Image.Image) -> Image.Image:
    if image.mode in ("RGB", "L"):
        return image.copy()
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode == "1":
        return image.convert("L")
    if image.mode.startswith("I"):
        # 16-bit samples: scale down before narrowing, convert("L") alone clips.
        return image.convert("I").point(lambda value: value / 256).convert("L")
    return image.convert("RGB")


def _image_xobject(raster: RasterImage, jpeg_quality: int) -> StreamObject:
    payload = encode_jpeg(raster, jpeg_quality)
    stream = StreamObject()
    stream.update(
        {
            NameObject("/Type"): NameObject("/XObject"),
            NameObject("/Subtype"): NameObject("/Image"),
            NameObject("/Width"): NumberObject(raster.width),
            NameObject("/Height"): NumberObject(raster.height),
            NameObject("/ColorSpace"): NameObject(
                "/DeviceGray" if raster.image.mode == "L" else "/DeviceRGB"
            ),
            NameObject("/BitsPerComponent"): NumberObject(8),
            NameObject("/Filter"): NameObject("/DCTDecode"),
        }
    )
    stream._data = payload
    return stream


def _placement(
    raster: RasterImage, width: float, height: float, preserve_aspect: bool
) -> Tuple[float, float, float, float]:
    if not preserve_aspect:
        return 0.0, 0.0, width, height
    factor = min(width / raster.width, height / raster.height)
    drawn_w = raster.width * factor
    drawn_h = raster.height * factor
    return (width - drawn_w) / 2, (height - drawn_h) / 2, drawn_w, drawn_h


def build_document(
    pages: Iterable[PageLayout],
    *,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    preserve_aspect: bool = False,
) -> PdfWriter:
    """Create a document with one page per ``(raster, width, height)`` entry."""

    writer = PdfWriter()
    count = 0
    for raster, width, height in pages:
        if width <= 0 or height <= 0:
            raise InvalidOptionError(f"Page size must be positive, got {width}x{height}")

        page = writer.add_blank_page(width=width, height=height)
        image_ref = writer._add_object(_image_xobject(raster, jpeg_quality))

        x, y, w, h = _placement(raster, width, height, preserve_aspect)
        content = DecodedStreamObject()
        content.set_data(
            f"q {w:.4f} 0 0 {h:.4f} {x:.4f} {y:.4f} cm {IMAGE_NAME} Do Q".encode("ascii")
        )

        page[NameObject("/Resources")] = DictionaryObject(
            {
                NameObject("/XObject"): DictionaryObject({NameObject(IMAGE_NAME): image_ref}),
                NameObject("/ProcSet"): ArrayObject(
                    [NameObject("/PDF"), NameObject("/ImageC"), NameObject("/ImageB")]
                ),
            }
        )
        page[NameObject("/Contents")] = writer._add_object(content)
        count += 1
        LOGGER.debug(
            "Placed %s (%dx%d px) on a %.1fx%.1f pt page",
            raster.source or "image",
            raster.width,
            raster.height,
            width,
            height,
        )

    if count == 0:
        raise InvalidOptionError("At least one image is required to build a document")
    return writer


def page_size_for(
    raster: RasterImage,
    orientation: str,
    page_format: str,
    settings: Optional[EngineSettings] = None,
) -> Tuple[float, float]:
    """Return the page size in points ``raster`` will be placed on."""

    if orientation not in ORIENTATIONS:
        raise InvalidOptionError(
            f"Unknown orientation {orientation!r}; expected one of {', '.join(ORIENTATIONS)}"
        )
    if page_format not in PAGE_FORMATS:
        raise InvalidOptionError(
            f"Unknown page format {page_format!r}; expected one of {', '.join(PAGE_FORMATS)}"
        )

    if page_format == "fit":
        return float(raster.width), float(raster.height)

    settings = settings or get_settings()
    short, long = sorted(settings.fixed_page_size)
    if orientation == "landscape":
        return long, short
    return short, long


def assemble(
    images: Sequence[RasterImage],
    orientation: str = "portrait",
    page_format: str = "a4",
    *,
    preserve_aspect: bool = False,
    settings: Optional[EngineSettings] = None,
) -> PdfWriter:
    """Lay ``images`` out one per page.

    Under ``a4`` every page has the fixed page size in the requested
    orientation and the image is stretched to fill it unless
    ``preserve_aspect`` is set. Under ``fit`` each page takes the image's
    pixel dimensions.
    """

    if not images:
        raise InvalidOptionError("No images provided")

    layout: List[PageLayout] = []
    for raster in images:
        width, height = page_size_for(raster, orientation, page_format, settings)
        layout.append((raster, width, height))
    return build_document(layout, preserve_aspect=preserve_aspect)


__all__ = [
    "ORIENTATIONS",
    "PAGE_FORMATS",
    "assemble",
    "build_document",
    "load_image",
    "page_size_for",
]
