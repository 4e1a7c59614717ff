from __future__ import annotations

import io

import pytest
from PIL import Image
from pypdf import PdfReader

from pdfeditx.assembler import assemble, build_document, load_image, page_size_for
from pdfeditx.config import A4_PORTRAIT, EngineSettings
from pdfeditx.exceptions import (
    DocumentCorruptError,
    InvalidOptionError,
    UnsupportedImageError,
)
from pdfeditx.serializer import serialize


def _reader(writer) -> PdfReader:
    return PdfReader(io.BytesIO(serialize(writer)))


def _page_size(page) -> tuple[float, float]:
    return float(page.mediabox.width), float(page.mediabox.height)


def test_load_image_decodes_rgb(image_factory) -> None:
    raster = load_image(image_factory((40, 20)), name="red.png")

    assert (raster.width, raster.height) == (40, 20)
    assert raster.image.mode == "RGB"
    assert raster.source == "red.png"


def test_load_image_flattens_transparency_onto_white(image_factory) -> None:
    data = image_factory((8, 8), mode="RGBA", color=(0, 0, 0, 0))

    raster = load_image(data)

    assert raster.image.mode == "RGB"
    assert raster.image.getpixel((4, 4)) == (255, 255, 255)


def test_load_image_keeps_grayscale(image_factory) -> None:
    raster = load_image(image_factory((8, 8), mode="L", color=128))
    assert raster.image.mode == "L"


@pytest.mark.parametrize(("sample", "expected"), [(0, 0), (32768, 128), (65535, 255)])
def test_load_image_scales_16_bit_grayscale(sample: int, expected: int) -> None:
    buffer = io.BytesIO()
    Image.new("I;16", (4, 4), sample).save(buffer, format="PNG")

    raster = load_image(buffer.getvalue())

    assert raster.image.mode == "L"
    assert abs(raster.image.getpixel((2, 2)) - expected) <= 1


def test_load_image_keeps_bilevel_images(image_factory) -> None:
    raster = load_image(image_factory((8, 8), mode="1", color=1))

    assert raster.image.mode == "L"
    assert raster.image.getpixel((0, 0)) == 255


def test_load_image_applies_clockwise_rotation() -> None:
    image = Image.new("RGB", (40, 20), (255, 255, 255))
    image.putpixel((0, 0), (255, 0, 0))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")

    raster = load_image(buffer.getvalue(), rotation=90)

    assert (raster.width, raster.height) == (20, 40)
    # Top-left corner moves to the top-right after a clockwise quarter turn.
    assert raster.image.getpixel((19, 0)) == (255, 0, 0)


def test_load_image_rejects_garbage() -> None:
    with pytest.raises(UnsupportedImageError) as excinfo:
        load_image(b"definitely not an image", name="bad.png")

    assert isinstance(excinfo.value, DocumentCorruptError)
    assert "bad.png" in str(excinfo.value)


def test_load_image_rejects_odd_rotation(image_factory) -> None:
    with pytest.raises(InvalidOptionError):
        load_image(image_factory((4, 4)), rotation=30)


def test_page_size_for_formats(image_factory) -> None:
    raster = load_image(image_factory((640, 480)))

    assert page_size_for(raster, "portrait", "fit") == (640.0, 480.0)
    assert page_size_for(raster, "landscape", "fit") == (640.0, 480.0)
    assert page_size_for(raster, "portrait", "a4") == A4_PORTRAIT
    assert page_size_for(raster, "landscape", "a4") == (A4_PORTRAIT[1], A4_PORTRAIT[0])

    letter = EngineSettings(fixed_page_size=(612.0, 792.0))
    assert page_size_for(raster, "landscape", "a4", letter) == (792.0, 612.0)


@pytest.mark.parametrize(("orientation", "page_format"), [("sideways", "a4"), ("portrait", "letter")])
def test_page_size_for_rejects_unknown_options(image_factory, orientation, page_format) -> None:
    raster = load_image(image_factory((10, 10)))
    with pytest.raises(InvalidOptionError):
        page_size_for(raster, orientation, page_format)


def test_assemble_fit_uses_pixel_dimensions(image_factory) -> None:
    sizes = [(640, 480), (100, 300), (33, 33)]
    rasters = [load_image(image_factory(size)) for size in sizes]

    reader = _reader(assemble(rasters, page_format="fit"))

    assert [_page_size(page) for page in reader.pages] == sizes


def test_assemble_a4_landscape(image_factory) -> None:
    rasters = [load_image(image_factory((50, 50))) for _ in range(3)]

    reader = _reader(assemble(rasters, "landscape", "a4"))

    assert len(reader.pages) == 3
    for page in reader.pages:
        width, height = _page_size(page)
        assert width == pytest.approx(841.89)
        assert height == pytest.approx(595.28)


def test_assembled_page_embeds_jpeg(image_factory) -> None:
    reader = _reader(assemble([load_image(image_factory((64, 32)))], page_format="fit"))

    page = reader.pages[0]
    image = page["/Resources"]["/XObject"]["/Im0"]
    assert image["/Filter"] == "/DCTDecode"
    assert (image["/Width"], image["/Height"]) == (64, 32)
    assert image["/ColorSpace"] == "/DeviceRGB"
    assert b"/Im0 Do" in page.get_contents().get_data()


def test_preserve_aspect_letterboxes(image_factory) -> None:
    raster = load_image(image_factory((200, 100)))

    reader = _reader(assemble([raster], preserve_aspect=True))

    content = reader.pages[0].get_contents().get_data().decode("ascii").split()
    w, _, _, h, x, y = (float(value) for value in content[1:7])
    assert w == pytest.approx(595.28, abs=0.01)
    assert h == pytest.approx(297.64, abs=0.01)
    assert x == pytest.approx(0.0, abs=0.01)
    assert y == pytest.approx((841.89 - 297.64) / 2, abs=0.01)


def test_stretch_fills_page(image_factory) -> None:
    reader = _reader(assemble([load_image(image_factory((200, 100)))]))

    content = reader.pages[0].get_contents().get_data().decode("ascii").split()
    assert float(content[1]) == pytest.approx(595.28)
    assert float(content[4]) == pytest.approx(841.89)


def test_assemble_requires_images() -> None:
    with pytest.raises(InvalidOptionError):
        assemble([])
    with pytest.raises(InvalidOptionError):
        build_document([])


def test_build_document_rejects_empty_page(image_factory) -> None:
    raster = load_image(image_factory((10, 10)))
    with pytest.raises(InvalidOptionError):
        build_document([(raster, 0, 100)])
