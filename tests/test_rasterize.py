from __future__ import annotations

import pytest

from pdfeditx.config import EngineSettings
from pdfeditx.document import open_document
from pdfeditx.exceptions import (
    InvalidOptionError,
    RenderOrderError,
    SurfaceAcquisitionError,
)
from pdfeditx.rasterize import (
    RenderContext,
    compression_tier,
    encode_jpeg,
    render_pages,
    scale_for_quality,
)


@pytest.mark.parametrize(
    ("quality", "scale"),
    [(1.0, 1.5), (0.61, 1.5), (0.6, 1.0), (0.5, 1.0), (0.31, 1.0), (0.3, 0.7), (0.0, 0.7)],
)
def test_scale_for_quality(quality: float, scale: float) -> None:
    assert scale_for_quality(quality) == scale


@pytest.mark.parametrize("quality", [-0.1, 1.01, "high", None])
def test_scale_for_quality_rejects_bad_values(quality) -> None:
    with pytest.raises(InvalidOptionError):
        scale_for_quality(quality)


def test_compression_tier_clamps_jpeg_quality() -> None:
    assert compression_tier(0.05).jpeg_quality == 20
    assert compression_tier(0.5).jpeg_quality == 50
    assert compression_tier(0.99).jpeg_quality == 95

    tier = compression_tier(0.2)
    assert (tier.name, tier.scale) == ("low", 0.7)
    assert compression_tier(0.7).name == "high"

    custom = EngineSettings(min_jpeg_quality=40, max_jpeg_quality=60)
    assert compression_tier(0.1, custom).jpeg_quality == 40
    assert compression_tier(0.8, custom).jpeg_quality == 60


def test_render_context_renders_at_scale(pdf_factory) -> None:
    document = open_document(pdf_factory([100, 300], height=200))

    with RenderContext(document) as context:
        first = context.render(0, 1.0)
        second = context.render(1, 1.5)

    assert first.page_number == 1
    assert first.page_size == (100, 200)
    assert abs(first.width - 100) <= 1 and abs(first.height - 200) <= 1
    assert abs(second.width - 450) <= 1 and abs(second.height - 300) <= 1
    assert first.image.mode == "RGB"
    # Blank pages render white.
    assert first.image.getpixel((10, 10)) == (255, 255, 255)


def test_render_context_uses_display_orientation(pdf_factory) -> None:
    document = open_document(pdf_factory([100], height=200, rotations=[90]))

    with RenderContext(document) as context:
        raster = context.render(0, 1.0)

    assert raster.page_size == (200, 100)
    assert raster.width > raster.height


def test_render_context_enforces_ascending_order(ten_page_pdf: bytes) -> None:
    document = open_document(ten_page_pdf)

    with RenderContext(document) as context:
        context.render(2, 0.5)
        with pytest.raises(RenderOrderError):
            context.render(1, 0.5)
        with pytest.raises(RenderOrderError):
            context.render(2, 0.5)
        # Skipping ahead is allowed.
        assert context.render(5, 0.5).page_number == 6


def test_render_context_rejects_out_of_range_page(pdf_factory) -> None:
    document = open_document(pdf_factory([100]))
    with RenderContext(document) as context:
        with pytest.raises(IndexError):
            context.render(1, 1.0)
        with pytest.raises(InvalidOptionError):
            context.render(0, 0)


def test_render_context_is_unusable_after_release(pdf_factory) -> None:
    document = open_document(pdf_factory([100]))
    context = RenderContext(document)

    with pytest.raises(SurfaceAcquisitionError):
        context.render(0, 1.0)

    with context:
        pass

    with pytest.raises(SurfaceAcquisitionError):
        context.render(0, 1.0)
    with pytest.raises(SurfaceAcquisitionError):
        context.open()


def test_render_context_rejects_concurrent_use(pdf_factory) -> None:
    document = open_document(pdf_factory([100]))

    with RenderContext(document) as context:
        context._lock.acquire()
        try:
            with pytest.raises(SurfaceAcquisitionError):
                context.render(0, 1.0)
        finally:
            context._lock.release()
        assert context.render(0, 1.0).page_number == 1


def test_render_context_released_on_error(pdf_factory) -> None:
    document = open_document(pdf_factory([100, 100]))
    context = RenderContext(document)

    with pytest.raises(RenderOrderError):
        with context:
            context.render(1, 1.0)
            context.render(0, 1.0)

    assert context._handle is None


def test_render_encrypted_document(encrypted_pdf: bytes) -> None:
    document = open_document(encrypted_pdf, "secret")

    rasters = list(render_pages(document, 0.5))

    assert [raster.page_number for raster in rasters] == [1, 2, 3]


def test_render_pages_reports_progress(ten_page_pdf: bytes) -> None:
    calls: list[tuple[int, int]] = []

    def record(current: int, total: int) -> None:
        calls.append((current, total))

    rasters = list(render_pages(open_document(ten_page_pdf), 0.25, record))

    assert len(rasters) == 10
    assert calls == [(index, 10) for index in range(1, 11)]


def test_encode_jpeg(pdf_factory) -> None:
    document = open_document(pdf_factory([100]))
    [raster] = list(render_pages(document, 1.0))

    payload = encode_jpeg(raster, 80)

    assert payload[:3] == b"\xff\xd8\xff"


def test_renderer_uses_pymupdf_namespace() -> None:
    from pdfeditx import rasterize

    assert rasterize.pymupdf.__name__ == "pymupdf"
    assert not hasattr(rasterize, "fitz")
