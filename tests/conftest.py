from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from PIL import Image
from pypdf import PdfReader, PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

PdfFactory = Callable[..., bytes]


def _write(writer: PdfWriter) -> bytes:
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_widths(data: bytes) -> list[float]:
    """Widths of every page; test documents encode page identity in the width."""
    reader = PdfReader(io.BytesIO(data))
    return [float(page.mediabox.width) for page in reader.pages]


@pytest.fixture()
def pdf_factory() -> PdfFactory:
    def _create(
        widths: Sequence[float],
        *,
        height: float = 200,
        title: str | None = None,
        rotations: Sequence[int] | None = None,
    ) -> bytes:
        writer = PdfWriter()
        for index, width in enumerate(widths):
            page = writer.add_blank_page(width=width, height=height)
            if rotations:
                page.rotate(rotations[index])
        if title is not None:
            writer.add_metadata({"/Title": title, "/Author": "pdfeditx-tests"})
        return _write(writer)

    return _create


@pytest.fixture()
def ten_page_pdf(pdf_factory: PdfFactory) -> bytes:
    # Page i is 100 + 10 * i points wide.
    return pdf_factory([100 + 10 * index for index in range(10)], title="Ten Pages")


@pytest.fixture()
def shared_resources_pdf() -> bytes:
    """Three pages drawing text through one shared resource dictionary."""

    writer = PdfWriter()
    font = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/Type1"),
            NameObject("/BaseFont"): NameObject("/Helvetica"),
        }
    )
    resources = DictionaryObject(
        {NameObject("/Font"): DictionaryObject({NameObject("/F1"): writer._add_object(font)})}
    )
    resources_ref = writer._add_object(resources)

    for number in range(1, 4):
        page = writer.add_blank_page(width=300 + number, height=200)
        content = DecodedStreamObject()
        content.set_data(f"BT /F1 24 Tf 20 100 Td (Page {number}) Tj ET".encode("ascii"))
        page[NameObject("/Resources")] = resources_ref
        page[NameObject("/Contents")] = writer._add_object(content)
    return _write(writer)


@pytest.fixture()
def encrypted_pdf(pdf_factory: PdfFactory) -> bytes:
    reader = PdfReader(io.BytesIO(pdf_factory([150, 160, 170], title="Secret")))
    writer = PdfWriter(clone_from=reader)
    writer.encrypt(user_password="secret", owner_password="owner")
    return _write(writer)


@pytest.fixture()
def image_factory() -> Callable[..., bytes]:
    def _create(
        size: tuple[int, int],
        *,
        mode: str = "RGB",
        color: object = (200, 30, 30),
        fmt: str = "PNG",
    ) -> bytes:
        image = Image.new(mode, size, color)
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _create
