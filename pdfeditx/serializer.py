"""Turn documents and page images into output bytes."""

from __future__ import annotations

import io
import logging
import zipfile
from typing import Iterable, Tuple

from pypdf import PdfWriter

LOGGER = logging.getLogger("pdfeditx.serializer")

PDF_MIME_TYPE = "application/pdf"
ARCHIVE_MIME_TYPE = "application/zip"

STRIPPED_METADATA_KEYS = (
    "/Title",
    "/Author",
    "/Subject",
    "/Keywords",
    "/Creator",
    "/Producer",
)

# Fixed entry timestamp so identical inputs produce identical archives.
_ARCHIVE_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


def strip_metadata(writer: PdfWriter) -> None:
    """Remove descriptive document information entries from ``writer``."""

    metadata = writer.metadata
    if not metadata:
        return
    writer.metadata = {
        key: value
        for key, value in metadata.items()
        if key not in STRIPPED_METADATA_KEYS
    }


def serialize(writer: PdfWriter, *, strip_metadata_entries: bool = False) -> bytes:
    """Write ``writer`` to bytes.

    With ``strip_metadata_entries`` the descriptive metadata is dropped; the
    cross-reference section is always a classic table, never an object
    stream.
    """

    if strip_metadata_entries:
        strip_metadata(writer)

    buffer = io.BytesIO()
    writer.write(buffer)
    data = buffer.getvalue()
    LOGGER.debug("Serialized %d page(s) into %d bytes", len(writer.pages), len(data))
    return data


def page_entry_name(page_number: int) -> str:
    """Archive entry name for the 1-based ``page_number``."""

    return f"page_{page_number}.jpg"


def serialize_archive(entries: Iterable[Tuple[str, bytes]]) -> bytes:
    """Pack ``(name, payload)`` entries into an uncompressed ZIP archive."""

    buffer = io.BytesIO()
    count = 0
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_STORED) as archive:
        for name, payload in entries:
            info = zipfile.ZipInfo(name, date_time=_ARCHIVE_TIMESTAMP)
            info.compress_type = zipfile.ZIP_STORED
            info.external_attr = 0o644 << 16
            archive.writestr(info, payload)
            count += 1
    data = buffer.getvalue()
    LOGGER.debug("Archived %d entr%s into %d bytes", count, "y" if count == 1 else "ies", len(data))
    return data


__all__ = [
    "ARCHIVE_MIME_TYPE",
    "PDF_MIME_TYPE",
    "page_entry_name",
    "serialize",
    "serialize_archive",
    "strip_metadata",
]
