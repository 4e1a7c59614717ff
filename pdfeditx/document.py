"""Read-side access to PDF documents held in memory."""

from __future__ import annotations

import io
import logging
from typing import Any, Iterator, List, Optional

from pypdf import PageObject, PdfReader
from pypdf.errors import PdfReadError

from .exceptions import CredentialRequiredError, DocumentCorruptError, InvalidOptionError
from .types import DocumentInfo, PageGeometry
from .utils import normalize_rotation

LOGGER = logging.getLogger("pdfeditx.document")


class PDFDocument:
    """A parsed PDF document backed by a :class:`pypdf.PdfReader`.

    Instances are created with :func:`open_document`. The reader has already
    been decrypted when the source was protected, so pages handed out by
    :meth:`get_page` are readable and anything built from them carries no
    credential requirement.
    """

    def __init__(
        self,
        reader: PdfReader,
        raw_bytes: bytes,
        *,
        name: str = "document.pdf",
        password: Optional[str] = None,
    ) -> None:
        self.reader = reader
        self.raw_bytes = raw_bytes
        self.name = name
        self._password = password
        self._geometry_cache: dict[int, PageGeometry] = {}

    # ------------------------------------------------------------------
    # Basic document information helpers
    # ------------------------------------------------------------------
    @property
    def page_count(self) -> int:
        return len(self.reader.pages)

    @property
    def file_size(self) -> int:
        return len(self.raw_bytes)

    @property
    def was_encrypted(self) -> bool:
        return bool(self.reader.is_encrypted)

    @property
    def password(self) -> Optional[str]:
        """Credential that opened the document, if one was needed."""
        return self._password

    @property
    def metadata(self) -> Any:
        return self.reader.metadata

    def get_page(self, index: int) -> PageObject:
        if not 0 <= index < self.page_count:
            raise IndexError(
                f"Page index {index} is out of bounds for a {self.page_count}-page document"
            )
        return self.reader.pages[index]

    def iter_pages(self) -> Iterator[PageObject]:
        return iter(self.reader.pages)

    def page_geometry(self, index: int) -> PageGeometry:
        """Return width, height and rotation of the page at ``index``."""

        cached = self._geometry_cache.get(index)
        if cached is not None:
            return cached

        page = self.get_page(index)
        try:
            box = page.mediabox
            width = abs(float(box.width))
            height = abs(float(box.height))
            rotation = normalize_rotation(page.rotation)
        except Exception as exc:
            raise DocumentCorruptError(
                f"Unable to read geometry of page {index + 1} in {self.name}: {exc}"
            ) from exc

        if width <= 0 or height <= 0:
            raise DocumentCorruptError(
                f"Page {index + 1} in {self.name} has invalid size {width}x{height}"
            )

        geometry = PageGeometry(width=width, height=height, rotation=rotation)
        self._geometry_cache[index] = geometry
        return geometry

    # ------------------------------------------------------------------
    # Validation and reporting helpers
    # ------------------------------------------------------------------
    def validate_access(self) -> None:
        """Ensure every page can be reached and has a usable geometry."""
        for index in range(self.page_count):
            self.page_geometry(index)

    def to_info(self) -> DocumentInfo:
        metadata = self.metadata
        return DocumentInfo(
            num_pages=self.page_count,
            file_size=self.file_size,
            pages=[self.page_geometry(index) for index in range(self.page_count)],
            title=getattr(metadata, "title", None),
            author=getattr(metadata, "author", None),
            producer=getattr(metadata, "producer", None),
            was_encrypted=self.was_encrypted,
        )

    def __repr__(self) -> str:
        return f"PDFDocument(name={self.name!r}, pages={self.page_count})"


def open_document(
    data: bytes,
    password: Optional[str] = None,
    *,
    name: str = "document.pdf",
) -> PDFDocument:
    """Parse ``data`` into a :class:`PDFDocument`.

    Raises:
        DocumentCorruptError: If ``data`` is not a readable PDF with pages.
        CredentialRequiredError: If the document is encrypted and ``password``
            does not open it.
    """

    if not data:
        raise DocumentCorruptError(f"PDF file is empty: {name}")

    try:
        reader = PdfReader(io.BytesIO(data))
    except PdfReadError as exc:
        raise DocumentCorruptError(f"Corrupted or invalid PDF file: {name}. Error: {exc}") from exc
    except Exception as exc:
        raise DocumentCorruptError(f"Unexpected error reading PDF: {name}. Error: {exc}") from exc

    used_password: Optional[str] = None
    if reader.is_encrypted:
        # Documents protected with an owner password only open with the empty user password.
        candidate = password if password is not None else ""
        try:
            status = reader.decrypt(candidate)
        except Exception as exc:
            raise CredentialRequiredError(
                f"Unable to decrypt {name}: {exc}"
            ) from exc
        if status == 0:
            if password:
                raise CredentialRequiredError(f"Incorrect password for {name}.")
            raise CredentialRequiredError(
                f"{name} is encrypted. Supply a password to process this file."
            )
        used_password = candidate
        LOGGER.debug("Decrypted %s", name)

    try:
        num_pages = len(reader.pages)
    except Exception as exc:
        raise DocumentCorruptError(f"Unable to read page tree of {name}: {exc}") from exc
    if num_pages == 0:
        raise DocumentCorruptError(f"PDF has no pages: {name}")

    LOGGER.debug("Opened %s with %d page(s)", name, num_pages)
    return PDFDocument(reader, data, name=name, password=used_password)


def open_documents(
    buffers: List[bytes],
    passwords: Optional[List[Optional[str]]] = None,
) -> List[PDFDocument]:
    """Open several buffers in order, naming them by position."""

    passwords = passwords or [None] * len(buffers)
    if len(passwords) != len(buffers):
        raise InvalidOptionError("passwords must match the number of documents")
    return [
        open_document(data, password, name=f"document_{index}.pdf")
        for index, (data, password) in enumerate(zip(buffers, passwords), start=1)
    ]


__all__ = ["PDFDocument", "open_document", "open_documents"]
