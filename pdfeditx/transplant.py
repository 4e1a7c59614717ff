"""Copy pages between documents.

Every page handed to :func:`transplant` is cloned into the destination
writer together with everything it references (content streams, fonts,
images, graphics states). pypdf keeps a per-source translation table while
cloning, so a resource dictionary shared by several pages of one source is
cloned once and shared again in the destination, never with the source. The
sources can be dropped as soon as the writer is built.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple

from pypdf import PageObject, PdfWriter

from .document import PDFDocument
from .exceptions import (
    InvalidOptionError,
    InvalidPermutationError,
    PermutationLengthMismatchError,
)
from .utils import normalize_rotation

LOGGER = logging.getLogger("pdfeditx.transplant")

PageRef = Tuple[PDFDocument, int]


def transplant(sources: Iterable[PageRef]) -> PdfWriter:
    """Build a new document from ``(document, page_index)`` pairs, in order."""

    writer = PdfWriter()
    count = 0
    for document, index in sources:
        page = document.get_page(index)
        LOGGER.debug("Copying page %d of %s", index + 1, document.name)
        writer.add_page(page)
        count += 1

    if count == 0:
        raise InvalidOptionError("At least one page is required to build a document")
    return writer


def merge_documents(documents: Sequence[PDFDocument]) -> PdfWriter:
    """Concatenate every page of ``documents`` in input order."""

    if not documents:
        raise InvalidOptionError("No input PDFs provided")
    return transplant(
        (document, index)
        for document in documents
        for index in range(document.page_count)
    )


def extract_pages(document: PDFDocument, indices: Sequence[int]) -> PdfWriter:
    """Copy the pages at ``indices`` (zero-based) in the order given."""

    return transplant((document, index) for index in indices)


def validate_permutation(permutation: Sequence[int], page_count: int) -> List[int]:
    """Check that ``permutation`` lists every page index exactly once."""

    order = [int(index) for index in permutation]
    if len(order) != page_count:
        raise PermutationLengthMismatchError(
            f"Page order has {len(order)} entries but the document has {page_count} pages."
        )

    seen: set[int] = set()
    for index in order:
        if not 0 <= index < page_count:
            raise InvalidPermutationError(
                f"Page index {index} is out of bounds for a {page_count}-page document."
            )
        if index in seen:
            raise InvalidPermutationError(f"Page index {index} appears more than once.")
        seen.add(index)
    return order


def reorder_pages(document: PDFDocument, permutation: Sequence[int]) -> PdfWriter:
    """Return a copy of ``document`` with pages in ``permutation`` order."""

    order = validate_permutation(permutation, document.page_count)
    return extract_pages(document, order)


def rotate_pages(pages: Iterable[PageObject], rotation: int) -> None:
    """Rotate already transplanted ``pages`` clockwise by ``rotation`` degrees."""

    angle = normalize_rotation(rotation, strict=True)
    if not angle:
        return
    for page in pages:
        page.rotate(angle)


__all__ = [
    "PageRef",
    "transplant",
    "merge_documents",
    "extract_pages",
    "validate_permutation",
    "reorder_pages",
    "rotate_pages",
]
