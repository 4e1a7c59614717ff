"""Public operations of the pdfeditx engine.

Every function takes raw bytes (or a path) and option values, runs one
stateless transform and returns an :class:`~pdfeditx.types.OperationResult`
holding the output bytes and an :class:`~pdfeditx.types.OutputArtifact`.
Errors abort the whole operation; there are no partial results.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Union

from pypdf import PdfWriter

from .assembler import assemble, build_document, load_image
from .config import EngineSettings, get_settings
from .document import PDFDocument, open_document
from .exceptions import InvalidOptionError
from .rasterize import compression_tier, encode_jpeg, render_pages
from .ranges import select_pages
from .security import PROTECTION_NOT_APPLIED, apply_credential, remove_credential
from .serializer import (
    ARCHIVE_MIME_TYPE,
    PDF_MIME_TYPE,
    page_entry_name,
    serialize,
    serialize_archive,
)
from .transplant import extract_pages, merge_documents, reorder_pages, rotate_pages
from .types import (
    ArtifactKind,
    DocumentInfo,
    FileItem,
    FileKind,
    OperationResult,
    OutputArtifact,
    RasterImage,
)
from .utils import BytesSource, get_logger, read_bytes

LOGGER = get_logger("pdfeditx.operations")

ProgressCallback = Callable[[int, int], None]
ImageInput = Union[BytesSource, FileItem]

DEFAULT_NAMES = {
    ArtifactKind.MERGED: "merged.pdf",
    ArtifactKind.SPLIT: "split.pdf",
    ArtifactKind.REORDERED: "reordered.pdf",
    ArtifactKind.COMPRESSED: "compressed.pdf",
    ArtifactKind.CONVERTED: "converted_images.pdf",
    ArtifactKind.IMAGE_ARCHIVE: "extracted_pages.zip",
    ArtifactKind.UNLOCKED: "unlocked.pdf",
    ArtifactKind.PROTECTED: "protected.pdf",
}


def _document_result(
    writer: PdfWriter,
    kind: ArtifactKind,
    name: Optional[str],
    *,
    strip_metadata_entries: bool = False,
) -> OperationResult:
    data = serialize(writer, strip_metadata_entries=strip_metadata_entries)
    artifact = OutputArtifact(
        name=name or DEFAULT_NAMES[kind],
        kind=kind,
        size_bytes=len(data),
        mime_type=PDF_MIME_TYPE,
    )
    LOGGER.info("Created %s with %d page(s)", artifact, len(writer.pages))
    return OperationResult(data=data, artifact=artifact, page_count=len(writer.pages))


def _open(data: BytesSource, password: Optional[str], name: str = "document.pdf") -> PDFDocument:
    return open_document(read_bytes(data), password, name=name)


def merge_pdfs(
    inputs: Sequence[BytesSource],
    *,
    passwords: Optional[Sequence[Optional[str]]] = None,
    name: Optional[str] = None,
) -> OperationResult:
    """Concatenate every page of ``inputs`` in input order."""

    if not inputs:
        raise InvalidOptionError("No input PDFs provided")
    if passwords is not None and len(passwords) != len(inputs):
        raise InvalidOptionError("passwords must match the number of input PDFs")

    documents = [
        _open(data, passwords[index] if passwords else None, f"document_{index + 1}.pdf")
        for index, data in enumerate(inputs)
    ]
    LOGGER.debug("Merging %d input(s)", len(documents))
    return _document_result(merge_documents(documents), ArtifactKind.MERGED, name)


def merge_files(items: Sequence[FileItem], *, name: Optional[str] = None) -> OperationResult:
    """Merge caller-supplied PDF items, honouring each item's rotation."""

    if not items:
        raise InvalidOptionError("No input PDFs provided")

    documents: List[PDFDocument] = []
    for item in items:
        if item.kind is not FileKind.PDF:
            raise InvalidOptionError(f"{item.name} is not a PDF file")
        documents.append(open_document(item.data, name=item.name))

    writer = merge_documents(documents)
    offset = 0
    for item, document in zip(items, documents):
        rotate_pages(writer.pages[offset:offset + document.page_count], item.rotation)
        offset += document.page_count
    return _document_result(writer, ArtifactKind.MERGED, name)


def split_pdf(
    data: BytesSource,
    expression: str,
    *,
    password: Optional[str] = None,
    name: Optional[str] = None,
) -> OperationResult:
    """Keep the pages selected by ``expression``, in ascending order."""

    document = _open(data, password)
    indices = select_pages(expression, document.page_count)
    LOGGER.debug("Splitting %s on %r -> %s", document.name, expression, indices)
    return _document_result(extract_pages(document, indices), ArtifactKind.SPLIT, name)


def reorder_pdf(
    data: BytesSource,
    permutation: Sequence[int],
    *,
    password: Optional[str] = None,
    name: Optional[str] = None,
) -> OperationResult:
    """Rearrange pages so output page ``i`` is source page ``permutation[i]``."""

    document = _open(data, password)
    return _document_result(reorder_pages(document, permutation), ArtifactKind.REORDERED, name)


def compress_pdf(
    data: BytesSource,
    quality: float = 0.5,
    *,
    password: Optional[str] = None,
    name: Optional[str] = None,
    progress_callback: Optional[ProgressCallback] = None,
    settings: Optional[EngineSettings] = None,
) -> OperationResult:
    """Shrink a PDF.

    At or above the lossless threshold only descriptive metadata is removed.
    Below it every page is rendered at the tier's scale, JPEG encoded and
    placed on a page of the original displayed size.
    """

    settings = settings or get_settings()
    tier = compression_tier(quality, settings)
    quality = float(quality)
    document = _open(data, password)

    if quality >= settings.lossless_quality_threshold:
        LOGGER.debug("Quality %.2f: metadata-only pass for %s", quality, document.name)
        writer = PdfWriter(clone_from=document.reader)
        return _document_result(
            writer, ArtifactKind.COMPRESSED, name, strip_metadata_entries=True
        )

    LOGGER.debug(
        "Quality %.2f: rasterizing %s at %.1fx (%s tier, JPEG %d)",
        quality,
        document.name,
        tier.scale,
        tier.name,
        tier.jpeg_quality,
    )
    layout = []
    for raster in render_pages(document, tier.scale, progress_callback):
        width, height = raster.page_size or (raster.width / tier.scale, raster.height / tier.scale)
        layout.append((raster, width, height))
    writer = build_document(layout, jpeg_quality=tier.jpeg_quality)
    return _document_result(writer, ArtifactKind.COMPRESSED, name)


def _image_raster(item: ImageInput, position: int) -> RasterImage:
    if isinstance(item, FileItem):
        if item.kind is not FileKind.IMAGE:
            raise InvalidOptionError(f"{item.name} is not an image file")
        return load_image(item.data, rotation=item.rotation, name=item.name)
    return load_image(read_bytes(item), name=f"image_{position}")


def images_to_pdf(
    images: Sequence[ImageInput],
    *,
    orientation: str = "portrait",
    page_format: str = "a4",
    preserve_aspect: bool = False,
    name: Optional[str] = None,
    settings: Optional[EngineSettings] = None,
) -> OperationResult:
    """Convert ``images`` into a document with one page per image."""

    if not images:
        raise InvalidOptionError("No images provided")
    rasters = [_image_raster(item, position) for position, item in enumerate(images, start=1)]
    writer = assemble(
        rasters,
        orientation,
        page_format,
        preserve_aspect=preserve_aspect,
        settings=settings,
    )
    return _document_result(writer, ArtifactKind.CONVERTED, name)


def pdf_to_images(
    data: BytesSource,
    *,
    password: Optional[str] = None,
    name: Optional[str] = None,
    progress_callback: Optional[ProgressCallback] = None,
    settings: Optional[EngineSettings] = None,
) -> OperationResult:
    """Render every page to JPEG and pack them as ``page_<n>.jpg`` in a ZIP."""

    settings = settings or get_settings()
    document = _open(data, password)

    entries = []
    for raster in render_pages(document, settings.export_scale, progress_callback):
        payload = encode_jpeg(raster, settings.export_jpeg_quality)
        entries.append((page_entry_name(raster.page_number or len(entries) + 1), payload))

    archive = serialize_archive(entries)
    artifact = OutputArtifact(
        name=name or DEFAULT_NAMES[ArtifactKind.IMAGE_ARCHIVE],
        kind=ArtifactKind.IMAGE_ARCHIVE,
        size_bytes=len(archive),
        mime_type=ARCHIVE_MIME_TYPE,
    )
    LOGGER.info("Created %s from %d page(s)", artifact, len(entries))
    return OperationResult(data=archive, artifact=artifact, page_count=len(entries))


def unlock_pdf(
    data: BytesSource,
    password: str,
    *,
    name: Optional[str] = None,
) -> OperationResult:
    """Remove the password from a protected PDF."""

    document = _open(data, password)
    return _document_result(remove_credential(document), ArtifactKind.UNLOCKED, name)


def protect_pdf(
    data: BytesSource,
    password: str,
    *,
    name: Optional[str] = None,
) -> OperationResult:
    """Placeholder: return the input unchanged and report that nothing was applied."""

    # Warns once, attributed to our caller.
    output = apply_credential(read_bytes(data), password, stacklevel=3)
    notices = [PROTECTION_NOT_APPLIED]

    artifact = OutputArtifact(
        name=name or DEFAULT_NAMES[ArtifactKind.PROTECTED],
        kind=ArtifactKind.PROTECTED,
        size_bytes=len(output),
        mime_type=PDF_MIME_TYPE,
    )
    return OperationResult(
        data=output,
        artifact=artifact,
        protection_applied=False,
        warnings=notices,
    )


def get_document_info(data: BytesSource, *, password: Optional[str] = None) -> DocumentInfo:
    """Return page count, metadata and per-page geometry of ``data``."""

    document = _open(data, password)
    document.validate_access()
    return document.to_info()


__all__ = [
    "DEFAULT_NAMES",
    "compress_pdf",
    "get_document_info",
    "images_to_pdf",
    "merge_files",
    "merge_pdfs",
    "pdf_to_images",
    "protect_pdf",
    "reorder_pdf",
    "split_pdf",
    "unlock_pdf",
]
