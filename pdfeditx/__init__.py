"""
pdfeditx - stateless PDF editing engine.

Takes raw PDF or image bytes and returns new bytes: merge, split by page
range, reorder, compress (metadata-only or rasterized), convert images to a
PDF, export pages as JPEGs in a ZIP archive, and remove a password.
Password protection is a declared no-op that returns the input unchanged
and warns.

Quick Start:
    >>> from pdfeditx import split_pdf
    >>> result = split_pdf(open('input.pdf', 'rb').read(), '1-3,5')
    >>> open(result.artifact.name, 'wb').write(result.data)

Building blocks:
    - select_pages / parse_selection: page range expressions
    - open_document / PDFDocument: read-side access and geometry
    - transplant / merge_documents / reorder_pages: page copying
    - RenderContext / render_pages: page rasterization
    - assemble / load_image: images to pages
    - serialize / serialize_archive: output bytes

For CLI usage, use the 'pdfeditx' command after installation.
"""

__version__ = "1.0.0"

# Building blocks
from pdfeditx.assembler import assemble, build_document, load_image
from pdfeditx.config import EngineSettings, get_settings
from pdfeditx.document import PDFDocument, open_document
from pdfeditx.ranges import format_page_indices, parse_selection, select_pages
from pdfeditx.rasterize import RenderContext, compression_tier, render_pages, scale_for_quality
from pdfeditx.security import apply_credential, remove_credential
from pdfeditx.serializer import serialize, serialize_archive
from pdfeditx.transplant import extract_pages, merge_documents, reorder_pages, transplant

# Operations
from pdfeditx.operations import (
    compress_pdf,
    get_document_info,
    images_to_pdf,
    merge_files,
    merge_pdfs,
    pdf_to_images,
    protect_pdf,
    reorder_pdf,
    split_pdf,
    unlock_pdf,
)

# Data types
from pdfeditx.types import (
    ArtifactKind,
    DocumentInfo,
    FileItem,
    FileKind,
    OperationResult,
    OutputArtifact,
    PageGeometry,
    RasterImage,
)

# Exceptions
from pdfeditx.exceptions import (
    CredentialRequiredError,
    DocumentCorruptError,
    EmptySelectionError,
    InvalidOptionError,
    InvalidPermutationError,
    PDFEditXError,
    PermutationLengthMismatchError,
    ProtectionNotAppliedWarning,
    RenderOrderError,
    SurfaceAcquisitionError,
    UnsupportedImageError,
)

__all__ = [
    # Operations
    "merge_pdfs",
    "merge_files",
    "split_pdf",
    "reorder_pdf",
    "compress_pdf",
    "images_to_pdf",
    "pdf_to_images",
    "unlock_pdf",
    "protect_pdf",
    "get_document_info",
    # Building blocks
    "select_pages",
    "parse_selection",
    "format_page_indices",
    "open_document",
    "PDFDocument",
    "transplant",
    "merge_documents",
    "extract_pages",
    "reorder_pages",
    "RenderContext",
    "render_pages",
    "scale_for_quality",
    "compression_tier",
    "assemble",
    "build_document",
    "load_image",
    "serialize",
    "serialize_archive",
    "remove_credential",
    "apply_credential",
    "EngineSettings",
    "get_settings",
    # Data types
    "ArtifactKind",
    "DocumentInfo",
    "FileItem",
    "FileKind",
    "OperationResult",
    "OutputArtifact",
    "PageGeometry",
    "RasterImage",
    # Exceptions
    "PDFEditXError",
    "EmptySelectionError",
    "PermutationLengthMismatchError",
    "InvalidPermutationError",
    "DocumentCorruptError",
    "UnsupportedImageError",
    "CredentialRequiredError",
    "SurfaceAcquisitionError",
    "RenderOrderError",
    "InvalidOptionError",
    "ProtectionNotAppliedWarning",
    # Version info
    "__version__",
]
