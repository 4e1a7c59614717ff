"""Password handling for pdfeditx documents.

Removing a credential is a full copy of a document that was already opened
with the right password. Applying one is deliberately not implemented: the
input is handed back untouched and the caller is told so through
:class:`~pdfeditx.exceptions.ProtectionNotAppliedWarning`.
"""

from __future__ import annotations

import logging
import warnings

from pypdf import PdfWriter

from .document import PDFDocument
from .exceptions import ProtectionNotAppliedWarning

LOGGER = logging.getLogger("pdfeditx.security")

PROTECTION_NOT_APPLIED = (
    "Password protection is not supported by this engine; "
    "the document was returned without protection."
)


def _copy_reader_contents(document: PDFDocument) -> PdfWriter:
    writer = PdfWriter()
    writer.clone_reader_document_root(document.reader)

    metadata = document.metadata
    if metadata:
        writer.add_metadata(
            {
                key: str(value)
                for key, value in metadata.items()
                if isinstance(key, str) and value is not None
            }
        )

    return writer


def remove_credential(document: PDFDocument) -> PdfWriter:
    """Return an unencrypted copy of ``document``.

    The credential was validated when the document was opened, so this step
    has no failure mode of its own.
    """

    if not document.was_encrypted:
        LOGGER.info("%s is not encrypted; copying it unchanged", document.name)
    writer = _copy_reader_contents(document)
    LOGGER.debug("Removed credential from %s", document.name)
    return writer


def apply_credential(data: bytes, password: str, *, stacklevel: int = 2) -> bytes:
    """Declared no-op: return ``data`` unchanged and warn that nothing happened.

    ``stacklevel`` is passed to :func:`warnings.warn` so wrappers can point
    the warning at their own caller.
    """

    LOGGER.warning("%s (password of length %d ignored)", PROTECTION_NOT_APPLIED, len(password or ""))
    warnings.warn(PROTECTION_NOT_APPLIED, ProtectionNotAppliedWarning, stacklevel=stacklevel)
    return data


__all__ = ["PROTECTION_NOT_APPLIED", "apply_credential", "remove_credential"]
