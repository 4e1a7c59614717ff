"""
Custom exceptions for pdfeditx.

Every terminal failure derives from :class:`PDFEditXError` so callers can
catch the whole family, while the concrete class tells them which message to
show (bad range vs. wrong password vs. corrupt file).
"""


class PDFEditXError(Exception):
    """Base exception for all pdfeditx errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF editing error occurred."


class EmptySelectionError(PDFEditXError):
    """Raised when a page range expression selects no pages."""

    @property
    def default_message(self) -> str:
        return "No valid pages found in the supplied range."


class PermutationLengthMismatchError(PDFEditXError):
    """Raised when a reorder permutation does not cover every page."""

    @property
    def default_message(self) -> str:
        return "The number of indices must match the total number of pages."


class InvalidPermutationError(PDFEditXError):
    """Raised when a reorder permutation repeats or overflows an index."""

    @property
    def default_message(self) -> str:
        return "Page order must list every page exactly once."


class DocumentCorruptError(PDFEditXError):
    """Raised when input bytes are not a well-formed PDF document."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class UnsupportedImageError(DocumentCorruptError):
    """Raised when image bytes cannot be decoded."""

    @property
    def default_message(self) -> str:
        return "Unsupported or corrupted image file."


class CredentialRequiredError(PDFEditXError):
    """Raised when a PDF needs a password and none, or a wrong one, was given."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted and cannot be opened without the correct password."


class SurfaceAcquisitionError(PDFEditXError):
    """Raised when a rendering surface is unavailable, busy or released."""

    @property
    def default_message(self) -> str:
        return "Unable to acquire a rendering surface."


class RenderOrderError(PDFEditXError):
    """Raised when pages are not rendered in ascending order."""

    @property
    def default_message(self) -> str:
        return "Pages must be rendered in ascending order."


class InvalidOptionError(PDFEditXError, ValueError):
    """Raised when an operation option is out of range or unknown."""

    @property
    def default_message(self) -> str:
        return "Invalid operation option."


class ProtectionNotAppliedWarning(UserWarning):
    """Emitted when password protection is requested but not performed."""
