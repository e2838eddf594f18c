"""Exception types raised while composing invoice documents."""

from typing import Optional


class InvoiceComposerError(Exception):
    """Base class for all invoice composer errors."""


class UnknownJurisdiction(InvoiceComposerError):
    """Tax selection references a code that is not in the tax table."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown tax jurisdiction: {code!r}")


class InvalidLineItems(InvoiceComposerError):
    """Line items are empty or contain a negative amount."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class InvalidInvoiceData(InvoiceComposerError):
    """An invoice file or stored document is missing fields or has bad values."""


class ImageDecodeFailure(InvoiceComposerError):
    """A logo could not be decoded into a raster image.

    Raised by the image acquisition step, never by the composer itself.
    The pipeline turns it into a warning and renders without the logo.
    """

    def __init__(self, reason: str, source: Optional[str] = None):
        self.reason = reason
        self.source = source
        if source:
            super().__init__(f"Could not decode logo image ({source}): {reason}")
        else:
            super().__init__(f"Could not decode logo image: {reason}")


class LayoutError(InvoiceComposerError):
    """Illegal layout cursor transition."""


class ConfigError(InvoiceComposerError):
    """Configuration file contains invalid values."""
