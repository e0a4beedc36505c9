"""Custom exception hierarchy for the PDF output format."""

from __future__ import annotations


class TdcPdfError(RuntimeError):
    """Base exception for output format and render failures."""


class InvalidOptionError(TdcPdfError, ValueError):
    """Raised when a format option falls outside its accepted values."""


class AssetCopyError(TdcPdfError):
    """Raised when intermediates or supporting files cannot be staged."""


class RenderError(TdcPdfError):
    """Raised when the external renderer fails to produce its output."""


class PandocNotFoundError(RenderError):
    """Raised when no pandoc executable can be located."""


__all__ = [
    "AssetCopyError",
    "InvalidOptionError",
    "PandocNotFoundError",
    "RenderError",
    "TdcPdfError",
]
