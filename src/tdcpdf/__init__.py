"""Primary public API for tdc-pdf."""

from __future__ import annotations

from tdcpdf.core.config import RenderConfig
from tdcpdf.core.context import RenderContext
from tdcpdf.core.dependencies import (
    LatexDependency,
    assemble_header_include,
    clean_tmpfiles,
    latex_dependencies,
)
from tdcpdf.core.exceptions import (
    AssetCopyError,
    InvalidOptionError,
    PandocNotFoundError,
    RenderError,
    TdcPdfError,
)
from tdcpdf.core.formats import (
    FigureDefaults,
    OutputFormat,
    latex_document,
    latex_fragment,
    pdf_format,
)
from tdcpdf.core.intermediates import generate_intermediates
from tdcpdf.core.options import (
    CitationPackage,
    DataFramePrint,
    FormatOptions,
    Highlight,
    Includes,
    LatexEngine,
)
from tdcpdf.core.render import render
from tdcpdf.version import get_version


tdc_pdf = pdf_format

__version__ = get_version()

__all__ = [
    "AssetCopyError",
    "CitationPackage",
    "DataFramePrint",
    "FigureDefaults",
    "FormatOptions",
    "Highlight",
    "Includes",
    "InvalidOptionError",
    "LatexDependency",
    "LatexEngine",
    "OutputFormat",
    "PandocNotFoundError",
    "RenderConfig",
    "RenderContext",
    "RenderError",
    "TdcPdfError",
    "__version__",
    "assemble_header_include",
    "clean_tmpfiles",
    "generate_intermediates",
    "get_version",
    "latex_dependencies",
    "latex_document",
    "latex_fragment",
    "pdf_format",
    "render",
    "tdc_pdf",
]
