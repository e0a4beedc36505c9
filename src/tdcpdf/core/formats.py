"""Output format descriptors handed to the render pipeline."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from functools import partial
import logging
from pathlib import Path
import shutil
from typing import Any

from .context import RenderContext
from .dependencies import LatexDependency
from .exceptions import InvalidOptionError
from .intermediates import generate_intermediates
from .options import DataFramePrint, FormatOptions, LatexEngine
from .pandoc_args import build_pdf_args, markdown_input_format
from .preprocess import pdf_pre_processor
from .templates import builtin_template_path


logger = logging.getLogger(__name__)

PreProcessor = Callable[[RenderContext], list[str]]
IntermediatesGenerator = Callable[[RenderContext, Path, Path], list[Path]]

_GHOSTSCRIPT_BINARIES = ("gs", "gswin64c", "gswin32c")


@dataclass(frozen=True, slots=True)
class FigureDefaults:
    """Figure settings forwarded to the engine running embedded computations."""

    width: float
    height: float
    crop: bool
    dev: str


@dataclass(frozen=True, slots=True)
class OutputFormat:
    """Everything the render pipeline needs to drive pandoc."""

    to: str
    from_: str
    args: tuple[str, ...]
    latex_engine: LatexEngine
    keep_tex: bool
    ext: str
    clean_supporting: bool
    df_print: DataFramePrint | Callable[..., Any]
    figures: FigureDefaults
    pre_processor: PreProcessor
    intermediates_generator: IntermediatesGenerator
    template: Path | None = None
    options: FormatOptions = field(default_factory=FormatOptions)

    @property
    def produces_pdf(self) -> bool:
        return self.ext == ".pdf"

    def command_args(self, extra_args: Sequence[str] = ()) -> list[str]:
        """Return ``args`` with hook flags placed before the pass-through arguments."""
        split = len(self.args) - len(self.options.pandoc_args)
        return [*self.args[:split], *extra_args, *self.args[split:]]


def has_crop_tools() -> bool:
    """Return whether ``pdfcrop`` and ghostscript are both available."""
    if shutil.which("pdfcrop") is None:
        return False
    return any(shutil.which(binary) for binary in _GHOSTSCRIPT_BINARIES)


def _pre_processor(
    context: RenderContext,
    *,
    use_default_template: bool,
    extra_dependencies: tuple[LatexDependency, ...],
) -> list[str]:
    # Custom templates may define their own geometry and preamble.
    if not use_default_template:
        return []
    return pdf_pre_processor(context, extra_dependencies)


def _intermediates_generator(
    context: RenderContext, original_input: Path, intermediates_dir: Path
) -> list[Path]:
    return generate_intermediates(
        original_input, intermediates_dir, files_dir=context.files_dir
    )


def _resolved_template(options: FormatOptions) -> Path | None:
    if options.template is None:
        return None
    if options.uses_default_template:
        return builtin_template_path()
    return Path(options.template).expanduser()


def pdf_format(
    options: FormatOptions | Mapping[str, Any] | None = None, **overrides: Any
) -> OutputFormat:
    """Build the branded PDF output format.

    Options may be passed as a :class:`FormatOptions` instance, a mapping, or
    keyword arguments. Invalid enumerated values raise
    :class:`~tdcpdf.core.exceptions.InvalidOptionError` before anything runs.
    """
    if isinstance(options, FormatOptions):
        resolved = options if not overrides else FormatOptions.build(
            options.model_dump(), **overrides
        )
    else:
        resolved = FormatOptions.build(options, **overrides)

    figures = FigureDefaults(
        width=resolved.fig_width,
        height=resolved.fig_height,
        crop=resolved.fig_crop and has_crop_tools(),
        dev=resolved.dev,
    )
    if resolved.fig_crop and not figures.crop:
        logger.debug("pdfcrop or ghostscript not found; figure cropping disabled.")

    return OutputFormat(
        to="latex",
        from_=markdown_input_format(resolved.fig_caption, resolved.md_extensions),
        args=build_pdf_args(resolved),
        latex_engine=resolved.latex_engine,
        keep_tex=resolved.keep_tex,
        ext=".pdf",
        clean_supporting=not resolved.keep_tex,
        df_print=resolved.df_print,
        figures=figures,
        pre_processor=partial(
            _pre_processor,
            use_default_template=resolved.uses_default_template,
            extra_dependencies=tuple(resolved.extra_dependencies),
        ),
        intermediates_generator=_intermediates_generator,
        template=_resolved_template(resolved),
        options=resolved,
    )


def latex_document(
    options: FormatOptions | Mapping[str, Any] | None = None, **overrides: Any
) -> OutputFormat:
    """PDF format variant that stops at the ``.tex`` source."""
    output_format = pdf_format(options, **overrides)
    return replace(output_format, ext=".tex", keep_tex=True)


def _sets_template(
    options: FormatOptions | Mapping[str, Any] | None, overrides: Mapping[str, Any]
) -> bool:
    if "template" in overrides:
        return True
    if isinstance(options, FormatOptions):
        return "template" in options.model_fields_set
    return options is not None and "template" in options


def latex_fragment(
    options: FormatOptions | Mapping[str, Any] | None = None, **overrides: Any
) -> OutputFormat:
    """LaTeX document variant emitting only the body through the fragment template."""
    if _sets_template(options, overrides):
        raise InvalidOptionError(
            "latex_fragment uses its bundled template; 'template' cannot be set."
        )
    overrides["template"] = builtin_template_path("fragment")
    return latex_document(options, **overrides)


__all__ = [
    "FigureDefaults",
    "IntermediatesGenerator",
    "OutputFormat",
    "PreProcessor",
    "has_crop_tools",
    "latex_document",
    "latex_fragment",
    "pdf_format",
]
