"""Translate format options into pandoc command-line arguments."""

from __future__ import annotations

from collections.abc import Sequence
import os
from pathlib import Path, PureWindowsPath

from .options import CitationPackage, FormatOptions, Highlight, Includes, LatexEngine
from .templates import builtin_template_path


DEFAULT_HIGHLIGHT_STYLE = "tango"
GRAPHICS_VARIABLE = "graphics=yes"
DEFAULT_GEOMETRY_VARIABLE = "geometry:margin=1in"
_DEFAULT_MARKDOWN_EXTENSIONS = ("autolink_bare_uris", "tex_math_single_backslash")


def path_arg(path: str | os.PathLike[str]) -> str:
    """Normalise a filesystem path before handing it to pandoc."""
    candidate = os.path.expanduser(os.fspath(path))
    if os.name == "nt":
        return PureWindowsPath(candidate).as_posix()
    return candidate


def toc_args(toc: bool, toc_depth: int = 3) -> list[str]:
    """Return the table of contents flags."""
    if not toc:
        return []
    return ["--table-of-contents", "--toc-depth", str(toc_depth)]


def template_args(template: str | os.PathLike[str] | None) -> list[str]:
    """Return the template flag for the bundled sentinel, a custom path, or nothing."""
    if template is None:
        return []
    if isinstance(template, str) and template == "default":
        return ["--template", path_arg(builtin_template_path())]
    return ["--template", path_arg(template)]


def highlight_args(
    highlight: Highlight | None, default: str = DEFAULT_HIGHLIGHT_STYLE
) -> list[str]:
    """Return syntax highlighting flags; ``None`` disables highlighting."""
    if highlight is None:
        return ["--no-highlight"]
    highlight = Highlight(highlight)
    style = default if highlight is Highlight.DEFAULT else highlight.value
    return ["--highlight-style", style]


def latex_engine_args(engine: LatexEngine) -> list[str]:
    """Return the flags selecting the LaTeX engine."""
    return ["--pdf-engine", LatexEngine(engine).value]


def citation_args(package: CitationPackage) -> list[str]:
    """Return the citation processing flag, if any."""
    package = CitationPackage(package)
    if package is CitationPackage.NONE:
        return []
    return [f"--{package.value}"]


def includes_args(includes: Includes | None) -> list[str]:
    """Translate include declarations into pandoc include flags."""
    if includes is None:
        return []
    args: list[str] = []
    for flag, paths in (
        ("--include-in-header", includes.in_header),
        ("--include-before-body", includes.before_body),
        ("--include-after-body", includes.after_body),
    ):
        for path in paths:
            args.extend([flag, path_arg(path)])
    return args


def in_header_args(paths: Sequence[Path]) -> list[str]:
    """Return ``--include-in-header`` flags for ``paths``."""
    return includes_args(Includes(in_header=list(paths)))


def markdown_input_format(implicit_figures: bool = True, extensions: str | None = None) -> str:
    """Return the pandoc input format string for Markdown sources."""
    extensions = (extensions or "").replace(" ", "")
    if not implicit_figures and "implicit_figures" not in extensions:
        extensions = f"-implicit_figures{extensions}"

    parts = ["markdown"]
    for extension in _DEFAULT_MARKDOWN_EXTENSIONS:
        if extension not in extensions:
            parts.append(f"+{extension}")
    parts.append(extensions)
    return "".join(parts)


def build_pdf_args(options: FormatOptions) -> tuple[str, ...]:
    """Assemble the ordered pandoc arguments for ``options``."""
    args: list[str] = []
    args.extend(toc_args(options.toc, options.toc_depth))
    args.extend(template_args(options.template))
    if options.number_sections:
        args.append("--number-sections")
    args.extend(highlight_args(options.highlight))
    args.extend(latex_engine_args(options.latex_engine))
    args.extend(citation_args(options.citation_package))
    args.extend(includes_args(options.includes))
    # The bundled template loads graphicx only when this variable is set.
    if options.uses_default_template:
        args.extend(["--variable", GRAPHICS_VARIABLE])
    args.extend(options.pandoc_args)
    return tuple(args)


__all__ = [
    "DEFAULT_GEOMETRY_VARIABLE",
    "DEFAULT_HIGHLIGHT_STYLE",
    "GRAPHICS_VARIABLE",
    "build_pdf_args",
    "citation_args",
    "highlight_args",
    "in_header_args",
    "includes_args",
    "latex_engine_args",
    "markdown_input_format",
    "path_arg",
    "template_args",
    "toc_args",
]
