"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
STRUCTURE_PANEL = "Structure"
RENDERING_PANEL = "Rendering"
FIGURES_PANEL = "Figures"
OUTPUT_PANEL = "Output"
TEMPLATE_PANEL = "Template"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="Markdown source document to render.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Output file. Defaults to the input name with the format extension.",
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

OutputDirOption = Annotated[
    Path | None,
    typer.Option(
        "--output-dir",
        help="Directory receiving the rendered file.",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

TexOnlyOption = Annotated[
    bool,
    typer.Option(
        "--tex-only",
        help="Stop at the LaTeX source instead of producing a PDF.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

KeepTexOption = Annotated[
    bool | None,
    typer.Option(
        "--keep-tex/--no-keep-tex",
        help="Keep the intermediate .tex file next to the PDF.",
        show_default=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

KeepIntermediatesOption = Annotated[
    bool,
    typer.Option(
        "--keep-intermediates",
        help="Leave the staged intermediates directory in place after rendering.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

TocOption = Annotated[
    bool | None,
    typer.Option(
        "--toc/--no-toc",
        help="Include a table of contents.",
        show_default=False,
        rich_help_panel=STRUCTURE_PANEL,
    ),
]

TocDepthOption = Annotated[
    int | None,
    typer.Option(
        "--toc-depth",
        min=1,
        help="Depth of headers included in the table of contents.",
        rich_help_panel=STRUCTURE_PANEL,
    ),
]

NumberSectionsOption = Annotated[
    bool | None,
    typer.Option(
        "--number-sections/--no-number-sections",
        help="Number section headings.",
        show_default=False,
        rich_help_panel=STRUCTURE_PANEL,
    ),
]

HighlightOption = Annotated[
    str | None,
    typer.Option(
        "--highlight",
        help=(
            "Syntax highlighting style: default, tango, pygments, kate, monochrome, "
            "espresso, zenburn, or haddock."
        ),
        rich_help_panel=RENDERING_PANEL,
    ),
]

NoHighlightOption = Annotated[
    bool,
    typer.Option(
        "--no-highlight",
        help="Disable syntax highlighting.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

LatexEngineOption = Annotated[
    str | None,
    typer.Option(
        "--latex-engine",
        help="LaTeX engine producing the PDF: pdflatex, lualatex, or xelatex.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

CitationPackageOption = Annotated[
    str | None,
    typer.Option(
        "--citation-package",
        help="LaTeX citation package: none, natbib, or biblatex.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

MarkdownExtensionsOption = Annotated[
    str | None,
    typer.Option(
        "--md-extensions",
        help="Pandoc markdown extensions to add or remove, e.g. '+smart-raw_html'.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

PandocArgOption = Annotated[
    list[str] | None,
    typer.Option(
        "--pandoc-arg",
        help="Extra pandoc argument appended last (repeatable, use --pandoc-arg=--flag).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

PandocBinaryOption = Annotated[
    str | None,
    typer.Option(
        "--pandoc",
        help="Pandoc executable to invoke (defaults to TDCPDF_PANDOC or PATH).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

TemplateOption = Annotated[
    str | None,
    typer.Option(
        "--template",
        "-t",
        help="'default' for the bundled template or a path to a custom pandoc template.",
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

NoTemplateOption = Annotated[
    bool,
    typer.Option(
        "--no-template",
        help="Use pandoc's built-in LaTeX template.",
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

ExtraDependencyOption = Annotated[
    list[str] | None,
    typer.Option(
        "--extra-dependency",
        "-d",
        help="LaTeX package to load, optionally with options as 'name[opt1,opt2]'.",
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

IncludeInHeaderOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--include-in-header",
        exists=True,
        dir_okay=False,
        resolve_path=True,
        help="File included verbatim at the end of the preamble.",
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

IncludeBeforeBodyOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--include-before-body",
        exists=True,
        dir_okay=False,
        resolve_path=True,
        help="File included at the start of the document body.",
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

IncludeAfterBodyOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--include-after-body",
        exists=True,
        dir_okay=False,
        resolve_path=True,
        help="File included at the end of the document body.",
        rich_help_panel=TEMPLATE_PANEL,
    ),
]

FigWidthOption = Annotated[
    float | None,
    typer.Option(
        "--fig-width", help="Default figure width in inches.", rich_help_panel=FIGURES_PANEL
    ),
]

FigHeightOption = Annotated[
    float | None,
    typer.Option(
        "--fig-height", help="Default figure height in inches.", rich_help_panel=FIGURES_PANEL
    ),
]

FigCaptionOption = Annotated[
    bool | None,
    typer.Option(
        "--fig-caption/--no-fig-caption",
        help="Render figures with captions.",
        show_default=False,
        rich_help_panel=FIGURES_PANEL,
    ),
]

FigCropOption = Annotated[
    bool | None,
    typer.Option(
        "--fig-crop/--no-fig-crop",
        help="Crop PDF figures with pdfcrop when available.",
        show_default=False,
        rich_help_panel=FIGURES_PANEL,
    ),
]
