"""Implementation of the primary ``tdc-pdf`` CLI command."""

from __future__ import annotations

from pathlib import Path
import re
from typing import Annotated, Any

import click
import typer

from tdcpdf.core.config import RenderConfig
from tdcpdf.core.dependencies import LatexDependency
from tdcpdf.core.exceptions import InvalidOptionError, TdcPdfError
from tdcpdf.core.formats import OutputFormat, latex_document, pdf_format
from tdcpdf.core.frontmatter import load_front_matter
from tdcpdf.core.options import DEFAULT_TEMPLATE, FormatOptions
from tdcpdf.core.render import render as render_document
from tdcpdf.version import get_version

from .._options import (
    CitationPackageOption,
    ExtraDependencyOption,
    FigCaptionOption,
    FigCropOption,
    FigHeightOption,
    FigWidthOption,
    HighlightOption,
    IncludeAfterBodyOption,
    IncludeBeforeBodyOption,
    IncludeInHeaderOption,
    InputPathArgument,
    KeepIntermediatesOption,
    KeepTexOption,
    LatexEngineOption,
    MarkdownExtensionsOption,
    NoHighlightOption,
    NoTemplateOption,
    NumberSectionsOption,
    OutputDirOption,
    OutputPathOption,
    PandocArgOption,
    PandocBinaryOption,
    TemplateOption,
    TexOnlyOption,
    TocDepthOption,
    TocOption,
)
from ..diagnostics import CliEmitter
from ..state import debug_enabled, emit_error, set_cli_state


DIAGNOSTICS_PANEL = "Diagnostics"

_DEPENDENCY_SPEC = re.compile(r"^\s*(?P<name>[^\[\]\s]+)\s*(?:\[(?P<options>[^\]]*)\])?\s*$")


def parse_dependency_spec(value: str) -> LatexDependency:
    """Parse ``name`` or ``name[opt1,opt2]`` into a LaTeX dependency."""
    match = _DEPENDENCY_SPEC.match(value)
    if match is None:
        raise typer.BadParameter(
            f"Invalid LaTeX dependency '{value}'; expected 'name' or 'name[opt1,opt2]'.",
            param_hint="--extra-dependency",
        )
    raw_options = match.group("options") or ""
    options = tuple(item.strip() for item in raw_options.split(",") if item.strip())
    return LatexDependency(name=match.group("name"), options=options)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


def _collect_overrides(**values: Any) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _includes_override(
    in_header: list[Path] | None,
    before_body: list[Path] | None,
    after_body: list[Path] | None,
) -> dict[str, list[Path]] | None:
    includes = _collect_overrides(
        in_header=in_header or None,
        before_body=before_body or None,
        after_body=after_body or None,
    )
    return includes or None


def _template_override(template: str | None, no_template: bool) -> str | Path | None:
    if no_template:
        return None
    if template is None or template == DEFAULT_TEMPLATE:
        return template
    return Path(template).expanduser().resolve()


def render(
    input_file: InputPathArgument,
    output: OutputPathOption = None,
    output_dir: OutputDirOption = None,
    tex_only: TexOnlyOption = False,
    keep_tex: KeepTexOption = None,
    keep_intermediates: KeepIntermediatesOption = False,
    toc: TocOption = None,
    toc_depth: TocDepthOption = None,
    number_sections: NumberSectionsOption = None,
    highlight: HighlightOption = None,
    no_highlight: NoHighlightOption = False,
    latex_engine: LatexEngineOption = None,
    citation_package: CitationPackageOption = None,
    md_extensions: MarkdownExtensionsOption = None,
    pandoc_arg: PandocArgOption = None,
    pandoc: PandocBinaryOption = None,
    template: TemplateOption = None,
    no_template: NoTemplateOption = False,
    extra_dependency: ExtraDependencyOption = None,
    include_in_header: IncludeInHeaderOption = None,
    include_before_body: IncludeBeforeBodyOption = None,
    include_after_body: IncludeAfterBodyOption = None,
    fig_width: FigWidthOption = None,
    fig_height: FigHeightOption = None,
    fig_caption: FigCaptionOption = None,
    fig_crop: FigCropOption = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Show full tracebacks when an unexpected error occurs.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the installed version and exit.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = False,
) -> None:
    """Render a Markdown document into a branded PDF through pandoc."""

    ctx = click.get_current_context(silent=True)
    typer_ctx = ctx if isinstance(ctx, typer.Context) else None
    state = set_cli_state(ctx=typer_ctx, verbosity=verbose, debug=debug)

    if typer_ctx is not None and typer_ctx.resilient_parsing:
        return

    dependencies = [parse_dependency_spec(entry) for entry in extra_dependency or []]
    overrides = _collect_overrides(
        toc=toc,
        toc_depth=toc_depth,
        number_sections=number_sections,
        highlight=highlight,
        latex_engine=latex_engine,
        citation_package=citation_package,
        md_extensions=md_extensions,
        pandoc_args=pandoc_arg or None,
        keep_tex=keep_tex,
        extra_dependencies=dependencies or None,
        includes=_includes_override(include_in_header, include_before_body, include_after_body),
        fig_width=fig_width,
        fig_height=fig_height,
        fig_caption=fig_caption,
        fig_crop=fig_crop,
    )
    if no_highlight:
        overrides["highlight"] = None
    if no_template or template is not None:
        overrides["template"] = _template_override(template, no_template)

    try:
        metadata = load_front_matter(input_file)
        options = FormatOptions.from_front_matter(
            metadata, base_dir=input_file.parent, **overrides
        )
        output_format: OutputFormat = (
            latex_document(options) if tex_only else pdf_format(options)
        )
    except InvalidOptionError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    config = RenderConfig.from_env(pandoc=pandoc, keep_intermediates=keep_intermediates or None)
    emitter = CliEmitter(state=state, debug_enabled=debug_enabled())

    try:
        target = render_document(
            input_file,
            output_format,
            output_file=output,
            output_dir=output_dir,
            config=config,
            emitter=emitter,
            console=state.console if state.verbosity >= 2 else None,
        )
    except TdcPdfError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    typer.echo(str(target))


__all__ = ["parse_dependency_spec", "render"]
