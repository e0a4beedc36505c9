from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tdcpdf.core import formats
from tdcpdf.core.context import RenderContext
from tdcpdf.core.dependencies import LatexDependency
from tdcpdf.core.exceptions import InvalidOptionError
from tdcpdf.core.formats import latex_document, latex_fragment, pdf_format
from tdcpdf.core.options import FormatOptions, LatexEngine, highlighters
from tdcpdf.core.templates import builtin_template_path


BUNDLED = str(builtin_template_path())


def test_default_arguments() -> None:
    output_format = pdf_format()

    assert output_format.to == "latex"
    assert output_format.ext == ".pdf"
    assert output_format.args == (
        "--template",
        BUNDLED,
        "--highlight-style",
        "tango",
        "--pdf-engine",
        "xelatex",
        "--variable",
        "graphics=yes",
    )
    assert output_format.latex_engine is LatexEngine.XELATEX
    assert output_format.keep_tex is False
    assert output_format.clean_supporting is True
    assert output_format.template == builtin_template_path()


def test_full_argument_order(tmp_path: Path) -> None:
    header = tmp_path / "header.tex"
    output_format = pdf_format(
        toc=True,
        toc_depth=3,
        number_sections=True,
        highlight="kate",
        latex_engine="lualatex",
        citation_package="biblatex",
        includes={"in_header": header},
        pandoc_args=["--listings"],
    )

    assert output_format.args == (
        "--table-of-contents",
        "--toc-depth",
        "3",
        "--template",
        BUNDLED,
        "--number-sections",
        "--highlight-style",
        "kate",
        "--pdf-engine",
        "lualatex",
        "--biblatex",
        "--include-in-header",
        str(header),
        "--variable",
        "graphics=yes",
        "--listings",
    )


@pytest.mark.parametrize("number_sections", [True, False])
def test_numbering_flag_present_iff_requested(number_sections: bool) -> None:
    args = pdf_format(number_sections=number_sections).args

    assert ("--number-sections" in args) is number_sections


@pytest.mark.parametrize("style", highlighters())
def test_each_highlight_style_yields_its_flag(style: str) -> None:
    args = list(pdf_format(highlight=style).args)
    expected = "tango" if style == "default" else style

    index = args.index("--highlight-style")
    assert args[index + 1] == expected


def test_highlight_none_disables_highlighting() -> None:
    args = pdf_format(highlight=None).args

    assert "--no-highlight" in args
    assert "--highlight-style" not in args


@pytest.mark.parametrize("style", ["solarized", "", "Tango Dark"])
def test_unknown_highlight_fails(style: str) -> None:
    with pytest.raises(InvalidOptionError, match="highlight"):
        pdf_format(highlight=style)


@pytest.mark.parametrize("engine", ["pdflatex", "lualatex", "xelatex"])
def test_each_engine_yields_its_selection_flag(engine: str) -> None:
    args = list(pdf_format(latex_engine=engine).args)

    index = args.index("--pdf-engine")
    assert args[index + 1] == engine


@pytest.mark.parametrize("engine", ["context", "tectonic", "latex"])
def test_unknown_engine_fails(engine: str) -> None:
    with pytest.raises(InvalidOptionError, match="LaTeX engine"):
        pdf_format(latex_engine=engine)


def test_template_none_has_no_template_or_graphics() -> None:
    args = pdf_format(template=None).args

    assert "--template" not in args
    assert "graphics=yes" not in args


def test_custom_template_is_passed_through(tmp_path: Path) -> None:
    custom = tmp_path / "brand.tex"

    args = list(pdf_format(template=str(custom)).args)

    assert args.count("--template") == 1
    assert args[args.index("--template") + 1] == str(custom)
    assert "graphics=yes" not in args


def test_citation_package_flags() -> None:
    assert "--natbib" in pdf_format(citation_package="natbib").args
    args = pdf_format(citation_package="none").args
    assert "--natbib" not in args
    assert "--biblatex" not in args


def test_input_format_follows_fig_caption() -> None:
    assert pdf_format().from_.endswith("-implicit_figures")
    assert pdf_format(fig_caption=True).from_ == (
        "markdown+autolink_bare_uris+tex_math_single_backslash"
    )
    assert pdf_format(fig_caption=True, md_extensions="+smart").from_.endswith("+smart")


def test_figure_crop_requires_tools(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(formats.shutil, "which", lambda _name: None)
    assert pdf_format().figures.crop is False

    monkeypatch.setattr(formats.shutil, "which", lambda name: f"/usr/bin/{name}")
    figures = pdf_format(fig_width=5, fig_height=3).figures
    assert figures.crop is True
    assert (figures.width, figures.height, figures.dev) == (5, 3, "pdf")

    assert pdf_format(fig_crop=False).figures.crop is False


def test_options_instance_with_overrides() -> None:
    base = FormatOptions.build(toc=True, extra_dependencies=["booktabs"])

    output_format = pdf_format(base, number_sections=True)

    assert output_format.options.toc is True
    assert output_format.options.number_sections is True
    assert output_format.options.extra_dependencies == [LatexDependency(name="booktabs")]
    assert pdf_format(base).options is base


def test_keep_tex_keeps_supporting_files() -> None:
    output_format = pdf_format(keep_tex=True)

    assert output_format.keep_tex is True
    assert output_format.clean_supporting is False


def test_latex_document_stops_at_tex() -> None:
    output_format = latex_document(toc=True)

    assert output_format.ext == ".tex"
    assert output_format.keep_tex is True
    assert output_format.produces_pdf is False
    assert "--table-of-contents" in output_format.args


def test_latex_fragment_uses_fragment_template(tmp_path: Path) -> None:
    document = tmp_path / "doc.md"
    document.write_text("Body only.\n", encoding="utf-8")

    output_format = latex_fragment(extra_dependencies=["booktabs"])

    args = list(output_format.args)
    assert args[args.index("--template") + 1] == str(builtin_template_path("fragment"))
    assert "graphics=yes" not in args
    assert output_format.ext == ".tex"
    context = RenderContext.for_input(document)
    assert output_format.pre_processor(context) == []
    assert context.tempfiles.paths == []


def test_pre_processor_runs_for_default_template(tmp_path: Path) -> None:
    document = tmp_path / "doc.md"
    document.write_text("---\ntitle: Report\n---\nHello\n", encoding="utf-8")
    context = RenderContext.for_input(document, metadata={"title": "Report"})

    assert pdf_format().pre_processor(context) == ["--variable", "geometry:margin=1in"]
    assert pdf_format(template=None).pre_processor(context) == []


@pytest.mark.parametrize(
    "build",
    [
        lambda path: latex_fragment(template=path),
        lambda path: latex_fragment({"template": path}),
        lambda path: latex_fragment(FormatOptions.build(template=path)),
        lambda path: latex_fragment(template=None),
    ],
)
def test_latex_fragment_rejects_template(
    tmp_path: Path, build: Callable[[Path], object]
) -> None:
    with pytest.raises(InvalidOptionError, match="template"):
        build(tmp_path / "custom.tex")


def test_command_args_places_hook_flags_before_pass_through() -> None:
    output_format = pdf_format(pandoc_args=["--listings", "--top-level-division=chapter"])

    args = output_format.command_args(["--variable", "geometry:margin=1in"])

    assert args[-4:] == [
        "--variable",
        "geometry:margin=1in",
        "--listings",
        "--top-level-division=chapter",
    ]
    assert args[:-4] == list(output_format.args[:-2])
    assert pdf_format().command_args(["--x"])[-1] == "--x"
