from __future__ import annotations

from pathlib import Path

import pytest

from tdcpdf.core.context import RenderContext
from tdcpdf.core.dependencies import LatexDependency, TempFileRegistry
from tdcpdf.core.preprocess import (
    dependency_args,
    geometry_args,
    has_geometry,
    pdf_pre_processor,
)


def _context(tmp_path: Path, text: str, **kwargs: object) -> RenderContext:
    document = tmp_path / "report.md"
    document.write_text(text, encoding="utf-8")
    return RenderContext(
        input_file=document,
        tempfiles=TempFileRegistry(directory=tmp_path),
        **kwargs,
    )


def test_has_geometry_matches_unindented_lines() -> None:
    assert has_geometry(["title: x", "geometry: margin=2in"])
    assert not has_geometry(["  geometry: margin=2in", "title: geometry"])


def test_geometry_set_in_front_matter_suppresses_default() -> None:
    text = "---\ntitle: Report\ngeometry: margin=2in\n---\n\nBody\n"

    assert geometry_args(text) == []


def test_missing_geometry_adds_exactly_one_default() -> None:
    args = geometry_args("---\ntitle: Report\n---\n\nBody\n")

    assert args == ["--variable", "geometry:margin=1in"]


def test_geometry_outside_front_matter_is_ignored() -> None:
    assert geometry_args("Body\n\ngeometry: margin=2in\n") == [
        "--variable",
        "geometry:margin=1in",
    ]


def test_geometry_in_caller_metadata_suppresses_default() -> None:
    assert geometry_args("Body\n", {"geometry": ["margin=2cm"]}) == []


def test_dependency_args_empty_without_dependencies(tmp_path: Path) -> None:
    context = _context(tmp_path, "Body\n", metadata={"header-includes": "custom"})

    assert dependency_args(context) == []
    assert context.tempfiles.paths == []


def test_include_file_orders_caller_discovered_then_header_includes(tmp_path: Path) -> None:
    context = _context(
        tmp_path,
        "Body\n",
        metadata={"header-includes": "custom"},
        knit_meta=(LatexDependency(name="longtable"),),
    )

    args = dependency_args(context, [LatexDependency(name="booktabs")])

    assert args[0] == "--include-in-header"
    include = Path(args[1])
    content = include.read_text(encoding="utf-8")
    assert content == "\\usepackage{booktabs}\n\\usepackage{longtable}\n\ncustom\n"
    assert content.index("booktabs") < content.index("longtable") < content.index("custom")
    assert context.tempfiles.paths == [include]


def test_discovered_dependencies_nested_in_metadata(tmp_path: Path) -> None:
    context = _context(
        tmp_path,
        "Body\n",
        knit_meta=[["ignored", [LatexDependency(name="float", options=("H",))]]],
    )

    args = dependency_args(context)

    assert Path(args[1]).read_text(encoding="utf-8") == "\\usepackage[H]{float}\n"


def test_pdf_pre_processor_combines_geometry_and_dependencies(tmp_path: Path) -> None:
    context = _context(tmp_path, "---\ntitle: Report\n---\nBody\n", metadata={"title": "Report"})

    args = pdf_pre_processor(context, (LatexDependency(name="booktabs"),))

    assert args[:2] == ["--variable", "geometry:margin=1in"]
    assert args[2] == "--include-in-header"
    assert len(args) == 4
    context.tempfiles.cleanup()
    assert not Path(args[3]).exists()


def test_malformed_header_includes_is_ignored(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    context = _context(
        tmp_path,
        "Body\n",
        metadata={"header-includes": {"tex": "custom"}},
    )

    with caplog.at_level("WARNING"):
        args = dependency_args(context, ["booktabs"])

    assert Path(args[1]).read_text(encoding="utf-8") == "\\usepackage{booktabs}\n"
    assert any("header-includes" in record.getMessage() for record in caplog.records)


class WarningSink:
    debug_enabled = False

    def __init__(self) -> None:
        self.warnings: list[str] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: object) -> None:
        return


def test_malformed_header_includes_warns_through_context_emitter(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    sink = WarningSink()
    context = _context(
        tmp_path,
        "Body\n",
        metadata={"header-includes": ["\\usepackage{xcolor}", 3]},
        emitter=sink,
    )

    with caplog.at_level("WARNING"):
        args = dependency_args(context, ["booktabs"])

    assert sink.warnings == ["Ignoring non-string entries in header-includes."]
    assert not caplog.records
    assert Path(args[1]).read_text(encoding="utf-8") == (
        "\\usepackage{booktabs}\n\n\\usepackage{xcolor}\n"
    )
