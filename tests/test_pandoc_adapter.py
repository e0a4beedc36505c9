from __future__ import annotations

import io
from pathlib import Path
import subprocess

import pytest
from rich.console import Console

from tdcpdf.adapters import pandoc
from tdcpdf.core.exceptions import PandocNotFoundError, RenderError


def _fake_binary(tmp_path: Path) -> Path:
    binary = tmp_path / "bin" / "pandoc"
    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_text("#!/bin/sh\n", encoding="utf-8")
    binary.chmod(0o755)
    return binary


def test_resolve_prefers_explicit_path(tmp_path: Path) -> None:
    binary = _fake_binary(tmp_path)

    assert pandoc.resolve_pandoc_binary(binary, environ={}) == str(binary)


def test_resolve_reads_environment(tmp_path: Path) -> None:
    binary = _fake_binary(tmp_path)

    resolved = pandoc.resolve_pandoc_binary(environ={"TDCPDF_PANDOC": str(binary)})

    assert resolved == str(binary)


def test_resolve_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(PandocNotFoundError, match="not found"):
        pandoc.resolve_pandoc_binary(tmp_path / "nope" / "pandoc", environ={})


def test_resolve_falls_back_to_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(pandoc.shutil, "which", lambda name: f"/usr/local/bin/{name}")
    assert pandoc.resolve_pandoc_binary(environ={}) == "/usr/local/bin/pandoc"

    monkeypatch.setattr(pandoc.shutil, "which", lambda _name: None)
    with pytest.raises(PandocNotFoundError, match="TDCPDF_PANDOC"):
        pandoc.resolve_pandoc_binary(environ={})
    with pytest.raises(PandocNotFoundError, match="pandoc-3"):
        pandoc.resolve_pandoc_binary("pandoc-3", environ={})


def test_not_found_is_a_render_error() -> None:
    assert issubclass(PandocNotFoundError, RenderError)


def test_build_pandoc_command_layout(tmp_path: Path) -> None:
    command = pandoc.build_pandoc_command(
        "pandoc",
        tmp_path / "doc.md",
        tmp_path / "out" / "doc.pdf",
        from_format="markdown",
        to_format="latex",
        args=["--toc"],
    )

    assert command.argv == [
        "pandoc",
        "doc.md",
        "--from",
        "markdown",
        "--to",
        "latex",
        "--output",
        str(tmp_path / "out" / "doc.pdf"),
        "--toc",
    ]
    assert command.output_path == tmp_path / "out" / "doc.pdf"


def test_run_pandoc_captures_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []

    def fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        calls.append({"argv": argv, **kwargs})
        return subprocess.CompletedProcess(argv, 43, "", "line 1\nError producing PDF.\n")

    monkeypatch.setattr(pandoc.subprocess, "run", fake_run)
    stream = io.StringIO()
    command = pandoc.PandocCommand(argv=["pandoc", "doc.md"], output_path=tmp_path / "doc.pdf")

    result = pandoc.run_pandoc(
        command, workdir=tmp_path, env={"A": "1"}, console=Console(file=stream)
    )

    assert calls[0]["cwd"] == tmp_path
    assert calls[0]["env"] == {"A": "1"}
    assert result.succeeded is False
    assert result.summary() == "line 1\nError producing PDF."
    assert "Error producing PDF." in stream.getvalue()


def test_run_pandoc_missing_executable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(argv: list[str], **_kwargs: object) -> None:
        raise FileNotFoundError(argv[0])

    monkeypatch.setattr(pandoc.subprocess, "run", fake_run)
    command = pandoc.PandocCommand(argv=["pandoc"], output_path=tmp_path / "doc.pdf")

    with pytest.raises(PandocNotFoundError):
        pandoc.run_pandoc(command, workdir=tmp_path, env={})


def test_summary_without_stderr() -> None:
    result = pandoc.PandocResult(returncode=2, stdout="", stderr="", command=["pandoc"])

    assert result.summary() == "pandoc exited with status 2"
