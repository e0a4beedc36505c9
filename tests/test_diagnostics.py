from __future__ import annotations

import logging

import pytest

from tdcpdf.core.diagnostics import (
    LoggingEmitter,
    NullEmitter,
    ensure_emitter,
    format_event_message,
    record_event,
)
from tdcpdf.core.exceptions import RenderError
from tdcpdf.ui.cli.diagnostics import CliEmitter
from tdcpdf.ui.cli.state import render_message, set_cli_state


def test_null_emitter_is_noop(caplog: pytest.LogCaptureFixture) -> None:
    emitter = NullEmitter()
    with caplog.at_level(logging.WARNING):
        emitter.warning("nothing to see")
        emitter.error("still quiet")
    assert not caplog.records
    emitter.event("ignored", {"value": 1})
    assert emitter.debug_enabled is False


def test_ensure_emitter_defaults_to_null() -> None:
    assert isinstance(ensure_emitter(None), NullEmitter)
    emitter = LoggingEmitter()
    assert ensure_emitter(emitter) is emitter


def test_logging_emitter_logs_messages(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter(debug_enabled=True)
    with caplog.at_level(logging.INFO):
        emitter.error("boom")
        record_event(emitter, "pandoc_command", {"argv": ["pandoc", "doc.md"]})
    messages = [record.message for record in caplog.records]
    assert "boom" in messages
    assert "Running: pandoc doc.md" in messages
    assert emitter.debug_enabled is True


def test_format_event_message() -> None:
    assert format_event_message("pandoc_command", {"argv": ["pandoc", "-o", "x.pdf"]}) == (
        "Running: pandoc -o x.pdf"
    )
    assert format_event_message(
        "intermediates_staged", {"intermediates_dir": "/tmp/x", "paths": ["a"]}
    ) == "Staged 1 intermediate file into /tmp/x"
    assert format_event_message("tempfiles_cleaned", {"paths": []}) is None
    assert format_event_message("tempfiles_cleaned", {"paths": ["a", "b"]}) == (
        "Removed 2 temporary include file(s)"
    )
    assert format_event_message("unknown", {}) is None


def test_cli_emitter_bridges_state(capsys: pytest.CaptureFixture[str]) -> None:
    state = set_cli_state(verbosity=1, debug=False)
    emitter = CliEmitter(state=state)

    emitter.warning("Heads up", exc=None)
    emitter.error("Boom", exc=None)
    emitter.event("pandoc_command", {"argv": ["pandoc", "memo.md"]})
    emitter.event("custom", {"flag": True})

    captured = capsys.readouterr()
    combined_output = f"{captured.out}\n{captured.err}"
    assert "Heads up" in combined_output
    assert "Boom" in combined_output
    assert "Running: pandoc memo.md" in combined_output
    assert state.events["custom"] == [{"flag": True}]
    set_cli_state(verbosity=0)


def test_render_message_includes_cause_chain(capsys: pytest.CaptureFixture[str]) -> None:
    set_cli_state(verbosity=2, debug=False)
    try:
        try:
            raise OSError("disk full")
        except OSError as exc:
            raise RenderError("pandoc failed") from exc
    except RenderError as error:
        render_message("error", "Render failed", exception=error)

    err = capsys.readouterr().err
    assert "Render failed" in err
    assert "type: RenderError" in err
    assert "OSError: disk full" in err
    set_cli_state(verbosity=0)


def test_info_messages_hidden_without_verbosity(capsys: pytest.CaptureFixture[str]) -> None:
    set_cli_state(verbosity=0)

    render_message("info", "quiet please")

    captured = capsys.readouterr()
    assert "quiet please" not in captured.out + captured.err
