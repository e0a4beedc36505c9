"""Per-render state threaded through the output format hooks."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .dependencies import TempFileRegistry
from .diagnostics import DiagnosticEmitter


@dataclass(slots=True)
class RenderContext:
    """Inputs shared by the pre-processor and the intermediates generator.

    One instance exists per render call; the files directory recorded here is
    what the intermediates generator later copies, so nothing is captured in
    closures or module globals.
    """

    input_file: Path
    metadata: Mapping[str, Any] = field(default_factory=dict)
    runtime: str = "static"
    knit_meta: Sequence[Any] = field(default_factory=tuple)
    files_dir: Path | None = None
    output_dir: Path | None = None
    tempfiles: TempFileRegistry = field(default_factory=TempFileRegistry)
    emitter: DiagnosticEmitter | None = None

    @classmethod
    def for_input(
        cls,
        input_file: Path,
        *,
        metadata: Mapping[str, Any] | None = None,
        runtime: str = "static",
        knit_meta: Sequence[Any] = (),
        output_dir: Path | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> RenderContext:
        """Build a context using the conventional ``<stem>_files`` directory."""
        return cls(
            input_file=input_file,
            metadata=dict(metadata or {}),
            runtime=runtime,
            knit_meta=tuple(knit_meta),
            files_dir=supporting_files_dir(input_file),
            output_dir=output_dir,
            emitter=emitter,
        )


def supporting_files_dir(input_file: Path) -> Path:
    """Return the directory holding figures generated for ``input_file``."""
    return input_file.with_name(f"{input_file.stem}_files")


__all__ = ["RenderContext", "supporting_files_dir"]
