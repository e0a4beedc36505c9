"""LaTeX dependency declarations and the transient header include file."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import re
import tempfile
from typing import Any

from .diagnostics import DiagnosticEmitter
from .exceptions import InvalidOptionError


logger = logging.getLogger(__name__)

TMPFILE_PREFIX = "tdcpdf-str"
TMPFILE_SUFFIX = ".tex"
_TMPFILE_PATTERN = re.compile(
    rf"^{re.escape(TMPFILE_PREFIX)}[0-9a-z_]+{re.escape(TMPFILE_SUFFIX)}$"
)


@dataclass(frozen=True, slots=True)
class LatexDependency:
    """A LaTeX package required by the rendered document."""

    name: str
    options: tuple[str, ...] = ()
    extra_lines: tuple[str, ...] = ()

    def as_latex(self) -> str:
        """Return the ``\\usepackage`` line followed by any extra preamble lines."""
        opts = ",".join(self.options)
        if opts:
            opts = f"[{opts}]"
        lines = [f"\\usepackage{opts}{{{self.name}}}", *self.extra_lines]
        return "\n".join(lines)


def _as_string_tuple(value: Any, *, label: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable) and not isinstance(value, bytes | Mapping):
        items: list[str] = []
        for item in value:
            if not isinstance(item, str):
                raise InvalidOptionError(f"LaTeX dependency {label} must be strings.")
            items.append(item)
        return tuple(items)
    raise InvalidOptionError(f"LaTeX dependency {label} must be a string or a list of strings.")


def latex_dependencies(payload: Any) -> list[LatexDependency]:
    """Normalise caller-supplied dependency declarations.

    Accepts a single package name, a :class:`LatexDependency`, a mapping of
    package names to their options, or a sequence mixing names and
    dependencies.
    """
    if payload is None:
        return []
    if isinstance(payload, LatexDependency):
        return [payload]
    if isinstance(payload, str):
        return [LatexDependency(name=payload)]
    if isinstance(payload, Mapping):
        if "name" in payload and isinstance(payload["name"], str):
            return [
                LatexDependency(
                    name=payload["name"],
                    options=_as_string_tuple(payload.get("options"), label="options"),
                    extra_lines=_as_string_tuple(payload.get("extra_lines"), label="extra lines"),
                )
            ]
        dependencies: list[LatexDependency] = []
        for name, options in payload.items():
            if not isinstance(name, str):
                raise InvalidOptionError("LaTeX dependency names must be strings.")
            dependencies.append(
                LatexDependency(name=name, options=_as_string_tuple(options, label="options"))
            )
        return dependencies
    if isinstance(payload, Iterable) and not isinstance(payload, bytes):
        dependencies = []
        for entry in payload:
            if isinstance(entry, Mapping) and "name" not in entry:
                raise InvalidOptionError(
                    "LaTeX dependency entries in a list must be names or declare a 'name'."
                )
            dependencies.extend(latex_dependencies(entry))
        return dependencies
    raise InvalidOptionError(
        "Extra dependencies must be package names, a mapping of names to options, "
        "or LatexDependency instances."
    )


def flatten_latex_dependencies(knit_meta: Any) -> list[LatexDependency]:
    """Collect LaTeX dependencies nested anywhere in computation metadata."""
    if isinstance(knit_meta, LatexDependency):
        return [knit_meta]
    if isinstance(knit_meta, str | bytes | Mapping) or knit_meta is None:
        return []
    if not isinstance(knit_meta, Iterable):
        return []
    found: list[LatexDependency] = []
    for entry in knit_meta:
        found.extend(flatten_latex_dependencies(entry))
    return found


def has_latex_dependencies(knit_meta: Any) -> bool:
    """Return whether the computation metadata declares any LaTeX dependency."""
    return bool(flatten_latex_dependencies(knit_meta))


def latex_dependencies_as_string(dependencies: Iterable[LatexDependency]) -> str:
    """Serialise dependencies into preamble lines."""
    return "\n".join(dependency.as_latex() for dependency in dependencies)


def _warn(emitter: DiagnosticEmitter | None, message: str) -> None:
    if emitter is None:
        logger.warning(message)
    else:
        emitter.warning(message)


def normalise_header_includes(
    raw: Any, *, emitter: DiagnosticEmitter | None = None
) -> list[str] | None:
    """Return ``header-includes`` as a list of lines, or ``None`` when unusable.

    Malformed entries are reported through ``emitter`` when one is given,
    otherwise through the module logger.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, Sequence) and not isinstance(raw, bytes):
        lines = [item for item in raw if isinstance(item, str)]
        if len(lines) != len(raw):
            _warn(emitter, "Ignoring non-string entries in header-includes.")
        return lines
    _warn(
        emitter,
        f"Ignoring header-includes of type {type(raw).__name__}; "
        "expected a string or a list of strings.",
    )
    return None


def assemble_header_include(
    explicit: Sequence[LatexDependency],
    discovered: Sequence[LatexDependency],
    header_includes: Any = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> bytes:
    """Build the header include payload.

    Caller dependencies come first, then discovered ones, then the raw
    ``header-includes`` content from the front matter.
    """
    text = latex_dependencies_as_string([*explicit, *discovered]) + "\n"
    lines = normalise_header_includes(header_includes, emitter=emitter)
    if lines is not None:
        text += "\n".join(["", *lines])
        text += "\n"
    return text.encode("utf-8")


@dataclass(slots=True)
class TempFileRegistry:
    """Transient files created for a single render."""

    directory: Path | None = None
    paths: list[Path] = field(default_factory=list)

    def create(self, payload: bytes) -> Path:
        """Write ``payload`` to a new temporary file and track it."""
        handle = tempfile.NamedTemporaryFile(
            prefix=TMPFILE_PREFIX,
            suffix=TMPFILE_SUFFIX,
            dir=self.directory,
            delete=False,
        )
        with handle:
            handle.write(payload)
        path = Path(handle.name)
        self.paths.append(path)
        return path

    def cleanup(self) -> list[Path]:
        """Delete every tracked file and return the removed paths."""
        removed: list[Path] = []
        while self.paths:
            path = self.paths.pop()
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            removed.append(path)
        return removed


def as_tmpfile(payload: bytes, registry: TempFileRegistry) -> Path | None:
    """Return ``payload`` written to a tracked temporary file, or ``None`` when empty."""
    if not payload:
        return None
    return registry.create(payload)


def clean_tmpfiles(directory: str | os.PathLike[str] | None = None) -> list[Path]:
    """Remove orphaned include files left in the temporary directory."""
    root = Path(directory) if directory is not None else Path(tempfile.gettempdir())
    removed: list[Path] = []
    if not root.is_dir():
        return removed
    for candidate in root.iterdir():
        if not _TMPFILE_PATTERN.match(candidate.name) or not candidate.is_file():
            continue
        try:
            candidate.unlink()
        except OSError as exc:
            logger.debug("Could not remove %s: %s", candidate, exc)
            continue
        removed.append(candidate)
    return removed


__all__ = [
    "TMPFILE_PREFIX",
    "LatexDependency",
    "TempFileRegistry",
    "as_tmpfile",
    "assemble_header_include",
    "clean_tmpfiles",
    "flatten_latex_dependencies",
    "has_latex_dependencies",
    "latex_dependencies",
    "latex_dependencies_as_string",
    "normalise_header_includes",
]
