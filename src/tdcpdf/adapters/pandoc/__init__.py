"""Pandoc command construction and execution helpers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import io
import os
from pathlib import Path
import shutil
import subprocess

from rich.console import Console

from tdcpdf.core.exceptions import PandocNotFoundError


PANDOC_ENV_VAR = "TDCPDF_PANDOC"


@dataclass(slots=True)
class PandocCommand:
    """Executable command plus the file it produces."""

    argv: list[str]
    output_path: Path


@dataclass(slots=True)
class PandocResult:
    """Outcome of a pandoc run."""

    returncode: int
    stdout: str
    stderr: str
    command: list[str]

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    def summary(self) -> str:
        """Return the most relevant diagnostic lines emitted by pandoc."""
        lines = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        if not lines:
            return f"pandoc exited with status {self.returncode}"
        return "\n".join(lines[-5:])


def _looks_like_path(binary: str) -> bool:
    """Return True when ``binary`` already encodes a filesystem path."""
    if Path(binary).is_absolute():
        return True
    separators = [os.sep]
    if os.altsep:
        separators.append(os.altsep)
    return any(sep and sep in binary for sep in separators)


def resolve_pandoc_binary(
    preference: str | os.PathLike[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Locate the pandoc executable to invoke."""
    source = os.environ if environ is None else environ
    candidate = os.fspath(preference) if preference is not None else source.get(PANDOC_ENV_VAR)
    if candidate:
        if _looks_like_path(candidate):
            if Path(candidate).is_file():
                return candidate
            raise PandocNotFoundError(f"Pandoc executable not found at {candidate}.")
        resolved = shutil.which(candidate)
        if resolved is None:
            raise PandocNotFoundError(f"'{candidate}' is not available on PATH.")
        return resolved

    resolved = shutil.which("pandoc")
    if resolved is None:
        raise PandocNotFoundError(
            f"Pandoc is not available on PATH (install it or set {PANDOC_ENV_VAR})."
        )
    return resolved


def build_pandoc_command(
    binary: str,
    input_path: Path,
    output_path: Path,
    *,
    from_format: str,
    to_format: str,
    args: Sequence[str] = (),
) -> PandocCommand:
    """Construct the pandoc command converting ``input_path``."""
    argv = [
        binary,
        input_path.name,
        "--from",
        from_format,
        "--to",
        to_format,
        "--output",
        str(output_path),
        *args,
    ]
    return PandocCommand(argv=argv, output_path=output_path)


def run_pandoc(
    command: PandocCommand,
    *,
    workdir: Path,
    env: Mapping[str, str],
    console: Console | None = None,
) -> PandocResult:
    """Execute the pandoc command and echo its output to ``console``."""
    console = console or Console(file=io.StringIO())
    try:
        process = subprocess.run(
            command.argv,
            check=False,
            capture_output=True,
            text=True,
            cwd=workdir,
            env=dict(env),
        )
    except FileNotFoundError as exc:
        raise PandocNotFoundError(f"Unable to execute {command.argv[0]}: {exc}") from exc

    stdout = process.stdout or ""
    stderr = process.stderr or ""
    if stdout:
        console.print(stdout.rstrip(), markup=False)
    if stderr:
        console.print(stderr.rstrip(), markup=False)
    return PandocResult(
        returncode=process.returncode,
        stdout=stdout,
        stderr=stderr,
        command=list(command.argv),
    )


__all__ = [
    "PANDOC_ENV_VAR",
    "PandocCommand",
    "PandocResult",
    "build_pandoc_command",
    "resolve_pandoc_binary",
    "run_pandoc",
]
