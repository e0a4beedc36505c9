"""Drive pandoc with an output format from source document to PDF."""

from __future__ import annotations

from collections.abc import Sequence
import logging
import os
from pathlib import Path
import shutil
import tempfile
from typing import Any

from rich.console import Console

from tdcpdf.adapters.pandoc import (
    build_pandoc_command,
    resolve_pandoc_binary,
    run_pandoc,
)

from .config import RenderConfig
from .context import RenderContext
from .dependencies import clean_tmpfiles
from .diagnostics import DiagnosticEmitter, ensure_emitter, record_event
from .exceptions import AssetCopyError, RenderError
from .formats import OutputFormat, pdf_format
from .frontmatter import split_front_matter
from .options import FormatOptions


logger = logging.getLogger(__name__)

INTERMEDIATES_PREFIX = "tdcpdf-intermediates-"


def resolve_output_path(
    input_path: Path,
    ext: str,
    *,
    output_file: str | os.PathLike[str] | None = None,
    output_dir: str | os.PathLike[str] | None = None,
) -> Path:
    """Return the absolute path of the rendered file."""
    if output_file is not None:
        target = Path(output_file).expanduser()
        if not target.suffix:
            target = target.with_suffix(ext)
    else:
        target = Path(f"{input_path.stem}{ext}")

    if not target.is_absolute():
        base = Path(output_dir).expanduser() if output_dir is not None else input_path.parent
        target = base / target
    return target.resolve()


def _stage_input(input_path: Path, intermediates_dir: Path) -> Path:
    staged = intermediates_dir / input_path.name
    if staged.exists() and staged.resolve() == input_path.resolve():
        return staged
    try:
        shutil.copy2(input_path, staged)
    except OSError as exc:
        raise AssetCopyError(f"Unable to stage '{input_path.name}': {exc}") from exc
    return staged


def _run_pandoc(
    binary: str,
    staged_input: Path,
    target: Path,
    output_format: OutputFormat,
    args: Sequence[str],
    *,
    workdir: Path,
    config: RenderConfig,
    emitter: DiagnosticEmitter,
    console: Console | None,
) -> None:
    command = build_pandoc_command(
        binary,
        staged_input,
        target,
        from_format=output_format.from_,
        to_format=output_format.to,
        args=args,
    )
    record_event(emitter, "pandoc_command", {"argv": command.argv, "output": str(target)})
    result = run_pandoc(command, workdir=workdir, env=config.pandoc_env(), console=console)
    if not result.succeeded:
        raise RenderError(f"pandoc failed to produce {target.name}: {result.summary()}")


def render(
    input_path: str | os.PathLike[str],
    output_format: OutputFormat | None = None,
    *,
    output_file: str | os.PathLike[str] | None = None,
    output_dir: str | os.PathLike[str] | None = None,
    knit_meta: Sequence[Any] = (),
    runtime: str = "static",
    config: RenderConfig | None = None,
    emitter: DiagnosticEmitter | None = None,
    console: Console | None = None,
) -> Path:
    """Render ``input_path`` and return the path of the produced file.

    When ``output_format`` is omitted, the format is read from the document's
    ``output`` front matter entry. Temporary include files are removed on every
    exit path, and a temporary intermediates directory is removed unless the
    configuration asks to keep it.
    """
    source = Path(input_path).expanduser().resolve()
    config = config or RenderConfig.from_env()

    text = source.read_text(encoding="utf-8")
    metadata, _ = split_front_matter(text)
    if output_format is None:
        output_format = pdf_format(
            FormatOptions.from_front_matter(metadata, base_dir=source.parent)
        )

    target = resolve_output_path(
        source, output_format.ext, output_file=output_file, output_dir=output_dir
    )
    binary = resolve_pandoc_binary(config.pandoc)
    context = RenderContext.for_input(
        source,
        metadata=metadata,
        runtime=runtime,
        knit_meta=knit_meta,
        output_dir=target.parent,
        emitter=emitter,
    )
    emitter = ensure_emitter(emitter)

    created_dir = config.intermediates_dir is None
    if created_dir:
        intermediates_dir = Path(tempfile.mkdtemp(prefix=INTERMEDIATES_PREFIX))
    else:
        intermediates_dir = config.intermediates_dir.expanduser().resolve()
        intermediates_dir.mkdir(parents=True, exist_ok=True)

    try:
        extra_args = output_format.pre_processor(context)
        staged = output_format.intermediates_generator(context, source, intermediates_dir)
        record_event(
            emitter,
            "intermediates_staged",
            {"intermediates_dir": str(intermediates_dir), "paths": [str(p) for p in staged]},
        )
        staged_input = _stage_input(source, intermediates_dir)
        args = output_format.command_args(extra_args)

        target.parent.mkdir(parents=True, exist_ok=True)
        if output_format.produces_pdf and output_format.keep_tex:
            _run_pandoc(
                binary,
                staged_input,
                target.with_suffix(".tex"),
                output_format,
                args,
                workdir=intermediates_dir,
                config=config,
                emitter=emitter,
                console=console,
            )
        _run_pandoc(
            binary,
            staged_input,
            target,
            output_format,
            args,
            workdir=intermediates_dir,
            config=config,
            emitter=emitter,
            console=console,
        )
    finally:
        removed = context.tempfiles.cleanup()
        record_event(emitter, "tempfiles_cleaned", {"paths": [str(path) for path in removed]})
        if created_dir and not config.keep_intermediates:
            shutil.rmtree(intermediates_dir, ignore_errors=True)
        else:
            logger.debug("Keeping intermediates in %s", intermediates_dir)
        if config.sweep_tempfiles:
            clean_tmpfiles()

    logger.info("Rendered %s", target)
    return target


__all__ = ["INTERMEDIATES_PREFIX", "render", "resolve_output_path"]
