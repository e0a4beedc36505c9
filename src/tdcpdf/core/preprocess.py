"""Pre-processing hooks run before pandoc converts the document."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import logging
import re
from typing import Any

from .context import RenderContext
from .dependencies import (
    LatexDependency,
    as_tmpfile,
    assemble_header_include,
    flatten_latex_dependencies,
    latex_dependencies,
)
from .frontmatter import front_matter_lines
from .pandoc_args import DEFAULT_GEOMETRY_VARIABLE, in_header_args


logger = logging.getLogger(__name__)

_GEOMETRY_PATTERN = re.compile(r"^geometry:.*$")


def has_geometry(lines: Iterable[str]) -> bool:
    """Return whether any line declares a ``geometry:`` setting."""
    return any(_GEOMETRY_PATTERN.match(line) for line in lines)


def geometry_args(text: str, metadata: Mapping[str, Any] | None = None) -> list[str]:
    """Return the default margin variable unless the document sets a geometry."""
    lines = front_matter_lines(text) or []
    if has_geometry(lines) or (metadata is not None and "geometry" in metadata):
        return []
    return ["--variable", DEFAULT_GEOMETRY_VARIABLE]


def dependency_args(
    context: RenderContext,
    extra_dependencies: Sequence[LatexDependency] | Any = (),
) -> list[str]:
    """Write caller and discovered dependencies to a header include file."""
    explicit = latex_dependencies(extra_dependencies) if extra_dependencies else []
    discovered = flatten_latex_dependencies(context.knit_meta)
    if not explicit and not discovered:
        return []

    payload = assemble_header_include(
        explicit,
        discovered,
        context.metadata.get("header-includes"),
        emitter=context.emitter,
    )
    filename = as_tmpfile(payload, context.tempfiles)
    if filename is None:
        return []
    logger.debug(
        "Wrote %d LaTeX dependencies to %s", len(explicit) + len(discovered), filename
    )
    return in_header_args([filename])


def pdf_pre_processor(
    context: RenderContext,
    extra_dependencies: Sequence[LatexDependency] = (),
) -> list[str]:
    """Geometry default plus dependency include for the bundled template."""
    text = context.input_file.read_text(encoding="utf-8")
    args = geometry_args(text, context.metadata)
    args.extend(dependency_args(context, extra_dependencies))
    return args


__all__ = [
    "dependency_args",
    "geometry_args",
    "has_geometry",
    "pdf_pre_processor",
]
