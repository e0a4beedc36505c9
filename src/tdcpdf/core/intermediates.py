"""Stage files pandoc needs next to the document it converts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from pathlib import Path
import re
import shutil
from typing import Any
from urllib.parse import unquote

from .exceptions import AssetCopyError
from .frontmatter import split_front_matter


logger = logging.getLogger(__name__)

_MARKDOWN_IMAGE = re.compile(r"!\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'][^\"']*[\"'])?\s*\)")
_HTML_IMAGE = re.compile(r"<img\b[^>]*?\bsrc\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_INCLUDE_GRAPHICS = re.compile(r"\\includegraphics\s*(?:\[[^\]]*\])?\s*\{([^}]+)\}")
_CHILD_CHUNK = re.compile(
    r"^\s*(?:```+|~~~+)\s*\{[^}\n]*\bchild\s*=\s*[\"']([^\"']+)[\"']", re.MULTILINE
)
_URL_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_FRONT_MATTER_RESOURCES = ("bibliography", "csl")


def _front_matter_references(metadata: Mapping[str, Any]) -> list[str]:
    references: list[str] = []
    for key in _FRONT_MATTER_RESOURCES:
        value = metadata.get(key)
        if isinstance(value, str):
            references.append(value)
        elif isinstance(value, list):
            references.extend(item for item in value if isinstance(item, str))
    return references


def _local_reference(reference: str, *, source_dir: Path, root: Path) -> Path | None:
    candidate = unquote(reference.strip()).split("#", 1)[0].split("?", 1)[0]
    if not candidate or _URL_SCHEME.match(candidate):
        return None
    path = Path(candidate)
    if path.is_absolute():
        return None
    resolved = (source_dir / path).resolve()
    try:
        relative = resolved.relative_to(root)
    except ValueError:
        logger.debug("Skipping %s outside of %s", reference, root)
        return None
    if not resolved.is_file():
        return None
    return relative


def find_external_resources(input_file: Path) -> list[Path]:
    """Return files referenced by ``input_file``, relative to its directory.

    Images, bibliography and CSL files are collected, and child documents
    declared through a ``child=`` chunk option are scanned recursively.
    """
    root = input_file.resolve().parent
    found: list[Path] = []
    seen: set[Path] = set()
    visited: set[Path] = set()

    def _scan(document: Path) -> None:
        resolved_document = document.resolve()
        if resolved_document in visited:
            return
        visited.add(resolved_document)

        text = resolved_document.read_text(encoding="utf-8")
        metadata, body = split_front_matter(text)
        source_dir = resolved_document.parent

        references = _front_matter_references(metadata)
        for pattern in (_MARKDOWN_IMAGE, _HTML_IMAGE, _INCLUDE_GRAPHICS):
            references.extend(match.group(1) for match in pattern.finditer(body))

        for reference in references:
            relative = _local_reference(reference, source_dir=source_dir, root=root)
            if relative is not None and relative not in seen:
                seen.add(relative)
                found.append(relative)

        for match in _CHILD_CHUNK.finditer(body):
            relative = _local_reference(match.group(1), source_dir=source_dir, root=root)
            if relative is None:
                continue
            if relative not in seen:
                seen.add(relative)
                found.append(relative)
            _scan(root / relative)

    _scan(input_file)
    return found


def _same_file(first: Path, second: Path) -> bool:
    try:
        return first.resolve() == second.resolve()
    except OSError:
        return False


def copy_render_intermediates(original_input: Path, intermediates_dir: Path) -> list[Path]:
    """Copy every file referenced by the input into ``intermediates_dir``."""
    source_root = original_input.resolve().parent
    staged: list[Path] = []
    for relative in find_external_resources(original_input):
        source = source_root / relative
        destination = intermediates_dir / relative
        if not _same_file(source, destination):
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, destination)
            except OSError as exc:
                raise AssetCopyError(f"Unable to stage intermediate '{relative}': {exc}") from exc
        staged.append(destination)
    return staged


def copy_supporting_files(files_dir: Path, intermediates_dir: Path) -> list[Path]:
    """Recursively copy ``files_dir`` into ``intermediates_dir`` and list the copies."""
    target = intermediates_dir / files_dir.name
    try:
        if not _same_file(files_dir, target):
            shutil.copytree(files_dir, target, dirs_exist_ok=True)
        return sorted(path for path in target.rglob("*") if path.is_file())
    except OSError as exc:
        raise AssetCopyError(
            f"Unable to copy supporting files from '{files_dir}': {exc}"
        ) from exc


def _unique(paths: Iterable[Path]) -> list[Path]:
    seen: set[Path] = set()
    ordered: list[Path] = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        ordered.append(path)
    return ordered


def generate_intermediates(
    original_input: Path,
    intermediates_dir: Path,
    *,
    files_dir: Path | None = None,
) -> list[Path]:
    """Stage the input's intermediates and its supporting files directory."""
    intermediates_dir.mkdir(parents=True, exist_ok=True)
    intermediates = copy_render_intermediates(original_input, intermediates_dir)

    # Generated figures must be visible to pandoc during the render as well.
    if files_dir is not None and files_dir.is_dir():
        intermediates.extend(copy_supporting_files(files_dir, intermediates_dir))

    return _unique(intermediates)


__all__ = [
    "copy_render_intermediates",
    "copy_supporting_files",
    "find_external_resources",
    "generate_intermediates",
]
