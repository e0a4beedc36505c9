"""YAML front matter parsing for Markdown sources."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


_DELIMITERS = {"---", "..."}


def front_matter_lines(source: str) -> list[str] | None:
    """Return the raw lines of the leading front matter block, if any."""
    candidate = source.lstrip("\ufeff")
    lines = candidate.splitlines()
    if not lines or lines[0].strip() != "---":
        return None

    block: list[str] = []
    for line in lines[1:]:
        if line.strip() in _DELIMITERS:
            return block
        block.append(line)
    return None


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split ``source`` into its parsed front matter and the remaining body."""
    block = front_matter_lines(source)
    if block is None:
        return {}, source

    try:
        metadata = yaml.safe_load("\n".join(block)) or {}
    except yaml.YAMLError:
        return {}, source

    if not isinstance(metadata, dict):
        metadata = {}

    lines = source.lstrip("\ufeff").splitlines()
    body = "\n".join(lines[len(block) + 2 :])
    if source.endswith("\n"):
        body += "\n"
    return metadata, body


def load_front_matter(path: Path) -> dict[str, Any]:
    """Return parsed front matter from a Markdown file."""
    metadata, _ = split_front_matter(path.read_text(encoding="utf-8"))
    return metadata


__all__ = ["front_matter_lines", "load_front_matter", "split_front_matter"]
