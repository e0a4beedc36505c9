"""Configuration models used by the render pipeline.

RenderConfig

`pandoc` (`str | None`)
: Pandoc executable to invoke. Defaults to `TDCPDF_PANDOC` or the first
  `pandoc` found on `PATH`.

`intermediates_dir` (`Path | None`)
: Directory where intermediates are staged. A fresh temporary directory is
  used when omitted, and removed after the render unless kept.

`keep_intermediates` (`bool`)
: Leave the intermediates directory in place after the render.

`sweep_tempfiles` (`bool`)
: Remove orphaned header include files from the system temporary directory
  once the render finishes.

`env` (`dict[str, str]`)
: Environment variables overriding the inherited environment when pandoc
  runs.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


_TRUTHY = {"1", "true", "yes", "on"}


class RenderConfig(BaseModel):
    """Settings controlling how pandoc is driven."""

    model_config = ConfigDict(extra="forbid")

    pandoc: str | None = None
    intermediates_dir: Path | None = None
    keep_intermediates: bool = False
    sweep_tempfiles: bool = False
    env: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: object
    ) -> RenderConfig:
        """Build a configuration from ``TDCPDF_*`` environment variables."""
        source = os.environ if environ is None else environ
        payload: dict[str, object] = {}
        pandoc = source.get("TDCPDF_PANDOC")
        if pandoc:
            payload["pandoc"] = pandoc
        keep = source.get("TDCPDF_KEEP_INTERMEDIATES")
        if keep is not None:
            payload["keep_intermediates"] = keep.strip().lower() in _TRUTHY
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(payload)

    def pandoc_env(self) -> dict[str, str]:
        """Return the environment used to run pandoc."""
        env = os.environ.copy()
        env.update(self.env)
        return env


__all__ = ["RenderConfig"]
