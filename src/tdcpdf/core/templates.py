"""Registry helpers for pandoc templates bundled with the package."""

from __future__ import annotations

from pathlib import Path


_RESOURCES_ROOT = Path(__file__).resolve().parent.parent / "resources"

_BUILTIN_TEMPLATES: dict[str, str] = {
    "tdc_pdf": "tdc_pdf.tex",
    "fragment": "fragment.tex",
}


def builtin_template_path(name: str = "tdc_pdf") -> Path:
    """Return the path of a bundled template."""
    try:
        filename = _BUILTIN_TEMPLATES[name]
    except KeyError as exc:
        available = ", ".join(sorted(_BUILTIN_TEMPLATES))
        raise LookupError(f"Unknown bundled template '{name}'. Available: {available}.") from exc
    return _RESOURCES_ROOT / filename


def iter_builtin_templates() -> tuple[str, ...]:
    """Return the available bundled template names."""
    return tuple(sorted(_BUILTIN_TEMPLATES))


__all__ = ["builtin_template_path", "iter_builtin_templates"]
