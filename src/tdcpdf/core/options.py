"""User-facing options accepted by the PDF output format.

FormatOptions

`toc` (`bool`)
: Include a table of contents in the output.

`toc_depth` (`int`)
: Depth of headers to include in the table of contents.

`number_sections` (`bool`)
: Number section headings.

`fig_width`, `fig_height` (`float`)
: Default figure size in inches, forwarded to the computation engine.

`fig_crop` (`bool`)
: Crop PDF figures with `pdfcrop` when it is available.

`fig_caption` (`bool`)
: Render figures with captions (pandoc `implicit_figures`).

`dev` (`str`)
: Graphics device used for figure output.

`df_print` (`DataFramePrint | Callable`)
: Method used to print data frames: `default`, `kable`, `tibble`, `paged`,
  or an arbitrary callable.

`highlight` (`Highlight | None`)
: Syntax highlighting style. `None` disables highlighting.

`template` (`str | Path | None`)
: `"default"` selects the bundled template, `None` pandoc's built-in one,
  anything else is a path to a custom template.

`keep_tex` (`bool`)
: Keep the intermediate `.tex` file.

`latex_engine` (`LatexEngine`)
: LaTeX engine used by pandoc to produce the PDF.

`citation_package` (`CitationPackage`)
: LaTeX package processing citations, or `none`.

`includes` (`Includes | None`)
: Additional content included in the header, before or after the body.

`md_extensions` (`str | None`)
: Pandoc markdown extensions added to or removed from the input format,
  e.g. `+smart-raw_html`.

`pandoc_args` (`list[str]`)
: Extra pandoc arguments appended after every derived flag.

`extra_dependencies`
: LaTeX packages added to the preamble.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .dependencies import LatexDependency, latex_dependencies
from .exceptions import InvalidOptionError


DEFAULT_TEMPLATE = "default"
FORMAT_NAMES = ("tdc_pdf", "tdcpdf::tdc_pdf", "tdcpdf.tdc_pdf")


class Highlight(str, Enum):
    """Syntax highlighting styles understood by pandoc."""

    DEFAULT = "default"
    TANGO = "tango"
    PYGMENTS = "pygments"
    KATE = "kate"
    MONOCHROME = "monochrome"
    ESPRESSO = "espresso"
    ZENBURN = "zenburn"
    HADDOCK = "haddock"


class LatexEngine(str, Enum):
    """LaTeX engines pandoc can drive to produce a PDF."""

    PDFLATEX = "pdflatex"
    LUALATEX = "lualatex"
    XELATEX = "xelatex"


class CitationPackage(str, Enum):
    """LaTeX packages that can process citations."""

    NONE = "none"
    NATBIB = "natbib"
    BIBLATEX = "biblatex"


class DataFramePrint(str, Enum):
    """Named data frame printing methods."""

    DEFAULT = "default"
    KABLE = "kable"
    TIBBLE = "tibble"
    PAGED = "paged"


def highlighters() -> tuple[str, ...]:
    """Return the accepted highlight style names."""
    return tuple(member.value for member in Highlight)


def _coerce_choice(enum_cls: type[Enum], value: Any, *, label: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        for member in enum_cls:
            if member.value == value:
                return member
    accepted = ", ".join(f"'{member.value}'" for member in enum_cls)
    raise ValueError(f"'{value}' is not a valid {label}; expected one of: {accepted}.")


class Includes(BaseModel):
    """Additional files included in the generated document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    in_header: list[Path] = Field(default_factory=list)
    before_body: list[Path] = Field(default_factory=list)
    after_body: list[Path] = Field(default_factory=list)

    @field_validator("in_header", "before_body", "after_body", mode="before")
    @classmethod
    def _wrap_single(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str | os.PathLike):
            return [value]
        return value

    def resolve(self, base_dir: Path) -> Includes:
        """Return a copy with relative paths anchored at ``base_dir``."""

        def _anchor(paths: list[Path]) -> list[Path]:
            return [path if path.is_absolute() else base_dir / path for path in paths]

        return Includes(
            in_header=_anchor(self.in_header),
            before_body=_anchor(self.before_body),
            after_body=_anchor(self.after_body),
        )


class FormatOptions(BaseModel):
    """Validated settings for the PDF output format."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    toc: bool = False
    toc_depth: int = Field(default=2, ge=1)
    number_sections: bool = False
    fig_width: float = 6.5
    fig_height: float = 4.5
    fig_crop: bool = True
    fig_caption: bool = False
    dev: str = "pdf"
    df_print: DataFramePrint | Callable[..., Any] = DataFramePrint.DEFAULT
    highlight: Highlight | None = Highlight.DEFAULT
    template: str | Path | None = DEFAULT_TEMPLATE
    keep_tex: bool = False
    latex_engine: LatexEngine = LatexEngine.XELATEX
    citation_package: CitationPackage = CitationPackage.NONE
    includes: Includes | None = None
    md_extensions: str | None = None
    pandoc_args: list[str] = Field(default_factory=list)
    extra_dependencies: list[LatexDependency] = Field(default_factory=list)

    @field_validator("highlight", mode="before")
    @classmethod
    def _validate_highlight(cls, value: Any) -> Any:
        if value is None:
            return None
        return _coerce_choice(Highlight, value, label="highlight style")

    @field_validator("latex_engine", mode="before")
    @classmethod
    def _validate_engine(cls, value: Any) -> Any:
        return _coerce_choice(LatexEngine, value, label="LaTeX engine")

    @field_validator("citation_package", mode="before")
    @classmethod
    def _validate_citation_package(cls, value: Any) -> Any:
        if value is None:
            return CitationPackage.NONE
        return _coerce_choice(CitationPackage, value, label="citation package")

    @field_validator("df_print", mode="before")
    @classmethod
    def _validate_df_print(cls, value: Any) -> Any:
        if callable(value) and not isinstance(value, str):
            return value
        return _coerce_choice(DataFramePrint, value, label="data frame print method")

    @field_validator("md_extensions", mode="before")
    @classmethod
    def _join_extensions(cls, value: Any) -> Any:
        if isinstance(value, list | tuple):
            return "".join(str(item) for item in value)
        return value

    @field_validator("pandoc_args", mode="before")
    @classmethod
    def _wrap_pandoc_args(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("extra_dependencies", mode="before")
    @classmethod
    def _normalise_dependencies(cls, value: Any) -> list[LatexDependency]:
        return latex_dependencies(value)

    @property
    def uses_default_template(self) -> bool:
        """Return whether the bundled template is selected."""
        return isinstance(self.template, str) and self.template == DEFAULT_TEMPLATE

    @classmethod
    def build(cls, payload: Mapping[str, Any] | None = None, **overrides: Any) -> FormatOptions:
        """Validate options, raising :class:`InvalidOptionError` on bad values."""
        data = dict(payload or {})
        data.update(overrides)
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidOptionError(_summarise_validation_error(exc)) from exc

    @classmethod
    def from_front_matter(
        cls,
        metadata: Mapping[str, Any] | None,
        *,
        base_dir: Path | None = None,
        **overrides: Any,
    ) -> FormatOptions:
        """Build options from the ``output`` entry of a document's front matter."""
        payload = dict(_extract_format_payload(metadata))
        payload.update(overrides)
        options = cls.build(payload)
        if base_dir is None:
            return options

        updates: dict[str, Any] = {}
        if options.includes is not None:
            updates["includes"] = options.includes.resolve(base_dir)
        template = options.template
        if template is not None and not options.uses_default_template:
            template_path = Path(template).expanduser()
            if not template_path.is_absolute():
                updates["template"] = base_dir / template_path
        return options.model_copy(update=updates) if updates else options


def _extract_format_payload(metadata: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not isinstance(metadata, Mapping):
        return {}
    output = metadata.get("output")
    if isinstance(output, str):
        return {}
    if not isinstance(output, Mapping):
        return {}
    for name in FORMAT_NAMES:
        if name not in output:
            continue
        section = output[name]
        if isinstance(section, Mapping):
            return {str(key).replace("-", "_"): value for key, value in section.items()}
        if section is None or section == "default":
            return {}
        raise InvalidOptionError(
            f"Front matter 'output.{name}' must be a mapping of options or 'default'."
        )
    return {}


def _summarise_validation_error(exc: ValidationError) -> str:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        original = (error.get("ctx") or {}).get("error")
        message = str(original) if original is not None else error.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or str(exc)


__all__ = [
    "DEFAULT_TEMPLATE",
    "CitationPackage",
    "DataFramePrint",
    "FormatOptions",
    "Highlight",
    "Includes",
    "LatexEngine",
    "highlighters",
]
