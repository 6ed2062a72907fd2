"""Configuration models used by the citation renderer.

ScholarConfig

`style` (`str`)
: Name of the citation style handed to the formatter. With the default pybtex
  engine this is a formatting style plugin such as `plain`, `unsrt` or `alpha`.

`locale` (`str`)
: Locale forwarded to the citation style engine.

`sort_by` (`str`)
: Entry field used to order bibliography listings. The literal `none` keeps
  the order produced by the query.

`order` (`str`)
: Listing direction. Values starting with `desc` or `reverse` (any case)
  reverse the sorted listing.

`source` (`str`)
: Directory holding the bibliography files referenced by relative names.

`bibliography` (`str | list[str]`)
: Default bibliography file name(s). The `.bib` suffix may be omitted.

`bibliography_template` (`str`)
: Inline Jinja template or name of a registered layout used to render each
  bibliography item.

`query` (`str`)
: Default query expression applied when a listing does not provide one.

`repository` (`str | None`)
: Directory scanned for PDF/PostScript attachments named after entry keys.

`replace_strings` (`bool`)
: Resolve `@string` macros across the parsed bibliography.

`bibtex_options` (`dict[str, Any]`)
: Options forwarded to the bibliography parser.

`bibtex_filters` (`list[str]`)
: Ordered names of field conversion filters applied before formatting.

`missing_reference` (`str`)
: Markup returned in place of citations whose key cannot be resolved.

`reference_tagname` (`str | None`)
: Element used to wrap full references; `span` when unset.

`details_dir` (`str`)
: Path segment under the base URL holding per-entry detail pages.

`details_layout` (`str`)
: Layout used to generate detail pages.

`details_link` (`str`)
: Default text of links pointing to detail pages.

`baseurl` / `base_url` (`str | None`)
: Base URL prefixed to repository and detail links. `baseurl` wins when both
  are set.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
import copy
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from .exceptions import ConfigurationError


class ScholarConfig(BaseModel):
    """Site-wide scholar configuration with built-in defaults."""

    model_config = ConfigDict(extra="forbid")

    style: str = "plain"
    locale: str = "en"
    sort_by: str = "none"
    order: str = "ascending"
    source: str = "./_bibliography"
    bibliography: str | list[str] = "references.bib"
    bibliography_template: str = "{{ reference }}"
    query: str = "@*"
    repository: str | None = None
    replace_strings: bool = True
    bibtex_options: dict[str, Any] = Field(default_factory=dict)
    bibtex_filters: list[str] = Field(default_factory=list)
    missing_reference: str = "(missing reference)"
    reference_tagname: str | None = "span"
    details_dir: str = "bibliography"
    details_layout: str = "bibtex.html"
    details_link: str = "Details"
    baseurl: str | None = None
    base_url: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ScholarConfig:
        """Validate a raw mapping, raising ``ConfigurationError`` on failure."""
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid scholar configuration: {exc}") from exc


def load_scholar_config(path: Path | str) -> ScholarConfig:
    """Load a YAML configuration file.

    The file may either hold the scholar options at its root or nest them
    under a ``scholar`` key next to site-level ``baseurl``/``base_url``.
    """
    config_path = Path(path)
    try:
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration '{config_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in '{config_path}': {exc}") from exc

    if not isinstance(payload, Mapping):
        raise ConfigurationError(f"Configuration '{config_path}' must contain a mapping.")

    if "scholar" in payload:
        scholar = payload.get("scholar") or {}
        if not isinstance(scholar, Mapping):
            raise ConfigurationError("The 'scholar' configuration entry must be a mapping.")
        merged = dict(scholar)
        for key in ("baseurl", "base_url"):
            if key in payload and key not in merged:
                merged[key] = payload[key]
        return ScholarConfig.from_mapping(merged)

    return ScholarConfig.from_mapping(payload)


class LayeredConfig(Mapping[str, Any]):
    """Immutable base configuration with ordered overlays.

    Lookups resolve last write wins across ``base < overlays[0] < ...``.
    Overlay values set to ``None`` are ignored so an unset option never hides
    the site value. Layers are never mutated; :meth:`with_overlay` returns a
    new instance sharing the existing layers.
    """

    __slots__ = ("_base", "_overlays")

    def __init__(
        self,
        base: Mapping[str, Any] | None = None,
        overlays: Sequence[Mapping[str, Any]] = (),
    ) -> None:
        self._base: Mapping[str, Any] = MappingProxyType(copy.deepcopy(dict(base or {})))
        self._overlays: tuple[Mapping[str, Any], ...] = tuple(
            _freeze_overlay(overlay) for overlay in overlays
        )

    @classmethod
    def from_site(
        cls, site: ScholarConfig | Mapping[str, Any] | None = None
    ) -> LayeredConfig:
        """Build a configuration from validated (or raw) site settings."""
        if isinstance(site, ScholarConfig):
            model = site
        else:
            model = ScholarConfig.from_mapping(site)
        return cls(model.model_dump())

    @property
    def layers(self) -> tuple[Mapping[str, Any], ...]:
        """Return every layer, lowest precedence first."""
        return (self._base, *self._overlays)

    def with_overlay(self, overlay: Mapping[str, Any] | None) -> LayeredConfig:
        """Return a new configuration with ``overlay`` stacked on top."""
        layered = LayeredConfig.__new__(LayeredConfig)
        layered._base = self._base
        extra = (_freeze_overlay(overlay),) if overlay else ()
        layered._overlays = self._overlays + extra
        return layered

    def __getitem__(self, key: str) -> Any:
        for layer in reversed(self.layers):
            if key in layer:
                return layer[key]
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for layer in self.layers:
            for key in layer:
                if key not in seen:
                    seen.add(key)
                    yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"LayeredConfig(layers={len(self.layers)})"


def _freeze_overlay(overlay: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(
        {key: copy.deepcopy(value) for key, value in overlay.items() if value is not None}
    )


__all__ = ["LayeredConfig", "ScholarConfig", "load_scholar_config"]
