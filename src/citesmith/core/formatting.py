"""Citation style formatting backed by pybtex styles."""

from __future__ import annotations

from enum import Enum
import html
from typing import Any, Protocol, runtime_checkable

from pybtex.database import Entry
from pybtex.exceptions import PybtexError
from pybtex.plugin import find_plugin

from .exceptions import CitationFormatError


class CitationMode(str, Enum):
    """Formatting mode requested from the style engine."""

    CITATION = "citation"
    BIBLIOGRAPHY = "bibliography"


@runtime_checkable
class CitationFormatter(Protocol):
    """Interface of the citation style engine."""

    def format(
        self,
        entry: Entry,
        *,
        style: str,
        locale: str | None,
        output_format: str,
        mode: CitationMode,
    ) -> str: ...


class PybtexFormatter:
    """Format entries with pybtex formatting styles.

    Full records use the style and the requested output backend. Citations
    render the entry label in brackets; labels come from
    ``citation_label_style`` since the numeric labels of ``plain`` carry no
    meaning for a single entry. pybtex styles are English only, so ``locale``
    is accepted but has no effect.
    """

    def __init__(self, *, citation_label_style: str = "alpha") -> None:
        self.citation_label_style = citation_label_style
        self._styles: dict[tuple[str, str | None], Any] = {}

    def _style(self, name: str, label_style: str | None = None) -> Any:
        key = (name, label_style)
        style = self._styles.get(key)
        if style is None:
            try:
                style_cls = find_plugin("pybtex.style.formatting", name)
                style = style_cls(label_style=label_style)
            except PybtexError as exc:
                raise CitationFormatError(f"Unknown citation style '{name}': {exc}") from exc
            self._styles[key] = style
        return style

    def _citation(self, entry: Entry, style: str, output_format: str) -> str:
        # Only the label is computed; fields required by the record template may be missing.
        engine = self._style(style, self.citation_label_style)
        try:
            label = str(next(iter(engine.format_labels(engine.sort([entry])))))
        except (PybtexError, KeyError) as exc:
            raise CitationFormatError(f"Unable to label entry '{entry.key}': {exc}") from exc
        if output_format == "html":
            label = html.escape(label)
        return f"[{label}]"

    def format(
        self,
        entry: Entry,
        *,
        style: str,
        locale: str | None = None,
        output_format: str = "html",
        mode: CitationMode = CitationMode.BIBLIOGRAPHY,
    ) -> str:
        if mode is CitationMode.CITATION:
            return self._citation(entry, style, output_format)

        engine = self._style(style)
        try:
            formatted = next(iter(engine.format_entries([entry])))
        except (PybtexError, KeyError) as exc:
            raise CitationFormatError(f"Unable to format entry '{entry.key}': {exc}") from exc

        try:
            backend = find_plugin("pybtex.backends", output_format)()
        except PybtexError as exc:
            raise CitationFormatError(f"Unknown output format '{output_format}': {exc}") from exc
        return formatted.text.render(backend)


__all__ = ["CitationFormatter", "CitationMode", "PybtexFormatter"]
