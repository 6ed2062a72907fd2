"""Citation and bibliography rendering for a single tag invocation."""

from __future__ import annotations

from collections.abc import Mapping
from functools import cached_property
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from pybtex.database import BibliographyData, Entry

from .bibliography.entries import entry_variables
from .bibliography.filters import FieldFilter, convert_entry, resolve_filters
from .bibliography.selection import select_entries
from .formatting import CitationMode
from .links import details_file_for, join_url
from .markup import content_tag, content_tag_with_attributes, link_to
from .templates import DEFAULT_TEMPLATE, CompiledTemplate


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .bibliography.loader import BibliographyLoader
    from .session import RenderSession


class ScholarRenderer:
    """Render citations and bibliography items with one resolved configuration.

    A renderer is created per tag invocation by :class:`RenderSession`; the
    configuration already carries the tag overlay.
    """

    def __init__(
        self,
        session: RenderSession,
        config: Mapping[str, Any],
        loader: BibliographyLoader,
    ) -> None:
        self.session = session
        self.config = config
        self.loader = loader

    @property
    def bibliography(self) -> BibliographyData:
        return self.loader.bibliography

    @property
    def prefix(self) -> str | None:
        return self.config.get("prefix")

    @property
    def style(self) -> str:
        return self.config.get("style")

    @property
    def missing_reference(self) -> str:
        return self.config.get("missing_reference")

    @property
    def reference_tagname(self) -> str:
        return self.config.get("reference_tagname") or "span"

    @property
    def details_path(self) -> str:
        return self.config.get("details_dir") or ""

    @cached_property
    def filters(self) -> list[FieldFilter]:
        return resolve_filters(self.config.get("bibtex_filters") or ())

    def anchor_id(self, key: str) -> str:
        """Return ``prefix-key``, or ``key`` when no prefix is configured."""
        return "-".join(part for part in (self.prefix, key) if part is not None)

    def _convert(self, entry: Entry) -> Entry:
        return convert_entry(entry, self.filters) if self.filters else entry

    def _format(self, entry: Entry, mode: CitationMode) -> str:
        return self.session.formatter.format(
            self._convert(entry),
            style=self.style,
            locale=self.config.get("locale"),
            output_format="html",
            mode=mode,
        )

    def lookup(self, key: str) -> Entry | None:
        return self.bibliography.entries.get(key)

    # Citations -----------------------------------------------------------

    def cite(self, key: str) -> str:
        """Render an inline citation linking to the entry's reference anchor.

        The key is logged in the citation context before the lookup, so
        unknown keys are recorded as well.
        """
        self.session.context.append(key)

        entry = self.lookup(key)
        if entry is None:
            return self.missing_reference

        citation = self._format(entry, CitationMode.CITATION)
        return link_to(f"#{self.anchor_id(entry.key)}", citation)

    def cite_details(self, key: str, text: str | None = None) -> str:
        """Render a link to the entry's detail page."""
        entry = self.lookup(key)
        if entry is None:
            return self.missing_reference
        label = text or self.config.get("text") or self.config.get("details_link")
        return link_to(self.details_link_for(entry), label)

    def cited_references(self) -> tuple[str, ...]:
        return self.session.context.read()

    # Links ---------------------------------------------------------------

    def repository_link_for(self, entry: Entry, base: str | None = None) -> str | None:
        path = self.loader.repository_file(entry.key)
        if path is None:
            return None
        return join_url(self.session.base_url if base is None else base, path)

    def details_link_for(self, entry: Entry, base: str | None = None) -> str:
        return join_url(
            self.session.base_url if base is None else base,
            self.details_path,
            details_file_for(entry.key),
        )

    # Bibliography --------------------------------------------------------

    def reference_tag(self, entry: Entry | None) -> str:
        """Render the full record of ``entry`` wrapped in an anchored element."""
        if entry is None:
            return self.missing_reference

        reference = self._format(entry, CitationMode.BIBLIOGRAPHY)
        return content_tag_with_attributes(
            self.reference_tagname, reference, {"id": self.anchor_id(entry.key)}
        )

    @property
    def template_source(self) -> str:
        """Template source: layout content when the name is registered, else inline."""
        source = self.config.get("bibliography_template")
        if not source:
            return DEFAULT_TEMPLATE
        layout = self.session.layouts.get(source)
        if layout is not None:
            return layout.content
        return source

    @cached_property
    def template(self) -> CompiledTemplate:
        return self.session.template(self.template_source)

    def bibliography_tag(self, entry: Entry | None, index: int) -> str:
        """Render one bibliography item through the template."""
        if entry is None:
            return self.missing_reference

        variables = {
            "entry": entry_variables(entry, self.filters),
            "reference": self.reference_tag(entry),
            "key": entry.key,
            "type": entry.type,
            "link": self.repository_link_for(entry),
            "details": self.details_link_for(entry),
            "index": index,
        }
        return self.session.templates.render(self.template, variables)

    def entries(self) -> list[Entry]:
        """Entries of the listing, restricted to cited keys in cited mode."""
        cited = self.session.context.read() if self.config.get("cited") else None
        return select_entries(
            self.bibliography,
            self.config,
            evaluator=self.session.query_evaluator,
            cited=cited,
        )

    def render_bibliography(self) -> str:
        """Render the whole listing as an ordered list."""
        items = [
            content_tag("li", self.bibliography_tag(entry, index))
            for index, entry in enumerate(self.entries(), start=1)
        ]
        return content_tag_with_attributes("ol", "".join(items), {"class": "bibliography"})

    def reference(self, key: str) -> str:
        """Render the full record of a single entry."""
        return self.reference_tag(self.lookup(key))

    def generate_details(self) -> bool:
        """Whether the configured details layout is registered."""
        name = PurePosixPath(str(self.config.get("details_layout") or "")).name
        return name.removesuffix(".html") in self.session.layouts


__all__ = ["ScholarRenderer"]
