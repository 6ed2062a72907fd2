"""Document render sessions.

A :class:`RenderSession` spans one document render. It owns the citation
context shared by every tag of the document, the memoised base URL, compiled
templates and bibliography loaders, and hands out a :class:`ScholarRenderer`
per tag invocation with the tag options layered over the site configuration.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import cached_property
from typing import Any

from .bibliography.loader import BibliographyLoader
from .bibliography.parsing import BibliographyParser, PybtexParser
from .bibliography.query import EntryQuery, QueryEvaluator
from .config import LayeredConfig, ScholarConfig
from .context import CitationContext
from .formatting import CitationFormatter, PybtexFormatter
from .links import resolve_base_url
from .options import TagOptions, parse_tag_arguments
from .rendering import ScholarRenderer
from .templates import CompiledTemplate, JinjaTemplateRenderer, LayoutRegistry, TemplateRenderer


class RenderSession:
    """State shared by the tags of one document render."""

    def __init__(
        self,
        config: LayeredConfig | ScholarConfig | Mapping[str, Any] | None = None,
        *,
        layouts: LayoutRegistry | Mapping[str, str] | None = None,
        parser: BibliographyParser | None = None,
        formatter: CitationFormatter | None = None,
        templates: TemplateRenderer | None = None,
        query_evaluator: QueryEvaluator | None = None,
    ) -> None:
        if isinstance(config, LayeredConfig):
            self.config = config
        else:
            self.config = LayeredConfig.from_site(config)
        if isinstance(layouts, LayoutRegistry):
            self.layouts = layouts
        else:
            self.layouts = LayoutRegistry(layouts)
        self.parser = parser or PybtexParser()
        self.formatter = formatter or PybtexFormatter()
        self.templates = templates or JinjaTemplateRenderer()
        self.query_evaluator = query_evaluator or EntryQuery()
        self.context = CitationContext()
        self._loaders: dict[tuple[str, ...], BibliographyLoader] = {}
        self._compiled: dict[str, CompiledTemplate] = {}

    @cached_property
    def base_url(self) -> str:
        return resolve_base_url(self.config)

    def loader(self, files: Sequence[str] = ()) -> BibliographyLoader:
        """Return the loader for ``files`` (the configured sources when empty)."""
        key = tuple(files)
        loader = self._loaders.get(key)
        if loader is None:
            loader = BibliographyLoader(self.config, files=list(files), parser=self.parser)
            self._loaders[key] = loader
        return loader

    def template(self, source: str) -> CompiledTemplate:
        """Compile ``source`` once per session."""
        compiled = self._compiled.get(source)
        if compiled is None:
            compiled = self.templates.compile(source)
            self._compiled[source] = compiled
        return compiled

    def renderer(self, options: TagOptions | str | None = None) -> ScholarRenderer:
        """Return a renderer for one tag invocation."""
        if not isinstance(options, TagOptions):
            options = parse_tag_arguments(options)
        config = self.config.with_overlay(options.as_overlay())
        return ScholarRenderer(self, config, self.loader(options.files))

    def cited_references(self) -> tuple[str, ...]:
        return self.context.read()


__all__ = ["RenderSession"]
