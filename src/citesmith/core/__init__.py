"""Core rendering pipeline: options, configuration, loading and rendering."""

from __future__ import annotations

from .config import LayeredConfig, ScholarConfig, load_scholar_config
from .context import CitationContext
from .exceptions import (
    ArgumentError,
    BibliographyNotFoundError,
    BibliographyParseError,
    CitationFormatError,
    CitesmithError,
    ConfigurationError,
    QueryError,
    TemplateRenderError,
)
from .formatting import CitationFormatter, CitationMode, PybtexFormatter
from .options import TagOptions, parse_tag_arguments
from .rendering import ScholarRenderer
from .session import RenderSession
from .templates import JinjaTemplateRenderer, LayoutRegistry


__all__ = [
    "ArgumentError",
    "BibliographyNotFoundError",
    "BibliographyParseError",
    "CitationContext",
    "CitationFormatError",
    "CitationFormatter",
    "CitationMode",
    "CitesmithError",
    "ConfigurationError",
    "JinjaTemplateRenderer",
    "LayeredConfig",
    "LayoutRegistry",
    "PybtexFormatter",
    "QueryError",
    "RenderSession",
    "ScholarConfig",
    "ScholarRenderer",
    "TagOptions",
    "TemplateRenderError",
    "load_scholar_config",
    "parse_tag_arguments",
]
