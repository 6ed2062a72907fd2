"""Primary public API for citesmith."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from citesmith.core.bibliography import (
    BibliographyLoader,
    EntryQuery,
    PybtexParser,
    bibliography_data_from_string,
    select_entries,
)
from citesmith.core.config import LayeredConfig, ScholarConfig, load_scholar_config
from citesmith.core.context import CitationContext
from citesmith.core.exceptions import (
    ArgumentError,
    BibliographyNotFoundError,
    BibliographyParseError,
    CitationFormatError,
    CitesmithError,
    ConfigurationError,
    QueryError,
    TemplateRenderError,
)
from citesmith.core.formatting import CitationMode, PybtexFormatter
from citesmith.core.options import TagOptions, parse_tag_arguments
from citesmith.core.rendering import ScholarRenderer
from citesmith.core.session import RenderSession
from citesmith.core.templates import JinjaTemplateRenderer, LayoutRegistry


try:
    __version__ = _pkg_version("citesmith")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "ArgumentError",
    "BibliographyLoader",
    "BibliographyNotFoundError",
    "BibliographyParseError",
    "CitationContext",
    "CitationFormatError",
    "CitationMode",
    "CitesmithError",
    "ConfigurationError",
    "EntryQuery",
    "JinjaTemplateRenderer",
    "LayeredConfig",
    "LayoutRegistry",
    "PybtexFormatter",
    "PybtexParser",
    "QueryError",
    "RenderSession",
    "ScholarConfig",
    "ScholarRenderer",
    "TagOptions",
    "TemplateRenderError",
    "__version__",
    "bibliography_data_from_string",
    "load_scholar_config",
    "parse_tag_arguments",
    "select_entries",
]
