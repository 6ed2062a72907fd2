"""Custom exception hierarchy for the citation rendering pipeline."""

from __future__ import annotations


class CitesmithError(RuntimeError):
    """Base exception for citation and bibliography rendering failures."""


class ArgumentError(CitesmithError):
    """Raised when a tag argument string cannot be parsed."""


class ConfigurationError(CitesmithError):
    """Raised when scholar configuration values are invalid."""


class BibliographyNotFoundError(CitesmithError):
    """Raised when a bibliography source cannot be read."""

    def __init__(self, path: object, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Bibliography source not found: {path}")


class BibliographyParseError(CitesmithError):
    """Raised when the bibliography parser rejects the source text."""


class QueryError(CitesmithError):
    """Raised when a bibliography query expression is malformed."""


class CitationFormatError(CitesmithError):
    """Raised when the citation style engine fails to format an entry."""


class TemplateRenderError(CitesmithError):
    """Raised when a bibliography template cannot be compiled or rendered."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ArgumentError",
    "BibliographyNotFoundError",
    "BibliographyParseError",
    "CitationFormatError",
    "CitesmithError",
    "ConfigurationError",
    "QueryError",
    "TemplateRenderError",
    "exception_hint",
    "exception_messages",
]
