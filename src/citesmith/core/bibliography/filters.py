"""Field conversion filters applied to bibliography entries before rendering."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import html
import re

from pybtex.database import Entry, Person
from pybtex.exceptions import PybtexError
from pybtex.richtext import Text

from ..exceptions import ConfigurationError


FieldFilter = Callable[[str], str]

_HTML_TAG_RE = re.compile(r"<[^>]+?>")


def latex_filter(value: str) -> str:
    """Decode LaTeX markup (accents, braces, commands) into plain Unicode text."""
    try:
        return Text.from_latex(value).render_as("text")
    except (PybtexError, ValueError):
        return value


def html_filter(value: str) -> str:
    """Strip lightweight HTML markup and unescape entities."""
    if "<" in value and ">" in value:
        value = _HTML_TAG_RE.sub("", value)
    return html.unescape(value)


_MONTH_NAME_TO_INT: dict[str, int] = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}


def month_filter(value: str) -> str:
    """Convert month names/abbreviations to their two-digit representation.

    Values that are not months are returned unchanged, so the filter is safe
    to apply to every field.
    """
    candidate = value.strip().strip("{}\"'").lower()
    if not candidate:
        return value

    if candidate.isdigit():
        month_int = int(candidate)
        if 1 <= month_int <= 12 and len(candidate) <= 2:
            return f"{month_int:02d}"
        return value

    month_int = _MONTH_NAME_TO_INT.get(candidate)
    if month_int is None:
        return value
    return f"{month_int:02d}"


FILTERS: dict[str, FieldFilter] = {
    "latex": latex_filter,
    "html": html_filter,
    "month": month_filter,
}


def resolve_filters(names: Iterable[str]) -> list[FieldFilter]:
    """Look up filters by name, preserving order."""
    resolved: list[FieldFilter] = []
    for name in names:
        try:
            resolved.append(FILTERS[str(name).lower()])
        except KeyError as exc:
            known = ", ".join(sorted(FILTERS))
            raise ConfigurationError(
                f"Unknown bibtex filter '{name}' (available: {known})."
            ) from exc
    return resolved


def convert_value(value: str, filters: Sequence[FieldFilter]) -> str:
    """Run a single field value through every filter in order."""
    for field_filter in filters:
        value = field_filter(value)
    return value


def convert_entry(entry: Entry, filters: Sequence[FieldFilter]) -> Entry:
    """Return a converted copy of ``entry``; the original is left untouched."""
    fields = {
        name: convert_value(value, filters) if isinstance(value, str) else value
        for name, value in entry.fields.items()
    }
    persons = {
        role: [Person(convert_value(str(person), filters)) for person in people]
        for role, people in entry.persons.items()
    }
    converted = Entry(getattr(entry, "original_type", entry.type), fields=fields, persons=persons)
    converted.key = entry.key
    return converted


__all__ = [
    "FILTERS",
    "FieldFilter",
    "convert_entry",
    "convert_value",
    "html_filter",
    "latex_filter",
    "month_filter",
    "resolve_filters",
]
