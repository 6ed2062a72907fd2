"""Helpers exposing pybtex entries as plain strings and template variables."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from pybtex.database import BibliographyData, Entry

from .filters import FieldFilter, convert_value


def format_persons(entry: Entry, role: str) -> str:
    """Join the people attached to ``role`` the way BibTeX writes them."""
    people = entry.persons.get(role) or []
    return " and ".join(str(person) for person in people)


def field_value(entry: Entry, name: str) -> str:
    """Return the string value of a field or person role, ``""`` when absent."""
    value = entry.fields.get(name)
    if value is not None:
        return str(value)
    if name in entry.persons:
        return format_persons(entry, name)
    return ""


def has_field(entry: Entry, name: str) -> bool:
    return name in entry.fields or name in entry.persons


def copy_entry(entry: Entry, *, exclude: Iterable[str] = ()) -> Entry:
    """Return a shallow copy of ``entry`` without the ``exclude`` fields."""
    skipped = {name.lower() for name in exclude}
    fields = {name: value for name, value in entry.fields.items() if name.lower() not in skipped}
    persons = {
        role: list(people)
        for role, people in entry.persons.items()
        if role.lower() not in skipped
    }
    duplicate = Entry(getattr(entry, "original_type", entry.type), fields=fields, persons=persons)
    duplicate.key = entry.key
    return duplicate


def entry_to_bibtex(entry: Entry, *, exclude: Iterable[str] = ()) -> str:
    """Serialise a single entry back into BibTeX."""
    record = copy_entry(entry, exclude=exclude)
    data = BibliographyData(entries={entry.key: record})
    return data.to_string("bibtex").strip()


def entry_variables(entry: Entry, filters: Sequence[FieldFilter] = ()) -> dict[str, Any]:
    """Expose an entry as a flat mapping for templates.

    Every field and person role becomes a string, each passed through
    ``filters``. ``bibtex`` holds the serialised record without the abstract.
    """
    variables: dict[str, Any] = {
        "key": entry.key,
        "type": entry.type,
        "bibtex": entry_to_bibtex(entry, exclude=("abstract",)),
    }
    for role in entry.persons:
        variables[role] = convert_value(format_persons(entry, role), filters)
    for name, value in entry.fields.items():
        variables[name] = convert_value(str(value), filters)
    return variables


__all__ = [
    "copy_entry",
    "entry_to_bibtex",
    "entry_variables",
    "field_value",
    "format_persons",
    "has_field",
]
