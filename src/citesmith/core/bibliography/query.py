"""Bibliography query evaluation.

Queries use the BibTeX-ruby notation::

    @*                          every entry
    @article                    entries of a given type
    @*[year=2001]               field equality
    @book[year>=2000, author~=Knuth]

Conditions inside brackets are comma separated and must all hold. Supported
operators are ``=``, ``!=``, ``~=`` (regular expression search) and the
ordering comparisons ``<``, ``<=``, ``>``, ``>=`` which compare numerically
when both sides are numbers. Field names also cover person roles such as
``author`` and ``editor``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import operator
import re
from typing import Protocol, runtime_checkable

from pybtex.database import BibliographyData, Entry

from ..exceptions import QueryError
from .entries import field_value, has_field


@runtime_checkable
class QueryEvaluator(Protocol):
    """Interface filtering a bibliography with a query expression."""

    def select(self, data: BibliographyData, expression: str | None) -> list[Entry]: ...


_QUERY_RE = re.compile(r"^@(?P<type>\*|[\w-]+)\s*(?:\[(?P<conditions>.*)\])?$", re.DOTALL)
_CONDITION_RE = re.compile(r"^(?P<field>[\w-]+)\s*(?P<op>!=|~=|<=|>=|=|<|>)\s*(?P<value>.*)$")

_ORDERING: dict[str, Callable[[object, object], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass(frozen=True, slots=True)
class Condition:
    """Single ``field op value`` predicate."""

    field: str
    op: str
    value: str

    def matches(self, entry: Entry) -> bool:
        actual = field_value(entry, self.field)
        if self.op == "=":
            return has_field(entry, self.field) and actual == self.value
        if self.op == "!=":
            return actual != self.value
        if self.op == "~=":
            return re.search(self.value, actual) is not None
        if not has_field(entry, self.field):
            return False
        compare = _ORDERING[self.op]
        try:
            return compare(float(actual), float(self.value))
        except ValueError:
            return compare(actual, self.value)


@dataclass(frozen=True, slots=True)
class ParsedQuery:
    """Compiled query expression."""

    entry_type: str | None
    conditions: tuple[Condition, ...] = ()

    def matches(self, entry: Entry) -> bool:
        if self.entry_type is not None and entry.type != self.entry_type:
            return False
        return all(condition.matches(entry) for condition in self.conditions)


def parse_query(expression: str | None) -> ParsedQuery:
    """Compile ``expression``; an empty expression selects every entry."""
    text = (expression or "").strip()
    if not text:
        return ParsedQuery(entry_type=None)

    match = _QUERY_RE.match(text)
    if match is None:
        raise QueryError(f"Invalid bibliography query: {text!r}")

    entry_type = match.group("type")
    conditions: list[Condition] = []
    for chunk in (match.group("conditions") or "").split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        parsed = _CONDITION_RE.match(chunk)
        if parsed is None:
            raise QueryError(f"Invalid query condition {chunk!r} in {text!r}")
        value = parsed.group("value").strip().strip("\"'")
        if parsed.group("op") == "~=":
            try:
                re.compile(value)
            except re.error as exc:
                raise QueryError(f"Invalid pattern {value!r} in {text!r}: {exc}") from exc
        conditions.append(Condition(parsed.group("field").lower(), parsed.group("op"), value))

    return ParsedQuery(
        entry_type=None if entry_type == "*" else entry_type.lower(),
        conditions=tuple(conditions),
    )


class EntryQuery:
    """Default query evaluator preserving bibliography order."""

    def select(self, data: BibliographyData, expression: str | None) -> list[Entry]:
        query = parse_query(expression)
        return [entry for entry in data.entries.values() if query.matches(entry)]


__all__ = [
    "Condition",
    "EntryQuery",
    "ParsedQuery",
    "QueryEvaluator",
    "parse_query",
]
