"""Entry selection: query, citation filter, sort and ordering."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import re
from typing import Any

from pybtex.database import BibliographyData, Entry

from .entries import field_value
from .query import EntryQuery, QueryEvaluator


_REVERSE_ORDER_RE = re.compile(r"^(desc|reverse)", re.IGNORECASE)


def is_reverse_order(order: object) -> bool:
    """Return whether an ``order`` setting requests descending output."""
    return bool(order) and _REVERSE_ORDER_RE.match(str(order)) is not None


def select_entries(
    data: BibliographyData,
    config: Mapping[str, Any],
    *,
    query: str | None = None,
    evaluator: QueryEvaluator | None = None,
    cited: Iterable[str] | None = None,
) -> list[Entry]:
    """Return the entries to render, in display order.

    ``query`` falls back to the configured ``query``. When ``cited`` is given
    only entries whose key appears in it are kept. Unless ``sort_by`` is
    ``none`` the entries are stably sorted by the string value of that field
    (missing fields sort as ``""``), then reversed when ``order`` starts with
    ``desc`` or ``reverse``.
    """
    active = evaluator or EntryQuery()
    entries = list(active.select(data, query or config.get("query")))

    if cited is not None:
        cited_keys = set(cited)
        entries = [entry for entry in entries if entry.key in cited_keys]

    sort_by = config.get("sort_by")
    if sort_by is not None and str(sort_by) != "none":
        entries.sort(key=lambda entry: field_value(entry, str(sort_by)))
        if is_reverse_order(config.get("order")):
            entries.reverse()

    return entries


__all__ = ["is_reverse_order", "select_entries"]
