"""Bibliography loading and selection.

Architecture
: `BibliographyLoader` resolves configured source names to files, reads and
  parses them through a `BibliographyParser`, and memoises the parsed
  `BibliographyData` together with the attachment repository index.
: `select_entries` turns a loaded bibliography into the ordered list of
  entries a listing renders, delegating the query itself to a
  `QueryEvaluator`.
: Field filters and entry helpers expose pybtex entries as plain strings for
  the style engine and templates.

Usage Example

```pycon
>>> from citesmith.core.bibliography import bibliography_data_from_string, select_entries
>>> data = bibliography_data_from_string(\"\"\"
... @misc{a, title = {First}, year = {2000}}
... @misc{b, title = {Second}, year = {2001}}
... \"\"\")
>>> [entry.key for entry in select_entries(data, {"sort_by": "year", "order": "desc"})]
['b', 'a']
```
"""

from __future__ import annotations

from .entries import entry_to_bibtex, entry_variables, field_value
from .filters import FILTERS, convert_entry, resolve_filters
from .loader import BibliographyLoader
from .parsing import BibliographyParser, PybtexParser, bibliography_data_from_string
from .query import EntryQuery, QueryEvaluator, parse_query
from .repository import scan_repository
from .selection import select_entries


__all__ = [
    "FILTERS",
    "BibliographyLoader",
    "BibliographyParser",
    "EntryQuery",
    "PybtexParser",
    "QueryEvaluator",
    "bibliography_data_from_string",
    "convert_entry",
    "entry_to_bibtex",
    "entry_variables",
    "field_value",
    "parse_query",
    "resolve_filters",
    "scan_repository",
    "select_entries",
]
