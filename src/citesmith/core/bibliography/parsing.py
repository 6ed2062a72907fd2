"""Parsing helpers for bibliography payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pybtex.database import BibliographyData
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError

from ..exceptions import BibliographyParseError


@runtime_checkable
class BibliographyParser(Protocol):
    """Interface turning raw bibliography text into structured entries."""

    def parse(self, text: str, options: Mapping[str, Any]) -> BibliographyData: ...

    def replace_strings(self, data: BibliographyData) -> BibliographyData: ...


class PybtexParser:
    """BibTeX parser backed by :mod:`pybtex`.

    Supported options are ``encoding``, ``keyless_entries`` and ``macros``
    (additional ``@string`` definitions seeded before parsing). Unknown
    options are ignored.
    """

    def parse(self, text: str, options: Mapping[str, Any]) -> BibliographyData:
        macros = dict(bibtex.month_names)
        extra_macros = options.get("macros") or {}
        if not isinstance(extra_macros, Mapping):
            raise BibliographyParseError("The 'macros' parser option must be a mapping.")
        macros.update({str(name).lower(): str(value) for name, value in extra_macros.items()})

        parser = bibtex.Parser(
            encoding=options.get("encoding"),
            macros=macros,
            keyless_entries=bool(options.get("keyless_entries", False)),
        )
        try:
            return parser.parse_string(text)
        except PybtexError as exc:
            raise BibliographyParseError(f"Failed to parse bibliography: {exc}") from exc

    def replace_strings(self, data: BibliographyData) -> BibliographyData:
        # pybtex substitutes @string macros while parsing.
        return data


def bibliography_data_from_string(
    payload: str,
    *,
    parser: BibliographyParser | None = None,
    options: Mapping[str, Any] | None = None,
) -> BibliographyData:
    """Parse an inline BibTeX payload."""
    active = parser or PybtexParser()
    return active.parse(payload, options or {})


__all__ = ["BibliographyParser", "PybtexParser", "bibliography_data_from_string"]
