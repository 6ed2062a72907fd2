"""Citation tracking shared by every tag of a document render."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(slots=True)
class CitationContext:
    """Append-only log of the keys cited during one render session.

    Every citation attempt is recorded, including keys missing from the
    bibliography; entries are never deduplicated or removed.
    """

    _keys: list[str] = field(default_factory=list, init=False, repr=False)

    def append(self, key: str) -> None:
        """Record a citation of ``key``."""
        self._keys.append(key)

    def read(self) -> tuple[str, ...]:
        """Return the cited keys in citation order."""
        return tuple(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._keys))

    def __contains__(self, key: object) -> bool:
        return key in self._keys


__all__ = ["CitationContext"]
