"""Bibliography loading with per-instance memoisation.

Each derived value (resolved paths, parsed bibliography, repository index) is
its own ``cached_property``; reading one never computes another. Instances
are meant for sequential reuse and must not be shared across threads.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from functools import cached_property
import logging
from pathlib import Path
from typing import Any

from pybtex.database import BibliographyData

from ..exceptions import BibliographyNotFoundError
from .parsing import BibliographyParser, PybtexParser
from .repository import scan_repository


logger = logging.getLogger(__name__)

BIBTEX_SUFFIX = ".bib"


class BibliographyLoader:
    """Resolve, read and parse the bibliography sources of a configuration."""

    def __init__(
        self,
        config: Mapping[str, Any],
        *,
        files: Sequence[str] | None = None,
        parser: BibliographyParser | None = None,
    ) -> None:
        self.config = config
        self._files = list(files) if files else None
        self.parser = parser or PybtexParser()

    @property
    def bibtex_files(self) -> list[str]:
        """Source identifiers: the override list, else the configured bibliography."""
        if self._files:
            return list(self._files)
        configured = self.config.get("bibliography")
        if isinstance(configured, (list, tuple)):
            return [str(name) for name in configured]
        return [configured or ""]

    @property
    def bibtex_file(self) -> str:
        return self.bibtex_files[0]

    def resolve_path(self, name: str | None) -> Path:
        """Resolve a source identifier to a path.

        An empty name falls back to the configured bibliography. Existing
        absolute paths are kept as they are; anything else is joined under
        ``source`` and receives the ``.bib`` suffix when the joined path does
        not exist.
        """
        if not name:
            configured = self.config.get("bibliography")
            if isinstance(configured, (list, tuple)):
                configured = configured[0] if configured else ""
            name = str(configured or "")

        candidate = Path(name)
        if candidate.is_absolute() and candidate.exists():
            return candidate

        path = Path(str(self.config.get("source") or ".")) / name.lstrip("/")
        if not path.exists():
            path = Path(f"{path}{BIBTEX_SUFFIX}")
        return path

    @cached_property
    def bibtex_paths(self) -> list[Path]:
        paths = [self.resolve_path(name) for name in self.bibtex_files]
        logger.debug("Resolved bibliography sources: %s", ", ".join(map(str, paths)))
        return paths

    @property
    def bibtex_path(self) -> Path:
        return self.bibtex_paths[0]

    @cached_property
    def bibliography(self) -> BibliographyData:
        """Parse the concatenated sources once per loader."""
        chunks: list[str] = []
        for path in self.bibtex_paths:
            try:
                chunks.append(path.read_text(encoding="utf-8"))
            except OSError as exc:
                raise BibliographyNotFoundError(
                    path, f"Unable to read bibliography '{path}': {exc}"
                ) from exc

        options = self.config.get("bibtex_options") or {}
        data = self.parser.parse("\n".join(chunks), options)
        if self.config.get("replace_strings"):
            data = self.parser.replace_strings(data)

        logger.debug("Loaded %d bibliography entries.", len(data.entries))
        return data

    @cached_property
    def repository(self) -> dict[str, Path]:
        """Attachment index keyed by entry key."""
        return scan_repository(self.config.get("repository"))

    def repository_file(self, key: str) -> Path | None:
        return self.repository.get(key)


__all__ = ["BIBTEX_SUFFIX", "BibliographyLoader"]
