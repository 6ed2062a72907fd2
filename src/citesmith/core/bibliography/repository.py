"""Attachment repository indexing."""

from __future__ import annotations

import logging
from pathlib import Path


logger = logging.getLogger(__name__)

REPOSITORY_SUFFIXES: tuple[str, ...] = (".pdf", ".ps")


def scan_repository(directory: str | Path | None) -> dict[str, Path]:
    """Map attachment base names to their paths.

    Files ending in one of :data:`REPOSITORY_SUFFIXES` are collected
    recursively; the key is the file name with the suffix stripped. An unset
    directory yields an empty index, and so does a missing or unreadable one.
    """
    if directory is None or not str(directory):
        return {}

    root = Path(directory)
    if not root.is_dir():
        logger.warning("Repository directory '%s' is not available; ignoring it.", root)
        return {}

    index: dict[str, Path] = {}
    try:
        for path in sorted(root.rglob("*")):
            if path.suffix in REPOSITORY_SUFFIXES and path.is_file():
                index[path.name[: -len(path.suffix)]] = path
    except OSError as exc:
        logger.warning("Failed to scan repository directory '%s': %s", root, exc)
        return {}

    logger.debug("Indexed %d repository file(s) under '%s'.", len(index), root)
    return index


__all__ = ["REPOSITORY_SUFFIXES", "scan_repository"]
