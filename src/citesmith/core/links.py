"""Link construction for repository attachments and detail pages."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import PurePath
import re
from typing import Any


_DETAILS_NAME_RE = re.compile(r"[:\s]+")


def join_url(base: str | None, *segments: object) -> str:
    """Join a base URL and path segments with single slashes.

    Empty segments are skipped; an empty base yields a relative path.
    """
    parts = [str(base or "")]
    for segment in segments:
        if segment is None:
            continue
        text = segment.as_posix() if isinstance(segment, PurePath) else str(segment)
        if text:
            parts.append(text)

    joined = parts[0]
    for part in parts[1:]:
        if not joined:
            joined = part
        elif joined.endswith("/") and part.startswith("/"):
            joined += part.lstrip("/")
        elif joined.endswith("/") or part.startswith("/"):
            joined += part
        else:
            joined = f"{joined}/{part}"
    return joined


def details_file_for(key: str) -> str:
    """Return the detail page file name for an entry key (``foo: bar`` gives ``foo_bar.html``)."""
    return f"{_DETAILS_NAME_RE.sub('_', str(key))}.html"


def resolve_base_url(config: Mapping[str, Any]) -> str:
    """Return ``baseurl``, else ``base_url``, else an empty string."""
    return config.get("baseurl") or config.get("base_url") or ""


__all__ = ["details_file_for", "join_url", "resolve_base_url"]
