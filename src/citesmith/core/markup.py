"""Minimal HTML element construction.

Three explicit constructors replace shape-based dispatch: an element with
content only, an empty element with attributes only, and an element with
both. Content is inserted verbatim since it is usually markup produced by the
style engine; attribute values are escaped.
"""

from __future__ import annotations

from collections.abc import Mapping
import html


def _open(name: str, attributes: Mapping[str, object] | None = None) -> str:
    parts = [name]
    for key, value in (attributes or {}).items():
        if value is None:
            continue
        parts.append(f'{key}="{html.escape(str(value), quote=True)}"')
    return " ".join(parts)


def content_tag(name: str, content: object) -> str:
    """Return ``<name>content</name>``."""
    return f"<{name}>{content}</{name}>"


def empty_tag(name: str, attributes: Mapping[str, object]) -> str:
    """Return a self-closing ``<name attr="..."/>`` element."""
    return f"<{_open(name, attributes)}/>"


def content_tag_with_attributes(
    name: str, content: object, attributes: Mapping[str, object]
) -> str:
    """Return ``<name attr="...">content</name>``."""
    return f"<{_open(name, attributes)}>{content}</{name}>"


def link_to(
    href: str, content: object | None = None, attributes: Mapping[str, object] | None = None
) -> str:
    """Return an anchor to ``href``; the href doubles as text when ``content`` is empty."""
    merged = dict(attributes or {})
    merged["href"] = href
    return content_tag_with_attributes("a", content or href, merged)


__all__ = ["content_tag", "content_tag_with_attributes", "empty_tag", "link_to"]
