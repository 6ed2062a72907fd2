"""Python-Markdown integration for citation tags.

The extension expands Liquid-style tags before block parsing::

    {% cite knuth84 %}                 inline citation
    {% cite_details knuth84 -t More %} link to the detail page
    {% reference knuth84 %}            full record of one entry
    {% bibliography --cited %}         listing

Tags inside code spans and fenced code blocks are left as written.
Each converted document is one render session: cited keys accumulate across
the tags of a document and are cleared by ``Markdown.reset()``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
import re
from typing import Any

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from citesmith.core.config import ScholarConfig
from citesmith.core.exceptions import ArgumentError
from citesmith.core.options import parse_tag_arguments
from citesmith.core.session import RenderSession
from citesmith.core.templates import LayoutRegistry, split_front_matter


__all__ = [
    "MarkdownDocument",
    "ScholarExtension",
    "makeExtension",
    "render_markdown",
]


# Fenced blocks and code spans are matched first and left verbatim.
_TAG_RE = re.compile(
    r"(?P<fenced>^[ \t]*(?P<fence>`{3,}|~{3,})[^\n]*\n.*?^[ \t]*(?P=fence)[ \t]*$)"
    r"|(?P<code>(?P<ticks>`+)(?!`).+?(?<!`)(?P=ticks)(?!`))"
    r"|\{%-?\s*(?P<name>cite_details|cite|reference|bibliography)\b"
    r"(?P<arguments>.*?)-?%\}",
    re.DOTALL | re.MULTILINE,
)


class _ScholarTagPreprocessor(Preprocessor):
    """Replace scholar tags with stashed HTML."""

    def __init__(self, md: Markdown, extension: ScholarExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        if "{%" not in text:
            return lines
        return _TAG_RE.sub(self._replace_match, text).split("\n")

    def _replace_match(self, match: re.Match[str]) -> str:
        if match.group("name") is None:
            return match.group(0)
        html = self.extension.expand(match.group("name"), match.group("arguments"))
        return self.md.htmlStash.store(html)


class ScholarExtension(Extension):
    """Register the scholar tag preprocessor."""

    def __init__(self, **kwargs: Any) -> None:
        self.config = {
            "config": [{}, "Scholar configuration (mapping or ScholarConfig)."],
            "layouts": ["", "Layout registry, mapping or directory path."],
            "formatter": ["", "Citation formatter overriding the pybtex engine."],
            "parser": ["", "Bibliography parser overriding pybtex."],
        }
        super().__init__(**kwargs)
        self._layouts: LayoutRegistry | None = None
        self.session = self._new_session()

    def _layout_registry(self) -> LayoutRegistry:
        if self._layouts is None:
            layouts = self.getConfig("layouts")
            if isinstance(layouts, LayoutRegistry):
                self._layouts = layouts
            elif isinstance(layouts, Mapping):
                self._layouts = LayoutRegistry(layouts)
            elif layouts:
                self._layouts = LayoutRegistry.from_directory(Path(str(layouts)))
            else:
                self._layouts = LayoutRegistry()
        return self._layouts

    def _new_session(self) -> RenderSession:
        config = self.getConfig("config") or {}
        if not isinstance(config, ScholarConfig):
            config = ScholarConfig.from_mapping(config)
        return RenderSession(
            config,
            layouts=self._layout_registry(),
            formatter=self.getConfig("formatter") or None,
            parser=self.getConfig("parser") or None,
        )

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        md.registerExtension(self)
        md.preprocessors.register(
            _ScholarTagPreprocessor(md, self),
            "citesmith_tags",
            priority=24,
        )

    def reset(self) -> None:
        """Start a new render session for the next document."""
        self.session = self._new_session()

    def expand(self, name: str, arguments: str | None) -> str:
        """Render a single tag to HTML."""
        options = parse_tag_arguments(arguments)
        renderer = self.session.renderer(options)

        if name == "bibliography":
            return renderer.render_bibliography()

        keys = " ".join(options.arguments).split()
        if not keys:
            raise ArgumentError(f"The '{name}' tag requires an entry key.")

        if name == "cite":
            return ", ".join(renderer.cite(key) for key in keys)
        if name == "cite_details":
            return renderer.cite_details(keys[0], options.text)
        return renderer.reference(keys[0])


def makeExtension(**kwargs: Any) -> ScholarExtension:  # noqa: N802  # pragma: no cover - API hook
    return ScholarExtension(**kwargs)


@dataclass(slots=True)
class MarkdownDocument:
    """Result of converting Markdown into HTML."""

    html: str
    front_matter: dict[str, Any]
    cited: tuple[str, ...]


def render_markdown(
    source: str,
    *,
    config: ScholarConfig | Mapping[str, Any] | None = None,
    layouts: LayoutRegistry | Mapping[str, str] | str | Path | None = None,
    extensions: list[Any] | None = None,
) -> MarkdownDocument:
    """Convert Markdown source into HTML, expanding scholar tags."""
    metadata, body = split_front_matter(source)
    scholar = ScholarExtension(config=config or {}, layouts=layouts or "")
    processor = Markdown(extensions=[scholar, *(extensions or [])])
    html = processor.convert(body)
    return MarkdownDocument(html=html, front_matter=metadata, cited=scholar.session.context.read())
