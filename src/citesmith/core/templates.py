"""Bibliography item templates and named layouts."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
import logging
from pathlib import Path
import re
from typing import Any, Protocol, runtime_checkable

from jinja2 import Environment, TemplateError
import yaml

from .exceptions import ConfigurationError, TemplateRenderError


logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "{{ reference }}"

LAYOUT_SUFFIXES: tuple[str, ...] = (".html", ".htm", ".j2", ".jinja", ".liquid", ".md")

_FRONT_MATTER_RE = re.compile(
    r"\A(?P<bom>\ufeff?)---[ \t]*\r?\n(?P<meta>.*?)^(?:---|\.\.\.)[ \t]*\r?$\n?",
    re.DOTALL | re.MULTILINE,
)


@runtime_checkable
class CompiledTemplate(Protocol):
    def render(self, *args: Any, **kwargs: Any) -> str: ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Interface of the template engine."""

    def compile(self, source: str) -> CompiledTemplate: ...

    def render(self, template: CompiledTemplate, variables: Mapping[str, Any]) -> str: ...


class JinjaTemplateRenderer:
    """Compile and render templates with Jinja2.

    Autoescaping is disabled: variables such as ``reference`` already hold
    markup produced by the style engine.
    """

    def __init__(self, environment: Environment | None = None) -> None:
        self.environment = environment or Environment(autoescape=False)

    def compile(self, source: str) -> CompiledTemplate:
        try:
            return self.environment.from_string(source)
        except TemplateError as exc:
            raise TemplateRenderError(f"Invalid bibliography template: {exc}") from exc

    def render(self, template: CompiledTemplate, variables: Mapping[str, Any]) -> str:
        try:
            return template.render(dict(variables))
        except TemplateError as exc:
            raise TemplateRenderError(f"Failed to render bibliography template: {exc}") from exc


def split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from a document, returning metadata and body.

    Documents without a closed block, or whose block is not a YAML mapping,
    come back with empty metadata. A leading byte order mark is kept.
    """
    match = _FRONT_MATTER_RE.match(source)
    if match is None:
        return {}, source
    try:
        metadata = yaml.safe_load(match.group("meta"))
    except yaml.YAMLError as exc:
        logger.debug("Ignoring unparsable front matter: %s", exc)
        return {}, source
    if not isinstance(metadata, dict):
        metadata = {}
    return metadata, match.group("bom") + source[match.end() :]


@dataclass(frozen=True, slots=True)
class Layout:
    """Named template source."""

    name: str
    content: str
    front_matter: Mapping[str, Any] = field(default_factory=dict)
    path: Path | None = None


class LayoutRegistry(Mapping[str, Layout]):
    """Named layouts available to ``bibliography_template`` and detail pages."""

    def __init__(self, layouts: Mapping[str, str | Layout] | None = None) -> None:
        self._layouts: dict[str, Layout] = {}
        for name, layout in (layouts or {}).items():
            self.register(name, layout)

    @classmethod
    def from_directory(cls, directory: Path | str) -> LayoutRegistry:
        """Load every layout file of ``directory``, keyed by file stem."""
        root = Path(directory)
        if not root.is_dir():
            raise ConfigurationError(f"Layout directory does not exist: {root}")

        registry = cls()
        for path in sorted(root.iterdir()):
            if not path.is_file() or path.suffix.lower() not in LAYOUT_SUFFIXES:
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise ConfigurationError(f"Unable to read layout '{path}': {exc}") from exc
            metadata, body = split_front_matter(text)
            registry.register(
                path.stem, Layout(name=path.stem, content=body, front_matter=metadata, path=path)
            )
        logger.debug("Registered %d layout(s) from '%s'.", len(registry), root)
        return registry

    def register(self, name: str, layout: str | Layout) -> None:
        if isinstance(layout, str):
            layout = Layout(name=name, content=layout)
        self._layouts[name] = layout

    def __getitem__(self, name: str) -> Layout:
        return self._layouts[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._layouts)

    def __len__(self) -> int:
        return len(self._layouts)


__all__ = [
    "DEFAULT_TEMPLATE",
    "CompiledTemplate",
    "JinjaTemplateRenderer",
    "Layout",
    "LayoutRegistry",
    "TemplateRenderer",
    "split_front_matter",
]
