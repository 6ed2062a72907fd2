"""Tag argument parsing.

Tag arguments follow a small flag language::

    -c, --cited             restrict listings to cited entries
    -f, --file FILE         bibliography source (repeatable)
    -q, --query QUERY       query expression
    -p, --prefix PREFIX     anchor prefix
    -t, --text TEXT         link text
    -s, --style STYLE       citation style
    -T, --template TEMPLATE template string or layout name

Parsing runs in two phases. :func:`scan_tag_arguments` lazily splits the raw
text wherever a flag begins, and :func:`parse_tag_arguments` consumes the
resulting tokens. A flag only begins after a non-word character, so values
may abut their flag (``-ppfx``) and hyphenated words are left alone.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
import re
from typing import Any

from .exceptions import ArgumentError


@dataclass(frozen=True, slots=True)
class _Flag:
    short: str
    long: str
    dest: str
    takes_value: bool


_FLAGS: tuple[_Flag, ...] = (
    _Flag("-c", "--cited", "cited", False),
    _Flag("-f", "--file", "bibliography", True),
    _Flag("-q", "--query", "query", True),
    _Flag("-p", "--prefix", "prefix", True),
    _Flag("-t", "--text", "text", True),
    _Flag("-s", "--style", "style", True),
    _Flag("-T", "--template", "bibliography_template", True),
)

_FLAG_LOOKUP: dict[str, _Flag] = {
    name: flag for flag in _FLAGS for name in (flag.short, flag.long)
}

# Long forms come first so ``--cited`` is not read as ``-`` followed by ``-c``.
_FLAG_RE = re.compile(
    r"(?<!\w)(?:"
    + "|".join(re.escape(flag.long) for flag in _FLAGS)
    + "|-["
    + "".join(flag.short[1] for flag in _FLAGS)
    + "])"
)


@dataclass(frozen=True, slots=True)
class Token:
    """Single scanned token."""

    text: str
    flag: bool = False


def scan_tag_arguments(text: str | None) -> Iterator[Token]:
    """Yield flag and value tokens from ``text``, skipping blank fragments."""
    if not text:
        return
    position = 0
    for match in _FLAG_RE.finditer(text):
        value = text[position : match.start()].strip()
        if value:
            yield Token(value)
        yield Token(match.group(0), flag=True)
        position = match.end()
    tail = text[position:].strip()
    if tail:
        yield Token(tail)


@dataclass(frozen=True, slots=True)
class TagOptions:
    """Options extracted from a tag invocation."""

    cited: bool = False
    files: tuple[str, ...] = ()
    query: str | None = None
    prefix: str | None = None
    text: str | None = None
    style: str | None = None
    template: str | None = None
    arguments: tuple[str, ...] = field(default=(), compare=False)

    def as_overlay(self) -> dict[str, Any]:
        """Return the configuration overlay holding only the options that were set."""
        overlay: dict[str, Any] = {}
        if self.cited:
            overlay["cited"] = True
        if self.files:
            overlay["bibliography"] = list(self.files)
        for name, value in (
            ("query", self.query),
            ("prefix", self.prefix),
            ("text", self.text),
            ("style", self.style),
            ("bibliography_template", self.template),
        ):
            if value is not None:
                overlay[name] = value
        return overlay

    def to_arguments(self) -> str:
        """Serialise the options back to canonical long-flag form."""
        parts: list[str] = []
        if self.cited:
            parts.append("--cited")
        parts.extend(f"--file {name}" for name in self.files)
        for flag, value in (
            ("--query", self.query),
            ("--prefix", self.prefix),
            ("--text", self.text),
            ("--style", self.style),
            ("--template", self.template),
        ):
            if value is not None:
                parts.append(f"{flag} {value}")
        return " ".join(parts)

    @property
    def key(self) -> str | None:
        """Return the leading positional argument, if any."""
        return self.arguments[0] if self.arguments else None


def parse_tag_arguments(text: str | None) -> TagOptions:
    """Parse ``text`` into :class:`TagOptions`.

    Operand flags consume exactly the next token, whatever it is. Tokens that
    are neither flags nor operands are kept as positional ``arguments``.

    Raises:
        ArgumentError: if an operand flag is the last token.
    """
    values: dict[str, Any] = {}
    files: list[str] = []
    arguments: list[str] = []
    pending: _Flag | None = None

    for token in scan_tag_arguments(text):
        if pending is not None:
            if pending.dest == "bibliography":
                files.append(token.text)
            else:
                values[pending.dest] = token.text
            pending = None
            continue

        flag = _FLAG_LOOKUP.get(token.text) if token.flag else None
        if flag is None:
            arguments.append(token.text)
        elif flag.takes_value:
            pending = flag
        else:
            values[flag.dest] = True

    if pending is not None:
        raise ArgumentError(f"missing argument: {pending.long}")

    return TagOptions(
        cited=bool(values.get("cited", False)),
        files=tuple(files),
        query=values.get("query"),
        prefix=values.get("prefix"),
        text=values.get("text"),
        style=values.get("style"),
        template=values.get("bibliography_template"),
        arguments=tuple(arguments),
    )


__all__ = ["TagOptions", "Token", "parse_tag_arguments", "scan_tag_arguments"]
