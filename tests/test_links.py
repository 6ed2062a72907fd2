from pathlib import PurePosixPath

import pytest

from citesmith.core.links import details_file_for, join_url, resolve_base_url
from citesmith.core.markup import content_tag, content_tag_with_attributes, empty_tag, link_to


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("foo: bar baz", "foo_bar_baz.html"),
        ("knuth84", "knuth84.html"),
        ("a::b\tc", "a_b_c.html"),
    ],
)
def test_details_file_for(key: str, expected: str) -> None:
    assert details_file_for(key) == expected


@pytest.mark.parametrize(
    ("base", "segments", "expected"),
    [
        ("/blog", ("bibliography", "x.html"), "/blog/bibliography/x.html"),
        ("/blog/", ("/bibliography/", "x.html"), "/blog/bibliography/x.html"),
        ("", ("bibliography", "x.html"), "bibliography/x.html"),
        (None, ("", "x.html"), "x.html"),
        ("https://example.org", (PurePosixPath("papers/a.pdf"),), "https://example.org/papers/a.pdf"),
    ],
)
def test_join_url(base: str | None, segments: tuple[object, ...], expected: str) -> None:
    assert join_url(base, *segments) == expected


def test_base_url_prefers_baseurl() -> None:
    assert resolve_base_url({"baseurl": "/a", "base_url": "/b"}) == "/a"
    assert resolve_base_url({"baseurl": None, "base_url": "/b"}) == "/b"
    assert resolve_base_url({}) == ""


def test_content_tag() -> None:
    assert content_tag("li", "<b>x</b>") == "<li><b>x</b></li>"


def test_empty_tag_escapes_attributes() -> None:
    assert empty_tag("img", {"src": "a.png", "alt": 'say "hi"', "title": None}) == (
        '<img src="a.png" alt="say &quot;hi&quot;"/>'
    )


def test_content_tag_with_attributes() -> None:
    assert content_tag_with_attributes("span", "ref", {"id": "p-k"}) == '<span id="p-k">ref</span>'


def test_link_to_uses_href_as_fallback_text() -> None:
    assert link_to("#k", "[K]") == '<a href="#k">[K]</a>'
    assert link_to("/x.pdf") == '<a href="/x.pdf">/x.pdf</a>'
    assert link_to("/x", "X", {"class": "pdf"}) == '<a class="pdf" href="/x">X</a>'
