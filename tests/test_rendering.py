from pathlib import Path
from typing import Any

import pytest

from citesmith.core.exceptions import TemplateRenderError
from citesmith.core.formatting import CitationMode
from citesmith.core.session import RenderSession
from citesmith.core.templates import LayoutRegistry


FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "bib"


class _RecordingFormatter:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, CitationMode]] = []
        self.entries: list[Any] = []

    def format(
        self,
        entry: Any,
        *,
        style: str,
        locale: str | None,
        output_format: str,
        mode: CitationMode,
    ) -> str:
        self.calls.append((entry.key, style, mode))
        self.entries.append(entry)
        if mode is CitationMode.CITATION:
            return f"({entry.key})"
        return f"<i>{entry.fields['title']}</i>"


def _session(layouts: dict[str, str] | None = None, **config: Any) -> RenderSession:
    config.setdefault("source", str(FIXTURE_DIR))
    config.setdefault("bibliography", "references")
    return RenderSession(config, layouts=layouts, formatter=_RecordingFormatter())


def test_missing_citation_is_logged() -> None:
    session = _session(missing_reference="[?]")

    assert session.renderer().cite("missing") == "[?]"
    assert session.cited_references() == ("missing",)


def test_every_citation_extends_the_context() -> None:
    session = _session()
    renderer = session.renderer()

    renderer.cite("doe2023")
    renderer.cite("doe2023")
    session.renderer("-p ch1").cite("roe2001")

    assert session.cited_references() == ("doe2023", "doe2023", "roe2001")
    assert len(session.context) == 3


def test_cite_links_to_reference_anchor() -> None:
    session = _session()

    assert session.renderer().cite("doe2023") == '<a href="#doe2023">(doe2023)</a>'
    assert session.renderer("-p ch1").cite("doe2023") == '<a href="#ch1-doe2023">(doe2023)</a>'


def test_tag_style_overlay_reaches_formatter() -> None:
    session = _session()

    session.renderer("-s unsrt").cite("doe2023")
    session.renderer().cite("doe2023")

    assert [style for _, style, _ in session.formatter.calls] == ["unsrt", "plain"]


def test_reference_wraps_record_in_anchored_element() -> None:
    session = _session(reference_tagname="div")

    assert session.renderer("-p p").reference("smith99") == (
        '<div id="p-smith99"><i>Earlier Findings</i></div>'
    )
    assert session.renderer().reference("nope") == "(missing reference)"


def test_reference_tagname_defaults_to_span() -> None:
    session = _session(reference_tagname=None)

    assert session.renderer().reference("smith99").startswith('<span id="smith99">')


def test_bibliography_listing_is_an_ordered_list() -> None:
    session = _session(sort_by="year")

    html = session.renderer().render_bibliography()

    assert html == (
        '<ol class="bibliography">'
        '<li><span id="smith99"><i>Earlier Findings</i></span></li>'
        '<li><span id="roe2001"><i>Collected Notes</i></span></li>'
        '<li><span id="doe2023"><i>A Minimal Example</i></span></li>'
        "</ol>"
    )


def test_cited_listing_only_includes_cited_entries() -> None:
    session = _session(bibliography_template="{{ key }}")
    session.renderer().cite("smith99")
    session.renderer().cite("doe2023")

    html = session.renderer("--cited").render_bibliography()

    assert html == '<ol class="bibliography"><li>doe2023</li><li>smith99</li></ol>'


def test_query_overlay_filters_listing() -> None:
    session = _session(bibliography_template="{{ key }}")

    html = session.renderer("-q @book").render_bibliography()

    assert html == '<ol class="bibliography"><li>roe2001</li></ol>'


def test_template_receives_entry_variables(tmp_path: Path) -> None:
    (tmp_path / "smith99.pdf").write_bytes(b"%PDF")
    session = _session(
        repository=str(tmp_path),
        baseurl="/site",
        bibliography_template=(
            "{{ index }}|{{ key }}|{{ type }}|{{ entry.title }}|{{ link }}|{{ details }}"
        ),
    )
    renderer = session.renderer("-q @*[year=1999]")

    assert renderer.render_bibliography() == (
        '<ol class="bibliography"><li>'
        f"1|smith99|article|Earlier Findings|/site/{tmp_path.as_posix().lstrip('/')}"
        "/smith99.pdf|/site/bibliography/smith99.html"
        "</li></ol>"
    )


def test_template_link_is_none_without_attachment() -> None:
    session = _session(bibliography_template="{{ link is none }}|{{ entry.bibtex }}")
    renderer = session.renderer()

    rendered = renderer.bibliography_tag(renderer.lookup("doe2023"), 1)

    assert rendered.startswith("True|@article{doe2023")
    assert "abstract" not in rendered.lower()


def test_named_layout_wins_over_inline_source() -> None:
    session = _session(layouts={"item": "[{{ key }}]"}, bibliography_template="item")

    assert session.renderer().bibliography_tag(session.renderer().lookup("smith99"), 1) == (
        "[smith99]"
    )


def test_template_overlay_uses_inline_source() -> None:
    session = _session(layouts={"item": "[{{ key }}]"})

    renderer = session.renderer("-T {{ index }}. {{ key }}")

    assert renderer.template_source == "{{ index }}. {{ key }}"
    assert renderer.bibliography_tag(renderer.lookup("roe2001"), 2) == "2. roe2001"


def test_templates_compile_once_per_session() -> None:
    session = _session(bibliography_template="{{ key }}")

    first = session.renderer().template
    second = session.renderer().template

    assert first is second


def test_invalid_template_raises() -> None:
    session = _session(bibliography_template="{% if %}")

    with pytest.raises(TemplateRenderError):
        session.renderer().render_bibliography()


def test_cite_details_links_to_detail_page() -> None:
    session = _session(base_url="/docs")

    assert session.renderer().cite_details("doe2023") == (
        '<a href="/docs/bibliography/doe2023.html">Details</a>'
    )
    assert session.renderer("-t More").cite_details("doe2023") == (
        '<a href="/docs/bibliography/doe2023.html">More</a>'
    )
    assert session.renderer().cite_details("doe2023", "Read") == (
        '<a href="/docs/bibliography/doe2023.html">Read</a>'
    )
    assert session.renderer().cite_details("ghost") == "(missing reference)"
    assert session.cited_references() == ()


def test_generate_details_depends_on_layout() -> None:
    assert _session(layouts={"bibtex": "{{ entry.bibtex }}"}).renderer().generate_details()
    assert not _session().renderer().generate_details()


def test_loaders_are_shared_per_source_list() -> None:
    session = _session()

    assert session.renderer().loader is session.renderer("-c").loader
    assert session.renderer("-f references").loader is not session.renderer().loader


def test_layout_registry_accepts_layout_directory(tmp_path: Path) -> None:
    (tmp_path / "item.html").write_text(
        "---\ntitle: Item\n---\n<p>{{ key }}</p>\n", encoding="utf-8"
    )
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    registry = LayoutRegistry.from_directory(tmp_path)

    assert list(registry) == ["item"]
    assert registry["item"].content == "<p>{{ key }}</p>\n"
    assert registry["item"].front_matter == {"title": "Item"}


def test_filters_convert_entries_before_formatting(tmp_path: Path) -> None:
    (tmp_path / "k.bib").write_text(
        "@article{k, author = {M{\\\"u}ller, Hans}, title = {Caf\\'e},"
        " journal = {J}, year = {2020}}\n",
        encoding="utf-8",
    )
    session = _session(source=str(tmp_path), bibliography="k", bibtex_filters=["latex"])
    renderer = session.renderer()

    renderer.cite("k")
    reference = renderer.reference("k")

    formatted = session.formatter.entries
    assert [entry.fields["title"] for entry in formatted] == ["Café", "Café"]
    assert str(formatted[0].persons["author"][0]) == "Müller, Hans"
    assert reference == '<span id="k"><i>Café</i></span>'
    assert renderer.lookup("k").fields["title"] == "Caf\\'e"


def test_only_entries_with_attachments_get_links(tmp_path: Path) -> None:
    (tmp_path / "smith99.pdf").write_bytes(b"%PDF")
    session = _session(repository=str(tmp_path), bibliography_template="{{ key }}={{ link }}")
    renderer = session.renderer()

    assert renderer.render_bibliography() == (
        '<ol class="bibliography">'
        "<li>doe2023=None</li>"
        "<li>roe2001=None</li>"
        f"<li>smith99={tmp_path.as_posix()}/smith99.pdf</li>"
        "</ol>"
    )
    assert renderer.repository_link_for(renderer.lookup("doe2023")) is None
