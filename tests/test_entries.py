from pathlib import Path

import pytest

from citesmith.core.bibliography import (
    bibliography_data_from_string,
    convert_entry,
    entry_to_bibtex,
    entry_variables,
    field_value,
    resolve_filters,
)
from citesmith.core.bibliography.filters import html_filter, latex_filter, month_filter
from citesmith.core.exceptions import ConfigurationError


FIXTURE_BIB = Path(__file__).resolve().parent / "fixtures" / "bib" / "references.bib"


@pytest.fixture
def data():
    return bibliography_data_from_string(FIXTURE_BIB.read_text(encoding="utf-8"))


def test_field_value_covers_fields_and_people(data) -> None:
    entry = data.entries["roe2001"]

    assert field_value(entry, "title") == "Collected Notes"
    assert field_value(entry, "author") == "Roe, John and Poe, Edgar"
    assert field_value(entry, "journal") == ""


def test_bibtex_serialisation_can_drop_fields(data) -> None:
    entry = data.entries["doe2023"]

    assert "abstract" in entry_to_bibtex(entry).lower()
    assert "abstract" not in entry_to_bibtex(entry, exclude=("abstract",)).lower()
    assert "abstract" in entry.fields


def test_entry_variables_expose_strings_without_abstract(data) -> None:
    variables = entry_variables(data.entries["doe2023"])

    assert variables["key"] == "doe2023"
    assert variables["type"] == "article"
    assert variables["author"] == "Doe, Jane"
    assert variables["year"] == "2023"
    assert variables["abstract"] == "We describe a minimal example."
    assert "@article{doe2023" in variables["bibtex"]
    assert "abstract" not in variables["bibtex"].lower()


def test_entry_variables_apply_filters() -> None:
    data = bibliography_data_from_string(r"@misc{k, title = {Caf\'e}, month = {mar}}")

    variables = entry_variables(data.entries["k"], resolve_filters(["latex", "month"]))

    assert variables["title"] == "Café"
    assert variables["month"] == "03"


def test_latex_filter_decodes_markup() -> None:
    assert latex_filter(r"{\"U}ber {Bach}") == "Über Bach"


def test_html_filter_strips_tags_and_entities() -> None:
    assert html_filter("<em>Fish</em> &amp; chips") == "Fish & chips"
    assert html_filter("a < b") == "a < b"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("jan", "01"), ("September", "09"), ("7", "07"), ("13", "13"), ("Spring", "Spring")],
)
def test_month_filter(value: str, expected: str) -> None:
    assert month_filter(value) == expected


def test_unknown_filter_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="unknown"):
        resolve_filters(["unknown"])


def test_convert_entry_leaves_original_untouched() -> None:
    data = bibliography_data_from_string(
        r"@Article{k, author = {M{\"u}ller, Hans}, title = {{Deep} Notes}}"
    )
    entry = data.entries["k"]

    converted = convert_entry(entry, resolve_filters(["latex"]))

    assert converted.key == "k"
    assert converted.type == "article"
    assert converted.fields["title"] == "Deep Notes"
    assert str(converted.persons["author"][0]) == "Müller, Hans"
    assert entry.fields["title"] == "{Deep} Notes"
