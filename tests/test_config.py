from pathlib import Path
import textwrap

import pytest

from citesmith.core.config import LayeredConfig, ScholarConfig, load_scholar_config
from citesmith.core.exceptions import ConfigurationError


def test_builtin_defaults_are_exposed() -> None:
    config = LayeredConfig.from_site(None)

    assert config["style"] == "plain"
    assert config["sort_by"] == "none"
    assert config["bibliography_template"] == "{{ reference }}"
    assert config.get("prefix") is None


def test_site_config_overrides_defaults() -> None:
    config = LayeredConfig.from_site({"style": "alpha", "missing_reference": "[?]"})

    assert config["style"] == "alpha"
    assert config["missing_reference"] == "[?]"
    assert config["locale"] == "en"


def test_overlay_wins_and_never_mutates_base() -> None:
    site = LayeredConfig.from_site({"style": "alpha"})
    layered = site.with_overlay({"style": "unsrt", "prefix": "pfx"})

    assert layered["style"] == "unsrt"
    assert layered["prefix"] == "pfx"
    assert site["style"] == "alpha"
    assert "prefix" not in site


def test_last_overlay_wins() -> None:
    config = LayeredConfig.from_site(None).with_overlay({"order": "asc"}).with_overlay(
        {"order": "desc"}
    )

    assert config["order"] == "desc"
    assert len(config.layers) == 3


def test_none_overlay_values_do_not_hide_site_values() -> None:
    config = LayeredConfig.from_site({"style": "alpha"}).with_overlay({"style": None})

    assert config["style"] == "alpha"


def test_overlay_copies_mutable_values() -> None:
    files = ["a.bib"]
    config = LayeredConfig.from_site(None).with_overlay({"bibliography": files})
    files.append("b.bib")

    assert config["bibliography"] == ["a.bib"]


def test_layers_are_read_only() -> None:
    config = LayeredConfig.from_site(None)

    with pytest.raises(TypeError):
        config.layers[0]["style"] = "alpha"  # type: ignore[index]


def test_unknown_site_option_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        ScholarConfig.from_mapping({"stlye": "alpha"})


def test_iteration_covers_every_layer() -> None:
    config = LayeredConfig.from_site(None).with_overlay({"cited": True})

    assert "cited" in set(config)
    assert "style" in set(config)
    assert len(config) == len(set(config))


def test_load_config_with_scholar_section(tmp_path: Path) -> None:
    path = tmp_path / "_config.yml"
    path.write_text(
        textwrap.dedent(
            """
            baseurl: /blog
            scholar:
              style: alpha
              sort_by: year
            """
        ),
        encoding="utf-8",
    )

    config = load_scholar_config(path)

    assert config.style == "alpha"
    assert config.sort_by == "year"
    assert config.baseurl == "/blog"


def test_load_config_from_root_mapping(tmp_path: Path) -> None:
    path = tmp_path / "scholar.yml"
    path.write_text("order: descending\n", encoding="utf-8")

    assert load_scholar_config(path).order == "descending"


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "scholar.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_scholar_config(path)
