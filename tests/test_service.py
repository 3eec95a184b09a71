from __future__ import annotations

import pytest

from fontpicker.config import FontpickerConfig
from fontpicker.exceptions import ConfigError
from fontpicker.selection import FontSelection
from fontpicker.service import FontPicker


@pytest.fixture
def picker(store) -> FontPicker:
    return FontPicker(store=store)


def test_picker_uses_store_configuration(make_store) -> None:
    store = make_store(weights=[700], include_italic=False)
    picker = FontPicker(store=store)
    assert picker.config is store.config
    assert picker.to_font_stylesheet_url("Roboto") == "https://fonts.bunny.net/css?family=roboto:700"


def test_field_methods(picker: FontPicker) -> None:
    assert picker.to_font_stylesheet_url("roboto") == (
        "https://fonts.bunny.net/css?family=roboto:400,400i,700,700i"
    )
    assert picker.to_font_family_name("https://fonts.bunny.net/family/open-sans") == "Open Sans"
    assert picker.to_font_family_name("plain") is None
    assert picker.is_valid_font("plain")
    assert picker.to_font_stylesheet_url("hollow") is None
    assert picker.to_font_stylesheet_url("unknown") is None
    assert not picker.is_valid_font("unknown")
    assert not picker.is_valid_font(42)


def test_select_applies_defaults(make_store) -> None:
    picker = FontPicker(store=make_store(weights=["900", 400], include_italic=False))
    selection = picker.select("  Inter ")
    assert selection.value == "Inter"
    assert selection.is_valid()
    assert selection.weight_filter == (400, 900)
    assert selection.include_italics is False
    assert selection.to_stylesheet_url() == "https://fonts.bunny.net/css?family=inter:400,900"


def test_select_unknown_value_is_invalid(picker: FontPicker) -> None:
    assert not picker.select("Comic Sans").is_valid()
    invalid = picker.select(None)
    assert invalid.value == ""
    assert not invalid.is_valid()


def test_collection_accepts_values_and_selections(picker: FontPicker) -> None:
    heading = picker.select("inter").with_css_variable("--font-heading")
    collection = picker.collection("roboto", [heading, ["missing"]], 3)

    assert len(collection) == 3
    assert all(isinstance(item, FontSelection) for item in collection)
    assert collection.to_stylesheet_url() == (
        "https://fonts.bunny.net/css?family=roboto:400,400i,700,700i|inter:400,700,900"
    )


def test_render_honours_preconnect_setting(make_store) -> None:
    picker = FontPicker(store=make_store())
    assert picker.render("inter").startswith('<link rel="preconnect"')
    assert picker.render("inter", preconnect=False) == (
        '<link rel="stylesheet" href="https://fonts.bunny.net/css?family=inter:400,700,900">'
    )

    quiet = FontPicker(store=make_store(preconnect=False))
    assert quiet.render("inter").startswith('<link rel="stylesheet"')
    assert quiet.render("nothing-here") is None


def test_conflicting_config_and_store_are_rejected(make_store) -> None:
    store = make_store(weights=[700])
    with pytest.raises(ConfigError):
        FontPicker(FontpickerConfig(weights=[400]), store=store)

    picker = FontPicker(FontpickerConfig(weights=[700]), store=store)
    assert picker.config is store.config


def test_supplied_store_is_kept_and_loaded_lazily(make_store) -> None:
    store = make_store()
    picker = FontPicker(store=store)
    assert picker.store is store
    assert store.fetcher.calls == 0
    assert picker.resolver.store is store
