from __future__ import annotations

import pytest

from emmet_ls.schema import (
    SETTINGS_SECTION,
    InitializationOptions,
    RoutingConfig,
    routing_from_settings,
)


def test_routing_config_defaults() -> None:
    config = RoutingConfig()
    assert config.html_filetypes == ["html"]
    assert config.css_filetypes == ["css"]
    assert config.is_markup("html")
    assert config.is_stylesheet("css")
    assert not config.is_markup("css")
    assert not config.is_stylesheet(None)


def test_routing_config_normalizes_lists() -> None:
    config = RoutingConfig(html_filetypes="html, vue", css_filetypes=["css", 1, "scss"])
    assert config.html_filetypes == ["html", "vue"]
    assert config.css_filetypes == ["css", "scss"]


def test_routing_from_settings_top_level_keys() -> None:
    fallback = RoutingConfig()
    config = routing_from_settings({"html_filetypes": ["php"]}, fallback=fallback)
    assert config.html_filetypes == ["php"]
    assert config.css_filetypes == ["css"]


def test_routing_from_settings_nested_section() -> None:
    fallback = RoutingConfig(html_filetypes=["vue"])
    payload = {SETTINGS_SECTION: {"css_filetypes": ["less"]}, "unrelated": True}
    config = routing_from_settings(payload, fallback=fallback)
    assert config.html_filetypes == ["vue"]
    assert config.css_filetypes == ["less"]


def test_routing_from_settings_none_keeps_fallback() -> None:
    fallback = RoutingConfig(html_filetypes=["vue"])
    assert routing_from_settings(None, fallback=fallback) is fallback


def test_routing_from_settings_rejects_non_objects() -> None:
    with pytest.raises(ValueError):
        routing_from_settings(["html"], fallback=RoutingConfig())


def test_initialization_options_aliases() -> None:
    options = InitializationOptions.from_payload(
        {"replaceAbbreviation": True, "logLevel": "debug", "css_filetypes": "css,sass"}
    )
    assert options.replace_abbreviation is True
    assert options.log_level == "debug"
    assert options.css_filetypes == ["css", "sass"]
    assert options.html_filetypes is None


def test_initialization_options_ignore_non_objects() -> None:
    options = InitializationOptions.from_payload("nope")
    assert options == InitializationOptions()
