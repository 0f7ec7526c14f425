from __future__ import annotations

from emmet_ls.dispatch import Grammar, route
from emmet_ls.schema import RoutingConfig


def test_route_default_config() -> None:
    config = RoutingConfig()
    assert route("html", config) == (Grammar.MARKUP,)
    assert route("css", config) == (Grammar.STYLESHEET,)


def test_route_unknown_language_selects_nothing() -> None:
    assert route("python", RoutingConfig()) == ()
    assert route(None, RoutingConfig()) == ()


def test_route_language_in_both_lists_selects_both() -> None:
    config = RoutingConfig(html_filetypes=["html", "vue"], css_filetypes=["css", "vue"])
    assert route("vue", config) == (Grammar.MARKUP, Grammar.STYLESHEET)


def test_grammar_engine_type() -> None:
    assert Grammar.MARKUP.engine_type == "markup"
    assert Grammar.STYLESHEET.engine_type == "stylesheet"
