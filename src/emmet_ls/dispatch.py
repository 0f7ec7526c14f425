"""Grammar selection from a document's language id."""

from __future__ import annotations

from enum import Enum

from emmet_ls.schema import RoutingConfig


class Grammar(str, Enum):
    MARKUP = "markup"
    STYLESHEET = "stylesheet"

    @property
    def engine_type(self) -> str:
        return self.value


def route(language_id: str | None, config: RoutingConfig) -> tuple[Grammar, ...]:
    """Return the grammars to attempt, markup first.

    Both are returned when the language id is configured into both lists;
    an empty tuple means no extraction should be attempted at all.
    """
    grammars: list[Grammar] = []
    if config.is_markup(language_id):
        grammars.append(Grammar.MARKUP)
    if config.is_stylesheet(language_id):
        grammars.append(Grammar.STYLESHEET)
    return tuple(grammars)
