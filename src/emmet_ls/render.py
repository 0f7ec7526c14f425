"""Expand abbreviations into editor snippet text.

The engine numbers its tab stops and hands each one to the ``output.field``
hook; the hook below writes them in LSP snippet syntax (``${1}`` or
``${1:default}``). The preview is the same expansion without the hook, so the
engine prints its own rendition of the pending fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import emmet
from lsprotocol.types import Position, Range

from emmet_ls.dispatch import Grammar
from emmet_ls.exceptions import ExpansionError
from emmet_ls.extract import ExtractedAbbreviation

RangeMapper = Callable[[Range], Range]


@dataclass(frozen=True)
class RenderedSnippet:
    preview_text: str
    snippet_text: str
    replacement_range: Range


def snippet_field(index: int, placeholder: str, **_kwargs: object) -> str:
    if placeholder:
        return f"${{{index}:{placeholder}}}"
    return f"${{{index}}}"


def engine_config(grammar: Grammar, *, snippet_fields: bool = True) -> dict[str, object]:
    config: dict[str, object] = {"type": grammar.engine_type}
    if snippet_fields:
        config["options"] = {"output.field": snippet_field}
    return config


def expand(abbreviation: str, grammar: Grammar, *, snippet_fields: bool = True) -> str:
    try:
        return emmet.expand(abbreviation, engine_config(grammar, snippet_fields=snippet_fields))
    except Exception as exc:
        raise ExpansionError(abbreviation, grammar.value, exc) from exc


def replacement_range(
    line_number: int,
    start_offset: int,
    cursor_offset: int,
    *,
    replace_abbreviation: bool = False,
) -> Range:
    """Range the completion edit applies to.

    By default both ends sit on the abbreviation start, so the edit is an
    insertion in front of the typed text. With ``replace_abbreviation`` the
    range runs to the cursor and the typed text is replaced.
    """
    end = cursor_offset if replace_abbreviation else start_offset
    return Range(
        start=Position(line=line_number, character=start_offset),
        end=Position(line=line_number, character=end),
    )


def render(
    abbreviation: ExtractedAbbreviation,
    grammar: Grammar,
    *,
    line_number: int = 0,
    cursor_offset: int | None = None,
    replace_abbreviation: bool = False,
    range_mapper: RangeMapper | None = None,
) -> RenderedSnippet:
    snippet_text = expand(abbreviation.text, grammar)
    preview_text = expand(abbreviation.text, grammar, snippet_fields=False)
    if cursor_offset is None:
        cursor_offset = abbreviation.start_offset + len(abbreviation.text)
    target = replacement_range(
        line_number,
        abbreviation.start_offset,
        cursor_offset,
        replace_abbreviation=replace_abbreviation,
    )
    if range_mapper is not None:
        target = range_mapper(target)
    return RenderedSnippet(
        preview_text=preview_text,
        snippet_text=snippet_text,
        replacement_range=target,
    )
