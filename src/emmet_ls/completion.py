from __future__ import annotations

import logging
from typing import Iterable

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    InsertTextFormat,
    Range,
    TextEdit,
)

from emmet_ls.dispatch import Grammar
from emmet_ls.exceptions import ExpansionError
from emmet_ls.extract import clamp_cursor, extract
from emmet_ls.json_types import JSONObject
from emmet_ls.render import RangeMapper, RenderedSnippet, render

logger = logging.getLogger(__name__)


def _range_payload(target: Range) -> JSONObject:
    return {
        "start": {"line": target.start.line, "character": target.start.character},
        "end": {"line": target.end.line, "character": target.end.character},
    }


def build_completion_item(abbreviation: str, rendered: RenderedSnippet) -> CompletionItem:
    """Label and detail carry the typed abbreviation so client-side filtering
    matches what the user wrote rather than the expansion."""
    target = rendered.replacement_range
    return CompletionItem(
        label=abbreviation,
        detail=abbreviation,
        documentation=rendered.preview_text,
        insert_text_format=InsertTextFormat.Snippet,
        text_edit=TextEdit(range=target, new_text=rendered.snippet_text),
        kind=CompletionItemKind.Snippet,
        data={"range": _range_payload(target), "textResult": rendered.snippet_text},
    )


def completion_for(
    line_number: int,
    line: str,
    cursor: int,
    grammar: Grammar,
    *,
    replace_abbreviation: bool = False,
    range_mapper: RangeMapper | None = None,
) -> CompletionItem | None:
    abbreviation = extract(line, cursor, grammar)
    if abbreviation is None:
        return None
    try:
        rendered = render(
            abbreviation,
            grammar,
            line_number=line_number,
            cursor_offset=clamp_cursor(line, cursor),
            replace_abbreviation=replace_abbreviation,
            range_mapper=range_mapper,
        )
    except ExpansionError as exc:
        logger.warning("ERR: %s", exc)
        return None
    return build_completion_item(abbreviation.text, rendered)


def complete_line(
    line_number: int,
    line: str,
    cursor: int,
    grammars: Iterable[Grammar],
    *,
    replace_abbreviation: bool = False,
    range_mapper: RangeMapper | None = None,
) -> list[CompletionItem]:
    items: list[CompletionItem] = []
    for grammar in grammars:
        item = completion_for(
            line_number,
            line,
            cursor,
            grammar,
            replace_abbreviation=replace_abbreviation,
            range_mapper=range_mapper,
        )
        if item is not None:
            items.append(item)
    return items
