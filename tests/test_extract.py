from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from emmet_ls import extract as extract_module
from emmet_ls.dispatch import Grammar
from emmet_ls.exceptions import InvariantViolation, ScannerFault
from emmet_ls.extract import (
    ExtractedAbbreviation,
    ScanStatus,
    clamp_cursor,
    extract,
    scan,
)


def test_extract_whole_line_abbreviation() -> None:
    found = extract("ul>li*3", 7)
    assert found == ExtractedAbbreviation(start_offset=0, text="ul>li*3")


def test_extract_clamps_cursor_past_line_end() -> None:
    found = extract("ul>li*3", 9)
    assert found == ExtractedAbbreviation(start_offset=0, text="ul>li*3")


def test_extract_after_prefix_text() -> None:
    line = "    div.container>ul>li*3"
    found = extract(line, len(line))
    assert found is not None
    assert found.start_offset == 4
    assert found.text == "div.container>ul>li*3"
    assert line[found.start_offset : len(line)] == found.text


def test_extract_stylesheet_grammar() -> None:
    found = extract("  m10", 5, Grammar.STYLESHEET)
    assert found is not None
    assert found.start_offset == 2
    assert found.text == "m10"


@pytest.mark.parametrize(
    ("line", "cursor"),
    [("", 0), ("div", 0), ("    ", 4), ("div ", 4)],
)
def test_scan_declines_without_abbreviation(line: str, cursor: int) -> None:
    outcome = scan(line, cursor)
    assert outcome.status is ScanStatus.DECLINED
    assert outcome.abbreviation is None
    assert extract(line, cursor) is None


def test_scan_reports_scanner_fault(monkeypatch, caplog) -> None:
    def _boom(*_args, **_kwargs):
        raise AssertionError("scanner exploded")

    monkeypatch.setattr(extract_module.emmet, "extract", _boom)
    outcome = scan("div", 3)
    assert outcome.status is ScanStatus.FAULT
    assert isinstance(outcome.fault, ScannerFault)
    assert outcome.fault.cursor == 3
    assert isinstance(outcome.fault.cause, AssertionError)

    with caplog.at_level(logging.WARNING, logger="emmet_ls"):
        assert extract("div", 3) is None
    assert "scanner exploded" in caplog.text


def test_scan_treats_empty_match_as_declined(monkeypatch) -> None:
    monkeypatch.setattr(
        extract_module.emmet,
        "extract",
        lambda *_args, **_kwargs: SimpleNamespace(abbreviation="", start=3),
    )
    assert scan("div", 3).status is ScanStatus.DECLINED


def test_scan_rejects_start_past_cursor(monkeypatch) -> None:
    monkeypatch.setattr(
        extract_module.emmet,
        "extract",
        lambda *_args, **_kwargs: SimpleNamespace(abbreviation="div", start=5),
    )
    with pytest.raises(InvariantViolation):
        scan("div", 3)


def test_clamp_cursor() -> None:
    assert clamp_cursor("abc", -1) == 0
    assert clamp_cursor("abc", 2) == 2
    assert clamp_cursor("abc", 10) == 3
