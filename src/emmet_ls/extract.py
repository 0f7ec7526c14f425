"""Locate the abbreviation that ends at the cursor on a single line."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import emmet

from emmet_ls.dispatch import Grammar
from emmet_ls.exceptions import ScannerFault
from emmet_ls.invariants import never

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractedAbbreviation:
    start_offset: int
    text: str


class ScanStatus(Enum):
    FOUND = "found"
    DECLINED = "declined"
    FAULT = "fault"


@dataclass(frozen=True)
class ScanOutcome:
    """Result of one scan.

    ``DECLINED`` means the scanner found nothing and nothing is wrong;
    ``FAULT`` means the scanner itself raised and ``fault`` says why.
    """

    status: ScanStatus
    abbreviation: ExtractedAbbreviation | None = None
    fault: ScannerFault | None = None

    @classmethod
    def declined(cls) -> ScanOutcome:
        return cls(ScanStatus.DECLINED)


def clamp_cursor(line: str, cursor: int) -> int:
    return min(len(line), max(0, cursor))


def scan(line: str, cursor: int, grammar: Grammar = Grammar.MARKUP) -> ScanOutcome:
    # Clients may report a cursor past the end of the line; the scanner clamps too.
    cursor = clamp_cursor(line, cursor)
    if cursor == 0:
        return ScanOutcome.declined()
    try:
        found = emmet.extract(line, cursor, {"type": grammar.engine_type})
    except Exception as exc:
        return ScanOutcome(ScanStatus.FAULT, fault=ScannerFault(line, cursor, exc))
    if found is None or not found.abbreviation:
        return ScanOutcome.declined()
    start = found.start
    if not 0 <= start <= cursor:
        never(
            "extracted abbreviation starts outside the line prefix",
            start=start,
            cursor=cursor,
        )
    return ScanOutcome(
        ScanStatus.FOUND,
        abbreviation=ExtractedAbbreviation(start_offset=start, text=found.abbreviation),
    )


def extract(
    line: str, cursor: int, grammar: Grammar = Grammar.MARKUP
) -> ExtractedAbbreviation | None:
    outcome = scan(line, cursor, grammar)
    if outcome.status is ScanStatus.FAULT:
        logger.warning("ERR: %s", outcome.fault)
    return outcome.abbreviation
