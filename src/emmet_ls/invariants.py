"""Invariant markers."""

from __future__ import annotations

from typing import NoReturn

from emmet_ls.exceptions import InvariantViolation


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The env payload is attached to the raised exception for diagnostics only.
    """
    raise InvariantViolation(reason or "never() marker reached", env=env)
