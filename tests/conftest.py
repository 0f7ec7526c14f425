from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from emmet_ls.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def _propagating_logger():
    # caplog listens on the root logger; keep package records flowing there.
    logger = logging.getLogger(LOGGER_NAME)
    previous_level = logger.level
    previous_propagate = logger.propagate
    previous_handlers = list(logger.handlers)
    logger.propagate = True
    try:
        yield logger
    finally:
        logger.setLevel(previous_level)
        logger.propagate = previous_propagate
        logger.handlers[:] = previous_handlers
