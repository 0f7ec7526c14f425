"""emmet-ls package root."""

from emmet_ls.exceptions import (
    DocumentNotFound,
    EmmetLsError,
    ExpansionError,
    InvariantViolation,
    ScannerFault,
)
from emmet_ls.invariants import never

__all__ = [
    "__version__",
    "DocumentNotFound",
    "EmmetLsError",
    "ExpansionError",
    "InvariantViolation",
    "ScannerFault",
    "never",
]

__version__ = "0.1.0"
