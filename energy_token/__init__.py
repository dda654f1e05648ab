"""
Energy Token Ledger

A permissioned ledger of metered energy production (kWh base units) with
per-issuance provenance: energy source and carbon footprint.
"""

from .errors import LedgerError, LedgerErrorKind
from .models import (
    NULL_ADDRESS,
    ExecutionContext,
    LedgerState,
    MintEvent,
    SourceType,
    TokenConfig,
    TokenMetadata,
)
from .token import EnergyToken
from .validator import LedgerValidator

__version__ = "1.0.0"
__all__ = [
    "NULL_ADDRESS",
    "EnergyToken",
    "ExecutionContext",
    "LedgerError",
    "LedgerErrorKind",
    "LedgerState",
    "LedgerValidator",
    "MintEvent",
    "SourceType",
    "TokenConfig",
    "TokenMetadata",
]
