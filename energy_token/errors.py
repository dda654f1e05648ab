import datetime
from enum import IntEnum
from typing import Any, Dict


class LedgerErrorKind(IntEnum):
    """Rejection reasons for ledger operations, with their numeric codes"""

    NOT_AUTHORIZED = 100
    INSUFFICIENT_BALANCE = 101
    MAX_SUPPLY_REACHED = 102
    PAUSED = 103
    ZERO_ADDRESS = 104
    INVALID_AMOUNT = 105
    INVALID_SOURCE = 106
    NOT_MINTER = 107
    DENIED = 108

    def __str__(self):
        return self.name.lower()


DEFAULT_MESSAGES = {
    LedgerErrorKind.NOT_AUTHORIZED: "Caller is not the admin",
    LedgerErrorKind.INSUFFICIENT_BALANCE: "Balance is lower than the requested amount",
    LedgerErrorKind.MAX_SUPPLY_REACHED: "Mint would exceed the maximum supply",
    LedgerErrorKind.PAUSED: "Ledger is paused",
    LedgerErrorKind.ZERO_ADDRESS: "The null address is not a valid target",
    LedgerErrorKind.INVALID_AMOUNT: "Amount must be a positive integer",
    LedgerErrorKind.INVALID_SOURCE: "Source label is empty or too long",
    LedgerErrorKind.NOT_MINTER: "Caller is not an authorized minter",
    LedgerErrorKind.DENIED: "Account is on the deny list",
}


class LedgerError(Exception):
    """A rejected ledger operation.

    Raised before any state is produced, so a failed call never leaves a
    partial effect behind. ``kind`` identifies which precondition failed.
    """

    def __init__(
        self,
        kind: LedgerErrorKind,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.details = details or {}
        self.timestamp = datetime.datetime.now(datetime.timezone.utc)
        super().__init__(self.message)

    @property
    def code(self) -> int:
        return int(self.kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "error_type": str(self.kind),
            "error_message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"LedgerError(kind={self.kind.name}, message={self.message!r})"
