"""
Access Control

Admin-only operations over the admin identity, minter set, deny list and
pause flag, plus the guards every mutating ledger operation runs first.

Each operation takes the current state and returns ``(new_state, result)``
without touching its input. A rejected call raises ``LedgerError``.
"""

from typing import Tuple

from energy_token.errors import LedgerError, LedgerErrorKind
from energy_token.models import NULL_ADDRESS, ExecutionContext, LedgerState


def require_admin(state: LedgerState, ctx: ExecutionContext, operation: str) -> None:
    if ctx.caller != state.admin:
        raise LedgerError(
            LedgerErrorKind.NOT_AUTHORIZED,
            details={"operation": operation, "caller": ctx.caller},
        )


def require_not_paused(state: LedgerState, operation: str = "") -> None:
    if state.paused:
        raise LedgerError(LedgerErrorKind.PAUSED, details={"operation": operation})


def require_not_denied(state: LedgerState, account: str, operation: str = "") -> None:
    if state.is_denied(account):
        raise LedgerError(
            LedgerErrorKind.DENIED,
            f"Account {account} is on the deny list",
            details={"operation": operation, "account": account},
        )


def require_not_null(account: str, operation: str = "") -> None:
    """Reject the null address and anything that is not a non-empty string"""
    if not isinstance(account, str) or not account or account == NULL_ADDRESS:
        raise LedgerError(
            LedgerErrorKind.ZERO_ADDRESS,
            details={"operation": operation, "account": account},
        )


def transfer_admin(
    state: LedgerState, ctx: ExecutionContext, new_admin: str
) -> Tuple[LedgerState, bool]:
    require_admin(state, ctx, "transfer_admin")
    require_not_null(new_admin, "transfer_admin")

    return state.model_copy(update={"admin": new_admin}), True


def set_paused(
    state: LedgerState, ctx: ExecutionContext, value: bool
) -> Tuple[LedgerState, bool]:
    require_admin(state, ctx, "set_paused")

    paused = bool(value)
    return state.model_copy(update={"paused": paused}), paused


def add_minter(
    state: LedgerState, ctx: ExecutionContext, account: str
) -> Tuple[LedgerState, bool]:
    require_admin(state, ctx, "add_minter")
    require_not_null(account, "add_minter")

    minters = dict(state.minters)
    minters[account] = True
    return state.model_copy(update={"minters": minters}), True


def remove_minter(
    state: LedgerState, ctx: ExecutionContext, account: str
) -> Tuple[LedgerState, bool]:
    require_admin(state, ctx, "remove_minter")

    minters = dict(state.minters)
    minters.pop(account, None)
    return state.model_copy(update={"minters": minters}), True


def blacklist_address(
    state: LedgerState, ctx: ExecutionContext, account: str
) -> Tuple[LedgerState, bool]:
    require_admin(state, ctx, "blacklist_address")
    require_not_null(account, "blacklist_address")

    blacklist = dict(state.blacklist)
    blacklist[account] = True
    return state.model_copy(update={"blacklist": blacklist}), True


def unblacklist_address(
    state: LedgerState, ctx: ExecutionContext, account: str
) -> Tuple[LedgerState, bool]:
    require_admin(state, ctx, "unblacklist_address")

    blacklist = dict(state.blacklist)
    blacklist.pop(account, None)
    return state.model_copy(update={"blacklist": blacklist}), True
