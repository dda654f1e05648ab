"""
Ledger accounting

State transitions for issuing, destroying and moving balances. Every
function validates its preconditions in a fixed order, then builds a new
``LedgerState`` from copies of the affected containers. The input state is
left untouched, so a rejected call has no effect at all.
"""

from typing import Tuple, Union

from energy_token.access_control import (
    require_admin,
    require_not_denied,
    require_not_null,
    require_not_paused,
)
from energy_token.errors import LedgerError, LedgerErrorKind
from energy_token.models import (
    AdminTransferNotification,
    BurnNotification,
    ExecutionContext,
    LedgerState,
    MintEvent,
    MintNotification,
    SourceType,
    TokenConfig,
    TransferNotification,
)


def _require_amount(amount: int, operation: str) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise LedgerError(
            LedgerErrorKind.INVALID_AMOUNT,
            details={"operation": operation, "amount": repr(amount)},
        )


def _require_balance(state: LedgerState, account: str, amount: int, operation: str) -> None:
    balance = state.balance_of(account)
    if balance < amount:
        raise LedgerError(
            LedgerErrorKind.INSUFFICIENT_BALANCE,
            f"Account {account} holds {balance}, requested {amount}",
            details={
                "operation": operation,
                "account": account,
                "balance": balance,
                "amount": amount,
            },
        )


def normalize_source(source: Union[str, SourceType]) -> str:
    if isinstance(source, SourceType):
        return source.value
    return source


def _require_source(source: str, max_length: int) -> None:
    if not isinstance(source, str) or not source or len(source) > max_length:
        raise LedgerError(
            LedgerErrorKind.INVALID_SOURCE,
            details={"operation": "mint", "source": repr(source), "max_length": max_length},
        )


def _move(balances: dict, sender: str, recipient: str, amount: int) -> None:
    balances[sender] = balances.get(sender, 0) - amount
    balances[recipient] = balances.get(recipient, 0) + amount


def mint(
    state: LedgerState,
    ctx: ExecutionContext,
    recipient: str,
    amount: int,
    source: Union[str, SourceType],
    carbon_footprint: int,
    config: TokenConfig,
) -> Tuple[LedgerState, MintNotification]:
    """
    Issue ``amount`` base units to ``recipient`` with provenance metadata.

    Args:
        state: Current ledger state
        ctx: Invocation context; ``ctx.caller`` must be a minter
        recipient: Account to credit
        amount: Base units to issue
        source: Energy source label
        carbon_footprint: Carbon per base unit, negative for net-negative sources
        config: Ledger limits

    Returns:
        The new state and the mint notification carrying the assigned id

    Raises:
        LedgerError: Paused, NotMinter, ZeroAddress, InvalidAmount,
            InvalidSource, Denied or MaxSupplyReached, checked in that order
    """
    require_not_paused(state, "mint")
    if not state.is_minter(ctx.caller):
        raise LedgerError(
            LedgerErrorKind.NOT_MINTER,
            details={"operation": "mint", "caller": ctx.caller},
        )
    require_not_null(recipient, "mint")
    _require_amount(amount, "mint")
    if isinstance(carbon_footprint, bool) or not isinstance(carbon_footprint, int):
        raise LedgerError(
            LedgerErrorKind.INVALID_AMOUNT,
            "Carbon footprint must be an integer",
            details={"operation": "mint", "carbon_footprint": repr(carbon_footprint)},
        )
    source = normalize_source(source)
    _require_source(source, config.source_max_length)
    require_not_denied(state, recipient, "mint")
    if state.total_supply + amount > config.max_supply:
        raise LedgerError(
            LedgerErrorKind.MAX_SUPPLY_REACHED,
            details={
                "operation": "mint",
                "total_supply": state.total_supply,
                "amount": amount,
                "max_supply": config.max_supply,
            },
        )

    balances = dict(state.balances)
    balances[recipient] = balances.get(recipient, 0) + amount

    supply_per_source = dict(state.supply_per_source)
    supply_per_source[source] = supply_per_source.get(source, 0) + amount

    mint_id = state.next_mint_id
    mint_events = dict(state.mint_events)
    mint_events[mint_id] = MintEvent(
        minter=ctx.caller,
        recipient=recipient,
        amount=amount,
        source=source,
        carbon_footprint=carbon_footprint,
        block_height=ctx.block_height,
    )

    new_state = state.model_copy(
        update={
            "balances": balances,
            "total_supply": state.total_supply + amount,
            "supply_per_source": supply_per_source,
            "total_carbon": state.total_carbon + carbon_footprint * amount,
            "mint_events": mint_events,
            "next_mint_id": mint_id + 1,
        }
    )
    notification = MintNotification(
        minter=ctx.caller,
        recipient=recipient,
        amount=amount,
        source=source,
        carbon_footprint=carbon_footprint,
        mint_id=mint_id,
    )
    return new_state, notification


def burn(
    state: LedgerState, ctx: ExecutionContext, amount: int
) -> Tuple[LedgerState, BurnNotification]:
    """Destroy ``amount`` of the caller's balance.

    Per-source supply and the carbon total are left as they are: they
    record historical production, not what is still in circulation.
    """
    require_not_paused(state, "burn")
    _require_amount(amount, "burn")
    _require_balance(state, ctx.caller, amount, "burn")

    balances = dict(state.balances)
    balances[ctx.caller] = balances[ctx.caller] - amount

    new_state = state.model_copy(
        update={"balances": balances, "total_supply": state.total_supply - amount}
    )
    return new_state, BurnNotification(burner=ctx.caller, amount=amount)


def transfer(
    state: LedgerState, ctx: ExecutionContext, recipient: str, amount: int
) -> Tuple[LedgerState, TransferNotification]:
    require_not_paused(state, "transfer")
    require_not_null(recipient, "transfer")
    require_not_denied(state, ctx.caller, "transfer")
    require_not_denied(state, recipient, "transfer")
    _require_amount(amount, "transfer")
    _require_balance(state, ctx.caller, amount, "transfer")

    balances = dict(state.balances)
    _move(balances, ctx.caller, recipient, amount)

    new_state = state.model_copy(update={"balances": balances})
    return new_state, TransferNotification(from_=ctx.caller, to=recipient, amount=amount)


def admin_transfer(
    state: LedgerState,
    ctx: ExecutionContext,
    sender: str,
    recipient: str,
    amount: int,
) -> Tuple[LedgerState, AdminTransferNotification]:
    """Admin recovery path: moves balance regardless of pause or deny list."""
    require_admin(state, ctx, "admin_transfer")
    require_not_null(recipient, "admin_transfer")
    _require_amount(amount, "admin_transfer")
    _require_balance(state, sender, amount, "admin_transfer")

    balances = dict(state.balances)
    _move(balances, sender, recipient, amount)

    new_state = state.model_copy(update={"balances": balances})
    notification = AdminTransferNotification(
        admin=ctx.caller, from_=sender, to=recipient, amount=amount
    )
    return new_state, notification


def truncate_div(numerator: int, denominator: int) -> int:
    """Integer division truncated toward zero; 0 for a non-positive denominator"""
    if denominator <= 0:
        return 0
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


def average_carbon_footprint(state: LedgerState) -> int:
    """Total carbon over current supply, truncated toward zero; 0 when empty"""
    return truncate_div(state.total_carbon, state.total_supply)
