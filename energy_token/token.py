"""
Energy Token service

Owns one ``LedgerState`` and serializes every operation on it. Mutations are
computed by the pure functions in ``access_control`` and ``ledger`` and only
committed when they return; notifications are appended and delivered to
listeners after the commit.
"""

import threading
from typing import Callable, Dict, List, Optional, Union

from pydantic import BaseModel

from energy_token import access_control, ledger
from energy_token.errors import LedgerError
from energy_token.logging_config import logger
from energy_token.models import (
    AdminTransferNotification,
    BurnNotification,
    ExecutionContext,
    LedgerState,
    MintEvent,
    MintNotification,
    Notification,
    SourceType,
    TokenConfig,
    TokenMetadata,
    TransferNotification,
)

Listener = Callable[[Notification], None]


class EnergyToken:
    """Single-writer handle over the ledger state"""

    def __init__(
        self,
        admin: str,
        config: Optional[TokenConfig] = None,
        state: Optional[LedgerState] = None,
    ):
        """
        Initialize the ledger.

        Args:
            admin: Initial admin identity; ignored when ``state`` is given
            config: Token identity and limits, defaults to the settings values
            state: Existing state to resume from
        """
        self.config = config or TokenConfig.from_settings()
        self._state = state if state is not None else LedgerState.genesis(admin)
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self.notifications: List[Notification] = []

    def _execute(self, operation: str, ctx: ExecutionContext, func, *args):
        with self._lock:
            try:
                new_state, result = func(self._state, ctx, *args)
            except LedgerError as e:
                logger.warning(
                    f"{operation} rejected for {ctx.caller}: {e.kind.name} ({e.message})"
                )
                raise
            except Exception:
                logger.error(f"Unexpected error during {operation}", exc_info=True)
                raise

            self._state = new_state
            logger.info(f"{operation} committed by {ctx.caller} at height {ctx.block_height}")

            if isinstance(result, BaseModel):
                self._emit(result)

            return result

    def _emit(self, notification: Notification) -> None:
        self.notifications.append(notification)
        logger.debug(f"Notification: {notification.model_dump(by_alias=True)}")
        for listener in list(self._listeners):
            listener(notification)

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked with every notification after commit"""
        with self._lock:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # Access control

    def transfer_admin(self, ctx: ExecutionContext, new_admin: str) -> bool:
        return self._execute(
            "transfer_admin", ctx, access_control.transfer_admin, new_admin
        )

    def set_paused(self, ctx: ExecutionContext, value: bool) -> bool:
        return self._execute("set_paused", ctx, access_control.set_paused, value)

    def add_minter(self, ctx: ExecutionContext, account: str) -> bool:
        return self._execute("add_minter", ctx, access_control.add_minter, account)

    def remove_minter(self, ctx: ExecutionContext, account: str) -> bool:
        return self._execute("remove_minter", ctx, access_control.remove_minter, account)

    def blacklist_address(self, ctx: ExecutionContext, account: str) -> bool:
        return self._execute(
            "blacklist_address", ctx, access_control.blacklist_address, account
        )

    def unblacklist_address(self, ctx: ExecutionContext, account: str) -> bool:
        return self._execute(
            "unblacklist_address", ctx, access_control.unblacklist_address, account
        )

    # Ledger

    def mint(
        self,
        ctx: ExecutionContext,
        recipient: str,
        amount: int,
        source: Union[str, SourceType],
        carbon_footprint: int,
    ) -> MintNotification:
        """
        Issue new units to ``recipient``.

        Returns:
            The mint notification, including the assigned ``mint_id``
        """
        return self._execute(
            "mint",
            ctx,
            ledger.mint,
            recipient,
            amount,
            source,
            carbon_footprint,
            self.config,
        )

    def burn(self, ctx: ExecutionContext, amount: int) -> BurnNotification:
        return self._execute("burn", ctx, ledger.burn, amount)

    def transfer(
        self, ctx: ExecutionContext, recipient: str, amount: int
    ) -> TransferNotification:
        return self._execute("transfer", ctx, ledger.transfer, recipient, amount)

    def admin_transfer(
        self, ctx: ExecutionContext, sender: str, recipient: str, amount: int
    ) -> AdminTransferNotification:
        return self._execute(
            "admin_transfer", ctx, ledger.admin_transfer, sender, recipient, amount
        )

    # Read accessors

    def snapshot(self) -> LedgerState:
        """Current committed state; immutable, safe to keep and compare"""
        with self._lock:
            return self._state

    def get_balance(self, account: str) -> int:
        return self.snapshot().balance_of(account)

    def get_total_supply(self) -> int:
        return self.snapshot().total_supply

    def get_admin(self) -> str:
        return self.snapshot().admin

    def is_paused(self) -> bool:
        return self.snapshot().paused

    def check_is_minter(self, account: str) -> bool:
        return self.snapshot().is_minter(account)

    def check_is_blacklisted(self, account: str) -> bool:
        return self.snapshot().is_denied(account)

    def get_supply_per_source(self, source: Union[str, SourceType]) -> int:
        return self.snapshot().source_supply(ledger.normalize_source(source))

    def get_all_supply_per_source(self) -> Dict[str, int]:
        return dict(self.snapshot().supply_per_source)

    def get_total_carbon(self) -> int:
        return self.snapshot().total_carbon

    def get_average_carbon_footprint(self) -> int:
        average = ledger.average_carbon_footprint(self.snapshot())
        logger.debug(f"Average carbon footprint: {average}")
        return average

    def get_mint_event(self, mint_id: int) -> Optional[MintEvent]:
        return self.snapshot().mint_event(mint_id)

    def get_mint_events(self) -> List[MintEvent]:
        """Mint history in issuance order"""
        state = self.snapshot()
        return [state.mint_events[i] for i in range(state.next_mint_id)]

    def get_next_mint_id(self) -> int:
        return self.snapshot().next_mint_id

    def get_name(self) -> str:
        return self.config.name

    def get_symbol(self) -> str:
        return self.config.symbol

    def get_decimals(self) -> int:
        return self.config.decimals

    def get_token_metadata(self) -> TokenMetadata:
        return TokenMetadata(
            name=self.config.name,
            symbol=self.config.symbol,
            decimals=self.config.decimals,
        )
