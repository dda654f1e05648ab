"""
Ledger Validation System

Audits a ledger state against the accounting invariants.
"""

from typing import Any, Dict, Optional

from energy_token.models import NULL_ADDRESS, LedgerState, MintEvent, SourceType, TokenConfig


class LedgerValidator:
    """Validates ledger state integrity"""

    def __init__(self, config: Optional[TokenConfig] = None):
        """
        Initialize validator.

        Args:
            config: Token limits to check against, defaults to the settings values
        """
        self.config = config or TokenConfig.from_settings()

    def validate_state(self, state: LedgerState) -> Dict[str, Any]:
        """
        Validate every accounting invariant of a ledger state.

        Args:
            state: Ledger state to audit

        Returns:
            Dictionary with validation results
        """
        errors = []
        warnings = []

        # Balances must add up to the total supply
        balance_sum = sum(state.balances.values())
        if balance_sum != state.total_supply:
            errors.append(
                f"Supply mismatch: balances sum to {balance_sum}, "
                f"total supply is {state.total_supply}"
            )

        if state.total_supply > self.config.max_supply:
            errors.append(
                f"Total supply {state.total_supply} exceeds maximum "
                f"{self.config.max_supply}"
            )

        negative = {acct: bal for acct, bal in state.balances.items() if bal < 0}
        if negative:
            errors.append(f"Negative balances found: {negative}")

        # Event log must be dense and numbered from zero
        expected_ids = set(range(state.next_mint_id))
        actual_ids = set(state.mint_events.keys())
        if actual_ids != expected_ids:
            missing = sorted(expected_ids - actual_ids)
            extra = sorted(actual_ids - expected_ids)
            errors.append(
                f"Mint event ids do not match next mint id {state.next_mint_id}: "
                f"missing={missing}, unexpected={extra}"
            )

        # Per-source supply and carbon are gross historical totals
        minted = sum(event.amount for event in state.mint_events.values())
        source_sum = sum(state.supply_per_source.values())
        if source_sum != minted:
            errors.append(
                f"Source supply mismatch: sources sum to {source_sum}, "
                f"mint events total {minted}"
            )

        for source in {event.source for event in state.mint_events.values()}:
            source_minted = sum(
                event.amount for event in state.mint_events.values()
                if event.source == source
            )
            if state.source_supply(source) != source_minted:
                errors.append(
                    f"Source '{source}' records {state.source_supply(source)}, "
                    f"mint events total {source_minted}"
                )

        carbon = sum(event.carbon for event in state.mint_events.values())
        if carbon != state.total_carbon:
            errors.append(
                f"Carbon mismatch: total carbon is {state.total_carbon}, "
                f"mint events total {carbon}"
            )

        if state.total_supply > minted:
            errors.append(
                f"Total supply {state.total_supply} exceeds gross minted {minted}"
            )

        if not state.admin or state.admin == NULL_ADDRESS:
            errors.append("Admin is unset or the null address")

        if state.paused:
            warnings.append("Ledger is paused")

        denied_holders = [
            acct for acct, bal in state.balances.items()
            if bal > 0 and state.is_denied(acct)
        ]
        if denied_holders:
            warnings.append(
                f"{len(denied_holders)} deny-listed accounts hold a balance"
            )

        if state.balance_of(NULL_ADDRESS) > 0:
            warnings.append(
                f"Null address holds {state.balance_of(NULL_ADDRESS)} units"
            )

        return {
            'valid': len(errors) == 0,
            'errors': errors,
            'warnings': warnings,
            'total_supply': state.total_supply,
            'balance_sum': balance_sum,
            'gross_minted': minted,
            'total_carbon': state.total_carbon,
            'mint_events': len(state.mint_events),
        }

    def validate_mint_event(self, event: MintEvent) -> Dict[str, Any]:
        """
        Validate a single mint event.

        Args:
            event: Mint event to validate

        Returns:
            Dictionary with validation results
        """
        errors = []
        warnings = []

        if event.amount > self.config.max_supply:
            errors.append(
                f"Amount {event.amount} exceeds maximum supply {self.config.max_supply}"
            )

        if len(event.source) > self.config.source_max_length:
            errors.append(
                f"Source label must be 1-{self.config.source_max_length} characters"
            )

        if event.recipient == NULL_ADDRESS:
            errors.append("Recipient is the null address")

        if event.source not in SourceType.values():
            warnings.append(f"Unrecognized source label: '{event.source}'")

        if event.carbon_footprint < 0:
            warnings.append(
                f"Net-negative carbon footprint: {event.carbon_footprint}"
            )

        return {
            'valid': len(errors) == 0,
            'errors': errors,
            'warnings': warnings
        }
