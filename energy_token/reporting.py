"""
Production reporting

Tabular views of the mint history and holdings for the trading platform.
"""

from typing import Any, Dict, List

import pandas as pd

from energy_token.ledger import average_carbon_footprint, truncate_div
from energy_token.models import LedgerState, MintEvent
from energy_token.token import EnergyToken

MINT_EVENT_COLUMNS = [
    "mint_id",
    "minter",
    "recipient",
    "amount",
    "source",
    "carbon_footprint",
    "block_height",
    "carbon",
]


def mint_events_frame(events: List[MintEvent]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per mint event.

    Args:
        events: Mint events in issuance order; the position is the mint id

    Returns:
        DataFrame with the ``MINT_EVENT_COLUMNS`` columns
    """
    rows = [
        {
            "mint_id": mint_id,
            "minter": event.minter,
            "recipient": event.recipient,
            "amount": event.amount,
            "source": event.source,
            "carbon_footprint": event.carbon_footprint,
            "block_height": event.block_height,
            "carbon": event.carbon,
        }
        for mint_id, event in enumerate(events)
    ]
    return pd.DataFrame(rows, columns=MINT_EVENT_COLUMNS)


def _ordered_events(state: LedgerState) -> List[MintEvent]:
    return [state.mint_events[i] for i in range(state.next_mint_id)]


def source_summary_frame(token: EnergyToken) -> pd.DataFrame:
    """Gross production, event count and carbon attribution per source"""
    state = token.snapshot()
    events = mint_events_frame(_ordered_events(state))
    supply = state.supply_per_source

    if events.empty:
        return pd.DataFrame(
            columns=["source", "minted", "events", "carbon", "average_carbon_footprint"]
        )

    grouped = (
        events.groupby("source")
        .agg(events=("mint_id", "count"), carbon=("carbon", "sum"))
        .reset_index()
    )
    grouped["minted"] = grouped["source"].map(lambda s: supply.get(s, 0))
    grouped["average_carbon_footprint"] = [
        truncate_div(int(carbon), int(minted))
        for carbon, minted in zip(grouped["carbon"], grouped["minted"])
    ]

    summary = grouped[["source", "minted", "events", "carbon", "average_carbon_footprint"]]
    return summary.sort_values("minted", ascending=False).reset_index(drop=True)


def holder_frame(token: EnergyToken) -> pd.DataFrame:
    """Non-zero balances with their share of the current supply"""
    state = token.snapshot()
    rows = [
        {"account": account, "balance": balance}
        for account, balance in state.balances.items()
        if balance > 0
    ]
    df = pd.DataFrame(rows, columns=["account", "balance"])
    if df.empty:
        df["share"] = pd.Series(dtype=float)
        return df

    df["share"] = df["balance"] / state.total_supply
    return df.sort_values("balance", ascending=False).reset_index(drop=True)


def get_statistics(token: EnergyToken) -> Dict[str, Any]:
    """Get ledger statistics"""
    state = token.snapshot()
    gross_minted = sum(state.supply_per_source.values())

    return {
        'name': token.get_name(),
        'symbol': token.get_symbol(),
        'total_supply': state.total_supply,
        'gross_minted': gross_minted,
        'total_burned': gross_minted - state.total_supply,
        'total_mint_events': state.next_mint_id,
        'total_carbon': state.total_carbon,
        'average_carbon_footprint': average_carbon_footprint(state),
        'supply_by_source': dict(state.supply_per_source),
        'total_holders': sum(1 for bal in state.balances.values() if bal > 0),
        'total_minters': sum(1 for flag in state.minters.values() if flag),
        'total_denied': sum(1 for flag in state.blacklist.values() if flag),
        'paused': state.paused,
    }
