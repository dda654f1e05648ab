"""
Example usage of the Energy Token ledger

This demonstrates how to:
1. Set up minters and mint production with provenance
2. Transfer and burn balances
3. Manage the deny list and the admin recovery path
4. Report on production by source
"""

import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from energy_token import (
    EnergyToken,
    ExecutionContext,
    LedgerError,
    LedgerValidator,
    SourceType,
)
from energy_token.reporting import holder_frame, mint_events_frame, source_summary_frame

ADMIN = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
ORACLE = "ST2CY5V39NHDP5PWEEDAHR9H0YETWQGYDXMHD4R2Q"
SOLAR_FARM = "ST3NBRSFKX28FQ2ZJ1MAKX58HKHSDGNV5N7R21XCP"
WIND_FARM = "ST4QY9HV9HJ2JMB926V22XJDACRQTS4GXPXP3GRS"
BUYER = "ST2JHG361ZXG51QTKY2NQCVBPPRRE2KZB1HR05NNC"


def ctx(caller, height):
    return ExecutionContext(caller=caller, block_height=height)


def example_minting(token):
    """Mint production from several sources"""
    print("=" * 60)
    print("Example 1: Minting metered production")
    print("=" * 60)

    token.add_minter(ctx(ADMIN, 1), ORACLE)

    token.mint(ctx(ORACLE, 10), SOLAR_FARM, 2_000_000, SourceType.SOLAR, 40)
    token.mint(ctx(ORACLE, 11), WIND_FARM, 3_000_000, SourceType.WIND, 12)
    token.mint(ctx(ORACLE, 12), SOLAR_FARM, 1_000_000, SourceType.SOLAR, 35)

    print(f"\nTotal supply: {token.get_total_supply()}")
    print(f"Solar production: {token.get_supply_per_source(SourceType.SOLAR)}")
    print(f"Wind production: {token.get_supply_per_source(SourceType.WIND)}")
    print(f"Average carbon footprint: {token.get_average_carbon_footprint()}")
    print(f"\nMint history:\n{mint_events_frame(token.get_mint_events())}")


def example_trading(token):
    """Transfer to a buyer, who retires part of the balance"""
    print("\n" + "=" * 60)
    print("Example 2: Transfers and burns")
    print("=" * 60)

    token.transfer(ctx(SOLAR_FARM, 20), BUYER, 1_500_000)
    token.transfer(ctx(WIND_FARM, 21), BUYER, 1_000_000)
    token.burn(ctx(BUYER, 22), 500_000)

    print(f"\nBuyer balance: {token.get_balance(BUYER)}")
    print(f"Total supply after burn: {token.get_total_supply()}")
    # Per-source totals keep the gross production
    print(f"Solar production (unchanged by burn): {token.get_supply_per_source('solar')}")
    print(f"\nHolders:\n{holder_frame(token)}")


def example_deny_list(token):
    """Deny-list an account, then recover its balance as admin"""
    print("\n" + "=" * 60)
    print("Example 3: Deny list and admin recovery")
    print("=" * 60)

    token.blacklist_address(ctx(ADMIN, 30), WIND_FARM)

    try:
        token.transfer(ctx(WIND_FARM, 31), BUYER, 100)
    except LedgerError as e:
        print(f"\nTransfer rejected: {e.to_dict()}")

    recovered = token.get_balance(WIND_FARM)
    token.admin_transfer(ctx(ADMIN, 32), WIND_FARM, BUYER, recovered)
    print(f"Recovered {recovered} units to the buyer")
    print(f"Wind farm balance: {token.get_balance(WIND_FARM)}")


def example_reporting(token):
    """Summarize production and audit the ledger"""
    print("\n" + "=" * 60)
    print("Example 4: Reporting and audit")
    print("=" * 60)

    print(f"\nProduction by source:\n{source_summary_frame(token)}")

    validation = LedgerValidator(token.config).validate_state(token.snapshot())
    print(f"\nAudit valid: {validation['valid']}")
    for warning in validation['warnings']:
        print(f"  Warning: {warning}")


if __name__ == "__main__":
    token = EnergyToken(ADMIN)

    example_minting(token)
    example_trading(token)
    example_deny_list(token)
    example_reporting(token)

    print("\n" + "=" * 60)
    print(f"Emitted {len(token.notifications)} notifications")
    print("=" * 60)
