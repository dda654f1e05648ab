#!/usr/bin/env python3
"""
Quick Demo - See the ledger in action immediately!
Run this file to see a simple demonstration.
"""

import sys
import os

# Add the package to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

try:
    from energy_token import (
        EnergyToken,
        ExecutionContext,
        LedgerError,
        LedgerValidator,
        SourceType,
    )
    from energy_token.reporting import get_statistics

    ADMIN = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
    ORACLE = "ST2CY5V39NHDP5PWEEDAHR9H0YETWQGYDXMHD4R2Q"
    SOLAR_FARM = "ST3NBRSFKX28FQ2ZJ1MAKX58HKHSDGNV5N7R21XCP"
    UTILITY = "ST4QY9HV9HJ2JMB926V22XJDACRQTS4GXPXP3GRS"

    print("=" * 70)
    print("🌱 ENERGY TOKEN LEDGER - QUICK DEMO 🌱")
    print("=" * 70)
    print()

    # Step 1: Deploy the ledger
    print("📝 Step 1: Creating the ledger...")
    token = EnergyToken(ADMIN)
    metadata = token.get_token_metadata()
    print(f"   ✅ {metadata.name} ({metadata.symbol}), {metadata.decimals} decimals")
    print()

    # Step 2: Authorize the metering oracle
    print("🔑 Step 2: Authorizing the metering oracle as a minter...")
    token.add_minter(ExecutionContext(caller=ADMIN, block_height=1), ORACLE)
    print(f"   ✅ Minter: {token.check_is_minter(ORACLE)}")
    print()

    # Step 3: Mint confirmed production
    print("⚡ Step 3: Minting 1.5 kWh of solar production...")
    event = token.mint(
        ExecutionContext(caller=ORACLE, block_height=2),
        SOLAR_FARM,
        1_500_000,
        SourceType.SOLAR,
        45,
    )
    print(f"   ✅ Mint #{event.mint_id}: {event.amount} base units to {event.recipient}")
    print()

    # Step 4: Transfer to a buyer
    print("🔄 Step 4: Transferring 0.5 kWh to the utility...")
    token.transfer(ExecutionContext(caller=SOLAR_FARM, block_height=3), UTILITY, 500_000)
    print(f"   📊 Farm balance:    {token.get_balance(SOLAR_FARM)}")
    print(f"   📊 Utility balance: {token.get_balance(UTILITY)}")
    print()

    # Step 5: Show a rejected call
    print("🚫 Step 5: Pausing the ledger and attempting a transfer...")
    token.set_paused(ExecutionContext(caller=ADMIN, block_height=4), True)
    try:
        token.transfer(ExecutionContext(caller=UTILITY, block_height=5), SOLAR_FARM, 1)
    except LedgerError as e:
        print(f"   ✅ Rejected with {e.kind.name} (code {e.code})")
    token.set_paused(ExecutionContext(caller=ADMIN, block_height=6), False)
    print()

    # Step 6: Statistics and audit
    print("📊 Step 6: Ledger statistics:")
    stats = get_statistics(token)
    print(f"   📦 Total supply: {stats['total_supply']}")
    print(f"   ⚡ Supply by source: {stats['supply_by_source']}")
    print(f"   🌍 Average carbon footprint: {stats['average_carbon_footprint']}")
    audit = LedgerValidator(token.config).validate_state(token.snapshot())
    print(f"   ✅ Invariant audit: {'PASSED' if audit['valid'] else 'FAILED'}")
    print()

    print("=" * 70)
    print("🎉 DEMO COMPLETE! 🎉")
    print("=" * 70)
    print()
    print("💡 Next steps:")
    print("   1. Run 'python examples/example_usage.py' for more examples")
    print("   2. Run 'pytest tests/' to run the test suite")
    print()

except ImportError as e:
    print("❌ Error: Missing dependencies")
    print(f"   {e}")
    print()
    print("💡 Solution: Install dependencies with:")
    print("   pip install -r requirements.txt")
    print()
    sys.exit(1)
