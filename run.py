#!/usr/bin/env python3
"""
Bank Ledger Simulator Entry Point

Seeds demo accounts, performs a few transfers and simulates a year of
savings interest.
"""

import sys

from bank_ledger.config import get_config
from bank_ledger.logging_config import setup_logging
from bank_ledger.seed import run_demo


if __name__ == "__main__":
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)

    print("🏦 Starting Bank Ledger Simulator...")
    print(f"📅 Simulating {config.demo_months} months of interest")
    print()

    try:
        balances = run_demo(config.demo_months)
    except ValueError as e:
        print(f"❌ Simulation failed: {e}")
        sys.exit(1)

    for account_id, balance in balances.items():
        print(f"  {account_id}: {balance.to_string()}")
