"""
Bank Ledger Simulator

A toy in-memory banking ledger with checking and savings accounts,
card-limited transfers and withdrawals, and simulated-calendar interest
accrual. All monetary values use Decimal precision.
"""

__version__ = "1.0.0"
