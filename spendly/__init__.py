"""
Spendly - Ledger Engine Package

The expense aggregation and budget-status engine behind the Spendly
personal finance app.

DESIGN PRINCIPLES:
1. Reports are pure functions of a ledger snapshot
2. Nothing is written without validation
3. Amounts stay exact Decimals until the formatting layer
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Spendly Team"
