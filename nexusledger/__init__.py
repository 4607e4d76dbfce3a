"""
Nexus Ledger - Source Package

A small-business bookkeeping engine: purchases and sales update a
weighted-average inventory and post balanced double-entry ledger
transactions automatically.

DESIGN PRINCIPLES:
1. The ledger engine is pure - state in, state out
2. Debits equal credits for every posting, always
3. Failures are values, not surprises
4. Every change to the books is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Nexus Ledger Team"
