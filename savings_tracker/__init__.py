"""
Savings Tracker - Source Package

The ledger core of a single-screen savings tracker: ten fixed bank
accounts, one balance each, a running total, and an explicit save
to on-device storage.

DESIGN PRINCIPLES:
1. One mutation path per piece of state
2. Validate at the write boundary, re-validate what comes back from storage
3. No user mistake or storage failure is fatal
4. Nothing is persisted without an explicit save
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Savings Tracker Team"
