"""
Transaction Analyser - Source Package

Computes the relative balance of an account over a time range
from a CSV ledger of payments and reversals.

DESIGN PRINCIPLES:
1. Load once, query many times, mutate never
2. Fail early, fail visibly
3. No silent corrections
4. Exact decimal arithmetic for every amount
"""

__version__ = "1.0.0"
