"""
Transaction Statistics - Source Package

Records monetary transactions for a single account and serves running
statistics (sum, average, min, max, count) on demand.

DESIGN PRINCIPLES:
1. Validate before anything touches state
2. Aggregates are maintained incrementally, never recomputed
3. Statistics are only served to the account's declared location
4. Every outcome is an explicit, distinguishable value
5. Every operation is auditable
"""

__version__ = "1.0.0"
__author__ = "Transaction Statistics Team"
