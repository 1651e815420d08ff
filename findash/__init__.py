"""
FinDash - Personal Finance Dashboard

Tracks income and expense transactions (optionally split into sub-items),
categories and savings goals, and derives monthly summaries, the lifetime
balance and trend charts from them.

DESIGN PRINCIPLES:
1. Derived numbers are always recomputed from the transactions
2. In-memory state is authoritative; storage failures never crash a session
3. Forms reject bad input instead of silently fixing it
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "FinDash Team"
