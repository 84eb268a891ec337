"""
Pha Pa Ledger - Source Package

A small budget ledger for a one-time charity fundraising event
(a "pha pa" merit-making ceremony raising money for school computers).

DESIGN PRINCIPLES:
1. Entries are the only stored data; everything else is derived
2. Derived numbers are recomputed on every read, never cached
3. Storage is a single swappable key-value slot
4. The AI summary is optional - failures degrade to a fixed message
"""

__version__ = "1.0.0"
__author__ = "Pha Pa Ledger Team"
