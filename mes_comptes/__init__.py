"""
Mes Comptes - Source Package

Local persistence for a personal finance tracker: transactions, a
category registry and an opening balance, stored as one document in a
file or in a key/value store.

DESIGN PRINCIPLES:
1. Never lose a user's financial records
2. Every older document format still loads
3. Load and save never raise to the UI
4. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Mes Comptes Team"
