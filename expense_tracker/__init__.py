"""
Expense Tracker - Source Package

A small personal expense tracker: record, edit, delete and total
expense line items, with a decorative particle field behind the UI.

DESIGN PRINCIPLES:
1. Storage layer is swappable
2. Every mutation is auditable
3. The background animation never blocks or breaks the app
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
