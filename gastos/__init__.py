"""
Gastos - Source Package

Core of a local personal finance tracker: categories and income/expense
transactions stored in a single SQLite file.

DESIGN PRINCIPLES:
1. Validate before touching storage
2. Fail early, fail visibly
3. Money is stored as integer cents, exposed as major units
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Gastos Team"
