"""
Rider Expense - earnings and expense tracker backend for delivery riders.
"""

__version__ = "1.0.0"
