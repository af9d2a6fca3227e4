"""LucidIQ: product analysis and shopping chat over a completion API."""

__version__ = "2.0.0"
