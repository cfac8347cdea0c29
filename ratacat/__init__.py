"""Block and transaction history, jump marks, JSON helpers and a todo store for a NEAR dashboard."""

__version__ = "0.3.0"