"""
Services Module
"""
from .ledger import LedgerService

__all__ = ["LedgerService"]
