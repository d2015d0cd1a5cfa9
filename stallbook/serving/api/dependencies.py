"""
Request Dependencies
"""

from fastapi import Request

from stallbook.services.ledger import LedgerService


def get_ledger(request: Request) -> LedgerService:
    """Ledger service bound to the record store created at startup"""
    return LedgerService(request.app.state.record_store, request.app.state.settings)
