"""
Commit ledger exceptions
"""

from .base import DomainException


class LedgerException(DomainException):
    """Commit ledger base exception"""
    pass


class LedgerIndexError(LedgerException):
    """An index on the commit ledger could not be created"""

    def __init__(self, index_name: str, reason: str):
        super().__init__(
            message=f"Failed to create commit ledger index {index_name}: {reason}",
            code="LEDGER_INDEX_ERROR",
            details={"index": index_name, "reason": reason}
        )
