"""
Stallbook Exceptions
"""
from typing import Optional


class StallbookError(Exception):
    """Base class for application errors"""


class EntryValidationError(StallbookError):
    """User input rejected before it reaches a record"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class StorageReadError(StallbookError):
    """A persisted collection could not be read or parsed"""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Failed to read '{key}': {reason}")
        self.key = key
        self.reason = reason
