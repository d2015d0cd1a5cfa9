"""
Data Quality Module
"""
from .validators import DataValidator, ValidationResult, validate_history

__all__ = [
    "DataValidator",
    "ValidationResult",
    "validate_history",
]
