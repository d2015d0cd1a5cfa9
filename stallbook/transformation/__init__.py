"""
Data Transformation Module
"""
from .normalizer import normalize
from . import editing

__all__ = [
    "normalize",
    "editing",
]
