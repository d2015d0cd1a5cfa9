"""
Data Generation Module
"""
from .generators import SampleDataGenerator

__all__ = [
    "SampleDataGenerator",
]
