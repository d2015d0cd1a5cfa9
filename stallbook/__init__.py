"""
Stallbook - daily record keeping for a fresh fruit and juice stall
"""

__version__ = "1.0.0"
