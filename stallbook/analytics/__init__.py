"""
Analytics Module
"""
from .metrics import aggregate, expense_breakdown, fixed_expense_summary, recent_entries
from .timeseries import project, to_frame, weekly_rollup

__all__ = [
    "aggregate",
    "expense_breakdown",
    "fixed_expense_summary",
    "recent_entries",
    "project",
    "to_frame",
    "weekly_rollup",
]
