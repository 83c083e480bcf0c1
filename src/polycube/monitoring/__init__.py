"""Monitoring module for polycube searches.

Provides Telegram notifications and metrics tracking for solver runs.
"""

from .metrics import (
    SearchMetrics,
    SolutionRecord,
    export_to_csv,
    export_to_json,
    print_summary,
)
from .telegram_notifier import (
    format_error,
    format_final_summary,
    format_search_start,
    format_solution_milestone,
    send_telegram,
)

__all__ = [
    # Metrics
    "SearchMetrics",
    "SolutionRecord",
    "export_to_csv",
    "export_to_json",
    "print_summary",
    # Telegram
    "send_telegram",
    "format_search_start",
    "format_solution_milestone",
    "format_error",
    "format_final_summary",
]
