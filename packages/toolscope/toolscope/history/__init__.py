"""toolscope history — bounded tool call log, journal, and query engine."""

from toolscope.history.journal import JournalWriter, JsonlJournal
from toolscope.history.query import order_most_recent_first, run_query, select_calls
from toolscope.history.store import MAX_ENTRIES, ToolHistory

__all__ = [
    "JournalWriter",
    "JsonlJournal",
    "MAX_ENTRIES",
    "ToolHistory",
    "order_most_recent_first",
    "run_query",
    "select_calls",
]
