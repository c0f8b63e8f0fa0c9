"""toolscope usage — aggregate call counters."""

from toolscope.usage.tracker import UsageTracker

__all__ = ["UsageTracker"]
