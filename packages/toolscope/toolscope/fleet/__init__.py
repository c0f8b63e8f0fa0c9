"""toolscope fleet — combine history and usage across backend processes."""

from toolscope.fleet.aggregator import (
    FleetAggregator,
    FleetHistoryReport,
    FleetUsageReport,
    fold_usage,
)
from toolscope.fleet.backends import BackendClient, HttpBackend, LocalBackend

__all__ = [
    "BackendClient",
    "FleetAggregator",
    "FleetHistoryReport",
    "FleetUsageReport",
    "HttpBackend",
    "LocalBackend",
    "fold_usage",
]
