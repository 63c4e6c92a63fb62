"""
Core module containing configuration and shared utilities.
"""
from ga_meta.core.config import ClientConfig, settings
from ga_meta.core.exceptions import AggregationError, GAMetaError

__all__ = [
    "settings",
    "ClientConfig",
    "GAMetaError",
    "AggregationError",
]
