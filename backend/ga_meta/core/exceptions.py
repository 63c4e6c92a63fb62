"""
Exception types shared across services.
"""


class GAMetaError(Exception):
    """Base exception for the meta backend."""
    pass


class AggregationError(GAMetaError):
    """Raised when the store cannot be read during a meta aggregation."""
    pass
