"""
Upstream API clients.

Each client returns typed fetch outcomes instead of raising, so callers decide
how a missing or failing item affects their own loop.
"""
from ga_meta.services.clients.base import (
    EMPTY,
    NOT_FOUND,
    BaseApiClient,
    Empty,
    ErrorKind,
    FetchError,
    FetchOutcome,
    Found,
    NotFound,
)
from ga_meta.services.clients.gatcg import GatcgClient
from ga_meta.services.clients.omni_web import OmniWebClient
from ga_meta.services.clients.omnidex import OmnidexClient

__all__ = [
    "BaseApiClient",
    "FetchOutcome",
    "Found",
    "Empty",
    "NotFound",
    "FetchError",
    "ErrorKind",
    "EMPTY",
    "NOT_FOUND",
    "OmnidexClient",
    "OmniWebClient",
    "GatcgClient",
]
