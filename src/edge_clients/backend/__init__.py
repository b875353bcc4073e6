"""
Edge Clients - Backend Access.

`{data, error}` envelopes, retrying fetch/invoke helpers and the Supabase client.
"""

from .results import BackendResult
from .fetch import FETCH_RETRY_CONFIG, fetch_with_retry
from .rpc import RPC_RETRY_CONFIG, Invoker, invoke_with_retry
from .supabase import SupabaseClient

__all__ = [
    "BackendResult",
    "FETCH_RETRY_CONFIG",
    "fetch_with_retry",
    "RPC_RETRY_CONFIG",
    "Invoker",
    "invoke_with_retry",
    "SupabaseClient",
]
