# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - backend.py: RowStore / ObjectStore contract the editors depend on
# - supabase_client.py: Supabase implementations of that contract
# - utils.py: Shared utilities (form value normalization, error base class)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.backend import Filter, ObjectStore, Order, RowStore
from lib.supabase_client import (
    SupabaseClient,
    SupabaseClientError,
    SupabaseObjectStore,
    SupabaseRowStore,
)
from lib.utils import ApplicationError, blank_to_none, join_lines, normalize_id, split_lines

__all__ = [
    # Backend contract
    "Filter",
    "ObjectStore",
    "Order",
    "RowStore",
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "SupabaseObjectStore",
    "SupabaseRowStore",
    # Utils
    "ApplicationError",
    "blank_to_none",
    "join_lines",
    "normalize_id",
    "split_lines",
]
