"""Adapters - I/O implementations of ports."""

from .supabase_rest import (
    BackendError,
    SupabaseClaimRepository,
    SupabaseClient,
    SupabaseJamRepository,
    SupabaseReviewRepository,
    TableMissingError,
)
from .file_store import (
    FileClaimRepository,
    FileJamRepository,
    FileReviewRepository,
    JsonTableStore,
)

__all__ = [
    "BackendError",
    "TableMissingError",
    "SupabaseClient",
    "SupabaseJamRepository",
    "SupabaseClaimRepository",
    "SupabaseReviewRepository",
    "JsonTableStore",
    "FileJamRepository",
    "FileClaimRepository",
    "FileReviewRepository",
]
