"""Identity and store backend adapters."""

from .base import (
    BOARDS_TABLE,
    PROFILES_TABLE,
    CredentialRejected,
    PrivilegedHandle,
    RowNotFound,
    ScopedHandle,
    StoreError,
    UniqueViolation,
)
from .memory import MemoryPrivilegedHandle, MemoryScopedHandle
from .rest import SupabasePrivilegedHandle, SupabaseScopedHandle

__all__ = [
    "BOARDS_TABLE",
    "PROFILES_TABLE",
    "CredentialRejected",
    "MemoryPrivilegedHandle",
    "MemoryScopedHandle",
    "PrivilegedHandle",
    "RowNotFound",
    "ScopedHandle",
    "StoreError",
    "SupabasePrivilegedHandle",
    "SupabaseScopedHandle",
    "UniqueViolation",
]
