"""
Gallery Services — Serviços do catálogo.

Re-exports:
    from gallery.services import ProductSyncService, SyncResult
"""

from .sync import ProductSyncService, SyncFailure, SyncResult  # noqa: F401
