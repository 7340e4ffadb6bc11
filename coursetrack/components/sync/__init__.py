"""
Sync component - Client side of progress persistence.
"""

from ._impl import LocalView, ProgressSyncClient
from .component import create_sync_client
from .models import (
    PrincipalNotFoundError,
    Session,
    SyncAuthError,
    SyncError,
    SyncRejectedError,
    SyncResult,
    SyncTransportError,
)
from .ports import CompletionReporterPort, PrincipalLostHandler, SyncClockPort

__all__ = [
    "create_sync_client",
    "ProgressSyncClient",
    "LocalView",
    # Models
    "Session",
    "SyncResult",
    "SyncError",
    "SyncTransportError",
    "SyncRejectedError",
    "SyncAuthError",
    "PrincipalNotFoundError",
    # Ports
    "SyncClockPort",
    "CompletionReporterPort",
    "PrincipalLostHandler",
]
