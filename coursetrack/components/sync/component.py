"""
Sync component - Client construction.
"""

from __future__ import annotations

import httpx

from ._impl import LocalView, ProgressSyncClient
from .ports import SyncClockPort


def create_sync_client(
    base_url: str,
    clock: SyncClockPort,
    *,
    timeout_seconds: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ProgressSyncClient:
    """
    Build a client over a fresh httpx.Client.

    timeout_seconds=None keeps httpx's default timeout.
    """
    kwargs: dict = {"base_url": base_url}
    if timeout_seconds is not None:
        kwargs["timeout"] = timeout_seconds
    if transport is not None:
        kwargs["transport"] = transport
    return ProgressSyncClient(httpx.Client(**kwargs), clock, LocalView())
