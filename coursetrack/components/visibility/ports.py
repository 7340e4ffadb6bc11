"""
Visibility component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol


class EngagementTargetPort(Protocol):
    """Anything that understands Resume/Pause (the engagement state machine)."""

    def resume(self) -> None:
        ...

    def pause(self) -> None:
        ...
