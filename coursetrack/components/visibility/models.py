"""
Visibility component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

EnvironmentSignal = Literal[
    "load",
    "pointer_enter",
    "pointer_move",
    "click",
    "touch_start",
    "visibility_visible",
    "visibility_hidden",
    "page_hide",
    "pause",
]

# Interaction signals only count when they happen on the player surface.
INTERACTION_SIGNALS: frozenset[str] = frozenset(
    {"pointer_enter", "pointer_move", "click", "touch_start"}
)
RESUME_SIGNALS: frozenset[str] = INTERACTION_SIGNALS | {"load", "visibility_visible"}
PAUSE_SIGNALS: frozenset[str] = frozenset({"visibility_hidden", "page_hide", "pause"})


class EngagementSignal(Enum):
    """Logical event consumed by the engagement state machine."""

    RESUME = "resume"
    PAUSE = "pause"


@dataclass(frozen=True)
class SignalInput:
    """A raw environment signal."""

    signal: str
    on_player_surface: bool = True
