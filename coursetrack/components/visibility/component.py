"""
Visibility component - Page visibility and interaction to Resume/Pause.

No player API is available, so these signals approximate "the learner is
actively engaged", not "media is playing".
"""

from __future__ import annotations

import logging

from .models import (
    INTERACTION_SIGNALS,
    PAUSE_SIGNALS,
    RESUME_SIGNALS,
    EngagementSignal,
    SignalInput,
)
from .ports import EngagementTargetPort

logger = logging.getLogger(__name__)


def classify_signal(inp: SignalInput) -> EngagementSignal | None:
    """
    Map an environment signal to Resume, Pause or nothing.

    Interaction outside the player surface is not trusted.
    """
    if inp.signal in INTERACTION_SIGNALS and not inp.on_player_surface:
        return None
    if inp.signal in RESUME_SIGNALS:
        return EngagementSignal.RESUME
    if inp.signal in PAUSE_SIGNALS:
        return EngagementSignal.PAUSE
    return None


class VisibilityMonitor:
    """Forwards classified signals to an attached engagement target."""

    def __init__(self) -> None:
        self._target: EngagementTargetPort | None = None

    @property
    def attached(self) -> bool:
        return self._target is not None

    def attach(self, target: EngagementTargetPort) -> None:
        self._target = target

    def detach(self) -> None:
        self._target = None

    def handle(self, signal: str, *, on_player_surface: bool = True) -> EngagementSignal | None:
        """
        Handle one raw signal.

        Returns:
            The logical signal forwarded, or None if ignored
        """
        classified = classify_signal(SignalInput(signal=signal, on_player_surface=on_player_surface))
        if classified is None:
            logger.debug("Ignoring signal %s", signal)
            return None

        target = self._target
        if target is None:
            return None

        if classified is EngagementSignal.RESUME:
            target.resume()
        else:
            target.pause()
        return classified

    def on_visibility_change(self, hidden: bool) -> EngagementSignal | None:
        return self.handle("visibility_hidden" if hidden else "visibility_visible")
