"""
Visibility component - Environment signals to engagement Resume/Pause.
"""

from .component import VisibilityMonitor, classify_signal
from .models import (
    INTERACTION_SIGNALS,
    PAUSE_SIGNALS,
    RESUME_SIGNALS,
    EngagementSignal,
    EnvironmentSignal,
    SignalInput,
)
from .ports import EngagementTargetPort

__all__ = [
    "VisibilityMonitor",
    "classify_signal",
    "EngagementSignal",
    "EnvironmentSignal",
    "SignalInput",
    "INTERACTION_SIGNALS",
    "PAUSE_SIGNALS",
    "RESUME_SIGNALS",
    "EngagementTargetPort",
]
