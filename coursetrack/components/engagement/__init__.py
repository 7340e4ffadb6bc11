"""
Engagement component - Completion inference from active watch time.
"""

from ._impl import (
    DeclaredDurationPolicy,
    EngagementStateMachine,
    FixedDurationPolicy,
    clamp_delta,
    completion_threshold,
)
from .component import config_from_rules, run_close_session, run_open_session
from .models import (
    DEFAULT_COMPLETION_RATIO,
    DEFAULT_ESTIMATED_DURATION_SECONDS,
    DEFAULT_TICK_INTERVAL_SECONDS,
    CompletionEvent,
    EngagementConfig,
    EngagementState,
    OpenSessionInput,
    OpenSessionOutput,
    ViewingSession,
)
from .ports import (
    ClockPort,
    CompletionListener,
    DurationPolicyPort,
    EngagementRulesPort,
    TickerPort,
)

__all__ = [
    # Component functions
    "run_open_session",
    "run_close_session",
    "config_from_rules",
    # Core
    "EngagementStateMachine",
    "FixedDurationPolicy",
    "DeclaredDurationPolicy",
    "completion_threshold",
    "clamp_delta",
    # Models
    "CompletionEvent",
    "EngagementConfig",
    "EngagementState",
    "OpenSessionInput",
    "OpenSessionOutput",
    "ViewingSession",
    "DEFAULT_COMPLETION_RATIO",
    "DEFAULT_ESTIMATED_DURATION_SECONDS",
    "DEFAULT_TICK_INTERVAL_SECONDS",
    # Ports
    "ClockPort",
    "CompletionListener",
    "DurationPolicyPort",
    "EngagementRulesPort",
    "TickerPort",
]
