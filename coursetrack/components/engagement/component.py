"""
Engagement component - Viewing session lifecycle.

Shell Layer - wires clock, ticker and duration policy into a state machine.
"""

from __future__ import annotations

from ._impl import EngagementStateMachine
from .models import EngagementConfig, OpenSessionInput, OpenSessionOutput
from .ports import (
    ClockPort,
    CompletionListener,
    DurationPolicyPort,
    EngagementRulesPort,
    TickerPort,
)


def config_from_rules(rules: EngagementRulesPort) -> EngagementConfig:
    """Build state machine tuning from the rules file."""
    return EngagementConfig(
        completion_ratio=rules.get_completion_ratio(),
        tick_interval_seconds=rules.get_tick_interval_seconds(),
        max_delta_seconds=rules.get_max_delta_seconds(),
    )


def run_open_session(
    inp: OpenSessionInput,
    *,
    clock: ClockPort,
    ticker: TickerPort,
    duration_policy: DurationPolicyPort | None = None,
    config: EngagementConfig | None = None,
    on_complete: CompletionListener | None = None,
) -> OpenSessionOutput:
    """
    Create a viewing session and start its ticker.

    A lecture that is already completed gets a terminal session: no ticker
    is scheduled and no completion will ever be emitted for it.
    """
    machine = EngagementStateMachine(
        inp.lecture_id,
        clock=clock,
        ticker=ticker,
        duration_policy=duration_policy,
        config=config,
        already_completed=inp.already_completed,
    )
    if on_complete is not None:
        machine.add_listener(on_complete)

    tracking = machine.start()

    return OpenSessionOutput(
        machine=machine,
        tracking=tracking,
        threshold_seconds=machine.session.threshold_seconds,
    )


def run_close_session(machine: EngagementStateMachine) -> float:
    """
    Tear down a viewing session.

    Returns:
        Seconds of active watching credited to the session
    """
    machine.stop()
    return machine.session.accumulated_seconds
