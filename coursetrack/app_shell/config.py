import logging
import os

import httpx

from coursetrack.components.engagement import (
    DeclaredDurationPolicy,
    DurationPolicyPort,
    EngagementConfig,
    FixedDurationPolicy,
    config_from_rules,
)
from coursetrack.components.sync import ProgressSyncClient, SyncClockPort, create_sync_client
from coursetrack.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Startup configuration is unusable."""


def validate_ops_rules(rules: Rules) -> None:
    """
    Validate operational requirements before startup.
    Raises ConfigurationError listing every missing environment variable.
    """
    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    logger.info("Configuration validated (rules version %s)", rules.rules_version)


class EngagementRulesAdapter:
    """Adapter to map generic Rules to the engagement EngagementRulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.engagement

    def get_estimated_duration_seconds(self) -> float:
        return self._rules.estimated_duration_seconds

    def get_completion_ratio(self) -> float:
        return self._rules.completion_ratio

    def get_tick_interval_seconds(self) -> float:
        return self._rules.tick_interval_seconds

    def get_max_delta_seconds(self) -> float | None:
        return self._rules.max_delta_seconds


class ProgressRulesAdapter:
    """Adapter to map generic Rules to the progress ProgressRulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.progress

    def get_max_note_length(self) -> int:
        return self._rules.max_note_length


def engagement_config(rules: Rules) -> EngagementConfig:
    return config_from_rules(EngagementRulesAdapter(rules))


def duration_policy(rules: Rules) -> DurationPolicyPort:
    """Fixed estimate, overridden per lecture where the catalog declares one."""
    fixed = FixedDurationPolicy(EngagementRulesAdapter(rules).get_estimated_duration_seconds())
    if rules.engagement.declared_durations:
        return DeclaredDurationPolicy(rules.engagement.declared_durations, fallback=fixed)
    return fixed


def sync_client(
    rules: Rules,
    clock: SyncClockPort,
    transport: httpx.BaseTransport | None = None,
) -> ProgressSyncClient:
    """Sync client pointed at the configured API."""
    return create_sync_client(
        rules.sync.base_url,
        clock,
        timeout_seconds=rules.sync.timeout_seconds,
        transport=transport,
    )
