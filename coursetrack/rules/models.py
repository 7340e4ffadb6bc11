from pydantic import BaseModel, Field, model_validator


class EngagementRules(BaseModel):
    estimated_duration_seconds: float = Field(default=1800.0, gt=0)
    completion_ratio: float = Field(default=0.80, gt=0, le=1)
    tick_interval_seconds: float = Field(default=3.0, gt=0)
    # Clamp for a single wall-clock delta; null means "tick interval"
    max_delta_seconds: float | None = Field(default=None, gt=0)
    # Per-lecture durations declared by the catalog, keyed by lecture id
    declared_durations: dict[str, float] = Field(default_factory=dict)


class ProgressRules(BaseModel):
    max_note_length: int = Field(default=20_000, gt=0)


class AuthRules(BaseModel):
    token_ttl_minutes: int = Field(default=60 * 24, gt=0)


class RateLimitWindow(BaseModel):
    window_seconds: int = Field(gt=0)
    max_attempts: int = Field(gt=0)


class RateLimitRules(BaseModel):
    login: RateLimitWindow = RateLimitWindow(window_seconds=60, max_attempts=10)


class SyncRules(BaseModel):
    base_url: str = "http://localhost:8000"
    timeout_seconds: float | None = None  # None keeps the transport default


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    rules_version: str = "1"
    engagement: EngagementRules = EngagementRules()
    progress: ProgressRules = ProgressRules()
    auth: AuthRules = AuthRules()
    rate_limit: RateLimitRules = RateLimitRules()
    sync: SyncRules = SyncRules()
    ops: OpsRules = OpsRules()

    @model_validator(mode="after")
    def _check_declared_durations(self) -> "Rules":
        bad = [k for k, v in self.engagement.declared_durations.items() if v <= 0]
        if bad:
            raise ValueError(f"declared durations must be positive: {', '.join(bad)}")
        return self
