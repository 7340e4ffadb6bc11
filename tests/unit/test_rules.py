from pathlib import Path

import pytest
import yaml

from coursetrack.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(content)
    return path


def test_project_rules_file_loads():
    rules = load_rules(PROJECT_ROOT / "rules.yaml")

    assert rules.engagement.estimated_duration_seconds == 1800
    assert rules.engagement.completion_ratio == pytest.approx(0.8)
    assert rules.engagement.tick_interval_seconds == 3
    assert rules.engagement.max_delta_seconds is None
    assert rules.rate_limit.login.max_attempts > 0


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "absent.yaml")


def test_empty_file_uses_defaults(tmp_path):
    rules = load_rules(_write(tmp_path, ""))

    assert rules.progress.max_note_length == 20_000
    assert rules.auth.token_ttl_minutes == 1440


def test_fenced_yaml(tmp_path):
    content = "# Rules\n\n```yaml\nengagement:\n  completion_ratio: 0.5\n```\n"

    rules = load_rules(_write(tmp_path, content))

    assert rules.engagement.completion_ratio == 0.5


def test_invalid_yaml(tmp_path):
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(_write(tmp_path, "engagement: [unclosed\n"))


@pytest.mark.parametrize(
    "section",
    [
        {"engagement": {"completion_ratio": 0}},
        {"engagement": {"completion_ratio": 1.5}},
        {"engagement": {"tick_interval_seconds": -1}},
        {"engagement": {"declared_durations": {"7": 0}}},
        {"progress": {"max_note_length": 0}},
    ],
)
def test_out_of_range_values_rejected(tmp_path, section):
    with pytest.raises(ValueError, match="Rules validation failed"):
        load_rules(_write(tmp_path, yaml.dump(section)))


def test_declared_durations(tmp_path):
    content = yaml.dump({"engagement": {"declared_durations": {"7": 600}}})

    rules = load_rules(_write(tmp_path, content))

    assert rules.engagement.declared_durations == {"7": 600.0}
