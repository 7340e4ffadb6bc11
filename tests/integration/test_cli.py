import json
from pathlib import Path

import pytest

from coursetrack.app_shell import cli

PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.chdir(PROJECT_ROOT)
    monkeypatch.setenv("COURSETRACK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("COURSETRACK_RULES_PATH", str(PROJECT_ROOT / "rules.yaml"))
    return tmp_path


def test_migrate_then_dry_run(cli_env, capsys):
    cli.main(["migrate"])
    assert "Applied 1 migration(s)" in capsys.readouterr().out

    cli.main(["migrate", "--dry-run"])
    assert capsys.readouterr().out == ""


def test_add_user_and_show(cli_env, capsys):
    cli.main(["migrate"])
    cli.main(["add-user", "ada", "--password", "pw", "--role", "admin"])
    assert "Created admin 'ada'" in capsys.readouterr().out

    cli.main(["show", "ada"])
    record = json.loads(capsys.readouterr().out)

    assert record["username"] == "ada"
    assert record["completed"] == []
    assert record["checkIns"] == []


def test_duplicate_user_exits(cli_env):
    cli.main(["migrate"])
    cli.main(["add-user", "ada", "--password", "pw"])

    with pytest.raises(SystemExit):
        cli.main(["add-user", "ada", "--password", "pw"])


def test_show_unknown(cli_env):
    cli.main(["migrate"])

    with pytest.raises(SystemExit):
        cli.main(["show", "ghost"])
