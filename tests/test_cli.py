from __future__ import annotations

import json
import os
from pathlib import Path
import subprocess
import sys

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"


def _run(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONDONTWRITEBYTECODE"] = "1"
    env["LAUNCHPAD_API_MODE"] = "mock"
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    env["COLUMNS"] = "200"
    return subprocess.run(
        [sys.executable, "-m", "launchpad.cli", *args],
        capture_output=True,
        text=True,
        env=env,
        cwd=cwd,
    )


def _values(tmp_path: Path, **overrides) -> Path:
    values = {
        "repo_url": "https://example/repo",
        "context_dir": "app",
        "git_ref": "main",
        "name": "svc",
        "env": "prod",
        "config": [{"key": "A", "value": "1"}, {"key": "A", "value": "2"}],
    }
    values.update(overrides)
    path = tmp_path / "values.json"
    path.write_text(json.dumps(values), encoding="utf-8")
    return path


def test_deploy_non_interactive(tmp_path: Path) -> None:
    result = _run(
        ["deploy", "-p", "prop", "--values", str(_values(tmp_path)), "--yes", "--print-payload"],
        tmp_path,
    )
    assert result.returncode == 0, result.stdout + result.stderr
    assert '"port": "3000"' in result.stdout
    assert '"healthCheckPath": "/"' in result.stdout
    assert '"A": "2"' in result.stdout
    assert "Deployed Containerized Application successfully" in result.stdout


def test_deploy_blocked_by_unreachable_repository(tmp_path: Path) -> None:
    values = _values(tmp_path, repo_url="example/repo")
    result = _run(["deploy", "-p", "prop", "--values", str(values), "--yes"], tmp_path)
    assert result.returncode == 1
    assert "Repository example/repo is not reachable" in result.stdout


def test_deploy_rejects_unknown_values_field(tmp_path: Path) -> None:
    values = _values(tmp_path, colour="blue")
    result = _run(["deploy", "-p", "prop", "--values", str(values), "--yes"], tmp_path)
    assert result.returncode == 1


@pytest.mark.parametrize("config", [{"A": "1"}, ["A=1"], "A=1"])
def test_deploy_rejects_malformed_pair_list(tmp_path: Path, config) -> None:
    values = _values(tmp_path, config=config)
    result = _run(["deploy", "-p", "prop", "--values", str(values), "--yes"], tmp_path)
    assert result.returncode == 1
    assert "Traceback" not in result.stdout + result.stderr
    assert "config must be a list" in result.stdout


def test_validate_command(tmp_path: Path) -> None:
    ok = _run(
        ["validate", "-p", "prop", "--name", "svc", "--repo-url", "https://example/repo", "--context-dir", "app"],
        tmp_path,
    )
    assert ok.returncode == 0, ok.stdout + ok.stderr
    assert "Port: 3000" in ok.stdout

    rejected = _run(
        ["validate", "-p", "prop", "--name", "svc", "--repo-url", "nowhere", "--context-dir", "app"],
        tmp_path,
    )
    assert rejected.returncode == 1


def test_envs_command(tmp_path: Path) -> None:
    result = _run(["envs", "-p", "prop"], tmp_path)
    assert result.returncode == 0, result.stdout + result.stderr
    for name in ("dev", "qa", "prod"):
        assert name in result.stdout


def test_bad_settings_exit_nonzero(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("LAUNCHPAD_TIMEOUT_S=never\n", encoding="utf-8")
    result = _run(["envs", "-p", "prop"], tmp_path)
    assert result.returncode == 1
