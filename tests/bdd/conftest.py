from __future__ import annotations

import json
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict

import pytest
import jsonschema
from pytest_bdd import given, when, then, parsers


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root


def _run_cli(cmd: str, workspace: Path, templates: Path) -> Dict[str, Any]:
    # cmd is a full string like: behat-exposer version --json
    cmd = cmd.replace("{workspace}", str(workspace)).replace("{templates}", str(templates))
    parts = shlex.split(cmd)
    assert parts and parts[0] == "behat-exposer", "BDD commands must start with 'behat-exposer'"
    # Execute via python -m to avoid relying on script installation
    p = subprocess.run(
        [sys.executable, "-m", "behat_exposer.cli", *parts[1:]],
        capture_output=True,
        text=True,
    )
    try:
        out = json.loads(p.stdout)
    except Exception as e:  # pragma: no cover
        raise AssertionError(f"CLI did not return JSON. Output:\n{p.stdout}") from e
    if out.get("ok") is True:
        assert p.returncode == 0, f"Expected exit 0 for ok envelope, got {p.returncode}\nSTDERR: {p.stderr}"
    else:
        assert p.returncode != 0, f"Expected non-zero exit for err envelope, got {p.returncode}\nSTDERR: {p.stderr}"
    return out


def _load_schema(name: str) -> Dict[str, Any]:
    repo_root = Path(__file__).resolve().parents[2]
    schema_path = repo_root / "schemas" / name
    assert schema_path.exists(), f"Missing schema file: {schema_path}"
    return json.loads(schema_path.read_text(encoding="utf-8"))


def _validate_envelope(out: Dict[str, Any]) -> None:
    schema = _load_schema("envelope.ok.schema.json" if out.get("ok") is True else "envelope.err.schema.json")
    jsonschema.validate(out, schema)


@given("a clean workspace")
def given_clean_workspace(workspace: Path) -> None:
    assert workspace.exists()
    assert not any(workspace.iterdir())


@given("the fake behat runner is configured")
def given_fake_runner(
    tmp_path: Path, workspace: Path, fake_behat_command: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    config = tmp_path / "config.toml"
    config.write_text(
        f"[behat]\ncommand = {json.dumps(fake_behat_command)}\nworkspace = {json.dumps(str(workspace))}\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("BEHAT_EXPOSER_CONFIG_PATH", str(config))


@given("no behat configuration")
def given_no_configuration(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BEHAT_EXPOSER_CONFIG_PATH", str(tmp_path / "missing.toml"))


@given(parsers.parse('env "{key}" is "{value}"'))
def given_env(key: str, value: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(key, value)


@when(parsers.parse('the client runs "{cmd}"'), target_fixture="when_client_runs")
def when_client_runs(cmd: str, workspace: Path, templates_dir: Path) -> Dict[str, Any]:
    out = _run_cli(cmd, workspace, templates_dir)
    _validate_envelope(out)
    return out


@then("the engine returns an OK envelope")
def then_ok(when_client_runs: Dict[str, Any]) -> None:
    assert when_client_runs.get("ok") is True, f"Expected ok=true, got error: {when_client_runs.get('error')}"


@then(parsers.parse('the engine returns a "{error_type}" error'))
def then_error(when_client_runs: Dict[str, Any], error_type: str) -> None:
    assert when_client_runs.get("ok") is False
    assert when_client_runs["error"]["type"] == error_type


@then(parsers.parse("the run reports {steps:d} steps with {failed:d} failed"))
def then_run_counts(when_client_runs: Dict[str, Any], steps: int, failed: int) -> None:
    result = when_client_runs["data"]["result"]
    assert result["steps"] == steps
    assert result["failed"] == failed
    assert result["passed"] == steps - failed
    assert result["success"] is (failed == 0)


@then("the run result is unknown")
def then_run_unknown(when_client_runs: Dict[str, Any]) -> None:
    result = when_client_runs["data"]["result"]
    assert result["steps"] is None
    assert result["passed"] is None
    assert result["failed"] is None
    assert result["success"] is False


@then("the workspace is empty")
def then_workspace_empty(workspace: Path) -> None:
    assert not any(workspace.iterdir())


@then(parsers.parse('the form contains a "{control}" for "{key}"'))
def then_form_control(when_client_runs: Dict[str, Any], control: str, key: str) -> None:
    assert f'<{control} id="{key}" name="{key}"' in when_client_runs["data"]["html"]


@then(parsers.parse('the listed templates are "{names}"'))
def then_listed(when_client_runs: Dict[str, Any], names: str) -> None:
    listed = [entry["file"] for entry in when_client_runs["data"]["features"]]
    assert listed == [name.strip() for name in names.split(",")]
