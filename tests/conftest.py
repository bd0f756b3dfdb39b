# pytest configuration hooks.
#
# Policy: No skipped tests. If something cannot run in this environment, use xfail with a clear reason.

from __future__ import annotations

import os
import shlex
import sys
from pathlib import Path
import pytest

from behat_exposer.core import config as config_core

FIXTURES = Path(__file__).resolve().parent / "fixtures"
TEMPLATES = FIXTURES / "templates"
FAKE_BEHAT = FIXTURES / "fake_behat.py"

_SKIP_COUNT = 0


def pytest_configure() -> None:
    if "BEHAT_EXPOSER_CONFIG_PATH" not in os.environ:
        path = Path(__file__).resolve().parents[1] / ".behat-exposer-test-config.toml"
        os.environ["BEHAT_EXPOSER_CONFIG_PATH"] = str(path)


def pytest_runtest_logreport(report: pytest.TestReport) -> None:
    global _SKIP_COUNT
    if report.when == "setup" and report.outcome == "skipped":
        _SKIP_COUNT += 1


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    if _SKIP_COUNT > 0:
        pytest.exit(f"Skipped tests are not allowed (skipped={_SKIP_COUNT}).", returncode=2)


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("BEHAT_EXPOSER_WORKSPACE_DIR", raising=False)
    monkeypatch.delenv("FAKE_BEHAT_MODE", raising=False)
    monkeypatch.delenv("FAKE_BEHAT_CAPTURE", raising=False)
    config_core.reset_config_cache()
    yield
    config_core.reset_config_cache()


@pytest.fixture()
def fake_behat_command() -> str:
    return f"{shlex.quote(sys.executable)} {shlex.quote(str(FAKE_BEHAT))}"


@pytest.fixture()
def templates_dir() -> Path:
    return TEMPLATES
