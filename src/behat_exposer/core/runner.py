from __future__ import annotations

from dataclasses import dataclass, asdict
import logging
import re
import shlex
from typing import Protocol, Sequence

from behat_exposer.core.config import Config
from behat_exposer.core.errors import EmptyOutput, InvalidRunnerCommand, RunnerFailed
from behat_exposer.core.feature import FeatureFile
from behat_exposer.core.process import ensure_tool, run_combined

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "behat"

# Behat's summary line, e.g. "3 scenarios, 10 steps (8 passed, 2 failed)".
_SUMMARY_RE = re.compile(r"(\d+)\D*?steps.*?(\d+)\D*?passed")


@dataclass(frozen=True)
class ExecutionResult:
    command: str
    success: bool
    elapsed: str
    steps: int | None
    passed: int | None
    failed: int | None
    output: str
    returncode: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class OutputSummary:
    elapsed: str
    steps: int | None
    passed: int | None
    failed: int | None

    @property
    def success(self) -> bool:
        # An unparseable summary is not a pass.
        return self.failed == 0


def parse_summary_line(line: str) -> tuple[int | None, int | None]:
    m = _SUMMARY_RE.search(line)
    if not m:
        return None, None
    return int(m.group(1)), int(m.group(2))


def parse_output(lines: Sequence[str]) -> OutputSummary:
    """Read the elapsed time and step counts from the last two output lines."""
    if not lines:
        raise ValueError("Cannot parse empty runner output")
    elapsed = lines[-1]
    steps, passed = parse_summary_line(lines[-2]) if len(lines) > 1 else (None, None)
    failed = steps - passed if steps is not None and passed is not None else None
    return OutputSummary(elapsed=elapsed, steps=steps, passed=passed, failed=failed)


class Runner(Protocol):
    def execute(self, feature_file: FeatureFile) -> ExecutionResult: ...


class BehatCliRunner:
    """Runs the Behat command line against a single feature file."""

    def __init__(self, config: Config, command: str = DEFAULT_COMMAND) -> None:
        self._config = config
        self._command = config.get_option("command") or command

    def build_command(self, feature_file: FeatureFile) -> list[str]:
        cmd = shlex.split(self._command)
        if not cmd:
            raise InvalidRunnerCommand(self._command)
        runner_config = self._config.get_option("config")
        if runner_config:
            cmd.append(f"--config={runner_config}")
        cmd.append(str(feature_file.path))
        return cmd

    def execute(self, feature_file: FeatureFile) -> ExecutionResult:
        cmd = self.build_command(feature_file)
        command_line = shlex.join(cmd)
        ensure_tool(cmd[0])

        logger.debug("running %s", command_line)
        try:
            proc = run_combined(cmd)
        except OSError as exc:
            raise RunnerFailed(command_line, exc.strerror or str(exc)) from exc
        if not proc.lines:
            raise EmptyOutput(command_line)

        summary = parse_output(proc.lines)
        logger.info(
            "%s: steps=%s passed=%s failed=%s elapsed=%s",
            feature_file.name,
            summary.steps,
            summary.passed,
            summary.failed,
            summary.elapsed,
        )
        return ExecutionResult(
            command=command_line,
            success=summary.success,
            elapsed=summary.elapsed,
            steps=summary.steps,
            passed=summary.passed,
            failed=summary.failed,
            output="\n".join(proc.lines),
            returncode=proc.returncode,
        )
