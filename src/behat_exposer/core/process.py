from __future__ import annotations

from dataclasses import dataclass
import shutil
import subprocess
from typing import Sequence


class ToolMissingError(RuntimeError):
    error_type = "TOOL_MISSING"

    def __init__(self, tool: str) -> None:
        super().__init__(f"Required tool not found on PATH: {tool}")
        self.tool = tool


@dataclass(frozen=True)
class ProcessResult:
    lines: list[str]
    returncode: int


def ensure_tool(name: str) -> str:
    path = shutil.which(name)
    if not path:
        raise ToolMissingError(name)
    return path


def run_combined(cmd: Sequence[str]) -> ProcessResult:
    """Run `cmd` to completion with stderr folded into stdout.

    Every output line is kept, minus its trailing whitespace. Bytes that are not
    valid UTF-8 become U+FFFD. The return code is reported but never checked here.
    """
    proc = subprocess.run(
        list(cmd),
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        encoding="utf-8",
        errors="replace",
    )
    lines = [line.rstrip() for line in proc.stdout.splitlines()]
    return ProcessResult(lines=lines, returncode=proc.returncode)
