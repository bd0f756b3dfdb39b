from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Protocol

DEFAULT_PARAMETER_TYPE = "text"

# 1: type (`text`, `yesno`, ...), 2: key, which must match a `<key>` placeholder,
# 3: display label, 4: free text holding the description and an optional `(default)`.
_PARAM_RE = re.compile(r'# @param (\w*) (\w*) "([\w ]*)"(.*)$', re.MULTILINE)
_DEFAULT_RE = re.compile(r"\((.*)\)")


@dataclass(frozen=True)
class Parameter:
    key: str
    name: str
    type: str = DEFAULT_PARAMETER_TYPE
    default: str | None = None
    description: str | None = None
    source: str = ""

    def options(self) -> dict[str, str | None]:
        return {"default": self.default, "description": self.description}


def _split_tail(tail: str) -> tuple[str | None, str | None]:
    tail = tail.strip()
    m = _DEFAULT_RE.search(tail)
    if not m:
        return None, tail or None
    default = m.group(1).strip()
    parts = [part.strip() for part in (tail[: m.start()], tail[m.end() :])]
    description = " ".join(part for part in parts if part)
    return default, description or None


def extract_parameters(source: str) -> dict[str, Parameter]:
    """Collect `# @param` declarations keyed by parameter key.

    A later declaration of the same key replaces the earlier one. Lines without
    a quoted display name are not declarations and are skipped.
    """
    parameters: dict[str, Parameter] = {}
    for m in _PARAM_RE.finditer(source):
        param_type, key, name, tail = m.groups()
        default, description = _split_tail(tail)
        parameters[key] = Parameter(
            key=key,
            name=name.strip(),
            type=param_type or DEFAULT_PARAMETER_TYPE,
            default=default,
            description=description,
            source=m.group(0),
        )
    return parameters


class ParameterParser(Protocol):
    def extract_parameters(self, source: str) -> dict[str, Parameter]: ...


class DocCommentParameterParser:
    """Reads parameters written as `# @param` doc comments."""

    def extract_parameters(self, source: str) -> dict[str, Parameter]:
        return extract_parameters(source)
