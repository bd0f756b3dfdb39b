from __future__ import annotations

from typing import Final

# Typed errors let callers branch on failures without parsing messages.
# Keep this list minimal and grow it only when a new type is actually emitted.
KNOWN_ERROR_TYPES: Final[set[str]] = {
    "EMPTY_OUTPUT",
    "INVALID_ARGUMENT",
    "INVALID_FEATURE_SOURCE",
    "MISSING_WORKSPACE",
    "NOT_FOUND",
    "RUNNER_FAILED",
    "TOOL_MISSING",
}


def assert_known_error_type(error_type: str) -> None:
    if error_type not in KNOWN_ERROR_TYPES:
        raise ValueError(
            f"Unknown error type: {error_type!r}. Add it to behat_exposer.core.error_types.KNOWN_ERROR_TYPES."
        )
