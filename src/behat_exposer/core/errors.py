from __future__ import annotations


class BehatError(RuntimeError):
    """Base error for everything raised around the Behat runner.

    `error_type` matches an entry in `error_types.KNOWN_ERROR_TYPES` so the CLI
    can turn any of these into an error envelope without string matching.
    """

    error_type = "INVALID_ARGUMENT"


class InvalidFeatureSource(BehatError):
    error_type = "INVALID_FEATURE_SOURCE"

    def __init__(self, path: str, reason: str | None = None) -> None:
        message = f"The reference [{path}] is not a valid file."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
        self.path = path
        self.reason = reason


class MissingWorkspace(BehatError):
    error_type = "MISSING_WORKSPACE"

    def __init__(self, path: str | None) -> None:
        super().__init__(
            'The behat configuration must define a read/writable workspace path using the key named "workspace".'
        )
        self.path = path


class InvalidRunnerCommand(BehatError):
    error_type = "INVALID_ARGUMENT"

    def __init__(self, command: str) -> None:
        super().__init__(f"The behat command [{command}] is empty.")
        self.command = command


class RunnerFailed(BehatError):
    error_type = "RUNNER_FAILED"

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(f"Could not execute command [{command}]: {reason}")
        self.command = command
        self.reason = reason


class EmptyOutput(BehatError):
    error_type = "EMPTY_OUTPUT"

    def __init__(self, command: str) -> None:
        super().__init__(f"Expecting output from command [{command}].")
        self.command = command
