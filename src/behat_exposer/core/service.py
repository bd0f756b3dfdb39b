from __future__ import annotations

import logging
import os
from pathlib import Path
import tempfile
from typing import Mapping

from behat_exposer.core import paths
from behat_exposer.core.config import Config
from behat_exposer.core.errors import MissingWorkspace
from behat_exposer.core.feature import Feature, FeatureFile, FeatureTemplate
from behat_exposer.core.runner import ExecutionResult, Runner

logger = logging.getLogger(__name__)

FEATURE_SUFFIX = ".feature"
STAGED_FILE_MODE = 0o755


class FeatureExecutionService:
    """Fill in a feature template, stage it in the workspace and run it.

    The last result is kept on the instance, so one service must not run two
    executions at the same time.
    """

    def __init__(self, runner: Runner, config: Config) -> None:
        self._runner = runner
        self._config = config
        self._last_result: ExecutionResult | None = None
        self._last_staged: Path | None = None

    @property
    def last_result(self) -> ExecutionResult | None:
        return self._last_result

    @property
    def last_staged(self) -> Path | None:
        """Staged file of the last run, or None once it has been removed."""
        return self._last_staged

    def execute(self, template: FeatureTemplate, parameters: Mapping[str, object]) -> ExecutionResult:
        keep = self._keep_staged()
        template.apply_all(parameters)

        staged = self._create_staged_file(template.name)
        try:
            feature_file = self._copy_feature_as(template, staged)
            self._last_result = self._runner.execute(feature_file)
        finally:
            if keep:
                self._last_staged = staged
            else:
                staged.unlink(missing_ok=True)
                self._last_staged = None
                logger.debug("removed staged feature %s", staged)
        return self._last_result

    def _keep_staged(self) -> bool:
        keep = self._config.get_option("keep_staged")
        if keep is None:
            return False
        if not isinstance(keep, bool):
            raise ValueError(f"keep_staged must be true or false, got {keep!r}")
        return keep

    def _workspace(self) -> Path:
        workspace = self._config.get_option("workspace")
        if not paths.is_usable_workspace(workspace):
            raise MissingWorkspace(workspace)
        return Path(workspace).expanduser()

    def _create_staged_file(self, prefix: str) -> Path:
        fd, name = tempfile.mkstemp(prefix=f"{prefix}-", suffix=FEATURE_SUFFIX, dir=self._workspace())
        os.close(fd)
        return Path(name)

    def _copy_feature_as(self, feature: Feature, target: Path) -> FeatureFile:
        target.write_text(feature.test_scenarios, encoding="utf-8")
        target.chmod(STAGED_FILE_MODE)
        logger.debug("staged %s as %s", feature.name, target)
        return FeatureFile(target)
