from __future__ import annotations

from pathlib import Path
from typing import Mapping, Protocol

from behat_exposer.core.errors import InvalidFeatureSource


class Feature(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def test_scenarios(self) -> str: ...


class FeatureFile:
    """A feature file that exists on disk."""

    def __init__(self, path: str | Path) -> None:
        candidate = Path(path)
        if not candidate.is_file():
            raise InvalidFeatureSource(str(path))
        self._path = candidate

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        """File name without its extension."""
        return self._path.stem

    @property
    def test_scenarios(self) -> str:
        try:
            return self._path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidFeatureSource(str(self._path), "It is not UTF-8 text.") from exc
        except OSError as exc:
            raise InvalidFeatureSource(str(self._path), exc.strerror) from exc

    def __repr__(self) -> str:
        return f"FeatureFile({str(self._path)!r})"


class FeatureTemplate:
    """A feature file whose `<name>` placeholders can be filled in.

    The template reads the file once and edits its own copy of the text; the
    file on disk is never touched.
    """

    def __init__(self, feature_file: FeatureFile) -> None:
        self._name = feature_file.name
        self._test_scenarios = feature_file.test_scenarios

    @property
    def name(self) -> str:
        return self._name

    @property
    def test_scenarios(self) -> str:
        return self._test_scenarios

    def apply(self, name: str, value: object) -> None:
        """Replace every `<name>` token with `str(value)`, inserted verbatim."""
        self._test_scenarios = self._test_scenarios.replace(f"<{name}>", str(value))

    def apply_all(self, parameters: Mapping[str, object]) -> None:
        for name, value in parameters.items():
            self.apply(name, value)
