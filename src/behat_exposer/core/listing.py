from __future__ import annotations

from pathlib import Path
import re

from behat_exposer.core.service import FEATURE_SUFFIX

_FEATURE_NAME_RE = re.compile(r"^[ \t]*Feature:(.*)$", re.MULTILINE)


def feature_title(text: str) -> str | None:
    m = _FEATURE_NAME_RE.search(text)
    if not m:
        return None
    return m.group(1).strip() or None


def list_feature_templates(target_path: str | Path) -> dict[str, str]:
    """Map each `*.feature` file name in `target_path` to its `Feature:` title.

    Files without a title are left out.
    """
    root = Path(target_path).expanduser()
    if not root.is_dir():
        raise FileNotFoundError(f"Feature directory not found: {root}")

    features: dict[str, str] = {}
    for path in sorted(root.glob(f"*{FEATURE_SUFFIX}"), key=lambda p: p.name):
        if not path.is_file():
            continue
        title = feature_title(path.read_text(encoding="utf-8", errors="replace"))
        if title:
            features[path.name] = title
    return features
