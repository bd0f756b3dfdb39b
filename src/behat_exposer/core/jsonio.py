from __future__ import annotations

import json
from typing import Any, Dict


def dumps(obj: Dict[str, Any]) -> str:
    # Paths and other plain values in envelope data are written as strings.
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True, default=str) + "\n"
