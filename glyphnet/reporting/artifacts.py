"""Run artifact helpers."""

from __future__ import annotations

import json
import os
import platform
import time
from pathlib import Path
from typing import Mapping

from .metrics import git_sha


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    records: Mapping[str, object],
    seed: int,
) -> str:
    """Write a manifest JSON file capturing reproducibility metadata."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "records": dict(records),
        "seed": int(seed),
        "environment": {
            "python": platform.python_version(),
            "run_root": os.environ.get("GLYPHNET_RUN_ROOT", ""),
        },
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)
