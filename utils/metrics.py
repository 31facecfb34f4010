#!/usr/bin/env python3
"""Run counters and stage timings for the changelog agent, as JSONL.

Off by default; enable with METRICS_ENABLED=1 to keep a local record of how
many commits each run fetched, filtered and rendered.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

from configs.config import Config

METRICS_FILE = "changelog_metrics.jsonl"


def metrics_file() -> Path:
    return Path(Config.observability()["metrics_root"]) / METRICS_FILE


def incr(name: str, value: Any = 1, **labels) -> None:
    """Append one metric line; labels are the version range being processed."""
    if not Config.observability()["metrics_enabled"]:
        return
    path = metrics_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps({"ts": int(time.time()), "metric": name, "value": value, **labels}) + "\n")


class Timer:
    """Context manager recording `<name>.seconds` when the block exits."""

    def __init__(self, name: str, **labels):
        self.name = name
        self.labels = labels
        self.elapsed_s = 0.0

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, *exc):
        self.elapsed_s = time.perf_counter() - self._started
        incr(f"{self.name}.seconds", value=round(self.elapsed_s, 4), **self.labels)
