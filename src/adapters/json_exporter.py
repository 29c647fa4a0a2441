"""JSON export of the run summary.

Lets cron jobs and monitoring read the outcome of a run without scraping the
console output.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import RunSummary


def export_summary_json(*, summary: RunSummary, output_path: Path) -> Path:
    """Export `RunSummary` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = summary.model_dump(mode="json")
    payload["ok"] = summary.ok
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
