from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from picture_batch.processor import UnitResult


def write_run_report(
    *,
    output_path: Path,
    images_written: int,
    skipped_up_to_date: int,
    skipped_undecodable: int,
    failed: int,
    results: list[UnitResult],
    extra: dict[str, Any] | None = None,
) -> None:
    payload: dict[str, Any] = {
        "format_version": "1.0",
        "created_at": datetime.now(timezone.utc).isoformat(),
        "counts": {
            "written": int(images_written),
            "skipped_up_to_date": int(skipped_up_to_date),
            "skipped_undecodable": int(skipped_undecodable),
            "failed": int(failed),
        },
        "units": [
            {
                "source": str(r.source),
                "destination": str(r.destination),
                "status": r.status.value,
                "reason": r.reason,
            }
            for r in results
        ],
    }

    if extra:
        payload["extra"] = extra

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
