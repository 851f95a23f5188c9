from __future__ import annotations

import json
from pathlib import Path

from picture_batch.output import write_run_report
from picture_batch.processor import UnitResult, UnitStatus


def test_write_run_report(tmp_path: Path) -> None:
    out_path = tmp_path / "reports" / "run.json"
    results = [
        UnitResult(Path("/src/a.png"), Path("/dst/a.png"), UnitStatus.WRITTEN),
        UnitResult(Path("/src/b.png"), Path("/dst/b.png"), UnitStatus.FAILED, "boom"),
    ]
    write_run_report(
        output_path=out_path,
        images_written=1,
        skipped_up_to_date=3,
        skipped_undecodable=0,
        failed=1,
        results=results,
    )

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["format_version"] == "1.0"
    assert payload["counts"] == {
        "written": 1,
        "skipped_up_to_date": 3,
        "skipped_undecodable": 0,
        "failed": 1,
    }
    assert len(payload["units"]) == 2
    assert payload["units"][1]["status"] == "failed"
    assert payload["units"][1]["reason"] == "boom"
    assert payload["units"][0]["destination"] == str(Path("/dst/a.png"))
    assert "extra" not in payload
