import json
from decimal import Decimal
from pathlib import Path

import pandas as pd
from rich.console import Console

from cashproj_core.domain.models import CashEvent, ProjectionConfig, ProjectionRow, Recurrence
from cashproj_core.io import report
from cashproj_core.services.pipeline import project_cash


def _m(text: str) -> pd.Period:
    return pd.Period(text, freq="M")


def test_format_row_rounds_at_the_boundary():
    row = ProjectionRow(month=_m("2023-09"), monthly_total=Decimal("7192.3275"), cumulative_total=Decimal("-21576.985"))
    assert report.format_row(row) == "2023-09:       7192.33  ==>     -21576.99"


def test_format_rows_keeps_order():
    rows = [
        ProjectionRow(_m("2024-01"), Decimal("1"), Decimal("1")),
        ProjectionRow(_m("2024-02"), Decimal("0"), Decimal("1")),
    ]
    lines = report.format_rows(rows)
    assert [line[:7] for line in lines] == ["2024-01", "2024-02"]
    assert lines[1].endswith("==>          1.00")


def _result():
    events = [CashEvent("Rent", Decimal("-1000.005"), Recurrence.MONTHLY)]
    return project_cash(events, ProjectionConfig(start_month=_m("2024-01"), months=2))


def test_result_to_json_and_save(tmp_path: Path):
    payload = report.result_to_json(_result())
    assert payload["config"] == {"start_month": "2024-01", "months": 2, "tax_rate": "0"}
    assert payload["rows"][1] == {"month": "2024-02", "monthly_total": "-1000.01", "cumulative_total": "-2000.01"}
    assert payload["final_balance"] == "-2000.01"

    out = tmp_path / "nested" / "projection.json"
    report.save_json(out, payload)
    assert json.loads(out.read_text()) == payload


def test_render_table_and_events():
    console = Console(record=True, width=120)
    report.render_table(_result(), console)
    report.render_events([CashEvent("Rent", Decimal("-1000"), Recurrence.MONTHLY)], console)
    text = console.export_text()
    assert "2024-02" in text
    assert "-2,000.01" in text
    assert "Rent" in text
    assert "monthly" in text
