from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Iterable, List

from rich.console import Console
from rich.table import Table

from cashproj_core.domain.models import CashEvent, ProjectionResult, ProjectionRow

CENTS = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_row(row: ProjectionRow) -> str:
    return f"{row.month.strftime('%Y-%m')}:  {to_cents(row.monthly_total):>12}  ==>  {to_cents(row.cumulative_total):>12}"


def format_rows(rows: Iterable[ProjectionRow]) -> List[str]:
    return [format_row(r) for r in rows]


def result_to_json(result: ProjectionResult) -> dict:
    return {
        "config": {
            "start_month": str(result.horizon.start),
            "months": result.horizon.month_count,
            "tax_rate": str(result.config.tax_rate),
        },
        "rows": [
            {
                "month": str(r.month),
                "monthly_total": str(to_cents(r.monthly_total)),
                "cumulative_total": str(to_cents(r.cumulative_total)),
            }
            for r in result.rows
        ],
        "final_balance": str(to_cents(result.final_balance)),
    }


def save_json(path: Path, payload) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _money_markup(value: Decimal) -> str:
    color = "red" if value < 0 else "green"
    return f"[{color}]{to_cents(value):,}[/{color}]"


def render_table(result: ProjectionResult, console: Console) -> None:
    table = Table(title=f"Cash projection {result.horizon.start} .. {result.horizon.end}")
    table.add_column("Month")
    table.add_column("Monthly", justify="right")
    table.add_column("Balance", justify="right")
    for r in result.rows:
        table.add_row(str(r.month), _money_markup(r.monthly_total), _money_markup(r.cumulative_total))
    console.print(table)


def render_events(events: Iterable[CashEvent], console: Console) -> None:
    table = Table(title="Cash events")
    table.add_column("Label")
    table.add_column("Amount", justify="right")
    table.add_column("Recurrence")
    table.add_column("Start")
    table.add_column("Kind")
    table.add_column("Taxable")
    for e in events:
        table.add_row(
            e.label,
            _money_markup(e.amount),
            e.recurrence.value,
            str(e.start_month) if e.start_month is not None else "-",
            e.kind.value if e.kind is not None else "-",
            "yes" if e.taxable else "no",
        )
    console.print(table)
