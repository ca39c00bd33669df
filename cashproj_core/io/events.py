from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from cashproj_core.domain.errors import InputError
from cashproj_core.domain.models import CashEvent, EventKind, Recurrence, to_decimal

logger = logging.getLogger(__name__)


REQUIRED_COLUMNS = {"label", "amount", "recurrence"}

COLUMN_ALIASES = {
    "name": "label",
    "usd": "amount",
    "frequency": "recurrence",
    "start": "start_month",
    "date": "start_month",
    "type": "kind",
    "type_": "kind",
    "is_taxable": "taxable",
}

_TRUTHY = {"true", "yes", "y", "1"}
_FALSY = {"false", "no", "n", "0", ""}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    renamed = {}
    for col in df.columns:
        key = str(col).strip().lower()
        renamed[col] = COLUMN_ALIASES.get(key, key)
    targets = list(renamed.values())
    duplicated = sorted({name for name in targets if targets.count(name) > 1})
    if duplicated:
        raise InputError(f"Events CSV has more than one column for: {duplicated}")
    return df.rename(columns=renamed)


def _cell(row: Dict[str, str], column: str) -> str:
    value = row.get(column)
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def _parse_bool(raw: str) -> bool:
    txt = raw.lower()
    if txt in _TRUTHY:
        return True
    if txt in _FALSY:
        return False
    raise InputError(f"Invalid taxable flag: {raw!r}")


def parse_event_row(row: Dict[str, str]) -> CashEvent:
    """
    Build a CashEvent from one CSV record.
    When a kind is given the amount magnitude is signed by it (income in, everything else out);
    otherwise the amount is taken as written.
    """
    label = _cell(row, "label")
    recurrence, embedded_month = Recurrence.parse(_cell(row, "recurrence"))

    try:
        amount = to_decimal(_cell(row, "amount"))
    except ValueError as exc:
        raise InputError(f"Invalid amount for {label!r}: {_cell(row, 'amount')!r}") from exc
    if not amount.is_finite():
        raise InputError(f"Amount for {label!r} must be finite, got {_cell(row, 'amount')!r}")

    kind: Optional[EventKind] = None
    raw_kind = _cell(row, "kind")
    if raw_kind:
        kind = EventKind.parse(raw_kind)
        amount = abs(amount) * kind.sign

    raw_start = _cell(row, "start_month")
    start_month = raw_start if raw_start else embedded_month

    return CashEvent(
        label=label,
        amount=amount,
        recurrence=recurrence,
        start_month=start_month,
        kind=kind,
        taxable=_parse_bool(_cell(row, "taxable")),
    )


def load_events(csv_path: str | Path, skip_invalid: bool = False) -> List[CashEvent]:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise InputError(f"Cannot read events CSV {path}: {exc}") from exc
    df = _normalize_columns(df)
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise InputError(f"Missing columns in events CSV: {sorted(missing)}")

    events: List[CashEvent] = []
    for idx, row in enumerate(df.to_dict(orient="records"), start=1):
        try:
            events.append(parse_event_row(row))
        except InputError as exc:
            if not skip_invalid:
                raise InputError(f"{path.name} row {idx}: {exc}") from exc
            logger.warning("Skipping %s row %d: %s", path.name, idx, exc)
    logger.debug("Loaded %d events from %s", len(events), path)
    return events
