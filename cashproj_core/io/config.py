from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from cashproj_core.domain.errors import ConfigurationError
from cashproj_core.domain.models import ProjectionConfig, parse_month


def load_projection_config(path: str | Path) -> ProjectionConfig:
    data = _read_json(path)
    return build_projection_config(
        start_month=data.get("start_month"),
        months=data.get("months", 12),
        tax_rate=data.get("tax_rate", "0"),
    )


def build_projection_config(start_month=None, months=12, tax_rate="0") -> ProjectionConfig:
    """
    Validate raw horizon settings (from JSON or the command line) into a ProjectionConfig.
    """
    start = None
    if start_month not in (None, ""):
        try:
            start = parse_month(start_month)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid start month: {start_month!r}") from exc

    month_count = _parse_months(months)
    if month_count < 1:
        raise ConfigurationError(f"months must be at least 1, got {month_count}")

    return ProjectionConfig(start_month=start, months=month_count, tax_rate=tax_rate)


def _parse_months(months) -> int:
    # whole numbers only; 2.9 is refused rather than truncated
    if isinstance(months, bool):
        raise ConfigurationError(f"Invalid months value: {months!r}")
    if isinstance(months, int):
        return months
    if isinstance(months, float) and months.is_integer():
        return int(months)
    if isinstance(months, str):
        try:
            return int(months.strip())
        except ValueError:
            pass
    raise ConfigurationError(f"Invalid months value: {months!r}")


def _read_json(path: str | Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must hold a JSON object")
    return data
