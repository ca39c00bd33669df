import json
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from cashproj_core.domain.errors import ConfigurationError
from cashproj_core.io.config import build_projection_config, load_projection_config

DATA = Path(__file__).parent / "data"


def test_load_projection_config():
    config = load_projection_config(DATA / "projection.json")
    assert config.start_month == pd.Period("2023-07", freq="M")
    assert config.months == 7
    assert config.tax_rate == Decimal("0.25")


def test_missing_keys_fall_back_to_defaults(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text("{}")
    config = load_projection_config(path)
    assert config.start_month is None
    assert config.months == 12
    assert config.tax_rate == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"months": 0},
        {"months": -3},
        {"months": "twelve"},
        {"months": True},
        {"months": 2.9},
        {"months": "2.9"},
        {"start_month": "2023/07"},
        {"tax_rate": 2},
    ],
)
def test_invalid_config_values(tmp_path: Path, payload):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps(payload))
    with pytest.raises(ConfigurationError):
        load_projection_config(path)


def test_non_object_config(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigurationError):
        load_projection_config(path)


def test_build_from_cli_values():
    config = build_projection_config(start_month="2025-02-14", months="3", tax_rate="0.169")
    horizon = config.horizon()
    assert [str(m) for m in horizon.months()] == ["2025-02", "2025-03", "2025-04"]
    assert config.tax_rate == Decimal("0.169")


def test_whole_number_months_are_accepted(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"months": 3.0}))
    assert load_projection_config(path).months == 3
    assert build_projection_config(months=" 4 ").months == 4


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="Cannot read config file"):
        load_projection_config(tmp_path / "none.json")


def test_malformed_config_json(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text("{months: 3")
    with pytest.raises(ConfigurationError, match="Invalid JSON in config file"):
        load_projection_config(path)
