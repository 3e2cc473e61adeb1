from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from cardshop.config import DEFAULT_CONFIG, config_from_mapping, get_save_dir, load_config


def test_missing_config_file_uses_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "missing.json") is DEFAULT_CONFIG


def test_invalid_json_uses_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = tmp_path / "config.json"
    path.write_text("{oops", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        config = load_config(path)

    assert config is DEFAULT_CONFIG
    assert "using defaults" in caplog.text


def test_non_object_config_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert load_config(path) is DEFAULT_CONFIG


def test_overrides_are_applied(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"day_seconds": 120, "customer": {"challenge_chance": 0.5}, "shop": {"starting_money": 75}}),
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.day_seconds == 120
    assert config.customer.challenge_chance == 0.5
    assert config.shop.starting_money == 75
    assert config.night_seconds == DEFAULT_CONFIG.night_seconds


def test_invalid_values_are_ignored(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        config = config_from_mapping(
            {
                "day_seconds": -1,
                "max_dt_seconds": "fast",
                "night_seconds": float("nan"),
                "enforce_skill_prerequisites": 1,
                "battle": 5,
                "mystery": True,
            }
        )

    assert config == DEFAULT_CONFIG
    assert "mystery" in caplog.text


def test_inconsistent_ranges_are_repaired() -> None:
    config = config_from_mapping(
        {
            "customer": {"browse_seconds_min": 12, "challenge_chance": 1.5},
            "speed_upgrade": {"base_speed": 5.0},
        }
    )

    assert config.customer.browse_seconds_max == 12
    assert config.customer.challenge_chance == DEFAULT_CONFIG.customer.challenge_chance
    assert config.speed_upgrade == DEFAULT_CONFIG.speed_upgrade


def test_boolean_flag_override() -> None:
    config = config_from_mapping({"enforce_skill_prerequisites": True})

    assert config.enforce_skill_prerequisites is True


def test_save_dir_lives_under_user_data_dir() -> None:
    assert get_save_dir().name == "saves"
