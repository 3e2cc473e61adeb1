"""Simulation tuning and helpers for loading overrides from disk."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

from cardshop.core.guards import finite_or, is_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CustomerTuning:
    day_spawn_interval_seconds: float = 8.0
    night_spawn_interval_seconds: float = 14.0
    spawn_jitter_ms: int = 800
    min_spawn_interval_seconds: float = 0.5
    browse_seconds_min: float = 4.0
    browse_seconds_max: float = 10.0
    challenge_chance: float = 0.25
    challenge_timeout_seconds: float = 20.0
    max_customers: int = 20
    deck_size: int = 10


@dataclass(frozen=True, slots=True)
class ProgressionTuning:
    base_xp_to_next: float = 20.0
    xp_growth: float = 1.18
    skill_points_per_level: int = 1


@dataclass(frozen=True, slots=True)
class SpeedUpgradeTuning:
    base_speed: float = 1.0
    tier_increment: float = 0.05
    cap_speed: float = 3.0
    cost_base: float = 25.0
    cost_growth: float = 1.12


@dataclass(frozen=True, slots=True)
class ShopTuning:
    shelf_slots: int = 4
    shelf_slot_capacity: int = 6
    starting_money: int = 50
    deck_max_size: int = 20
    cards_per_pack: int = 8


@dataclass(frozen=True, slots=True)
class BattleTuning:
    attack_weight: float = 1.15
    variance: int = 2
    tier_bias_per_tier: int = 2
    win_money_per_tier: int = 10
    win_xp_per_tier: int = 6
    loss_money_per_tier: int = 2
    loss_xp_per_tier: int = 2


@dataclass(frozen=True, slots=True)
class SimConfig:
    """Static tuning shared by every simulation module."""

    day_seconds: float = 300.0
    night_seconds: float = 60.0
    max_dt_seconds: float = 0.25
    default_seed: int = 12345
    enforce_skill_prerequisites: bool = False
    customer: CustomerTuning = field(default_factory=CustomerTuning)
    progression: ProgressionTuning = field(default_factory=ProgressionTuning)
    speed_upgrade: SpeedUpgradeTuning = field(default_factory=SpeedUpgradeTuning)
    shop: ShopTuning = field(default_factory=ShopTuning)
    battle: BattleTuning = field(default_factory=BattleTuning)


DEFAULT_CONFIG = SimConfig()

# Values that must stay strictly positive or the clock/spawner could spin forever.
_POSITIVE_FIELDS = {
    "day_seconds",
    "night_seconds",
    "max_dt_seconds",
    "day_spawn_interval_seconds",
    "night_spawn_interval_seconds",
    "min_spawn_interval_seconds",
    "challenge_timeout_seconds",
    "base_xp_to_next",
    "xp_growth",
    "tier_increment",
    "cost_base",
    "cost_growth",
    "shelf_slots",
    "shelf_slot_capacity",
    "deck_max_size",
    "cards_per_pack",
    "max_customers",
}


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "CardShop"
        return Path.home() / "CardShop"
    return Path.home() / ".config" / "cardshop"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the per-user save directory."""
    return get_user_data_dir() / "saves"


def _coerce_value(name: str, current: Any, raw: Any) -> Any:
    if isinstance(current, bool):
        if isinstance(raw, bool):
            return raw
        raise ValueError(f"{name} must be a boolean")
    if not is_number(raw):
        raise ValueError(f"{name} must be a number")
    number = finite_or(raw, float("nan"))
    if number != number:
        raise ValueError(f"{name} must be finite")
    if name in _POSITIVE_FIELDS and number <= 0:
        raise ValueError(f"{name} must be positive")
    if number < 0:
        raise ValueError(f"{name} must not be negative")
    return int(number) if isinstance(current, int) else number


def _apply_overrides(target: Any, overrides: Mapping[str, Any], context: str) -> Any:
    changes: dict[str, Any] = {}
    for entry in fields(target):
        if entry.name not in overrides:
            continue
        raw = overrides[entry.name]
        current = getattr(target, entry.name)
        path = f"{context}.{entry.name}" if context else entry.name
        if hasattr(current, "__dataclass_fields__"):
            if isinstance(raw, Mapping):
                changes[entry.name] = _apply_overrides(current, raw, path)
            else:
                logger.warning("Ignoring config override %s: expected an object", path)
            continue
        try:
            changes[entry.name] = _coerce_value(entry.name, current, raw)
        except ValueError as exc:
            logger.warning("Ignoring config override %s: %s", path, exc)
    unknown = set(overrides) - {entry.name for entry in fields(target)}
    for key in sorted(str(name) for name in unknown):
        logger.warning("Ignoring unknown config key %s", f"{context}.{key}" if context else key)
    return replace(target, **changes) if changes else target


def config_from_mapping(overrides: Mapping[str, Any], base: SimConfig = DEFAULT_CONFIG) -> SimConfig:
    """Return ``base`` with every valid override applied; invalid entries are skipped."""
    config = _apply_overrides(base, overrides, "")
    customer = config.customer
    if customer.browse_seconds_max < customer.browse_seconds_min:
        logger.warning("browse_seconds_max below browse_seconds_min; using the minimum for both")
        config = replace(config, customer=replace(customer, browse_seconds_max=customer.browse_seconds_min))
    if not 0 <= config.customer.challenge_chance <= 1:
        logger.warning("challenge_chance outside [0, 1]; using default")
        config = replace(
            config,
            customer=replace(config.customer, challenge_chance=CustomerTuning().challenge_chance),
        )
    if config.speed_upgrade.cap_speed < config.speed_upgrade.base_speed:
        logger.warning("cap_speed below base_speed; using default speed tuning")
        config = replace(config, speed_upgrade=SpeedUpgradeTuning())
    return config


def load_config(path: Path | None = None) -> SimConfig:
    """Load config overrides from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return DEFAULT_CONFIG
    except (OSError, ValueError) as exc:
        logger.warning("Unable to read config %s (%s); using defaults", config_path, exc)
        return DEFAULT_CONFIG
    if not isinstance(raw, dict):
        logger.warning("Config %s is not a JSON object; using defaults", config_path)
        return DEFAULT_CONFIG
    return config_from_mapping(raw)
