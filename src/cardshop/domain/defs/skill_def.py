"""Skill definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SkillDef:
    """Describes a skill-point purchase that raises the unlocked card tier."""

    id: str
    name: str
    description: str
    cost: int
    unlocks_tier: int
    requires: str | None = None
