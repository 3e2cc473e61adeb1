"""Skill unlock rules and the derived card tier."""
from __future__ import annotations

from dataclasses import replace
from typing import Mapping, Tuple

from cardshop.core.types import MIN_TIER
from cardshop.data.skills import SKILL_CHAIN, SKILLS
from cardshop.domain.defs import SkillDef
from cardshop.domain.results import Failure, Outcome, Success
from cardshop.domain.state import ProgressionState, SkillsState


def create_initial_skills() -> SkillsState:
    return SkillsState(unlocked=frozenset())


def is_skill_unlocked(skills: SkillsState, skill_id: str) -> bool:
    return skill_id in skills.unlocked


def unlocked_card_tier(skills: SkillsState) -> int:
    """Highest tier granted by any unlocked skill; tier 1 is always available."""
    tier = MIN_TIER
    for skill in SKILL_CHAIN:
        if skill.id in skills.unlocked and skill.unlocks_tier > tier:
            tier = skill.unlocks_tier
    return tier


def unlock_skill(
    progression: ProgressionState,
    skills: SkillsState,
    skill_id: str,
    *,
    enforce_prerequisites: bool = False,
    catalog: Mapping[str, SkillDef] = SKILLS,
) -> Outcome[Tuple[ProgressionState, SkillsState]]:
    skill = catalog.get(skill_id) if isinstance(skill_id, str) else None
    if skill is None:
        return Failure("unknown_skill")
    if is_skill_unlocked(skills, skill_id):
        return Failure("already_unlocked")
    if enforce_prerequisites and skill.requires and not is_skill_unlocked(skills, skill.requires):
        return Failure("tier_locked")
    if progression.skill_points < skill.cost:
        return Failure("insufficient_skill_points")
    next_progression = replace(progression, skill_points=progression.skill_points - skill.cost)
    next_skills = SkillsState(unlocked=skills.unlocked | {skill_id})
    return Success((next_progression, next_skills))
