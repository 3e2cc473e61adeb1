"""Static skill chain: one purchase per card tier above the first."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

from cardshop.core.types import MAX_TIER
from cardshop.domain.defs import SkillDef

# Skill-point cost per unlocked tier (tier 2 .. tier 9).
_TIER_COSTS = {2: 1, 3: 1, 4: 2, 5: 2, 6: 3, 7: 3, 8: 4, 9: 5}


def skill_id_for_tier(tier: int) -> str:
    return f"unlockTier{tier}Cards"


def _build_skills() -> Tuple[SkillDef, ...]:
    skills = []
    for tier in range(2, MAX_TIER + 1):
        skills.append(
            SkillDef(
                id=skill_id_for_tier(tier),
                name=f"Unlock Tier {tier} Cards",
                description=f"Allows tier {tier} cards to appear in packs and be added to your deck.",
                cost=_TIER_COSTS[tier],
                unlocks_tier=tier,
                requires=skill_id_for_tier(tier - 1) if tier > 2 else None,
            )
        )
    return tuple(skills)


SKILL_CHAIN: Tuple[SkillDef, ...] = _build_skills()
SKILLS: Mapping[str, SkillDef] = MappingProxyType({skill.id: skill for skill in SKILL_CHAIN})
