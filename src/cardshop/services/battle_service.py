"""Battle service handling deterministic, score-based challenges."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from cardshop.config import SimConfig
from cardshop.core.guards import int_or
from cardshop.core.rng import RNG
from cardshop.core.types import MAX_TIER, MIN_TIER, BattleOutcomeKind
from cardshop.data.cards import CARD_CATALOG, CardCatalog


@dataclass(frozen=True, slots=True)
class BattleOutcome:
    result: BattleOutcomeKind
    money_delta: int
    xp_delta: int
    player_score: float
    enemy_score: float
    seed: int


class BattleService:
    """One deterministic comparison of deck scores; no turns, no state."""

    def __init__(self, config: SimConfig, *, catalog: CardCatalog = CARD_CATALOG) -> None:
        self._tuning = config.battle
        self._catalog = catalog

    def deck_score(self, card_ids: Iterable[str]) -> float:
        """Sum of attack * weight + health; ids missing from the catalog score 0."""
        total = 0.0
        for card_id in card_ids:
            card = self._catalog.find(card_id)
            if card is not None:
                total += card.attack * self._tuning.attack_weight + card.health
        return total

    def resolve(
        self,
        player_deck: Iterable[str],
        customer_tier: int,
        customer_deck: Iterable[str],
        seed: int,
    ) -> BattleOutcome:
        tuning = self._tuning
        tier = max(MIN_TIER, min(MAX_TIER, int_or(customer_tier, MIN_TIER)))
        rng = RNG(seed)
        player_variance = rng.randint(-tuning.variance, tuning.variance)
        enemy_variance = rng.randint(-tuning.variance, tuning.variance)

        player_score = self.deck_score(player_deck) + player_variance
        enemy_score = self.deck_score(customer_deck) + enemy_variance + (tier - 1) * tuning.tier_bias_per_tier
        # Ties go to the player.
        if player_score >= enemy_score:
            return BattleOutcome(
                result="win",
                money_delta=tuning.win_money_per_tier * tier,
                xp_delta=tuning.win_xp_per_tier * tier,
                player_score=player_score,
                enemy_score=enemy_score,
                seed=rng.seed,
            )
        return BattleOutcome(
            result="loss",
            money_delta=tuning.loss_money_per_tier * tier,
            xp_delta=tuning.loss_xp_per_tier * tier,
            player_score=player_score,
            enemy_score=enemy_score,
            seed=rng.seed,
        )
