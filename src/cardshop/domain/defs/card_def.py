"""Card definition structures."""
from __future__ import annotations

from dataclasses import dataclass

from cardshop.core.types import Rarity


@dataclass(frozen=True, slots=True)
class CardDef:
    """Describes one collectible card in the static catalog."""

    id: str
    name: str
    tier: int
    rarity: Rarity
    attack: int
    health: int
