"""Trait catalog.

Traits are small named modifiers carried by a horse. Each may shift the
overall rating, the market value, or race performance. A race effect can be
restricted to a distance class or surface (e.g. Mud Runner only helps on
dirt).
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional

from .models import Race, Trait

TRAIT_POOL: List[Trait] = [
    Trait("Sprinter", rating_effect=0, value_effect=300, race_effect=4.0, distance="sprint"),
    Trait("Endurance", rating_effect=0, value_effect=300, race_effect=4.0, distance="long"),
    Trait("Quick Learner", rating_effect=1, value_effect=400),
    Trait("Calm", rating_effect=1, value_effect=200, race_effect=1.0),
    Trait("Competitive", rating_effect=2, value_effect=500, race_effect=2.0),
    Trait("Late Bloomer", rating_effect=0, value_effect=100),
    Trait("Early Developer", rating_effect=1, value_effect=250),
    Trait("Mud Runner", rating_effect=0, value_effect=250, race_effect=3.0, surface="dirt"),
    Trait("Turf Specialist", rating_effect=0, value_effect=250, race_effect=3.0, surface="turf"),
]

TRAITS_BY_NAME: Dict[str, Trait] = {t.name: t for t in TRAIT_POOL}

def trait_by_name(name: str) -> Trait:
    """Catalog lookup; unknown names become effect-free traits."""
    return TRAITS_BY_NAME.get(name, Trait(name))

def race_delta(trait: Trait, race: Optional[Race]) -> float:
    if not trait.race_effect:
        return 0.0
    if trait.distance is not None and (race is None or race.distance != trait.distance):
        return 0.0
    if trait.surface is not None and (race is None or race.surface != trait.surface):
        return 0.0
    return float(trait.race_effect)

def total_race_delta(traits: Iterable[Trait], race: Optional[Race]) -> float:
    return sum(race_delta(t, race) for t in traits)
