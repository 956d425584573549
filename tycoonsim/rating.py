from __future__ import annotations
from typing import Dict, Iterable, List

from .models import CORE_STATS, Horse

STAT_WEIGHTS: Dict[str, float] = {
    "speed": 0.25,
    "acceleration": 0.20,
    "stamina": 0.20,
    "jumping": 0.15,
    "temperament": 0.20,
}

def weighted_stats(h: Horse) -> float:
    return sum(h.stat(k) * STAT_WEIGHTS[k] for k in CORE_STATS)

def age_modifier(age: int) -> float:
    if age < 3:
        return 0.8 + (age / 3.0) * 0.2
    if age > 15:
        return 1.0 - (age - 15) * 0.05
    if 5 <= age <= 10:
        return 1.05
    return 1.0

def age_value_multiplier(age: int) -> float:
    if age < 3:
        return 1.5
    if age > 12:
        return 0.7 - (age - 12) * 0.05
    if 4 <= age <= 8:
        return 1.2
    return 1.0

def overall_rating(h: Horse) -> int:
    """Single 0..100 competitiveness score.

    Weighted core stats scaled by training, age, health and energy, plus
    flat trait rating deltas.
    """
    base = weighted_stats(h)
    r = (
        base
        * (1.0 + h.training * 0.05)
        * age_modifier(h.age)
        * (h.health / 100.0)
        * (h.energy / 100.0)
    )
    r += sum(t.rating_effect for t in h.traits)
    return int(round(max(0.0, min(100.0, r))))

def market_value(h: Horse) -> int:
    base = overall_rating(h) * 100
    race_bonus = h.races_won * 500 + h.races_placed * 200
    trait_bonus = sum(t.value_effect for t in h.traits)
    return max(500, int(round(base * age_value_multiplier(h.age) + race_bonus + trait_bonus)))

def average_rating(horses: Iterable[Horse], default: float = 50.0) -> float:
    vals: List[int] = [overall_rating(h) for h in horses]
    if not vals:
        return default
    return sum(vals) / len(vals)
