from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List

from .models import CareResult, Horse
from .rng import RNG

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class CareRecipe:
    name: str
    label: str
    # stat -> maximum gain
    gains: Dict[str, int]

CARE_RECIPES: Dict[str, CareRecipe] = {
    "groom": CareRecipe("groom", "Groomed horse", {"happiness": 15}),
    "veterinarian": CareRecipe("veterinarian", "Veterinarian care provided", {"health": 20}),
    "feed": CareRecipe("feed", "Premium feed provided", {"energy": 25, "health": 5}),
    "massage": CareRecipe("massage", "Massage provided", {"energy": 15}),
}

def _gain(h: Horse, key: str, cap: int) -> int:
    cur = int(getattr(h, key))
    g = max(0, min(100 - cur, cap))
    setattr(h, key, cur + g)
    return g

def provide_care(h: Horse, care_type: str, rng: RNG) -> CareResult:
    recipe = CARE_RECIPES.get(care_type)
    if recipe is None:
        return CareResult(success=False, message="No care provided", care_type=care_type)

    deltas: Dict[str, int] = {k: _gain(h, k, cap) for k, cap in recipe.gains.items()}
    parts: List[str] = [f"{k.capitalize()} +{v}" for k, v in deltas.items()]
    bonus = False

    if care_type == "veterinarian" and h.injured and rng.chance(0.5):
        cut = min(h.injury_duration, 1)
        if cut > 0:
            h.injury_duration -= cut
            deltas["injury_duration"] = -cut
            bonus = True
            parts.append("Reduced injury recovery by 1 day")
    elif care_type == "massage":
        cut = min(h.racing_cooldown, 1)
        if cut > 0:
            h.racing_cooldown -= cut
            deltas["racing_cooldown"] = -cut
            bonus = True
            parts.append(f"Racing cooldown -{cut}")

    message = f"{recipe.label}. " + ", ".join(parts)
    logger.debug("%s: %s", h.name, message)
    return CareResult(success=True, message=message, care_type=care_type, bonus_applied=bonus, deltas=deltas)
