from __future__ import annotations
import logging
from typing import Dict, List

from .handicapping import ai_odds
from .models import AIHorse, DISTANCES, Entrant, EntryResult, Race, SURFACES, Tier
from .names import make_id, random_ai_horse_name, random_jockey_name
from .rng import RNG

logger = logging.getLogger(__name__)

# Higher tiers pack the field tighter around the player's level.
TIER_SPREAD: Dict[Tier, float] = {
    "low": 20.0,
    "medium": 15.0,
    "high": 10.0,
    "elite": 5.0,
}
DEFAULT_SPREAD = 15.0
QUALITY_MIN, QUALITY_MAX = 20.0, 95.0

def ai_quality(race: Race, player_rating: float, rng: RNG) -> float:
    spread = TIER_SPREAD.get(race.tier, DEFAULT_SPREAD)
    base = player_rating + (race.difficulty - 3) * 5
    q = base + rng.uniform(-spread, spread)
    return max(QUALITY_MIN, min(QUALITY_MAX, q))

def generate_ai_field(race: Race, player_rating: float, rng: RNG) -> List[AIHorse]:
    """Rival horses for every open slot; does not touch the race."""
    out: List[AIHorse] = []
    slots = race.max_entrants - len(race.entrants)
    for _ in range(max(0, slots)):
        q = ai_quality(race, player_rating, rng)
        out.append(AIHorse(
            id=make_id(rng, "AI"),
            name=random_ai_horse_name(rng),
            jockey_name=random_jockey_name(rng),
            quality=q,
            odds=ai_odds(q, rng),
            preferred_distance=rng.choice(DISTANCES),
            preferred_surface=rng.choice(SURFACES),
        ))
    return out

def add_ai_entrant(race: Race, ai: AIHorse) -> EntryResult:
    if race.has_run:
        return EntryResult(success=False, message="Race has already been run")
    if race.is_full:
        return EntryResult(success=False, message="Race is already full", max_entrants=race.max_entrants)
    entrant = Entrant(
        horse_id=ai.id,
        horse_name=ai.name,
        jockey_name=ai.jockey_name,
        is_player_controlled=False,
        odds=ai.odds,
    )
    race.entrants.append(entrant)
    return EntryResult(
        success=True,
        message=f"{ai.name} has been entered in the race",
        entrant=entrant,
        entrant_count=len(race.entrants),
        max_entrants=race.max_entrants,
    )

def fill_field(race: Race, player_rating: float, rng: RNG) -> List[AIHorse]:
    field = generate_ai_field(race, player_rating, rng)
    for ai in field:
        add_ai_entrant(race, ai)
    if field:
        logger.debug("%s: added %d rival(s) around rating %.0f", race.name, len(field), player_rating)
    return field
