from __future__ import annotations
import logging
from typing import Dict, List, Optional

from .models import (
    BreedingResult, CORE_STATS, GameDate, Horse, Trait, clamp_int,
)
from .names import make_id, random_horse_name
from .rng import RNG
from .traits import TRAIT_POOL

logger = logging.getLogger(__name__)

BREEDING_COOLDOWN_DAYS = 30
MIN_BREEDING_AGE = 3
FOAL_STAT_MIN, FOAL_STAT_MAX = 10, 100
DAM_PREFERENCE_P = 0.6
POTENTIAL_BONUS_P = 0.3
TRAIT_INHERIT_P = 0.7
NEW_TRAIT_P = 0.2

def breeding_problem(dam: Horse, sire: Horse) -> Optional[str]:
    """First failing precondition, or None when the pair may breed."""
    if dam.gender != "female" or sire.gender != "male":
        return "Breeding requires one female horse (dam) and one male horse (sire)"
    if dam.breeding_cooldown > 0:
        return f"{dam.name} needs to rest for {dam.breeding_cooldown} more days before breeding again"
    if dam.age < MIN_BREEDING_AGE or sire.age < MIN_BREEDING_AGE:
        return f"Horses must be at least {MIN_BREEDING_AGE} years old to breed"
    return None

def inherit_stats(dam: Horse, sire: Horse, rng: RNG) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for k in CORE_STATS:
        w = rng.random()  # fresh weight per stat
        weighted = dam.stat(k) * w + sire.stat(k) * (1.0 - w)
        variation = rng.uniform(-0.1, 0.1)
        out[k] = clamp_int(int(round(weighted * (1.0 + variation))), FOAL_STAT_MIN, FOAL_STAT_MAX)
    return out

def inherit_potential(dam: Horse, sire: Horse, rng: RNG) -> float:
    avg = (dam.potential + sire.potential) / 2.0
    bonus = rng.uniform(0.0, 15.0) if rng.chance(POTENTIAL_BONUS_P) else 0.0
    return min(100.0, avg + bonus)

def growth_rate_for(potential: float) -> float:
    return 0.8 + (potential / 100.0) * 0.4

def inherit_traits(dam: Horse, sire: Horse, rng: RNG) -> List[Trait]:
    out: List[Trait] = []
    for parent in (dam, sire):
        if parent.traits and rng.chance(TRAIT_INHERIT_P):
            t = rng.choice(parent.traits)
            if t.name not in [x.name for x in out]:
                out.append(t)
    if rng.chance(NEW_TRAIT_P):
        t = rng.choice(TRAIT_POOL)
        if t.name not in [x.name for x in out]:
            out.append(t)
    return out

def breed(dam: Horse, sire: Horse, today: GameDate, rng: RNG) -> BreedingResult:
    """Produce a foal from a dam and sire.

    Rejections leave both parents untouched. On success the dam goes on a
    30-day breeding cooldown.
    """
    problem = breeding_problem(dam, sire)
    if problem is not None:
        logger.debug("breeding rejected: %s", problem)
        return BreedingResult(success=False, message=problem)

    breed_name = dam.breed if rng.chance(0.5) else sire.breed
    pref_distance = dam.preferred_distance if rng.chance(DAM_PREFERENCE_P) else sire.preferred_distance
    pref_surface = dam.preferred_surface if rng.chance(DAM_PREFERENCE_P) else sire.preferred_surface
    gender = "male" if rng.chance(0.5) else "female"

    stats = inherit_stats(dam, sire, rng)
    potential = inherit_potential(dam, sire, rng)
    traits = inherit_traits(dam, sire, rng)

    foal = Horse(
        id=make_id(rng, "H"),
        name=random_horse_name(rng),
        gender=gender,
        breed=breed_name,
        color=rng.choice([dam.color, sire.color]),
        age=0,
        birth_day=today,
        sire=sire.ref(),
        dam=dam.ref(),
        preferred_distance=pref_distance,
        preferred_surface=pref_surface,
        potential=int(round(potential)),
        growth_rate=growth_rate_for(potential),
        traits=traits,
        is_player_owned=dam.is_player_owned,
        **stats,
    )

    dam.breeding_cooldown = BREEDING_COOLDOWN_DAYS

    kind = "colt" if gender == "male" else "filly"
    logger.info("%s x %s produced a %s (%s)", dam.name, sire.name, kind, foal.name)
    return BreedingResult(
        success=True,
        message=f"Breeding successful! {dam.name} and {sire.name} produced a {kind}.",
        foal=foal,
    )
