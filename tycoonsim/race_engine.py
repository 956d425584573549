"""Race simulation.

A race moves scheduled -> entered -> run and never leaves `run`. The
public surface is small:
  - check_eligibility(...)
  - add_entrant(...)
  - race_performance(...)
  - run_race(...)

Only the scored player horse gets a full performance (energy, injury,
experience). Every other entrant's score is synthesised from the odds frozen
at entry time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .cpu_pool import fill_field
from .handicapping import player_odds
from .models import (
    Distance, EligibilityResult, Entrant, EntryResult, Horse, InjuryOutcome, Performance,
    Race, RaceResult, RunRaceResult, Tier, is_opposite_distance,
)
from .progression import apply_race_result
from .rating import overall_rating
from .rng import RNG
from .traits import total_race_delta

logger = logging.getLogger(__name__)

MIN_RACING_HEALTH = 50
DEFAULT_PLAYER_RATING = 50.0

BASE_TIME: Dict[Distance, float] = {"sprint": 70.0, "middle": 120.0, "long": 180.0}
BASE_ENERGY: Dict[Distance, int] = {"sprint": 30, "middle": 50, "long": 70}
BASE_EXPERIENCE: Dict[Tier, int] = {"low": 10, "medium": 20, "high": 30, "elite": 50}
DEFAULT_EXPERIENCE = 15

BASE_INJURY_CHANCE = 0.005
# severity -> inclusive recovery-day band
INJURY_DAYS = {1: (1, 3), 2: (3, 7), 3: (7, 16)}


# ---------------------------
# Eligibility and entry
# ---------------------------


def check_eligibility(race: Race, horse: Horse) -> EligibilityResult:
    """Collect every failing requirement, not just the first."""
    req = race.requirements
    reasons: List[str] = []

    if horse.age < req.min_age:
        reasons.append(f"Horse is too young (minimum age: {req.min_age})")
    if horse.age > req.max_age:
        reasons.append(f"Horse is too old (maximum age: {req.max_age})")
    if overall_rating(horse) < req.min_rating:
        reasons.append(f"Horse's rating is too low (minimum rating: {req.min_rating})")
    if req.gender is not None and horse.gender != req.gender:
        reasons.append(f"This race is for {req.gender} horses only")
    if req.breeds and horse.breed not in req.breeds:
        reasons.append(f"This race is only for {', '.join(req.breeds)} breeds")
    if horse.injured:
        reasons.append("Horse is injured and cannot race")
    if horse.health < MIN_RACING_HEALTH:
        reasons.append("Horse's health is too low to race")
    if horse.racing_cooldown > 0:
        reasons.append(f"Horse needs to rest for {horse.racing_cooldown} more days before racing again")

    return EligibilityResult(is_eligible=not reasons, reasons=reasons)


def add_entrant(race: Race, horse: Horse, rng: RNG, jockey_name: str = "Player Jockey") -> EntryResult:
    if race.has_run:
        return EntryResult(success=False, message="Race has already been run")
    if race.is_full:
        return EntryResult(success=False, message="Race is already full", max_entrants=race.max_entrants)
    if race.entrant_for(horse.id) is not None:
        return EntryResult(success=False, message="Horse is already entered in this race")

    elig = check_eligibility(race, horse)
    if not elig.is_eligible:
        return EntryResult(
            success=False,
            message="Horse is not eligible for this race",
            reasons=elig.reasons,
        )

    entrant = Entrant(
        horse_id=horse.id,
        horse_name=horse.name,
        jockey_name=jockey_name,
        is_player_controlled=True,
        odds=player_odds(horse, race, rng),
    )
    race.entrants.append(entrant)
    logger.debug("%s entered %s at %.1f", horse.name, race.name, entrant.odds)
    return EntryResult(
        success=True,
        message=f"{horse.name} has been entered in {race.name}",
        entrant=entrant,
        entrant_count=len(race.entrants),
        max_entrants=race.max_entrants,
    )


# ---------------------------
# Performance
# ---------------------------


def distance_compatibility(horse: Horse, race: Race) -> float:
    if race.distance == horse.preferred_distance:
        return 1.2
    if is_opposite_distance(race.distance, horse.preferred_distance):
        return 0.8
    return 1.0


def surface_compatibility(horse: Horse, race: Race) -> float:
    return 1.15 if race.surface == horse.preferred_surface else 0.9


def race_time(distance: Distance, score: float, rng: RNG) -> float:
    base = BASE_TIME.get(distance, 120.0)
    return base * (1.0 + (100.0 - score) / 100.0 + rng.uniform(-0.05, 0.05))


def energy_used(horse: Horse, race: Race, rng: RNG) -> int:
    base = BASE_ENERGY.get(race.distance, 50)
    stamina_factor = 1.0 - horse.stamina / 200.0
    return min(100, int(round(base * stamina_factor * rng.uniform(0.9, 1.1))))


def injury_chance(horse: Horse, race: Race) -> float:
    p = BASE_INJURY_CHANCE
    if horse.energy < 30:
        p *= 2
    if horse.health < 50:
        p *= 3
    if race.distance == "long":
        p *= 1.5
    # calmer horses injure less
    p *= 1.0 - horse.temperament / 200.0
    return p


def roll_injury(horse: Horse, race: Race, rng: RNG) -> InjuryOutcome:
    if not rng.chance(injury_chance(horse, race)):
        return InjuryOutcome()
    severity = rng.randint(1, 3)
    lo, hi = INJURY_DAYS[severity]
    return InjuryOutcome(injured=True, severity=severity, duration=rng.randint(lo, hi))


def experience_gained(horse: Horse, race: Race, rng: RNG) -> int:
    exp = float(BASE_EXPERIENCE.get(race.tier, DEFAULT_EXPERIENCE))
    if race.distance == horse.preferred_distance:
        exp *= 1.2
    if race.surface == horse.preferred_surface:
        exp *= 1.1
    return int(round(exp * rng.uniform(0.9, 1.1)))


def race_performance(horse: Horse, race: Race, rng: RNG) -> Performance:
    score = (
        overall_rating(horse) * 0.8
        * distance_compatibility(horse, race)
        * surface_compatibility(horse, race)
        * (horse.energy / 100.0)
        * (horse.health / 100.0)
        * rng.uniform(0.85, 1.15)
    )
    score += total_race_delta(horse.traits, race)
    return Performance(
        score=score,
        time=race_time(race.distance, score, rng),
        energy_used=energy_used(horse, race, rng),
        injury=roll_injury(horse, race, rng),
        experience=experience_gained(horse, race, rng),
    )


def synthetic_score(odds: float, rng: RNG) -> float:
    return (100.0 - odds * 4.0) * rng.uniform(0.85, 1.15)


# ---------------------------
# Simulation
# ---------------------------


@dataclass
class _Scored:
    entrant: Entrant
    score: float
    time: float
    energy_used: int = 0
    injury: InjuryOutcome = InjuryOutcome()
    experience: int = 0


def run_race(
    race: Race,
    player_horse: Optional[Horse],
    rng: RNG,
    *,
    fill: bool = True,
    apply_consequences: bool = True,
) -> RunRaceResult:
    """Score every entrant once and settle the race.

    Open slots are filled with generated rivals first (unless `fill` is
    False). Scores are sorted descending with a stable sort, so equal scores
    keep entry order. The player horse, if entered, receives its post-race
    consequences unless `apply_consequences` is False.
    """
    if race.has_run:
        return RunRaceResult(success=False, message="Race has already been run", results=race.results)
    if not race.entrants:
        return RunRaceResult(success=False, message="No horses entered in the race")

    player_entrant = race.entrant_for(player_horse.id) if player_horse is not None else None
    if player_entrant is None:
        player_horse = None

    if fill:
        rating = float(overall_rating(player_horse)) if player_horse is not None else DEFAULT_PLAYER_RATING
        fill_field(race, rating, rng)

    scored: List[_Scored] = []
    for e in race.entrants:
        if player_horse is not None and e.horse_id == player_horse.id:
            perf = race_performance(player_horse, race, rng)
            scored.append(_Scored(e, perf.score, perf.time, perf.energy_used, perf.injury, perf.experience))
        else:
            s = synthetic_score(e.odds, rng)
            scored.append(_Scored(e, s, race_time(race.distance, s, rng)))

    ranked = sorted(scored, key=lambda p: p.score, reverse=True)
    results = tuple(
        RaceResult(
            position=pos,
            horse_id=p.entrant.horse_id,
            horse_name=p.entrant.horse_name,
            jockey_name=p.entrant.jockey_name,
            is_player_controlled=p.entrant.is_player_controlled,
            odds=p.entrant.odds,
            score=p.score,
            time=p.time,
            energy_used=p.energy_used,
            injury=p.injury,
            experience=p.experience,
            prize=race.prize_for(pos),
        )
        for pos, p in enumerate(ranked, start=1)
    )

    race.results = results
    race.has_run = True

    player_result = None
    if player_horse is not None:
        player_result = next(r for r in results if r.horse_id == player_horse.id)
        if apply_consequences:
            apply_race_result(player_horse, player_result, race.id, race.name, race.schedule_day)
    else:
        player_result = next((r for r in results if r.is_player_controlled), None)

    logger.info("%s run: winner %s (%d runners)", race.name, results[0].horse_name, len(results))
    return RunRaceResult(
        success=True,
        message="Race completed",
        results=results,
        player_result=player_result,
        purse=race.purse,
        prizes=list(race.prizes),
    )
