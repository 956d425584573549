from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import GameDate, Race, RaceRequirements, RaceResult, RaceType, TIERS, Tier
from .names import make_id
from .rng import RNG

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class RaceTemplate:
    name: str
    distance: str
    surface: str
    race_type: RaceType
    tier: Tier
    difficulty: int
    purse: int
    requirements: RaceRequirements = field(default_factory=RaceRequirements)
    is_special: bool = False

def _req(min_age: int, min_rating: int, max_age: int = 20) -> RaceRequirements:
    return RaceRequirements(min_age=min_age, max_age=max_age, min_rating=min_rating)

TEMPLATES: Dict[Tier, Dict[RaceType, List[RaceTemplate]]] = {
    "low": {
        "flat": [
            RaceTemplate("Beginner's Sprint", "sprint", "dirt", "flat", "low", 1, 1000, _req(3, 0)),
            RaceTemplate("Novice Cup", "middle", "dirt", "flat", "low", 1, 1200, _req(3, 0)),
            RaceTemplate("Local Turf Challenge", "middle", "turf", "flat", "low", 2, 1500, _req(3, 0)),
        ],
        "jump": [
            RaceTemplate("Beginner's Hurdle", "middle", "turf", "jump", "low", 2, 1800, _req(4, 0)),
        ],
    },
    "medium": {
        "flat": [
            RaceTemplate("Regional Sprint Cup", "sprint", "dirt", "flat", "medium", 2, 5000, _req(3, 40)),
            RaceTemplate("State Championship", "middle", "dirt", "flat", "medium", 3, 7500, _req(3, 45)),
            RaceTemplate("Autumn Classic", "long", "turf", "flat", "medium", 3, 10000, _req(3, 50)),
        ],
        "jump": [
            RaceTemplate("Regional Steeplechase", "middle", "turf", "jump", "medium", 3, 8000, _req(4, 45)),
            RaceTemplate("Spring Hurdles", "long", "turf", "jump", "medium", 3, 9000, _req(4, 50)),
        ],
    },
    "high": {
        "flat": [
            RaceTemplate("National Sprint", "sprint", "dirt", "flat", "high", 4, 25000, _req(3, 65)),
            RaceTemplate("Summer Cup", "middle", "dirt", "flat", "high", 4, 35000, _req(3, 70)),
            RaceTemplate("Coastal Stakes", "long", "turf", "flat", "high", 4, 50000, _req(3, 75)),
        ],
        "jump": [
            RaceTemplate("National Steeplechase", "long", "turf", "jump", "high", 4, 40000, _req(4, 70)),
        ],
    },
    "elite": {
        "flat": [
            RaceTemplate("Champion Sprint", "sprint", "dirt", "flat", "elite", 5, 100000, _req(3, 85)),
            RaceTemplate("Grand Derby", "middle", "dirt", "flat", "elite", 5, 150000, _req(3, 90)),
            RaceTemplate("International Cup", "long", "turf", "flat", "elite", 5, 250000, _req(3, 95)),
        ],
        "jump": [
            RaceTemplate("Grand National", "long", "turf", "jump", "elite", 5, 200000, _req(5, 90)),
        ],
    },
}

SPECIAL_TEMPLATES: Dict[Tier, RaceTemplate] = {
    "low": RaceTemplate("Newcomer's Special", "middle", "dirt", "flat", "low", 2, 2500, _req(3, 0, max_age=5), True),
    "medium": RaceTemplate("Breeder's Cup", "middle", "dirt", "flat", "medium", 3, 15000, _req(3, 50), True),
    "high": RaceTemplate("Governor's Stakes", "long", "turf", "flat", "high", 4, 75000, _req(3, 75), True),
    "elite": RaceTemplate("Triple Crown Event", "middle", "dirt", "flat", "elite", 5, 500000, _req(3, 85, max_age=3), True),
}

TIER_WEIGHTS: Dict[Tier, float] = {"low": 0.5, "medium": 0.3, "high": 0.15, "elite": 0.05}
JUMP_P = 0.2
SPECIAL_P = 0.3
WEEKDAY_RACES, WEEKEND_RACES = 3, 5

# reputation -> tier unlocked
TIER_UNLOCKS: Tuple[Tuple[int, Tier], ...] = ((30, "medium"), (100, "high"), (250, "elite"))
POSITION_POINTS = {1: 10, 2: 5, 3: 3, 4: 1}
TIER_PODIUM_BONUS: Dict[Tier, int] = {"low": 0, "medium": 2, "high": 5, "elite": 10}
REPUTATION_WINDOW = 20

def race_from_template(t: RaceTemplate, rng: RNG, day: Optional[GameDate] = None) -> Race:
    return Race(
        id=make_id(rng, "R"),
        name=t.name,
        distance=t.distance,  # type: ignore[arg-type]
        surface=t.surface,    # type: ignore[arg-type]
        race_type=t.race_type,
        tier=t.tier,
        difficulty=t.difficulty,
        purse=t.purse,
        requirements=t.requirements,
        is_special=t.is_special,
        schedule_day=day,
    )

def select_tier(rng: RNG, unlocked: Sequence[str]) -> Tier:
    """Weighted pick over unlocked tiers, biased towards the lower ones."""
    available = [t for t in TIERS if t in unlocked]
    if not available:
        return "low"
    total = sum(TIER_WEIGHTS[t] for t in available)
    r = rng.random()
    acc = 0.0
    for t in available:
        acc += TIER_WEIGHTS[t] / total
        if r <= acc:
            return t
    return available[-1]

def special_race(rng: RNG, day: GameDate, unlocked: Sequence[str]) -> Race:
    higher = [t for t in TIERS if t in unlocked and t != "low"]
    tier: Tier = rng.choice(higher) if higher else "low"
    t = SPECIAL_TEMPLATES[tier]
    if tier == "medium":
        t = replace(t, surface=rng.choice(["dirt", "turf"]))
    return race_from_template(t, rng, day)

def generate_races_for_day(rng: RNG, day: GameDate, unlocked: Sequence[str]) -> List[Race]:
    races: List[Race] = []
    count = WEEKEND_RACES if day.is_weekend else WEEKDAY_RACES
    for _ in range(count):
        tier = select_tier(rng, unlocked)
        kind: RaceType = "jump" if rng.chance(JUMP_P) else "flat"
        templates = TEMPLATES[tier][kind]
        if not templates:
            continue
        races.append(race_from_template(rng.choice(templates), rng, day))
    if day.is_weekend and rng.chance(SPECIAL_P):
        races.append(special_race(rng, day, unlocked))
    return races

def generate_schedule(rng: RNG, start: GameDate, days: int, unlocked: Sequence[str]) -> List[Race]:
    out: List[Race] = []
    for i in range(max(0, int(days))):
        out.extend(generate_races_for_day(rng, start.plus_days(i), unlocked))
    logger.debug("scheduled %d races over %d day(s) from %s", len(out), days, start)
    return out

def races_on(races: Iterable[Race], day: GameDate) -> List[Race]:
    return [r for r in races if r.schedule_day == day]

def open_races(races: Iterable[Race]) -> List[Race]:
    return [r for r in races if not r.has_run]

# ---------------------------
# Reputation
# ---------------------------

def reputation_points(history: Sequence[Tuple[Tier, int]]) -> int:
    """Points from (tier, position) pairs, most recent first.

    Only the last REPUTATION_WINDOW player placings count. A race where
    several player horses ran contributes one placing per horse, so the
    window covers the last 20 races only while each race has one player entry.
    """
    pts = 0
    for tier, pos in list(history)[:REPUTATION_WINDOW]:
        pts += POSITION_POINTS.get(pos, 0)
        if pos <= 3:
            pts += TIER_PODIUM_BONUS.get(tier, 0)
    return pts

def unlocked_tiers_for(reputation: int, current: Sequence[str] = ("low",)) -> List[Tier]:
    out: List[Tier] = [t for t in TIERS if t in current]
    if "low" not in out:
        out.insert(0, "low")
    for threshold, tier in TIER_UNLOCKS:
        if reputation >= threshold and tier not in out:
            out.append(tier)
    return out

def player_placings(race: Race) -> List[RaceResult]:
    return [r for r in race.results if r.is_player_controlled]
