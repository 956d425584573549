from __future__ import annotations
import logging
from typing import Dict, Optional

from .models import (
    AdvanceResult, CORE_STATS, DAYS_PER_AGE_YEAR, GameDate, Horse, RaceHistoryEntry,
    RaceRecordResult, RaceResult, clamp_int,
)
from .rng import RNG

logger = logging.getLogger(__name__)

OLD_AGE = 15
GROWTH_AGE_LIMIT = 6
DECLINE_STATS = ("speed", "acceleration", "stamina")

def age_on(h: Horse, today: GameDate) -> int:
    return max(0, today.days_since(h.birth_day) // DAYS_PER_AGE_YEAR)

def check_level_up(h: Horse) -> bool:
    """At most one level per call."""
    if h.training >= h.level * 5:
        h.level += 1
        return True
    return False

def tick_timers(h: Horse, days: int) -> bool:
    """Decrement cooldowns and injury. Returns True when the injury just cleared."""
    h.breeding_cooldown = max(0, h.breeding_cooldown - days)
    h.racing_cooldown = max(0, h.racing_cooldown - days)
    if h.injured:
        h.injury_duration -= days
        if h.injury_duration <= 0:
            h.injured = False
            h.injury_duration = 0
            return True
    return False

def _apply_aging_drift(h: Horse, rng: RNG) -> Dict[str, int]:
    changes: Dict[str, int] = {}
    if h.age > OLD_AGE:
        for k in DECLINE_STATS:
            drop = rng.randint(0, 2)
            cur = h.stat(k)
            h.set_stat(k, cur - drop)
            if h.stat(k) != cur:
                changes[k] = h.stat(k) - cur
    elif h.age < GROWTH_AGE_LIMIT:
        if rng.chance((GROWTH_AGE_LIMIT - h.age) * 0.1):
            k = rng.choice(CORE_STATS)
            cur = h.stat(k)
            h.set_stat(k, cur + rng.randint(1, 3))
            if h.stat(k) != cur:
                changes[k] = h.stat(k) - cur
    return changes

def advance(h: Horse, days: int, today: GameDate, rng: RNG) -> AdvanceResult:
    """Daily tick: age, passive recovery/decay, cooldowns and injury."""
    days = int(days)
    if days < 0:
        return AdvanceResult(success=False, message="Cannot advance a negative number of days", age=h.age)

    previous_age = h.age
    # Never decreases, even for horses whose birth day predates tracking.
    h.age = max(previous_age, age_on(h, today))
    has_aged = h.age > previous_age

    h.energy = clamp_int(h.energy + days * 5, 0, 100)
    h.happiness = clamp_int(h.happiness - days, 0, 100)
    recovered = tick_timers(h, days)

    changes: Dict[str, int] = {}
    if has_aged:
        changes = _apply_aging_drift(h, rng)
        logger.debug("%s turned %d (%s)", h.name, h.age, changes or "no drift")
    if recovered:
        logger.info("%s recovered from injury", h.name)

    return AdvanceResult(
        success=True,
        message=f"{h.name} advanced {days} day(s)",
        has_aged=has_aged,
        recovered_from_injury=recovered,
        age=h.age,
        stat_changes=changes,
    )

def apply_race_result(
    h: Horse,
    result: RaceResult,
    race_id: str,
    race_name: str,
    date: Optional[GameDate] = None,
) -> RaceRecordResult:
    """Post-race consequences for a scored horse."""
    h.races.append(RaceHistoryEntry(
        race_id=race_id,
        race_name=race_name,
        position=result.position,
        prize=result.prize,
        score=result.score,
        time=result.time,
        experience=result.experience,
        energy_used=result.energy_used,
        injured=result.injury.injured,
        date=date,
    ))
    if result.position == 1:
        h.races_won += 1
    if result.position <= 3:
        h.races_placed += 1
    h.earnings += int(result.prize)

    h.training += result.experience / 10.0
    h.energy = clamp_int(h.energy - result.energy_used, 0, 100)
    h.racing_cooldown = 1

    if result.injury.injured:
        h.injured = True
        h.injury_duration = int(result.injury.duration)
        h.health = clamp_int(h.health - result.injury.severity * 10, 0, 100)
        logger.info("%s was injured (severity %d, %d days)", h.name, result.injury.severity, result.injury.duration)

    leveled = check_level_up(h)
    return RaceRecordResult(
        success=True,
        message=f"{h.name} finished {ordinal_suffix(result.position)} in {race_name}",
        races_won=h.races_won,
        races_placed=h.races_placed,
        total_earnings=h.earnings,
        injured=h.injured,
        leveled_up=leveled,
    )

def ordinal_suffix(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suf = "th"
    else:
        suf = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suf}"
