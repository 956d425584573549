from __future__ import annotations
import logging

from .models import CORE_STATS, Horse, RestResult, TrainingResult, clamp_int
from .progression import check_level_up, tick_timers
from .rng import RNG

logger = logging.getLogger(__name__)

MIN_TRAINING_ENERGY = 20
INTENSITIES = (1, 2, 3)

def train(h: Horse, stat: str, intensity: int, rng: RNG) -> TrainingResult:
    """One training session on a single core stat.

    Higher intensity gains more but costs more energy and raises the chance
    that a different stat slips. All checks happen before any mutation.
    """
    if stat not in CORE_STATS:
        return TrainingResult(success=False, message=f"Unknown stat: {stat}", stat_trained=stat)
    if h.energy < MIN_TRAINING_ENERGY:
        return TrainingResult(success=False, message="Horse is too tired to train", stat_trained=stat)

    intensity = clamp_int(int(intensity), 1, 3)
    base_gain = intensity * 2
    energy_cost = intensity * 15

    rolled = int(round(base_gain * rng.uniform(0.8, 1.2)))
    before = h.stat(stat)
    h.set_stat(stat, before + rolled)
    # report what the 0..100 cap let through
    gain = h.stat(stat) - before

    loss = False
    other = ""
    loss_amt = 0
    if rng.chance(intensity * 0.1):
        other = rng.choice([k for k in CORE_STATS if k != stat])
        was = h.stat(other)
        h.set_stat(other, was - int(round(rolled * 0.3)))
        loss_amt = was - h.stat(other)
        loss = True

    h.energy = clamp_int(h.energy - energy_cost, 0, 100)

    # Diminishing returns on the accumulator.
    h.training += 1.0 / (1.0 + h.training / 10.0)
    leveled = check_level_up(h)

    logger.debug("%s trained %s x%d: +%d%s", h.name, stat, intensity, gain,
                 f", {other} -{loss_amt}" if loss else "")
    return TrainingResult(
        success=True,
        message="Training completed successfully",
        stat_trained=stat,
        primary_stat_gain=gain,
        secondary_stat_loss=loss,
        secondary_stat=other,
        secondary_stat_loss_amount=loss_amt,
        energy_cost=energy_cost,
        leveled_up=leveled,
        new_level=h.level,
    )

def rest(h: Horse, days: int) -> RestResult:
    days = int(days)
    if days < 1:
        return RestResult(success=False, message="Rest must last at least one day")

    recovered_energy = min(100 - h.energy, 20 * days)
    h.energy = clamp_int(h.energy + recovered_energy, 0, 100)

    recovered_health = 0
    if h.health < 100:
        recovered_health = min(100 - h.health, 5 * days)
        h.health += recovered_health

    cleared = tick_timers(h, days)
    return RestResult(
        success=True,
        message="Rest completed",
        energy_recovered=recovered_energy,
        health_recovered=recovered_health,
        recovered_from_injury=cleared,
    )
