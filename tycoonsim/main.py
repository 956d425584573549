from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .breeding import breed
from .care import provide_care
from .config import SimConfig, load_config
from .handicapping import render_entrant_table
from .models import CORE_STATS, Horse, Race
from .names import load_name_pool
from .race_engine import MIN_RACING_HEALTH, add_entrant, check_eligibility, run_race
from .race_reporting import render_race_card, render_stable
from .rng import RNG
from .roster import Stable, breeding_candidates, starter_horses
from .save_load import horse_from_dict, horse_to_dict, load_game, save_game
from .schedule import generate_races_for_day
from .training import MIN_TRAINING_ENERGY, train
from .world import WorldState, advance_world_day, record_race, world_from_dict, world_to_dict

logger = logging.getLogger(__name__)

SAVE_VERSION = 1
TRAIN_ENERGY_FLOOR = MIN_TRAINING_ENERGY + 20


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_config(args: argparse.Namespace) -> SimConfig:
    cfg = load_config(Path(args.config) if args.config else None)
    if getattr(args, "seed", None) is not None:
        cfg.seed = args.seed
    if getattr(args, "difficulty", None):
        cfg.difficulty = args.difficulty
    if getattr(args, "days", None):
        cfg.schedule_days = max(1, args.days)
    if args.save:
        cfg.save_path = args.save
    if args.log_level:
        cfg.log_level = args.log_level.upper()
    return cfg


def game_state(world: WorldState, stable: Stable) -> Dict[str, Any]:
    return {
        "version": SAVE_VERSION,
        "world": world_to_dict(world),
        "stable_size": stable.stable_size,
        "stable_level": stable.level,
        "horses": [horse_to_dict(h) for h in stable.horses],
    }


def restore_state(data: Dict[str, Any]) -> tuple[WorldState, Stable]:
    world = world_from_dict(data.get("world") or {})
    stable = Stable(stable_size=int(data.get("stable_size", 5)), level=int(data.get("stable_level", 1)))
    stable.horses = [horse_from_dict(h) for h in data.get("horses", [])]
    return world, stable


def weakest_stat(h: Horse) -> str:
    return min(CORE_STATS, key=h.stat)


def pick_race(races: List[Race], horse: Horse) -> Optional[Race]:
    """Richest open race the horse is eligible for."""
    open_ = [r for r in races if not r.has_run and not r.is_full and check_eligibility(r, horse).is_eligible]
    return max(open_, key=lambda r: r.purse, default=None)


def look_after(h: Horse, rng: RNG) -> str:
    """One non-racing action for the day."""
    if h.injured or h.health < MIN_RACING_HEALTH:
        return provide_care(h, "veterinarian", rng).message
    if h.energy < TRAIN_ENERGY_FLOOR:
        return provide_care(h, "feed", rng).message
    stat = weakest_stat(h)
    res = train(h, stat, 2, rng)
    return f"Trained {stat} +{res.primary_stat_gain}" if res.success else res.message


def try_breeding(stable: Stable, world: WorldState, rng: RNG) -> Optional[str]:
    if len(stable.horses) >= stable.stable_size:
        return None
    dams = stable.can_breed("female")
    if not dams:
        return None
    sires = stable.can_breed("male")
    if sires:
        sire = max(sires, key=lambda h: h.potential)
    else:
        sire = breeding_candidates(rng, world.today, "male", stable.average_rating(), count=1)[0]
    dam = max(dams, key=lambda h: h.potential)
    res = breed(dam, sire, world.today, rng)
    if not res.success or res.foal is None:
        return res.message
    added = stable.add(res.foal, rng)
    return f"{res.message} {added.message}"


def simulate_day(world: WorldState, stable: Stable, rng: RNG, out) -> None:
    races = generate_races_for_day(rng, world.today, world.unlocked_tiers)
    print(f"\n=== {world.today} | reputation {world.reputation} | tiers {', '.join(world.unlocked_tiers)} ===", file=out)

    raced: List[str] = []
    for h in stable.can_race():
        race = pick_race(races, h)
        if race is None:
            continue
        entry = add_entrant(race, h, rng)
        if not entry.success:
            logger.debug("%s: %s", h.name, entry.message)
            continue
        res = run_race(race, h, rng)
        if not res.success:
            logger.warning("%s could not be run: %s", race.name, res.message)
            continue
        print("", file=out)
        print(render_entrant_table(race), file=out)
        print(render_race_card(race), file=out)
        record_race(world, race)
        raced.append(h.id)

    for h in stable.horses:
        if h.id in raced:
            continue
        print(f"  {h.name}: {look_after(h, rng)}", file=out)

    note = try_breeding(stable, world, rng)
    if note:
        print(f"  {note}", file=out)

    advance_world_day(world, 1)
    events = stable.advance_all(1, world.today, rng)
    for name in events["birthdays"]:
        print(f"  {name} had a birthday", file=out)
    for name in events["recoveries"]:
        print(f"  {name} recovered from injury", file=out)


def cmd_season(args: argparse.Namespace, cfg: SimConfig, out=None) -> int:
    out = out if out is not None else sys.stdout
    rng = RNG(cfg.seed) if cfg.seed is not None else RNG.fresh()
    save_path = Path(cfg.save_path)

    loaded = None if args.new else load_game(save_path)
    if loaded is not None:
        world, stable = restore_state(loaded)
        logger.info("continuing save %s (%s)", save_path, world.today)
    else:
        world = WorldState()
        stable = Stable(stable_size=cfg.stable_size)
        pool = load_name_pool(Path(args.names)) if args.names else None
        for h in starter_horses(rng, world.today, cfg.starter_count, cfg.difficulty):
            if pool:
                h.name = rng.choice(pool)
            stable.add(h, rng)

    print(render_stable(stable.horses, "Starting stable"), file=out)
    upkeep = 0
    for _ in range(cfg.schedule_days):
        upkeep += stable.maintenance_cost(cfg.difficulty)
        simulate_day(world, stable, rng, out)

    print("", file=out)
    print(render_stable(stable.horses, f"Stable on {world.today}"), file=out)
    print(f"Stable upkeep over {cfg.schedule_days} day(s): ${upkeep:,}", file=out)
    save_game(save_path, game_state(world, stable))
    print(f"\nSaved to {save_path}", file=out)
    return 0


def cmd_show(args: argparse.Namespace, cfg: SimConfig, out=None) -> int:
    out = out if out is not None else sys.stdout
    save_path = Path(cfg.save_path)
    data = load_game(save_path)
    if data is None:
        print(f"No save found at {save_path}", file=out)
        return 1
    world, stable = restore_state(data)
    print(f"{world.today} | reputation {world.reputation} | tiers {', '.join(world.unlocked_tiers)}", file=out)
    print(f"Stable level {stable.level}, upkeep ${stable.maintenance_cost(cfg.difficulty):,}/day", file=out)
    print(render_stable(stable.horses), file=out)
    if world.history:
        print("\nRecent results", file=out)
        for rec in world.history[: args.history]:
            print(f"  {rec.date} {rec.race_name} ({rec.tier}): {rec.position} ${rec.prize:,}", file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="tycoonsim", description="Horse stable management simulation")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("--config", type=str, default=None, help="JSON config file.")
    ap.add_argument("--save", type=str, default=None, help="Save file path (.json).")
    ap.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING...")
    sub = ap.add_subparsers(dest="command", required=True)

    season = sub.add_parser("season", help="Simulate a run of race days.")
    season.add_argument("--seed", type=int, default=None)
    season.add_argument("--days", type=int, default=None, help="Days to simulate.")
    season.add_argument("--difficulty", choices=["easy", "normal", "hard"], default=None)
    season.add_argument("--names", type=str, default=None, help="Custom horse name list, one per line.")
    season.add_argument("--new", action="store_true", help="Ignore any existing save.")
    season.set_defaults(func=cmd_season)

    show = sub.add_parser("show", help="Print a saved stable.")
    show.add_argument("--history", type=int, default=10)
    show.set_defaults(func=cmd_show)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = _resolve_config(args)
    _configure_logging(cfg.log_level)
    return args.func(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
