from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .models import GameDate, Race, TIERS, Tier
from .schedule import player_placings, reputation_points, unlocked_tiers_for

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


@dataclass(frozen=True)
class HistoryRecord:
    race_id: str
    race_name: str
    tier: Tier
    horse_id: str
    position: int
    prize: int
    date: str = ""


@dataclass
class WorldState:
    """Cross-horse game state: calendar, reputation and tier ladder.

    history is most-recent-first and capped at MAX_HISTORY entries.
    """

    today: GameDate = field(default_factory=GameDate)
    reputation: int = 0
    unlocked_tiers: List[Tier] = field(default_factory=lambda: ["low"])
    history: List[HistoryRecord] = field(default_factory=list)


def world_to_dict(state: WorldState) -> Dict[str, Any]:
    return {
        "today": {"day": state.today.day, "month": state.today.month, "year": state.today.year},
        "reputation": int(state.reputation),
        "unlocked_tiers": list(state.unlocked_tiers),
        "history": [
            {
                "race_id": h.race_id,
                "race_name": h.race_name,
                "tier": h.tier,
                "horse_id": h.horse_id,
                "position": h.position,
                "prize": h.prize,
                "date": h.date,
            }
            for h in state.history
        ],
    }


def world_from_dict(data: Dict[str, Any]) -> WorldState:
    t = data.get("today") or {}
    today = GameDate(day=int(t.get("day", 1)), month=int(t.get("month", 1)), year=int(t.get("year", 2023)))
    tiers = [x for x in data.get("unlocked_tiers", ["low"]) if x in TIERS] or ["low"]
    history = [HistoryRecord(**h) for h in data.get("history", [])]
    return WorldState(
        today=today,
        reputation=max(0, int(data.get("reputation", 0))),
        unlocked_tiers=tiers,  # type: ignore[arg-type]
        history=history[:MAX_HISTORY],
    )


def load_world_state(path: Path) -> WorldState:
    if not path.exists():
        return WorldState()
    try:
        data = json.loads(path.read_text(encoding="utf-8", errors="ignore"))
        return world_from_dict(data)
    except (ValueError, TypeError, KeyError) as exc:
        # If corrupted, fall back safely.
        logger.warning("world state at %s is unreadable (%s); starting fresh", path, exc)
        return WorldState()


def save_world_state(path: Path, state: WorldState) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(world_to_dict(state), indent=2), encoding="utf-8")


def advance_world_day(state: WorldState, days: int = 1) -> WorldState:
    d = int(days)
    if d <= 0:
        return state
    state.today = state.today.plus_days(d)
    return state


def record_race(state: WorldState, race: Race) -> int:
    """Log the player's placings, then recompute reputation and tier unlocks."""
    date = str(race.schedule_day) if race.schedule_day else str(state.today)
    for r in player_placings(race):
        state.history.insert(0, HistoryRecord(
            race_id=race.id,
            race_name=race.name,
            tier=race.tier,
            horse_id=r.horse_id,
            position=r.position,
            prize=r.prize,
            date=date,
        ))
    del state.history[MAX_HISTORY:]

    state.reputation = reputation_points([(h.tier, h.position) for h in state.history])
    before = list(state.unlocked_tiers)
    state.unlocked_tiers = unlocked_tiers_for(state.reputation, before)
    for t in state.unlocked_tiers:
        if t not in before:
            logger.info("reputation %d unlocked the %s tier", state.reputation, t)
    return state.reputation
