"""Odds and the pre-race entrant table.

Odds are computed once, when a horse enters, and stay frozen. For rival
entrants the frozen odds later seed their synthetic race score, so odds
here are a strength signal rather than a payout multiplier.
"""

from __future__ import annotations

from typing import List, Sequence

from .models import Entrant, Horse, Race, is_opposite_distance
from .rating import overall_rating
from .rng import RNG

PLAYER_ODDS_MIN, PLAYER_ODDS_MAX = 1.2, 20.0
AI_ODDS_MIN, AI_ODDS_MAX = 1.5, 20.0


def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x


def player_odds(horse: Horse, race: Race, rng: RNG) -> float:
    """Decimal odds for a player horse entering `race`."""
    odds = 10.0 - overall_rating(horse) / 12.5

    if horse.preferred_distance == race.distance:
        odds *= 0.8
    elif is_opposite_distance(horse.preferred_distance, race.distance):
        odds *= 1.3

    odds *= 0.85 if horse.preferred_surface == race.surface else 1.15

    if race.race_type == "jump":
        if horse.jumping >= 70:
            odds *= 0.85
        elif horse.jumping <= 40:
            odds *= 1.3

    odds *= rng.uniform(0.85, 1.15)
    return round(_clamp(odds, PLAYER_ODDS_MIN, PLAYER_ODDS_MAX), 1)


def ai_odds(quality: float, rng: RNG) -> float:
    odds = (12.0 - quality / 10.0) * rng.uniform(0.8, 1.2)
    return round(_clamp(odds, AI_ODDS_MIN, AI_ODDS_MAX), 1)


def render_entrant_table(race: Race, entrants: Sequence[Entrant] | None = None, *, title: str | None = None) -> str:
    """Monospaced pre-race preview, favourites first."""
    rows = list(entrants if entrants is not None else race.entrants)
    if not rows:
        return ""

    order = sorted(range(len(rows)), key=lambda i: rows[i].odds)
    fav_rank = {rows[i].horse_id: rank for rank, i in enumerate(order, start=1)}

    horse_w = 22
    jockey_w = 18
    lines: List[str] = []
    lines.append(f"=== {title or race.name} ({race.distance}/{race.surface}/{race.race_type}, {race.tier}) ===")
    lines.append(f"{'#':<3} {'Horse':<{horse_w}} {'Jockey':<{jockey_w}} {'Odds':>5} {'Fav':>3}")
    lines.append(f"{'-'*3} {'-'*horse_w} {'-'*jockey_w} {'-'*5} {'-'*3}")
    for i, e in enumerate(rows, start=1):
        name = e.horse_name
        if len(name) > horse_w:
            name = name[: horse_w - 1] + "…"
        mark = "*" if e.is_player_controlled else " "
        lines.append(
            f"{i:<3} {name:<{horse_w}} {e.jockey_name[:jockey_w]:<{jockey_w}} {e.odds:>5.1f} {fav_rank[e.horse_id]:>3}{mark}"
        )
    lines.append("")
    lines.append("* = your horse | Fav: 1 = shortest odds")
    return "\n".join(lines)
