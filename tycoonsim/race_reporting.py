from __future__ import annotations
from typing import List, Optional

from .models import Horse, Race, RaceResult
from .rating import market_value, overall_rating

def format_time(seconds: float) -> str:
    m = int(seconds // 60)
    s = seconds - 60 * m
    return f"{m}:{s:05.2f}"

def race_header(race: Race) -> str:
    special = " [SPECIAL]" if race.is_special else ""
    day = f"{race.schedule_day} " if race.schedule_day else ""
    return (
        f"{day}{race.name}{special} | {race.tier.upper()} {race.race_type} "
        f"{race.distance} on {race.surface} | purse ${race.purse:,}"
    )

def render_race_card(race: Race, results: Optional[List[RaceResult]] = None) -> str:
    rows = list(results if results is not None else race.results)
    lines: List[str] = [race_header(race)]
    if not rows:
        lines.append("(not yet run)")
        return "\n".join(lines)
    winner_time = rows[0].time
    lines.append("")
    lines.append("Pos  Horse                         Jockey                Odds     Time    Gap       Prize")
    lines.append("---  ----------------------------  --------------------  -----  -------  -----  ----------")
    for rr in rows:
        mark = "*" if rr.is_player_controlled else " "
        gap = max(0.0, rr.time - winner_time)
        lines.append(
            f"{rr.position:>3}{mark} {rr.horse_name[:28]:<28}  {rr.jockey_name[:20]:<20}  "
            f"{rr.odds:>5.1f}  {format_time(rr.time):>7}  {gap:>5.2f}  {'$' + format(rr.prize, ','):>10}"
        )
    injured = [rr.horse_name for rr in rows if rr.injury.injured]
    if injured:
        lines.append("")
        lines.append("Injured: " + ", ".join(injured))
    return "\n".join(lines)

def render_horse_line(h: Horse) -> str:
    status = "injured" if h.injured else ("resting" if h.racing_cooldown else "ready")
    return (
        f"{h.name[:24]:<24} {h.gender[0].upper()} {h.age:>2}y  {h.breed[:14]:<14} "
        f"OVR {overall_rating(h):>3}  Lv {h.level:>2}  E {h.energy:>3}  H {h.health:>3}  "
        f"W/P {h.races_won}/{h.races_placed}  ${h.earnings:,}  value ${market_value(h):,}  {status}"
    )

def render_stable(horses: List[Horse], title: str = "Stable") -> str:
    lines = [title, "-" * len(title)]
    if not horses:
        lines.append("(empty)")
    for h in horses:
        lines.append(render_horse_line(h))
    return "\n".join(lines)
