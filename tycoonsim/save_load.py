from __future__ import annotations
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import (
    CORE_STATS, DISTANCES, Entrant, GameDate, GENDERS, Horse, InjuryOutcome, LineageRef,
    Race, RACE_TYPES, RaceHistoryEntry, RaceRequirements, RaceResult, SURFACES, TIERS, Trait, VITALS,
)
from .traits import trait_by_name

def _choice(value: Any, allowed, field_name: str) -> Any:
    if value not in allowed:
        raise ValueError(f"invalid {field_name}: {value!r} (expected one of {list(allowed)})")
    return value

def date_to_dict(d: Optional[GameDate]) -> Optional[Dict[str, int]]:
    return None if d is None else {"day": d.day, "month": d.month, "year": d.year}

def date_from_dict(d: Any) -> Optional[GameDate]:
    if d is None:
        return None
    if isinstance(d, int):
        return GameDate.from_ordinal(d)
    return GameDate(day=int(d["day"]), month=int(d["month"]), year=int(d["year"]))

def _ref_from(d: Any) -> Optional[LineageRef]:
    if not d:
        return None
    return LineageRef(id=str(d["id"]), name=str(d.get("name", "")))

def trait_to_dict(t: Trait) -> Dict[str, Any]:
    return asdict(t)

def trait_from_dict(d: Any) -> Trait:
    # Catalog traits may be stored by name only.
    if isinstance(d, str):
        return trait_by_name(d)
    return Trait(
        name=str(d["name"]),
        rating_effect=int(d.get("rating_effect", 0)),
        value_effect=int(d.get("value_effect", 0)),
        race_effect=float(d.get("race_effect", 0.0)),
        distance=d.get("distance"),
        surface=d.get("surface"),
    )

def horse_to_dict(h: Horse) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": h.id,
        "name": h.name,
        "gender": h.gender,
        "breed": h.breed,
        "color": h.color,
        "age": h.age,
        "birth_day": date_to_dict(h.birth_day),
        "sire": asdict(h.sire) if h.sire else None,
        "dam": asdict(h.dam) if h.dam else None,
    }
    for k in CORE_STATS:
        d[k] = h.stat(k)
    d.update({
        "preferred_distance": h.preferred_distance,
        "preferred_surface": h.preferred_surface,
        "energy": h.energy,
        "health": h.health,
        "happiness": h.happiness,
        "training": h.training,
        "level": h.level,
        "potential": h.potential,
        "growth_rate": h.growth_rate,
        "breeding_cooldown": h.breeding_cooldown,
        "racing_cooldown": h.racing_cooldown,
        "injured": h.injured,
        "injury_duration": h.injury_duration,
        "traits": [trait_to_dict(t) for t in h.traits],
        "races": [],
        "races_won": h.races_won,
        "races_placed": h.races_placed,
        "earnings": h.earnings,
        "is_player_owned": h.is_player_owned,
        "extras": dict(h.extras),
    })
    for e in h.races:
        row = asdict(e)
        row["date"] = date_to_dict(e.date)
        d["races"].append(row)
    return d

def horse_from_dict(d: Dict[str, Any]) -> Horse:
    h = Horse(
        id=str(d["id"]),
        name=str(d["name"]),
        gender=_choice(d["gender"], GENDERS, "gender"),
        breed=str(d.get("breed", "Thoroughbred")),
        color=str(d.get("color", "Bay")),
        age=int(d.get("age", 2)),
        birth_day=date_from_dict(d.get("birth_day")),
        sire=_ref_from(d.get("sire")),
        dam=_ref_from(d.get("dam")),
        preferred_distance=_choice(d.get("preferred_distance", "middle"), DISTANCES, "preferred_distance"),
        preferred_surface=_choice(d.get("preferred_surface", "dirt"), SURFACES, "preferred_surface"),
        training=float(d.get("training", 0.0)),
        level=int(d.get("level", 1)),
        potential=int(d.get("potential", 50)),
        growth_rate=float(d.get("growth_rate", 1.0)),
        breeding_cooldown=int(d.get("breeding_cooldown", 0)),
        racing_cooldown=int(d.get("racing_cooldown", 0)),
        injured=bool(d.get("injured", False)),
        injury_duration=int(d.get("injury_duration", 0)),
        traits=[trait_from_dict(t) for t in d.get("traits", [])],
        races_won=int(d.get("races_won", 0)),
        races_placed=int(d.get("races_placed", 0)),
        earnings=int(d.get("earnings", 0)),
        is_player_owned=bool(d.get("is_player_owned", False)),
        extras=(d.get("extras") if isinstance(d.get("extras"), dict) else {}),
        **{k: int(d[k]) for k in CORE_STATS + VITALS if k in d},
    )
    for e in d.get("races", []):
        row = dict(e)
        row["date"] = date_from_dict(row.get("date"))
        h.races.append(RaceHistoryEntry(**row))
    return h

def race_to_dict(r: Race) -> Dict[str, Any]:
    req = r.requirements
    return {
        "id": r.id,
        "name": r.name,
        "distance": r.distance,
        "surface": r.surface,
        "race_type": r.race_type,
        "tier": r.tier,
        "difficulty": r.difficulty,
        "purse": r.purse,
        "prizes": list(r.prizes),
        "entry_fee": r.entry_fee,
        "requirements": {
            "min_age": req.min_age,
            "max_age": req.max_age,
            "min_rating": req.min_rating,
            "gender": req.gender,
            "breeds": list(req.breeds),
        },
        "max_entrants": r.max_entrants,
        "is_special": r.is_special,
        "schedule_day": date_to_dict(r.schedule_day),
        "has_run": r.has_run,
        "entrants": [asdict(e) for e in r.entrants],
        "results": [asdict(x) for x in r.results],
    }

def race_from_dict(d: Dict[str, Any]) -> Race:
    rq = d.get("requirements") or {}
    gender = rq.get("gender")
    if gender in ("any", ""):
        gender = None
    if gender is not None:
        _choice(gender, GENDERS, "requirements.gender")
    results: List[RaceResult] = []
    for x in d.get("results", []):
        row = dict(x)
        row["injury"] = InjuryOutcome(**(row.get("injury") or {}))
        results.append(RaceResult(**row))
    return Race(
        id=str(d["id"]),
        name=str(d["name"]),
        distance=_choice(d.get("distance", "middle"), DISTANCES, "distance"),
        surface=_choice(d.get("surface", "dirt"), SURFACES, "surface"),
        race_type=_choice(d.get("race_type", "flat"), RACE_TYPES, "race_type"),
        tier=_choice(d.get("tier", "low"), TIERS, "tier"),
        difficulty=int(d.get("difficulty", 1)),
        purse=int(d.get("purse", 1000)),
        prizes=[int(p) for p in d.get("prizes", [])],
        entry_fee=int(d.get("entry_fee", 0)),
        requirements=RaceRequirements(
            min_age=int(rq.get("min_age", 3)),
            max_age=int(rq.get("max_age", 20)),
            min_rating=int(rq.get("min_rating", 0)),
            gender=gender,
            breeds=tuple(rq.get("breeds", ())),
        ),
        max_entrants=int(d.get("max_entrants", 8)),
        is_special=bool(d.get("is_special", False)),
        schedule_day=date_from_dict(d.get("schedule_day")),
        has_run=bool(d.get("has_run", False)),
        entrants=[Entrant(**e) for e in d.get("entrants", [])],
        results=tuple(results),
    )

def save_game(path: Path, state: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(state, indent=2), encoding="utf-8")

def load_game(path: Path) -> Optional[Dict[str, Any]]:
    if not path.exists():
        return None
    return json.loads(path.read_text(encoding="utf-8", errors="ignore"))
