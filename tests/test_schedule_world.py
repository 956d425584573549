import json

from tycoonsim.models import GameDate, InjuryOutcome, RaceResult
from tycoonsim.schedule import (
    TEMPLATES, generate_races_for_day, generate_schedule, open_races, races_on, reputation_points,
    select_tier, special_race, unlocked_tiers_for,
)
from tycoonsim.world import (
    MAX_HISTORY, WorldState, advance_world_day, load_world_state, record_race, save_world_state,
)
from tycoonsim.rng import RNG

from conftest import ScriptedRNG


# ---------------------------
# Calendar
# ---------------------------

def test_month_and_year_rollover():
    assert GameDate(30, 1, 2023).next_day() == GameDate(1, 2, 2023)
    assert GameDate(30, 12, 2023).next_day() == GameDate(1, 1, 2024)
    assert GameDate(1, 1, 2024).plus_days(-1) == GameDate(30, 12, 2023)


def test_day_of_week_and_weekend():
    assert GameDate(1, 3).day_of_week == 1
    assert GameDate(8, 3).day_of_week == 1
    assert GameDate(6, 3).is_weekend and GameDate(7, 3).is_weekend
    assert not GameDate(5, 3).is_weekend


def test_days_since_and_str():
    assert GameDate(1, 2, 2023).days_since(GameDate(1, 1, 2023)) == 30
    assert str(GameDate(5, 7, 2024)) == "2024-07-05"


# ---------------------------
# Schedule
# ---------------------------

def test_weekday_card_has_three_races():
    races = generate_races_for_day(ScriptedRNG(), GameDate(1, 1), ["low"])
    assert len(races) == 3
    assert all(r.tier == "low" and r.race_type == "flat" for r in races)
    assert all(r.schedule_day == GameDate(1, 1) for r in races)


def test_weekend_card_has_five_races_without_special():
    races = generate_races_for_day(ScriptedRNG(), GameDate(6, 1), ["low"])
    assert len(races) == 5
    assert not any(r.is_special for r in races)


def test_weekend_special():
    # with every draw at 0.0 every chance() hits, including the special
    races = generate_races_for_day(ScriptedRNG(default=0.0), GameDate(6, 1), ["low", "medium"])
    assert len(races) == 6
    assert races[-1].is_special


def test_select_tier_only_returns_unlocked():
    r = RNG(11)
    for _ in range(200):
        assert select_tier(r, ["low", "medium"]) in ("low", "medium")
    assert select_tier(ScriptedRNG(default=0.99), ["low", "medium", "high", "elite"]) == "elite"


def test_special_race_uses_higher_tier():
    race = special_race(ScriptedRNG(), GameDate(6, 1), ["low", "high"])
    assert race.is_special and race.tier == "high"
    assert special_race(ScriptedRNG(), GameDate(6, 1), ["low"]).tier == "low"


def test_generated_races_get_default_prizes():
    race = generate_races_for_day(ScriptedRNG(), GameDate(1, 1), ["low"])[0]
    assert race.prizes[0] == int(race.purse * 0.6)


def test_schedule_helpers():
    start = GameDate(1, 1)
    races = generate_schedule(RNG(2), start, 7, ["low"])
    assert len(races) >= 3 * 5 + 5 * 2
    assert len(races_on(races, start)) == 3
    races[0].has_run = True
    assert len(open_races(races)) == len(races) - 1


def test_template_catalog_covers_every_tier():
    for tier in ("low", "medium", "high", "elite"):
        assert TEMPLATES[tier]["flat"] and TEMPLATES[tier]["jump"]


# ---------------------------
# Reputation
# ---------------------------

def test_reputation_points():
    assert reputation_points([("low", 1)]) == 10
    assert reputation_points([("elite", 1)]) == 20
    assert reputation_points([("medium", 4)]) == 1
    assert reputation_points([("high", 3), ("low", 9)]) == 8
    assert reputation_points([("low", 1)] * 25) == 200


def test_tier_unlocks():
    assert unlocked_tiers_for(0) == ["low"]
    assert unlocked_tiers_for(30) == ["low", "medium"]
    assert unlocked_tiers_for(250) == ["low", "medium", "high", "elite"]
    assert unlocked_tiers_for(0, ["low", "medium"]) == ["low", "medium"]


def _won(make_race, tier="medium", n=0):
    race = make_race(id=f"R-{n}", tier=tier)
    race.results = (
        RaceResult(1, "H-1", "Mine", "J", True, 2.0, 90.0, 120.0, 30, InjuryOutcome(), 20, 600),
        RaceResult(2, "AI-1", "Theirs", "K", False, 4.0, 80.0, 121.0, 0, InjuryOutcome(), 0, 200),
    )
    race.has_run = True
    return race


def test_record_race_updates_reputation_and_unlocks(make_race):
    world = WorldState()
    for n in range(3):
        record_race(world, _won(make_race, n=n))
    assert world.reputation == 36
    assert "medium" in world.unlocked_tiers
    assert len(world.history) == 3
    assert world.history[0].race_id == "R-2"


def test_reputation_window_counts_placings(make_race):
    world = WorldState()
    for n in range(15):
        race = make_race(id=f"R-{n}", tier="low")
        race.results = (
            RaceResult(1, "H-1", "Mine", "J", True, 2.0, 90.0, 120.0, 30, InjuryOutcome(), 20, 600),
            RaceResult(2, "AI-1", "Theirs", "K", False, 4.0, 80.0, 121.0, 0, InjuryOutcome(), 0, 200),
            RaceResult(3, "AI-2", "Others", "L", False, 5.0, 70.0, 122.0, 0, InjuryOutcome(), 0, 100),
            RaceResult(4, "H-2", "Also Mine", "M", True, 6.0, 60.0, 123.0, 30, InjuryOutcome(), 10, 50),
        )
        race.has_run = True
        record_race(world, race)
    assert len(world.history) == 30
    # twenty placings from the last ten races at 10 + 1 points each
    assert world.reputation == 110


def test_history_is_capped(make_race):
    world = WorldState()
    for n in range(MAX_HISTORY + 5):
        record_race(world, _won(make_race, tier="low", n=n))
    assert len(world.history) == MAX_HISTORY


# ---------------------------
# World persistence
# ---------------------------

def test_world_round_trip(tmp_path, make_race):
    world = WorldState()
    record_race(world, _won(make_race))
    advance_world_day(world, 3)
    path = tmp_path / "world.json"
    save_world_state(path, world)
    loaded = load_world_state(path)
    assert loaded == world


def test_missing_or_corrupt_world_starts_fresh(tmp_path):
    assert load_world_state(tmp_path / "nope.json") == WorldState()
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_world_state(bad) == WorldState()
    bad.write_text(json.dumps({"history": [{"oops": 1}]}), encoding="utf-8")
    assert load_world_state(bad) == WorldState()


def test_advance_world_day_ignores_non_positive():
    world = WorldState()
    advance_world_day(world, 0)
    assert world.today == GameDate()
    advance_world_day(world, 2)
    assert world.today == GameDate(3, 1)
