import pytest

from tycoonsim.breeding import breed
from tycoonsim.models import RaceRequirements
from tycoonsim.race_engine import add_entrant, run_race
from tycoonsim.save_load import (
    horse_from_dict, horse_to_dict, load_game, race_from_dict, race_to_dict, save_game, trait_from_dict,
)
from tycoonsim.traits import trait_by_name


def test_horse_round_trip_with_history_and_lineage(make_horse, make_race, today, rng):
    dam = make_horse(id="D", gender="female", traits=[trait_by_name("Mud Runner")])
    sire = make_horse(id="S", gender="male", traits=[trait_by_name("Sprinter")])
    foal = breed(dam, sire, today, rng).foal
    foal.extras["note"] = "homebred"

    race = make_race(schedule_day=today)
    add_entrant(race, dam, rng)
    run_race(race, dam, rng)
    assert dam.races

    for h in (dam, foal):
        assert horse_from_dict(horse_to_dict(h)) == h


def test_race_round_trip_after_run(make_horse, make_race, today, rng):
    race = make_race(schedule_day=today, requirements=RaceRequirements(min_age=3, breeds=("Arabian", "Thoroughbred")))
    h = make_horse()
    add_entrant(race, h, rng)
    run_race(race, h, rng)
    again = race_from_dict(race_to_dict(race))
    assert again == race
    assert again.status == "run"


def test_unknown_enum_raises(make_horse):
    d = horse_to_dict(make_horse())
    d["gender"] = "unicorn"
    with pytest.raises(ValueError):
        horse_from_dict(d)


def test_missing_required_field_raises(make_horse):
    d = horse_to_dict(make_horse())
    del d["id"]
    with pytest.raises(KeyError):
        horse_from_dict(d)


def test_loader_clamps_stats(make_horse):
    d = horse_to_dict(make_horse())
    d["speed"] = 250
    d["energy"] = -5
    h = horse_from_dict(d)
    assert h.speed == 100 and h.energy == 0


def test_trait_by_name_only():
    assert trait_from_dict("Calm") == trait_by_name("Calm")


def test_save_and_load_game(tmp_path, make_horse):
    path = tmp_path / "saves" / "game.json"
    assert load_game(path) is None
    state = {"horses": [horse_to_dict(make_horse())]}
    save_game(path, state)
    assert load_game(path) == state
