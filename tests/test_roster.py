import pytest

from tycoonsim.names import load_name_pool, make_id, random_horse_name
from tycoonsim.progression import age_on
from tycoonsim.rating import market_value
from tycoonsim.roster import (
    Stable, breed_growth_rate, breeding_candidates, market_horses, random_horse, starter_horses,
)
from tycoonsim.rng import RNG

from conftest import ScriptedRNG

ATHLETIC = ("speed", "acceleration", "stamina", "jumping")


def test_random_horse_backdates_birth(today):
    h = random_horse(RNG(1), today, age=6)
    assert h.age == 6
    assert age_on(h, today) == 6


@pytest.mark.parametrize("difficulty,lo,hi", [("normal", 30, 60), ("easy", 36, 72), ("hard", 24, 48)])
def test_starter_stats_follow_difficulty(today, difficulty, lo, hi):
    horses = starter_horses(RNG(4), today, 3, difficulty)
    assert len(horses) == 3
    for h in horses:
        assert h.age == 3 and h.is_player_owned
        for k in ATHLETIC:
            assert lo <= h.stat(k) <= hi
        assert lo + 10 <= h.temperament <= hi + 10


def test_growth_rate_clamped():
    assert breed_growth_rate("Thoroughbred", ScriptedRNG(default=0.99)) == pytest.approx(1.2)
    assert breed_growth_rate("Clydesdale", ScriptedRNG(default=0.0)) == pytest.approx(0.81)
    assert breed_growth_rate("Mustang", ScriptedRNG()) == pytest.approx(1.0)


def test_market_horses_priced(today):
    horses = market_horses(RNG(8), today, count=4, player_rating=40)
    assert len(horses) == 4
    for h in horses:
        assert 3 <= h.age <= 8
        assert h.extras["for_sale"] is True
        assert h.extras["sale_price"] == market_value(h)
        assert not h.is_player_owned


def test_breeding_candidates(today):
    studs = breeding_candidates(RNG(8), today, "male", 60.0, count=3)
    assert len(studs) == 3
    assert all(h.gender == "male" and h.extras["stud_fee"] > 0 for h in studs)


def test_stable_capacity(make_horse):
    stable = Stable(stable_size=2)
    assert stable.add(make_horse(id="A")).success
    assert stable.add(make_horse(id="B")).success
    res = stable.add(make_horse(id="C"))
    assert not res.success
    assert res.message == "Stable is at maximum capacity"
    assert len(stable.horses) == 2


def test_stable_duplicate_id(make_horse):
    stable = Stable()
    stable.add(make_horse(id="A"))
    assert not stable.add(make_horse(id="A")).success
    res = stable.add(make_horse(id="A"), RNG(3))
    assert res.success and res.horse.id != "A"


def test_stable_remove_and_sell(make_horse):
    stable = Stable()
    h = make_horse(id="A")
    stable.add(h)
    value = market_value(h)
    sold = stable.sell("A")
    assert sold.success and sold.amount == value
    assert stable.get("A") is None
    assert not stable.remove("A").success
    assert not stable.sell("missing").success


def test_stable_filters(make_horse):
    stable = Stable()
    stable.add(make_horse(id="A", gender="female"))
    stable.add(make_horse(id="B", gender="male", injured=True, injury_duration=3))
    stable.add(make_horse(id="C", gender="male", age=2))
    assert [h.id for h in stable.can_race()] == ["A", "C"]
    assert [h.id for h in stable.can_breed("female")] == ["A"]
    assert [h.id for h in stable.can_breed("male")] == ["B"]
    assert stable.best() is not None


def test_advance_all_reports_recoveries(make_horse, today):
    stable = Stable()
    stable.add(make_horse(id="A", injured=True, injury_duration=1))
    events = stable.advance_all(1, today.plus_days(1), RNG(1))
    assert events["recoveries"] == ["Test Horse"]


def test_stable_upgrade_to_max(make_horse):
    stable = Stable(stable_size=4, horses=[make_horse()])
    paid = []
    for level, size in ((2, 6), (3, 8), (4, 10)):
        res = stable.upgrade()
        assert res.success
        assert (stable.level, stable.stable_size, res.stable_size) == (level, size, size)
        paid.append(res.amount)
    assert paid == [5000, 15000, 30000]

    top = stable.upgrade()
    assert not top.success
    assert top.message == "Stable is already at maximum level."
    assert (stable.level, stable.stable_size) == (4, 10)


def test_stable_upgrade_needs_funds(make_horse):
    stable = Stable(stable_size=4)
    res = stable.upgrade(funds=4999)
    assert not res.success
    assert res.amount == 5000
    assert "$5,000" in res.message
    assert stable.level == 1 and stable.stable_size == 4
    assert stable.upgrade(funds=5000).success


def test_upgrade_keeps_larger_roster():
    stable = Stable(stable_size=7)
    stable.upgrade()
    assert stable.stable_size == 7
    stable.upgrade()
    assert stable.stable_size == 8


def test_stable_maintenance(make_horse):
    stable = Stable(horses=[make_horse(id="A"), make_horse(id="B")])
    assert stable.maintenance_cost() == 125
    assert stable.maintenance_cost("hard", days=2) == 300
    stable.upgrade()
    assert stable.maintenance_cost() == 150


def test_names(tmp_path):
    pool_file = tmp_path / "names.txt"
    pool_file.write_text("# custom\nNight Owl\nNight Owl\nDawn Patrol\n", encoding="utf-8")
    pool = load_name_pool(pool_file)
    assert pool == ["Night Owl", "Dawn Patrol"]
    assert random_horse_name(ScriptedRNG(default=0.0), pool) == "Night Owl"
    assert load_name_pool(tmp_path / "missing.txt") == []
    assert make_id(ScriptedRNG(default=0.0), "H") == "H-0000000000"
