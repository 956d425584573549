import pytest

from tycoonsim.economy import default_prizes, maintenance_cost, sale_price, stable_capacity, stud_fee, upgrade_cost
from tycoonsim.rating import age_modifier, average_rating, market_value, overall_rating
from tycoonsim.traits import race_delta, total_race_delta, trait_by_name


def test_baseline_rating_is_weighted_stats(make_horse):
    h = make_horse()
    # 50*.25 + 50*.2 + 50*.2 + 50*.15 + 60*.2
    assert overall_rating(h) == 52


def test_rating_tracks_energy(make_horse):
    fresh = make_horse(energy=80)
    tired = make_horse(energy=40)
    assert overall_rating(fresh) > overall_rating(tired)
    assert overall_rating(fresh) == 42
    assert overall_rating(tired) == 21


def test_rating_clamped_to_100(make_horse):
    h = make_horse(speed=100, acceleration=100, stamina=100, jumping=100, temperament=100, training=20.0)
    assert overall_rating(h) == 100


def test_rating_zero_health(make_horse):
    assert overall_rating(make_horse(health=0)) == 0


def test_trait_rating_effect(make_horse):
    h = make_horse(traits=[trait_by_name("Competitive")])
    assert overall_rating(h) == 54


@pytest.mark.parametrize("age,expected", [(0, 0.8), (4, 1.0), (7, 1.05), (12, 1.0), (16, 0.95)])
def test_age_modifier(age, expected):
    assert age_modifier(age) == pytest.approx(expected)


def test_market_value(make_horse):
    h = make_horse()
    assert market_value(h) == 6240  # 52 * 100 * 1.2
    h.races_won, h.races_placed = 1, 2
    assert market_value(h) == 6240 + 500 + 400


def test_market_value_floor(make_horse):
    assert market_value(make_horse(health=0)) == 500


def test_average_rating_defaults_when_empty(make_horse):
    assert average_rating([]) == 50.0
    assert average_rating([make_horse(), make_horse(energy=40)]) == pytest.approx((52 + 21) / 2)


def test_prize_split():
    assert default_prizes(1000) == [600, 200, 100, 50, 50]
    assert default_prizes(999) == [599, 199, 99, 49, 49]


def test_stud_fee_and_sale_price(make_horse):
    h = make_horse()
    assert stud_fee(h) == round(6240 * 0.15)
    assert sale_price(h) == 6240
    assert sale_price(h, 1234) == 1234


@pytest.mark.parametrize("difficulty,expected", [("easy", 220), ("normal", 275), ("hard", 330)])
def test_maintenance_cost(difficulty, expected):
    # four horses at level 3
    assert maintenance_cost(4, 3, difficulty) == expected


def test_maintenance_scales_with_days():
    assert maintenance_cost(2, 1, "normal", days=3) == 375
    assert maintenance_cost(0, 1) == 25


def test_stable_levels():
    assert [stable_capacity(lvl) for lvl in (1, 2, 3, 4)] == [4, 6, 8, 10]
    assert [upgrade_cost(lvl) for lvl in (1, 2, 3, 4)] == [5000, 15000, 30000, None]


def test_conditioned_trait(make_race):
    mud = trait_by_name("Mud Runner")
    assert race_delta(mud, make_race(surface="dirt")) == 3.0
    assert race_delta(mud, make_race(surface="turf")) == 0.0
    assert race_delta(mud, None) == 0.0
    sprinter = trait_by_name("Sprinter")
    assert total_race_delta([mud, sprinter], make_race(surface="dirt", distance="sprint")) == 7.0


def test_unknown_trait_is_inert():
    t = trait_by_name("Lucky Socks")
    assert t.name == "Lucky Socks"
    assert t.rating_effect == 0 and t.race_effect == 0
