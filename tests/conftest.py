"""Shared fixtures for the simulation tests."""

from typing import Iterable, Optional

import pytest

from tycoonsim.models import GameDate, Horse, Race, RaceRequirements
from tycoonsim.rng import RNG


class ScriptedRNG(RNG):
    """Replays a fixed list of draws, then repeats `default`."""

    def __init__(self, values: Iterable[float] = (), default: float = 0.5):
        super().__init__(seed=0)
        self.values = list(values)
        self.default = default

    def random(self) -> float:
        if self.values:
            return self.values.pop(0)
        return self.default


TODAY = GameDate(day=1, month=1, year=2023)


def build_horse(id: str = "H-1", name: str = "Test Horse", gender: str = "male", age: int = 4, **kw) -> Horse:
    return Horse(id=id, name=name, gender=gender, age=age, **kw)


def build_race(id: str = "R-1", name: str = "Test Stakes", purse: int = 1000,
               requirements: Optional[RaceRequirements] = None, **kw) -> Race:
    return Race(id=id, name=name, purse=purse, requirements=requirements or RaceRequirements(), **kw)


@pytest.fixture
def today() -> GameDate:
    return TODAY


@pytest.fixture
def scripted():
    return ScriptedRNG


@pytest.fixture
def rng() -> RNG:
    return RNG(seed=1234)


@pytest.fixture
def make_horse():
    return build_horse


@pytest.fixture
def make_race():
    return build_race
