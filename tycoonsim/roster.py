from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .economy import maintenance_cost, sale_price, stable_capacity, stud_fee, upgrade_cost
from .models import (
    BREEDS, COLORS, DAYS_PER_AGE_YEAR, DISTANCES, Difficulty, GameDate, Gender, GENDERS,
    Horse, StableResult, SURFACES, clamp_int,
)
from .names import make_id, random_horse_name
from .progression import advance
from .rating import average_rating, market_value, overall_rating
from .rng import RNG

logger = logging.getLogger(__name__)

DIFFICULTY_MOD: Dict[str, float] = {"easy": 1.2, "normal": 1.0, "hard": 0.8}
FAST_GROWERS = ("Thoroughbred", "Arabian")
SLOW_GROWERS = ("Belgian", "Clydesdale")

def breed_growth_rate(breed: str, rng: RNG) -> float:
    rate = 1.0
    if breed in FAST_GROWERS:
        rate *= 1.1
    elif breed in SLOW_GROWERS:
        rate *= 0.9
    rate *= rng.uniform(0.9, 1.1)
    return max(0.8, min(1.2, rate))

def initial_potential(stats: Dict[str, int], rng: RNG) -> int:
    avg = sum(stats.values()) / len(stats)
    return int(round(min(100.0, avg * (1.0 + rng.uniform(-0.1, 0.2)))))

def random_horse(
    rng: RNG,
    today: GameDate,
    *,
    age: int = 3,
    min_stat: float = 30,
    stat_cap: float = 70,
    gender: Optional[Gender] = None,
    name_pool: Optional[List[str]] = None,
    is_player_owned: bool = False,
) -> Horse:
    """A fresh horse with stats uniform in [min_stat, stat_cap].

    Birth day is back-dated so the horse is exactly `age` on `today`.
    """
    lo = clamp_int(int(round(min_stat)), 0, 100)
    hi = clamp_int(int(round(stat_cap)), lo, 100)
    stats = {
        "speed": rng.randint(lo, hi),
        "acceleration": rng.randint(lo, hi),
        "stamina": rng.randint(lo, hi),
        "jumping": rng.randint(lo, hi),
        # temperament runs a little higher than the athletic stats
        "temperament": rng.randint(clamp_int(lo + 10, 0, 100), clamp_int(hi + 10, 0, 100)),
    }
    breed = rng.choice(BREEDS)
    return Horse(
        id=make_id(rng, "H"),
        name=random_horse_name(rng, name_pool),
        gender=gender or rng.choice(GENDERS),
        breed=breed,
        color=rng.choice(COLORS),
        age=age,
        birth_day=today.plus_days(-age * DAYS_PER_AGE_YEAR),
        preferred_distance=rng.choice(DISTANCES),
        preferred_surface=rng.choice(SURFACES),
        potential=initial_potential(stats, rng),
        growth_rate=breed_growth_rate(breed, rng),
        is_player_owned=is_player_owned,
        **stats,
    )

def starter_horses(rng: RNG, today: GameDate, count: int = 3, difficulty: Difficulty = "normal") -> List[Horse]:
    mod = DIFFICULTY_MOD.get(difficulty, 1.0)
    return [
        random_horse(rng, today, age=3, min_stat=30 * mod, stat_cap=60 * mod, is_player_owned=True)
        for _ in range(count)
    ]

def _quality_horse(rng: RNG, today: GameDate, min_q: float, max_q: float, min_age: int, max_age: int,
                   gender: Optional[Gender] = None) -> Horse:
    quality = rng.uniform(min_q, max(min_q, max_q))
    age = rng.randint(min_age, max_age)
    return random_horse(rng, today, age=age, min_stat=quality * 0.7, stat_cap=quality, gender=gender)

def market_horses(rng: RNG, today: GameDate, count: int = 5, player_rating: float = 50.0,
                  min_quality: float = 30.0, max_quality: float = 70.0) -> List[Horse]:
    """Horses for sale; quality tracks the player's stable so the market stays relevant."""
    out: List[Horse] = []
    cap = min(max_quality, player_rating + 10)
    for _ in range(count):
        h = _quality_horse(rng, today, min_quality, cap, 3, 8)
        h.extras["for_sale"] = True
        h.extras["sale_price"] = market_value(h)
        out.append(h)
    return out

def breeding_candidates(rng: RNG, today: GameDate, gender: Gender = "male", player_rating: float = 50.0,
                        count: int = 5, preferred_breeds: Optional[List[str]] = None) -> List[Horse]:
    out: List[Horse] = []
    for _ in range(count):
        h = _quality_horse(rng, today, player_rating - 10, min(70.0, player_rating + 10), 3, 10, gender=gender)
        if preferred_breeds and rng.chance(0.5):
            h.breed = rng.choice(preferred_breeds)
        h.extras["stud_fee"] = stud_fee(h)
        out.append(h)
    return out

@dataclass
class Stable:
    """Capacity-bounded roster owned by one player."""

    stable_size: int = 5
    horses: List[Horse] = field(default_factory=list)
    level: int = 1

    def get(self, horse_id: str) -> Optional[Horse]:
        for h in self.horses:
            if h.id == horse_id:
                return h
        return None

    def add(self, horse: Horse, rng: Optional[RNG] = None) -> StableResult:
        if len(self.horses) >= self.stable_size:
            return StableResult(
                success=False,
                message="Stable is at maximum capacity",
                horse_count=len(self.horses),
                stable_size=self.stable_size,
            )
        if self.get(horse.id) is not None:
            if rng is None:
                return StableResult(success=False, message=f"A horse with id {horse.id} is already stabled")
            horse.id = make_id(rng, "H")
        horse.is_player_owned = True
        self.horses.append(horse)
        return StableResult(
            success=True,
            message=f"{horse.name} has been added to your stable",
            horse=horse,
            horse_count=len(self.horses),
            stable_size=self.stable_size,
        )

    def remove(self, horse_id: str) -> StableResult:
        h = self.get(horse_id)
        if h is None:
            return StableResult(success=False, message="Horse not found")
        self.horses.remove(h)
        return StableResult(
            success=True,
            message=f"{h.name} has been removed from your stable",
            horse=h,
            horse_count=len(self.horses),
            stable_size=self.stable_size,
        )

    def sell(self, horse_id: str, price: Optional[int] = None) -> StableResult:
        """Remove a horse and report the sale amount; funds are the caller's concern."""
        h = self.get(horse_id)
        if h is None:
            return StableResult(success=False, message="Horse not found")
        amount = sale_price(h, price)
        self.horses.remove(h)
        return StableResult(
            success=True,
            message=f"{h.name} has been sold for ${amount:,}",
            horse=h,
            horse_count=len(self.horses),
            stable_size=self.stable_size,
            amount=amount,
        )

    def upgrade(self, funds: Optional[int] = None) -> StableResult:
        """Raise the stable one level. `amount` is the price; paying it is the caller's concern."""
        cost = upgrade_cost(self.level)
        if cost is None:
            return StableResult(
                success=False,
                message="Stable is already at maximum level.",
                horse_count=len(self.horses),
                stable_size=self.stable_size,
            )
        if funds is not None and funds < cost:
            return StableResult(
                success=False,
                message=f"Insufficient funds. You need ${cost:,}.",
                horse_count=len(self.horses),
                stable_size=self.stable_size,
                amount=cost,
            )
        self.level += 1
        # never shrink a roster that started above the level's capacity
        self.stable_size = max(self.stable_size, stable_capacity(self.level))
        logger.info("stable upgraded to level %d (capacity %d)", self.level, self.stable_size)
        return StableResult(
            success=True,
            message=f"Stable upgraded to level {self.level}. New capacity: {self.stable_size} horses.",
            horse_count=len(self.horses),
            stable_size=self.stable_size,
            amount=cost,
        )

    def maintenance_cost(self, difficulty: Difficulty = "normal", days: int = 1) -> int:
        return maintenance_cost(len(self.horses), self.level, difficulty, days)

    def average_rating(self) -> float:
        return average_rating(self.horses)

    def advance_all(self, days: int, today: GameDate, rng: RNG) -> Dict[str, List[str]]:
        """Daily tick for every horse; returns names grouped by notable event."""
        events: Dict[str, List[str]] = {"birthdays": [], "recoveries": []}
        for h in self.horses:
            res = advance(h, days, today, rng)
            if res.has_aged:
                events["birthdays"].append(h.name)
            if res.recovered_from_injury:
                events["recoveries"].append(h.name)
        return events

    def filter(self, pred: Callable[[Horse], bool]) -> List[Horse]:
        return [h for h in self.horses if pred(h)]

    def can_race(self) -> List[Horse]:
        return self.filter(lambda h: not h.injured and h.racing_cooldown == 0)

    def can_breed(self, gender: Optional[Gender] = None) -> List[Horse]:
        return self.filter(lambda h: h.age >= 3 and h.breeding_cooldown == 0 and (gender is None or h.gender == gender))

    def best(self) -> Optional[Horse]:
        return max(self.horses, key=overall_rating, default=None)
