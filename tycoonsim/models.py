from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

Gender = Literal["male","female"]
Distance = Literal["sprint","middle","long"]
Surface = Literal["dirt","turf","synthetic"]
RaceType = Literal["flat","jump"]
Tier = Literal["low","medium","high","elite"]
Difficulty = Literal["easy","normal","hard"]
CareType = Literal["groom","veterinarian","feed","massage"]
StatName = Literal["speed","acceleration","stamina","jumping","temperament"]

CORE_STATS: Tuple[StatName, ...] = ("speed","acceleration","stamina","jumping","temperament")
VITALS = ("energy", "health", "happiness")
TIMERS = ("breeding_cooldown", "racing_cooldown", "injury_duration")
GENDERS: Tuple[Gender, ...] = ("male","female")
DISTANCES: Tuple[Distance, ...] = ("sprint","middle","long")
SURFACES: Tuple[Surface, ...] = ("dirt","turf","synthetic")
RACE_TYPES: Tuple[RaceType, ...] = ("flat","jump")
TIERS: Tuple[Tier, ...] = ("low","medium","high","elite")
BREEDS: Tuple[str, ...] = (
    "Thoroughbred","Arabian","Quarter Horse","Appaloosa","Mustang",
    "Morgan","Andalusian","Friesian","Belgian","Clydesdale",
)
COLORS: Tuple[str, ...] = (
    "Bay","Chestnut","Black","Grey","Palomino","Buckskin",
    "Roan","Dun","Pinto","White","Sorrel",
)

# Calendar: 30-day months, 12 months. Aging counts 365 days per year.
DAYS_PER_MONTH = 30
MONTHS_PER_YEAR = 12
DAYS_PER_AGE_YEAR = 365

def clamp_int(x: int, lo: int, hi: int) -> int:
    return lo if x < lo else hi if x > hi else x

def is_opposite_distance(a: str, b: str) -> bool:
    return {a, b} == {"sprint", "long"}

@dataclass(frozen=True)
class GameDate:
    day: int = 1
    month: int = 1
    year: int = 2023

    def ordinal(self) -> int:
        return ((self.year * MONTHS_PER_YEAR) + (self.month - 1)) * DAYS_PER_MONTH + (self.day - 1)

    @classmethod
    def from_ordinal(cls, n: int) -> "GameDate":
        months, day0 = divmod(n, DAYS_PER_MONTH)
        year, month0 = divmod(months, MONTHS_PER_YEAR)
        return cls(day=day0 + 1, month=month0 + 1, year=year)

    def plus_days(self, days: int) -> "GameDate":
        return GameDate.from_ordinal(self.ordinal() + int(days))

    def next_day(self) -> "GameDate":
        return self.plus_days(1)

    def days_since(self, other: "GameDate") -> int:
        return self.ordinal() - other.ordinal()

    @property
    def day_of_week(self) -> int:
        """1 = Monday ... 7 = Sunday, counted within the month."""
        return (self.day - 1) % 7 + 1

    @property
    def is_weekend(self) -> bool:
        return self.day_of_week in (6, 7)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

@dataclass(frozen=True)
class LineageRef:
    id: str
    name: str

@dataclass(frozen=True)
class Trait:
    name: str
    rating_effect: int = 0
    value_effect: int = 0
    race_effect: float = 0.0
    # race_effect applies only when these match (None = any)
    distance: Optional[Distance] = None
    surface: Optional[Surface] = None

@dataclass(frozen=True)
class InjuryOutcome:
    injured: bool = False
    severity: int = 0
    duration: int = 0

@dataclass(frozen=True)
class Performance:
    score: float
    time: float
    energy_used: int
    injury: InjuryOutcome
    experience: int

@dataclass(frozen=True)
class RaceHistoryEntry:
    race_id: str
    race_name: str
    position: int
    prize: int
    score: float
    time: float
    experience: int = 0
    energy_used: int = 0
    injured: bool = False
    date: Optional[GameDate] = None

@dataclass
class Horse:
    id: str
    name: str
    gender: Gender
    breed: str = "Thoroughbred"
    color: str = "Bay"
    age: int = 2
    # None derives a birth day from `age`, counted back from the default start date.
    birth_day: Optional[GameDate] = None
    sire: Optional[LineageRef] = None
    dam: Optional[LineageRef] = None

    speed: int = 50
    acceleration: int = 50
    stamina: int = 50
    jumping: int = 50
    temperament: int = 60

    preferred_distance: Distance = "middle"
    preferred_surface: Surface = "dirt"

    energy: int = 100
    health: int = 100
    happiness: int = 100
    training: float = 0.0
    level: int = 1
    potential: int = 50
    growth_rate: float = 1.0

    breeding_cooldown: int = 0
    racing_cooldown: int = 0
    injured: bool = False
    injury_duration: int = 0

    traits: List[Trait] = field(default_factory=list)

    races: List[RaceHistoryEntry] = field(default_factory=list)
    races_won: int = 0
    races_placed: int = 0
    earnings: int = 0

    is_player_owned: bool = False
    # Caller-owned metadata the engine never reads (sale listing, notes).
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for k in CORE_STATS + VITALS:
            setattr(self, k, clamp_int(int(getattr(self, k)), 0, 100))
        for k in TIMERS:
            setattr(self, k, max(0, int(getattr(self, k))))
        if self.birth_day is None:
            self.birth_day = GameDate().plus_days(-self.age * DAYS_PER_AGE_YEAR)

    def stat(self, name: str) -> int:
        if name not in CORE_STATS:
            raise ValueError(f"unknown stat: {name}")
        return int(getattr(self, name))

    def set_stat(self, name: str, value: int) -> None:
        if name not in CORE_STATS:
            raise ValueError(f"unknown stat: {name}")
        setattr(self, name, clamp_int(int(value), 0, 100))

    def ref(self) -> LineageRef:
        return LineageRef(id=self.id, name=self.name)

    def trait_names(self) -> List[str]:
        return [t.name for t in self.traits]

@dataclass(frozen=True)
class RaceRequirements:
    min_age: int = 3
    max_age: int = 20
    min_rating: int = 0
    gender: Optional[Gender] = None  # None = any
    breeds: Tuple[str, ...] = ()     # empty = any

@dataclass(frozen=True)
class Entrant:
    horse_id: str
    horse_name: str
    jockey_name: str
    is_player_controlled: bool
    odds: float

@dataclass(frozen=True)
class AIHorse:
    id: str
    name: str
    jockey_name: str
    quality: float
    odds: float
    preferred_distance: Distance
    preferred_surface: Surface

@dataclass(frozen=True)
class RaceResult:
    position: int
    horse_id: str
    horse_name: str
    jockey_name: str
    is_player_controlled: bool
    odds: float
    score: float
    time: float
    energy_used: int
    injury: InjuryOutcome
    experience: int
    prize: int

RaceStatus = Literal["scheduled","entered","run"]

@dataclass
class Race:
    id: str
    name: str
    distance: Distance = "middle"
    surface: Surface = "dirt"
    race_type: RaceType = "flat"
    tier: Tier = "low"
    difficulty: int = 1
    purse: int = 1000
    prizes: List[int] = field(default_factory=list)
    entry_fee: int = 0
    requirements: RaceRequirements = field(default_factory=RaceRequirements)
    max_entrants: int = 8
    is_special: bool = False
    schedule_day: Optional[GameDate] = None

    has_run: bool = False
    entrants: List[Entrant] = field(default_factory=list)
    results: Tuple[RaceResult, ...] = ()

    def __post_init__(self) -> None:
        if not self.prizes:
            from .economy import default_prizes
            self.prizes = default_prizes(self.purse)

    @property
    def status(self) -> RaceStatus:
        if self.has_run:
            return "run"
        return "entered" if self.entrants else "scheduled"

    @property
    def is_full(self) -> bool:
        return len(self.entrants) >= self.max_entrants

    def prize_for(self, position: int) -> int:
        return int(self.prizes[position - 1]) if 1 <= position <= len(self.prizes) else 0

    def entrant_for(self, horse_id: str) -> Optional[Entrant]:
        for e in self.entrants:
            if e.horse_id == horse_id:
                return e
        return None

# ---------------------------------------------------------------------------
# Result objects: the only channel back to callers.
# ---------------------------------------------------------------------------

@dataclass
class OpResult:
    success: bool
    message: str

@dataclass
class EligibilityResult:
    is_eligible: bool
    reasons: List[str] = field(default_factory=list)

@dataclass
class EntryResult(OpResult):
    reasons: List[str] = field(default_factory=list)
    entrant: Optional[Entrant] = None
    entrant_count: int = 0
    max_entrants: int = 0

@dataclass
class RunRaceResult(OpResult):
    results: Tuple[RaceResult, ...] = ()
    player_result: Optional[RaceResult] = None
    purse: int = 0
    prizes: List[int] = field(default_factory=list)

@dataclass
class TrainingResult(OpResult):
    stat_trained: str = ""
    primary_stat_gain: int = 0
    secondary_stat_loss: bool = False
    secondary_stat: str = ""
    secondary_stat_loss_amount: int = 0
    energy_cost: int = 0
    leveled_up: bool = False
    new_level: int = 0

@dataclass
class RestResult(OpResult):
    energy_recovered: int = 0
    health_recovered: int = 0
    recovered_from_injury: bool = False

@dataclass
class AdvanceResult(OpResult):
    has_aged: bool = False
    recovered_from_injury: bool = False
    age: int = 0
    stat_changes: Dict[str, int] = field(default_factory=dict)

@dataclass
class CareResult(OpResult):
    care_type: str = ""
    bonus_applied: bool = False
    deltas: Dict[str, int] = field(default_factory=dict)

@dataclass
class RaceRecordResult(OpResult):
    races_won: int = 0
    races_placed: int = 0
    total_earnings: int = 0
    injured: bool = False
    leveled_up: bool = False

@dataclass
class BreedingResult(OpResult):
    foal: Optional[Horse] = None

@dataclass
class StableResult(OpResult):
    horse: Optional[Horse] = None
    horse_count: int = 0
    stable_size: int = 0
    amount: int = 0
