from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")

@dataclass
class RNG:
    """Injectable random source.

    Every draw is derived from `random()`, so a test double only needs to
    override that one method to script outcomes.
    """
    seed: Optional[int] = None
    _r: random.Random = None  # type: ignore

    def __post_init__(self) -> None:
        self._r = random.Random(self.seed)

    @classmethod
    def fresh(cls) -> "RNG":
        return cls(seed=None)

    def random(self) -> float:
        return self._r.random()

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()

    def chance(self, p: float) -> bool:
        return self.random() < p

    def randint(self, a: int, b: int) -> int:
        # inclusive on both ends
        n = b - a + 1
        return a + min(n - 1, int(self.random() * n))

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("choice from empty sequence")
        return seq[min(len(seq) - 1, int(self.random() * len(seq)))]
