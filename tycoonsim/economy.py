from __future__ import annotations
import math
from typing import Dict, List, Optional, Sequence

from .models import Horse
from .rating import market_value

# 1st..5th
PRIZE_SHARES = (0.60, 0.20, 0.10, 0.05, 0.05)
STUD_FEE_SHARE = 0.15

def default_prizes(purse: int, shares: Sequence[float] = PRIZE_SHARES) -> List[int]:
    return [int(math.floor(purse * s)) for s in shares]

def stud_fee(horse: Horse) -> int:
    return int(round(market_value(horse) * STUD_FEE_SHARE))

def sale_price(horse: Horse, asking: Optional[int] = None) -> int:
    """Asking price when given, otherwise market value."""
    if asking is not None:
        return int(asking)
    return market_value(horse)

# Cost of reaching each stable level; index 0 is unused.
STABLE_UPGRADE_COSTS = (0, 5000, 15000, 30000, 60000)
MAX_STABLE_LEVEL = len(STABLE_UPGRADE_COSTS) - 1
MAINTENANCE_PER_HORSE = 50
MAINTENANCE_PER_LEVEL = 25
COST_MULTIPLIER: Dict[str, float] = {"easy": 0.8, "normal": 1.0, "hard": 1.2}

def stable_capacity(level: int) -> int:
    return 4 + (level - 1) * 2

def upgrade_cost(level: int) -> Optional[int]:
    """Price of moving from `level` to the next one, or None at the top."""
    if level >= MAX_STABLE_LEVEL:
        return None
    return STABLE_UPGRADE_COSTS[level + 1]

def maintenance_cost(horse_count: int, stable_level: int, difficulty: str = "normal", days: int = 1) -> int:
    daily = horse_count * MAINTENANCE_PER_HORSE + stable_level * MAINTENANCE_PER_LEVEL
    return int(round(daily * COST_MULTIPLIER.get(difficulty, 1.0))) * max(0, int(days))
