from __future__ import annotations
from pathlib import Path
from typing import List, Optional

from .rng import RNG

HORSE_PREFIXES = [
    "Swift","Mighty","Golden","Thunder","Shadow","Royal","Noble","Mystic",
    "Wild","Silver","Midnight","Stellar","Magic","Legend","Storm","Brave",
]
HORSE_SUFFIXES = [
    "Runner","Spirit","Star","Bolt","Wind","Heart","Fire","Dash","Flash",
    "Mane","Dancer","Jumper","Blaze","Whisper","Dream","Legend",
]

# Rival (AI) stables use their own pool so fields read differently from the player's stock.
AI_PREFIXES = [
    "Bold","Swift","Mighty","Royal","Noble","Fast","Lucky","Epic",
    "Thunder","Silent","Golden","Silver","Midnight","Wild","Winter","Summer",
]
AI_SUFFIXES = [
    "Runner","Spirit","Wind","Star","Prince","King","Queen","Dancer",
    "Legend","Flash","Heart","Moon","Storm","Hero","Warrior","Champion",
]

JOCKEY_FIRST = [
    "John","Mike","James","Robert","Tom","William","David","Richard",
    "Sarah","Emma","Olivia","Sophia","Isabella","Ava","Emily","Grace",
]
JOCKEY_LAST = [
    "Smith","Johnson","Williams","Brown","Jones","Miller","Davis","Garcia",
    "Martinez","Wilson","Anderson","Taylor","Thomas","Moore","Martin","Lee",
]

def load_name_pool(path: Optional[Path]) -> List[str]:
    """Optional custom horse names, one per line ('#' comments allowed)."""
    if path is None or not path.exists():
        return []
    lines = [ln.strip() for ln in path.read_text(encoding="utf-8", errors="ignore").splitlines()]
    seen = set(); uniq = []
    for n in lines:
        if n and not n.startswith("#") and n not in seen:
            uniq.append(n); seen.add(n)
    return uniq

def random_horse_name(rng: RNG, pool: Optional[List[str]] = None) -> str:
    if pool:
        return rng.choice(pool)
    return f"{rng.choice(HORSE_PREFIXES)} {rng.choice(HORSE_SUFFIXES)}"

def random_ai_horse_name(rng: RNG) -> str:
    return f"{rng.choice(AI_PREFIXES)} {rng.choice(AI_SUFFIXES)}"

def random_jockey_name(rng: RNG) -> str:
    return f"{rng.choice(JOCKEY_FIRST)} {rng.choice(JOCKEY_LAST)}"

def make_id(rng: RNG, prefix: str) -> str:
    return f"{prefix}-{rng.randint(0, 16 ** 10 - 1):010x}"
