from dataclasses import dataclass

@dataclass(frozen=True)
class DifficultyRange:
    """values at difficulty 0, 5 and 10"""
    min: float
    mid: float
    max: float

# time (ms) a hit object is visible before it must be hit
PREEMPT_RANGE = DifficultyRange(min=1800., mid=1200., max=450.)
PREEMPT_MIN = 450.

# radius of a hit object at scale 1 (osu!pixels)
OBJECT_RADIUS = 64.

def difficulty_range(difficulty: float, r: DifficultyRange) -> float:
    """map a difficulty value in [0,10] onto `r`, piecewise linearly around 5"""
    if difficulty > 5:
        return r.mid + (r.max - r.mid) * (difficulty - 5) / 5
    if difficulty < 5:
        return r.mid + (r.mid - r.min) * (difficulty - 5) / 5
    return r.mid

def inverse_difficulty_range(value: float, r: DifficultyRange) -> float:
    toward_max = (value - r.mid > 0) == (r.max - r.mid > 0)
    if toward_max:
        return (value - r.mid) / (r.max - r.mid) * 5 + 5
    return (value - r.mid) / (r.mid - r.min) * 5 + 5

def calculate_preempt(ar: float) -> float:
    return difficulty_range(ar, PREEMPT_RANGE)

def calculate_fade_in(preempt: float) -> float:
    return 400 * min(1., preempt / PREEMPT_MIN)

def calculate_scale(cs: float) -> float:
    # CS 0 -> .85, CS 5 -> .5, CS 10 -> .15
    return (1 - .7 * (cs - 5) / 5) / 2

def calculate_radius(cs: float) -> float:
    return calculate_scale(cs) * OBJECT_RADIUS
