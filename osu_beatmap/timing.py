from dataclasses import dataclass, replace

from .hit_objects import TimingPoint, HitObject, SliderData
from .decode import DEFAULT_BEAT_LENGTH
from .beatmap import Beatmap

# base beat length assumed by timing queries when no uninherited point applies
FALLBACK_BEAT_LENGTH = 600.

# osu!pixels travelled per beat at 1x slider velocity
BASE_SCORING_DISTANCE = 100.

MIN_SV_MULTIPLIER = .1
MAX_SV_MULTIPLIER = 10.

def sort_timing_points(points: list[TimingPoint]) -> list[TimingPoint]:
    """stable sort by time, putting uninherited points first on ties"""
    return sorted(points, key=lambda tp: (tp.time, not tp.uninherited))

def thread_beat_length(points: list[TimingPoint], initial: float = DEFAULT_BEAT_LENGTH) -> list[TimingPoint]:
    """
    carry the beat length of the last uninherited point (with positive beat length)
    forward onto every point, in the given order
    """
    cur = initial
    result = []
    for tp in points:
        if tp.uninherited and tp.ms_per_beat > 0:
            cur = tp.ms_per_beat
        result.append(replace(tp, beat_length=cur))
    return result

def first_beat_length(points: list[TimingPoint], default: float = DEFAULT_BEAT_LENGTH) -> float:
    for tp in points:
        if tp.uninherited and tp.ms_per_beat > 0:
            return tp.ms_per_beat
    return default


@dataclass
class TimingState:
    base_beat_length: float
    sv_multiplier: float

def timing_state_at(points: list[TimingPoint], time: float) -> TimingState:
    """
    tempo and slider velocity in effect at `time`, given time-ordered `points`.
    an uninherited point resets the slider velocity multiplier
    """
    base_beat_length = FALLBACK_BEAT_LENGTH
    sv_multiplier = 1.
    if len(points) and points[0].uninherited and points[0].ms_per_beat > 0:
        base_beat_length = points[0].ms_per_beat

    for tp in points:
        if tp.time > time:
            break
        if tp.uninherited:
            if tp.ms_per_beat > 0:
                base_beat_length = tp.ms_per_beat
                sv_multiplier = 1.
        elif tp.velocity > 0:
            sv_multiplier = tp.velocity

    sv_multiplier = min(MAX_SV_MULTIPLIER, max(MIN_SV_MULTIPLIER, sv_multiplier))
    return TimingState(base_beat_length, sv_multiplier)

def slider_duration(bm: Beatmap, obj: HitObject) -> float:
    """
    total time (ms) spent sliding, across all repeats. 0 for non-sliders
    """
    if not isinstance(obj.data, SliderData) or obj.data.distance <= 0:
        return 0.

    state = timing_state_at(bm.timing_points, float(obj.time))
    sv = bm.sv if bm.sv > 0 else 1.
    single_slide = obj.data.distance * state.base_beat_length / (BASE_SCORING_DISTANCE * sv * state.sv_multiplier)
    return single_slide * obj.data.repetitions
