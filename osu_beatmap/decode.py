"""
decoders for single comma-separated lines of the [TimingPoints] and [HitObjects] sections.

decoders never raise: a line that can't be decoded yields `None`,
and a field that can't be parsed falls back to its default
"""

from typing import Optional

import math

from .hit_objects import (
    TimingPoint,
    HitObject,
    HitObjectType,
    HitSound,
    HitSample,
    SampleSet,
    PathType,
    CircleData,
    SliderData,
    SpinnerData,
    HoldData,
    Coordinate,
    PLAYFIELD_CENTER,
    object_kind,
)

# running beat length before any uninherited point has been seen
DEFAULT_BEAT_LENGTH = 500.

def parse_float(s: str, default: Optional[float] = 0.) -> Optional[float]:
    try:
        x = float(s)
    except ValueError:
        return default
    return x if math.isfinite(x) else default

def parse_int(s: str, default: Optional[int] = 0) -> Optional[int]:
    try:
        return int(s)
    except ValueError:
        # eg. "256.5"
        x = parse_float(s, None)
        return default if x is None else int(x)

def _field(fields: list[str], idx: int) -> Optional[str]:
    return fields[idx] if idx < len(fields) else None

def _sample_set(s: str) -> SampleSet:
    try:
        return SampleSet(parse_int(s))
    except ValueError:
        return SampleSet.AUTO


# timing points
# =====

def inherited_velocity(ms_per_beat: float) -> float:
    """
    slider velocity multiplier encoded by an inherited point's negative beat length,
    eg. -50 -> 2x. a zero or non-finite beat length gives 1x
    """
    if ms_per_beat == 0 or not math.isfinite(ms_per_beat):
        return 1.
    return -100. / ms_per_beat

def decode_timing_point(fields: list[str], current_beat_length: float) -> tuple[Optional[TimingPoint], float]:
    """
    decode a timing point given the running beat length.

    returns the point (`None` if the line is rejected) and the updated running beat length
    """
    if len(fields) < 2:
        return None, current_beat_length

    time = parse_float(fields[0], None)
    ms_per_beat = parse_float(fields[1], None)
    if time is None or ms_per_beat is None:
        return None, current_beat_length

    def opt(idx: int, parse, default):
        s = _field(fields, idx)
        return default if s is None else parse(s)

    meter = opt(2, lambda s: parse_int(s, 4), 4)
    sample_set = opt(3, _sample_set, SampleSet.AUTO)
    sample_index = opt(4, parse_int, 0)
    volume = opt(5, lambda s: parse_int(s, 100), 100)
    change = opt(6, lambda s: s.strip() != "0", True)
    effects = opt(7, parse_int, 0)

    inherited = ms_per_beat < 0
    if not inherited and ms_per_beat > 0:
        current_beat_length = ms_per_beat

    tp = TimingPoint(
        time=time,
        ms_per_beat=ms_per_beat,
        meter=meter,
        change=change,
        sample_set=sample_set,
        sample_index=sample_index,
        volume=volume,
        kiai=bool(effects & 1),
        velocity=inherited_velocity(ms_per_beat) if inherited else 1.,
        beat_length=current_beat_length,
    )
    return tp, current_beat_length


# hit objects
# =====

def decode_hit_sample(s: Optional[str]) -> Optional[HitSample]:
    """`normalSet:additionSet:index:volume:filename`. fields without a colon are not samples"""
    if s is None or ":" not in s:
        return None

    vals = s.split(":")
    get = lambda i: vals[i] if i < len(vals) else "0"
    filename = ":".join(vals[4:]).strip() if len(vals) > 4 else ""
    return HitSample(
        normal_set=_sample_set(get(0)),
        addition_set=_sample_set(get(1)),
        index=parse_int(get(2)),
        volume=parse_int(get(3)),
        filename=filename or None,
    )

def decode_curve(s: str) -> tuple[PathType, list[Coordinate]]:
    """`T|x:y|x:y|...`"""
    tag, *raw_points = s.split("|")
    try:
        path_type = PathType(tag.strip())
    except ValueError:
        path_type = PathType.BEZIER

    points: list[Coordinate] = []
    for p in raw_points:
        xy = p.split(":")
        if len(xy) != 2:
            continue
        x, y = parse_int(xy[0], None), parse_int(xy[1], None)
        if x is None or y is None:
            continue
        points.append((x, y))
    return path_type, points

def decode_edge_sounds(s: Optional[str]) -> Optional[list[int]]:
    if s is None or s.strip() == "":
        return None
    return [ parse_int(x) for x in s.split("|") ]

def decode_edge_sets(s: Optional[str]) -> Optional[list[tuple[SampleSet, SampleSet]]]:
    if s is None or s.strip() == "":
        return None
    edge_sets = []
    for pair in s.split("|"):
        normal, _, addition = pair.partition(":")
        edge_sets.append((_sample_set(normal), _sample_set(addition or "0")))
    return edge_sets

def decode_hit_object(fields: list[str]) -> Optional[HitObject]:
    """decode a hit object line. `None` if the line is rejected"""
    if len(fields) < 4:
        return None

    x, y, t, k = [ parse_int(f, None) for f in fields[:4] ]
    if x is None or y is None or t is None or k is None:
        return None

    hit_sound = HitSound(max(0, parse_int(fields[4]))) if len(fields) > 4 else HitSound(0)
    pos = (x, y)
    end_pos = (float(x), float(y))
    end_time = t
    sample_field = None

    kind = object_kind(k)
    if kind == HitObjectType.CIRCLE:
        data = CircleData(pos)
        sample_field = _field(fields, 5)
    elif kind == HitObjectType.SLIDER:
        if len(fields) < 8:
            return None
        path_type, points = decode_curve(fields[5])
        if len(points) == 0:
            return None
        data = SliderData(
            pos=pos,
            path_type=path_type,
            control_points=points,
            repetitions=max(1, parse_int(fields[6], 1)),
            distance=parse_float(fields[7]),
            edge_sounds=decode_edge_sounds(_field(fields, 8)),
            edge_sets=decode_edge_sets(_field(fields, 9)),
        )
        sample_field = _field(fields, 10)
    elif kind == HitObjectType.SPINNER:
        end_time = parse_int(fields[5], t) if len(fields) > 5 else t
        data = SpinnerData(end_time)
        end_pos = (float(PLAYFIELD_CENTER[0]), float(PLAYFIELD_CENTER[1]))
        sample_field = _field(fields, 6)
    elif kind == HitObjectType.HOLD:
        # `endTime:normalSet:additionSet:index:volume:filename`
        raw_end, _, rest = (fields[5] if len(fields) > 5 else "").partition(":")
        end_time = parse_int(raw_end, t)
        data = HoldData(pos, end_time)
        sample_field = rest if rest else _field(fields, 6)
    else:
        return None

    return HitObject(
        time=t,
        type=k,
        hit_sound=hit_sound,
        end_time=end_time,
        end_pos=end_pos,
        data=data,
        hit_sample=decode_hit_sample(sample_field),
    )
