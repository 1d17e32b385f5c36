from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
from typing import Optional, Union

from jaxtyping import Float

from numpy import ndarray

Coordinate = tuple[int, int]
Position = tuple[float, float]
Polyline = Float[ndarray, "_ 2"]

# center of the 512x384 osu!pixel playfield
PLAYFIELD_CENTER: Coordinate = (256, 192)


class GameMode(IntEnum):
    STANDARD = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3


class SampleSet(IntEnum):
    AUTO = 0
    NORMAL = 1
    SOFT = 2
    DRUM = 3


class HitObjectType(IntFlag):
    CIRCLE = 1 << 0
    SLIDER = 1 << 1
    NEW_COMBO = 1 << 2
    SPINNER = 1 << 3
    COMBO_SKIP = (1 << 4) | (1 << 5) | (1 << 6)
    HOLD = 1 << 7


class HitSound(IntFlag):
    NORMAL = 1 << 0
    WHISTLE = 1 << 1
    FINISH = 1 << 2
    CLAP = 1 << 3


class PathType(str, Enum):
    LINEAR = "L"
    BEZIER = "B"
    PERFECT = "P"
    CATMULL = "C"


# kind bits in dispatch priority order: the first bit set decides the kind
KIND_PRIORITY = (
    HitObjectType.CIRCLE,
    HitObjectType.SLIDER,
    HitObjectType.SPINNER,
    HitObjectType.HOLD,
)

def object_kind(type_bits: int) -> Optional[HitObjectType]:
    """return the kind bit selected by the `type` bitmask, or `None` if no kind bit is set"""
    for kind in KIND_PRIORITY:
        if type_bits & kind:
            return kind
    return None


@dataclass
class TimingPoint:
    time: float
    ms_per_beat: float
    meter: int = 4
    change: bool = True
    sample_set: SampleSet = SampleSet.AUTO
    sample_index: int = 0
    volume: int = 100
    kiai: bool = False

    # slider velocity multiplier (eg 2 = twice as fast)
    velocity: float = 1.
    # beat length of the last uninherited point at or before this one
    beat_length: float = 0.

    @property
    def uninherited(self) -> bool:
        return not self.ms_per_beat < 0

    def __repr__(self):
        return " ".join([
            f"{self.time:08.0f}:",
            f"beat_len={self.beat_length}" if self.uninherited else f"*{self.velocity}",
            f"meter={self.meter}",
            "kiai" if self.kiai else "",
        ]).rstrip()


@dataclass
class HitSample:
    normal_set: SampleSet = SampleSet.AUTO
    addition_set: SampleSet = SampleSet.AUTO
    index: int = 0
    volume: int = 0
    filename: Optional[str] = None


@dataclass
class CircleData:
    pos: Coordinate

    def __str__(self):
        return f"Circle({self.pos[0]},{self.pos[1]})"


@dataclass
class SliderData:
    pos: Coordinate
    path_type: PathType
    # does not include `pos`
    control_points: list[Coordinate]
    repetitions: int = 1
    distance: float = 0.

    # per-edge data, `None` when the line does not carry it
    edge_sounds: Optional[list[int]] = None
    edge_sets: Optional[list[tuple[SampleSet, SampleSet]]] = None

    # filled by the caller, see `sliders.cache_path`
    computed_path: Optional[Polyline] = field(default=None, compare=False, repr=False)

    def __str__(self):
        return f"Slider[{self.path_type.value}*{self.repetitions}]({self.pos} -> {self.control_points}, len={self.distance})"


@dataclass
class SpinnerData:
    end_time: int

    def __str__(self):
        return f"Spinner({self.end_time})"


@dataclass
class HoldData:
    pos: Coordinate
    end_time: int

    def __str__(self):
        return f"Hold({self.pos[0]},{self.pos[1]} -> {self.end_time})"


HitObjectData = Union[CircleData, SliderData, SpinnerData, HoldData]


@dataclass
class HitObject:
    time: int
    type: int
    hit_sound: HitSound
    end_time: int
    end_pos: Position
    data: HitObjectData
    hit_sample: Optional[HitSample] = None

    # assigned by a combo numbering pass
    combo_number: int = 0
    combo_count: int = 0

    @property
    def kind(self) -> Optional[HitObjectType]:
        return object_kind(self.type)

    @property
    def new_combo(self) -> bool:
        return bool(self.type & HitObjectType.NEW_COMBO)

    def __repr__(self):
        return f"{self.time:08}:" + (" *" if self.new_combo else "  ") + str(self.data)
