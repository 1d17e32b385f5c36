from dataclasses import dataclass, field
from typing import Optional, Union

import re
from pathlib import Path

from .hit_objects import TimingPoint, HitObject, HitObjectType, GameMode, object_kind
from .decode import decode_timing_point, decode_hit_object, parse_float, parse_int, DEFAULT_BEAT_LENGTH

# format version assumed when the file has no `osu file format v<N>` header
DEFAULT_FORMAT_VERSION = 14

# approach rate before it is read from the file
AR_UNSET = -1.

HEADER_RE = re.compile(r"^osu file format v(\d+)$")
SECTION_RE = re.compile(r"^\[(.+)\]$")

METADATA_KEYS = {
    "Title": "title",
    "TitleUnicode": "title_unicode",
    "Artist": "artist",
    "ArtistUnicode": "artist_unicode",
    "Creator": "creator",
    "Version": "version",
}

DIFFICULTY_KEYS = {
    "ApproachRate": "ar",
    "CircleSize": "cs",
    "OverallDifficulty": "od",
    "HPDrainRate": "hp",
    "SliderMultiplier": "sv",
    "SliderTickRate": "tick_rate",
}

DIFFICULTY_DEFAULTS = {
    "ar": AR_UNSET,
    "cs": 5.,
    "od": 5.,
    "hp": 5.,
    "sv": 1.,
    "tick_rate": 1.,
}

# sections after which the info scan has nothing left to read
INFO_HALT_SECTIONS = ("Events", "TimingPoints", "Colours", "HitObjects")


@dataclass
class Beatmap:
    format_version: int = DEFAULT_FORMAT_VERSION
    mode: GameMode = GameMode.STANDARD

    title: str = ""
    title_unicode: str = ""
    artist: str = ""
    artist_unicode: str = ""
    creator: str = ""
    version: str = ""

    ar: float = AR_UNSET
    cs: float = 5.
    od: float = 5.
    hp: float = 5.
    # base slider velocity in hundreds of osu!pixels per beat
    sv: float = 1.
    # slider ticks per beat
    tick_rate: float = 1.

    timing_points: list[TimingPoint] = field(default_factory=list)
    objects: list[HitObject] = field(default_factory=list)

    circle_count: int = 0
    slider_count: int = 0
    spinner_count: int = 0
    hold_count: int = 0

    def __repr__(self):
        return f"{self.title} [{self.version}]"


@dataclass
class BeatmapInfo:
    filename: str
    title: str
    artist: str
    version: str
    mode: GameMode
    ar: float
    cs: float
    od: float
    hp: float

    def __repr__(self):
        return f"{self.filename}: {self.artist} - {self.title} [{self.version}]"


@dataclass
class _ScanState:
    section: Optional[str] = None
    format_version: int = DEFAULT_FORMAT_VERSION
    mode: GameMode = GameMode.STANDARD
    metadata: dict[str, str] = field(default_factory=dict)
    difficulty: dict[str, float] = field(default_factory=lambda: dict(DIFFICULTY_DEFAULTS))
    timing_points: list[TimingPoint] = field(default_factory=list)
    objects: list[HitObject] = field(default_factory=list)
    current_beat_length: float = DEFAULT_BEAT_LENGTH
    halted: bool = False


def split_lines(raw: Union[str, bytes]) -> list[str]:
    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8", errors="replace")
    elif not isinstance(raw, str):
        raise TypeError(f"expected str or bytes, got {type(raw)}")
    return raw.lstrip("\ufeff").splitlines()

def key_value(line: str) -> Optional[tuple[str, str]]:
    key, sep, value = line.partition(":")
    if not sep:
        return None
    return key.strip(), value.strip()

def _parse_mode(s: str) -> GameMode:
    try:
        return GameMode(parse_int(s, None))
    except ValueError:
        return GameMode.STANDARD

def _feed(state: _ScanState, l: str, halt_at: tuple[str, ...] = ()) -> _ScanState:
    """advance the scan by one physical line"""

    # storyboard continuation lines
    if l.startswith((" ", "_")):
        return state

    l = l.strip()
    if l == "" or l.startswith("//"):
        return state

    m = HEADER_RE.match(l)
    if m is not None:
        state.format_version = int(m.group(1))
        return state

    m = SECTION_RE.match(l)
    if m is not None:
        state.section = m.group(1)
        state.halted = state.section in halt_at
        return state

    if state.section == "General":
        kv = key_value(l)
        if kv is not None and kv[0] == "Mode":
            state.mode = _parse_mode(kv[1])
    elif state.section == "Metadata":
        kv = key_value(l)
        if kv is not None and kv[0] in METADATA_KEYS:
            state.metadata[METADATA_KEYS[kv[0]]] = kv[1]
    elif state.section == "Difficulty":
        kv = key_value(l)
        if kv is not None and kv[0] in DIFFICULTY_KEYS:
            name = DIFFICULTY_KEYS[kv[0]]
            state.difficulty[name] = parse_float(kv[1], state.difficulty[name])
    elif state.section == "TimingPoints":
        tp, state.current_beat_length = decode_timing_point(l.split(","), state.current_beat_length)
        if tp is not None:
            state.timing_points.append(tp)
    elif state.section == "HitObjects":
        ho = decode_hit_object(l.split(","))
        if ho is not None:
            state.objects.append(ho)

    return state

def _scan(raw: Union[str, bytes], halt_at: tuple[str, ...] = ()) -> _ScanState:
    state = _ScanState()
    for l in split_lines(raw):
        state = _feed(state, l, halt_at)
        if state.halted:
            break
    return state

def _resolve_ar(difficulty: dict[str, float]) -> float:
    # older maps have no ApproachRate, it was tied to OverallDifficulty
    return difficulty["ar"] if difficulty["ar"] >= 0 else difficulty["od"]


def count_objects(objects: list[HitObject]) -> dict[HitObjectType, int]:
    counts = { kind: 0 for kind in (HitObjectType.CIRCLE, HitObjectType.SLIDER, HitObjectType.SPINNER, HitObjectType.HOLD) }
    for ho in objects:
        kind = object_kind(ho.type)
        if kind is not None:
            counts[kind] += 1
    return counts

def assemble(state: _ScanState, sort_timing_points: bool = False) -> Beatmap:
    """build the document from a completed scan"""
    # `timing` imports this module
    from . import timing

    timing_points = state.timing_points
    if sort_timing_points:
        timing_points = timing.sort_timing_points(timing_points)
        timing_points = timing.thread_beat_length(timing_points, timing.first_beat_length(timing_points))

    difficulty = dict(state.difficulty, ar=_resolve_ar(state.difficulty))
    counts = count_objects(state.objects)

    return Beatmap(
        format_version=state.format_version,
        mode=state.mode,
        **state.metadata,
        **difficulty,
        timing_points=timing_points,
        objects=state.objects,
        circle_count=counts[HitObjectType.CIRCLE],
        slider_count=counts[HitObjectType.SLIDER],
        spinner_count=counts[HitObjectType.SPINNER],
        hold_count=counts[HitObjectType.HOLD],
    )

def parse(raw: Union[str, bytes], sort_timing_points: bool = False) -> Beatmap:
    """
    parse the contents of an `.osu` file.

    malformed lines are skipped, so this returns a (possibly partial) beatmap for any text input.

    timing points are kept in file order unless `sort_timing_points` is set, in which case
    they are ordered by time (uninherited first on ties) before their beat lengths are resolved
    """
    return assemble(_scan(raw), sort_timing_points)

def parse_info(raw: Union[str, bytes], filename: str) -> BeatmapInfo:
    """
    read only the metadata and difficulty of an `.osu` file, stopping before the
    events, timing points and hit objects
    """
    state = _scan(raw, halt_at=INFO_HALT_SECTIONS)
    md, diff = state.metadata, state.difficulty
    return BeatmapInfo(
        filename=filename,
        title=md.get("title", ""),
        artist=md.get("artist", ""),
        version=md.get("version", ""),
        mode=state.mode,
        ar=_resolve_ar(diff),
        cs=diff["cs"],
        od=diff["od"],
        hp=diff["hp"],
    )

def parse_file(filename: Union[str, Path], sort_timing_points: bool = False) -> Beatmap:
    with open(filename, "rb") as f:
        return parse(f.read(), sort_timing_points)

def parse_info_file(filename: Union[str, Path]) -> BeatmapInfo:
    filename = Path(filename)
    with open(filename, "rb") as f:
        return parse_info(f.read(), filename.name)
