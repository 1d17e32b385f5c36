"""
lightweight extraction of single header values, without building a beatmap.

only the part of the file before the timing points is read, and never more than `limit` characters
"""

from typing import Optional, Union
from collections.abc import Iterator

from .beatmap import SECTION_RE, split_lines, key_value
from .decode import parse_int

# characters scanned when looking for a header value
HEADER_SCAN_LIMIT = 64 * 1024

# sections that come after everything extracted here
_STOP_SECTIONS = ("TimingPoints", "Colours", "HitObjects")

def _section_lines(raw: Union[str, bytes], limit: int) -> Iterator[tuple[Optional[str], str]]:
    """yield `(section, line)` for each non-empty line before the timing points"""
    section = None
    for l in split_lines(raw[:limit]):
        if l.startswith("//"):
            continue
        l = l.strip()
        if l == "":
            continue
        m = SECTION_RE.match(l)
        if m is not None:
            section = m.group(1)
            if section in _STOP_SECTIONS:
                return
            continue
        yield section, l

def _general_value(raw: Union[str, bytes], key: str, limit: int) -> Optional[str]:
    for section, l in _section_lines(raw, limit):
        if section != "General":
            continue
        kv = key_value(l)
        if kv is not None and kv[0] == key:
            return kv[1]
    return None

def _events(raw: Union[str, bytes], limit: int) -> Iterator[list[str]]:
    for section, l in _section_lines(raw, limit):
        if section == "Events":
            yield [ f.strip() for f in l.split(",") ]

def _unquote(s: str) -> str:
    if len(s) >= 2 and s[0] == s[-1] == '"':
        return s[1:-1]
    return s

def extract_audio_filename(raw: Union[str, bytes], limit: int = HEADER_SCAN_LIMIT) -> Optional[str]:
    return _general_value(raw, "AudioFilename", limit) or None

def extract_preview_time(raw: Union[str, bytes], limit: int = HEADER_SCAN_LIMIT) -> int:
    """song preview offset in ms, -1 if unset"""
    value = _general_value(raw, "PreviewTime", limit)
    return -1 if value is None else parse_int(value, -1)

def extract_background_filename(raw: Union[str, bytes], limit: int = HEADER_SCAN_LIMIT) -> Optional[str]:
    """filename of the first background event: `0,0,"bg.jpg",x,y`"""
    for ev in _events(raw, limit):
        if len(ev) >= 3 and ev[0] == "0":
            return _unquote(ev[2]) or None
    return None

def extract_video_info(raw: Union[str, bytes], limit: int = HEADER_SCAN_LIMIT) -> Optional[tuple[str, int]]:
    """`(filename, offset)` of the first video event: `Video,offset,"video.mp4"`"""
    for ev in _events(raw, limit):
        if len(ev) < 3 or ev[0] not in ("Video", "1"):
            continue
        filename = _unquote(ev[2])
        if not filename:
            continue
        return filename, parse_int(ev[1], 0)
    return None
