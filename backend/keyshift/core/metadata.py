"""
Filename metadata: "Song_Cmajor_128.mp3" -> key "c major", tempo 128.

Key and tempo are matched separately, so a filename can yield one without
the other.
"""
import re
from dataclasses import dataclass
from typing import Optional

_STRIP = re.compile(r"[\s_]+")
_KEY   = re.compile(r"([a-g][#b]?)(maj|minor|major|min)")
_TEMPO = re.compile(r"([0-9]{2,3})")


@dataclass(frozen=True)
class TrackMetadata:
    """Key/tempo read from a filename. None means not found."""
    key: Optional[str] = None
    tempo: Optional[int] = None


def extract_key(filename: str) -> Optional[str]:
    cleaned = _STRIP.sub("", filename).lower()
    match = _KEY.search(cleaned)
    if not match:
        return None
    note, mode = match.groups()
    return f"{note} {'major' if mode.startswith('maj') else 'minor'}"


def extract_tempo(filename: str) -> Optional[int]:
    # matched against the raw name, underscores and spaces included
    match = _TEMPO.search(filename)
    return int(match.group(1)) if match else None


def extract(filename: str) -> TrackMetadata:
    return TrackMetadata(key=extract_key(filename), tempo=extract_tempo(filename))
