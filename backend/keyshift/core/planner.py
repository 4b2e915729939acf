"""
Transform planner: source/target key + tempo -> pitch factor and tempo stages.

Pure function of its inputs. Either returns a complete plan or raises a
TransformError, so nothing downstream (ffmpeg) runs on bad input.
"""
from dataclasses import dataclass
from typing import Optional

import structlog

from keyshift.core import keys, shift, tempo
from keyshift.core.errors import InvalidInputError, UnknownKeyError
from keyshift.core.metadata import TrackMetadata

log = structlog.get_logger()


@dataclass(frozen=True)
class TransformRequest:
    source_key: Optional[str]
    source_tempo: Optional[int]
    target_key: str
    target_tempo: int

    @classmethod
    def from_metadata(cls, metadata: TrackMetadata, target_key: str, target_tempo: int) -> "TransformRequest":
        return cls(
            source_key=metadata.key,
            source_tempo=metadata.tempo,
            target_key=target_key,
            target_tempo=target_tempo,
        )


@dataclass(frozen=True)
class TransformPlan:
    """
    Invariants:
        pitch_factor == 2 ** (semitones / 12)
        product(tempo_stages) == tempo_ratio (float tolerance)
        every stage in [0.5, 2.0]
    """
    semitones: int
    pitch_factor: float
    tempo_ratio: float
    tempo_stages: tuple[float, ...]


def _check_tempo(name: str, value) -> None:
    # bool is an int subclass; True is not a tempo
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInputError(f"{name} must be a positive integer, got {value!r}")


def plan(request: TransformRequest) -> TransformPlan:
    if request.source_key is None or request.source_tempo is None:
        raise InvalidInputError("Could not read key and BPM from the filename")
    _check_tempo("source tempo", request.source_tempo)
    _check_tempo("target tempo", request.target_tempo)
    if not keys.is_known(request.target_key):
        raise UnknownKeyError(request.target_key)

    semitones = shift.resolve(request.source_key, request.target_key)
    ratio = request.target_tempo / request.source_tempo
    stages = tempo.build(ratio)

    result = TransformPlan(
        semitones=semitones,
        pitch_factor=shift.pitch_factor(semitones),
        tempo_ratio=ratio,
        tempo_stages=tuple(stages),
    )
    log.info(
        "plan_built",
        source_key=request.source_key, target_key=request.target_key,
        semitones=semitones, tempo_ratio=round(ratio, 4), stages=len(stages),
    )
    return result
