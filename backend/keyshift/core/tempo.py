"""
Tempo chain builder.

ffmpeg's atempo filter only accepts factors in [0.5, 2.0], so a larger change
is split into a chain of stages whose product is the requested ratio:

    build(5.0)  -> [2.0, 2.0, 1.25]
    build(0.2)  -> [0.5, 0.5, 0.8]
    build(0.75) -> [0.75]

Stages are exact floats. The two-decimal form is only for the filter string
(see format_stage).
"""
import math

from keyshift.core.errors import InvalidInputError

STAGE_MIN = 0.5
STAGE_MAX = 2.0


def build(ratio: float) -> list[float]:
    if not math.isfinite(ratio) or ratio <= 0:
        raise InvalidInputError(f"Tempo ratio must be a positive number, got {ratio}")

    stages = []
    while ratio > STAGE_MAX or ratio < STAGE_MIN:
        if ratio > STAGE_MAX:
            stages.append(STAGE_MAX)
            ratio /= STAGE_MAX
        else:
            stages.append(STAGE_MIN)
            ratio /= STAGE_MIN
    stages.append(ratio)
    return stages


def format_stage(value: float) -> str:
    return f"{value:.2f}"
