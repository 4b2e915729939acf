"""Semitone shift between two keys, along the shorter way round the circle."""
from keyshift.core.keys import lookup

SEMITONES_PER_OCTAVE = 12
MAX_SHIFT = 6


def wrap_shift(raw: int) -> int:
    """
    Fold a raw class difference (-11..11) into -6..6.

    Only strictly larger distances are folded: +6 stays +6 and -6 stays -6.
    """
    if raw > MAX_SHIFT:
        return raw - SEMITONES_PER_OCTAVE
    if raw < -MAX_SHIFT:
        return raw + SEMITONES_PER_OCTAVE
    return raw


def resolve(source_key: str, target_key: str) -> int:
    """Signed semitone shift from source_key to target_key. Raises UnknownKeyError."""
    source = lookup(source_key)
    target = lookup(target_key)
    return wrap_shift(target - source)


def pitch_factor(semitones: int) -> float:
    """Equal-tempered frequency ratio, 2^(n/12)."""
    return 2 ** (semitones / SEMITONES_PER_OCTAVE)
