"""Felklasser för planering och rendering."""


class TransformError(Exception):
    """Base for deterministic planning failures. Never retried."""


class UnknownKeyError(TransformError):
    """A key signature has no entry in the key table."""

    def __init__(self, signature):
        self.signature = signature
        super().__init__(f"Unknown key: {signature!r}")


class InvalidInputError(TransformError):
    """Filename metadata or a caller-supplied target is missing or malformed."""


class RenderError(Exception):
    """ffmpeg could not be started or exited with an error."""
