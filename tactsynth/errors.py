from __future__ import annotations


class TactSynthError(Exception):
    """Base error for the tactsynth library.

    ``location`` names the note that failed (e.g. ``"measure 2, channel 1, beat 3"``)
    when the error was raised while checking or rendering a composition.
    """

    location: str | None = None

    @property
    def detail(self) -> str:
        return super().__str__()

    def at(self, location: str) -> "TactSynthError":
        self.location = location
        return self

    def __str__(self) -> str:
        if self.location is None:
            return self.detail
        return f"{self.detail} ({self.location})"


class UnknownPitchError(TactSynthError):
    """Raised when a pitch name is not in the pitch table."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown pitch name: {name!r}")
        self.name = name


class InvalidDurationError(TactSynthError):
    """Raised when a note would last zero seconds or less."""


class MalformedCompositionError(TactSynthError):
    """Raised when a composition (or pitch table) does not match its schema."""


class MismatchedBeatError(MalformedCompositionError):
    """Raised when simultaneous notes in one beat disagree on their length."""


class SinkError(TactSynthError):
    """Raised when an output sink cannot be opened or rejects samples."""
