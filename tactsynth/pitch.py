from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from .errors import MalformedCompositionError, UnknownPitchError

_LOGGER = logging.getLogger("tactsynth.pitch")

REST_MARKER = "p"

# Tone letters in semitone order; uppercase is the raised tone.
TONES: tuple[str, ...] = ("c", "C", "d", "D", "e", "f", "F", "g", "G", "a", "A", "h")

# Register suffixes from sub-contra up to five-line, indexed relative to "1".
REGISTERS: Mapping[str, int] = MappingProxyType(
    {
        "C": -4,
        "c": -3,
        "b": -2,
        "s": -1,
        "1": 0,
        "2": 1,
        "3": 2,
        "4": 3,
        "5": 4,
    }
)

_REFERENCE_TONE = TONES.index("a")


def _build_default_offsets() -> dict[str, int]:
    offsets: dict[str, int] = {}
    for register, octave in REGISTERS.items():
        for index, tone in enumerate(TONES):
            offsets[f"{tone}{register}"] = 12 * octave + index - _REFERENCE_TONE
    return offsets


class PitchTable(Mapping[str, int]):
    """Read-only mapping of pitch names to semitone offsets from a1 (440 Hz)."""

    def __init__(self, offsets: Mapping[str, int]) -> None:
        if REST_MARKER in offsets:
            raise MalformedCompositionError(
                f"Pitch table may not define the rest marker {REST_MARKER!r}"
            )
        for name, value in offsets.items():
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedCompositionError(
                    f"Pitch table entry {name!r} must be an integer, got {value!r}"
                )
        self._offsets: Mapping[str, int] = MappingProxyType(dict(offsets))

    def __getitem__(self, name: str) -> int:
        return self._offsets[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._offsets)

    def __len__(self) -> int:
        return len(self._offsets)

    def __repr__(self) -> str:
        return f"PitchTable({len(self)} pitches)"

    def lookup(self, name: str) -> int | None:
        """Return the semitone offset for ``name``, or ``None`` for a rest."""
        if name == REST_MARKER:
            return None
        try:
            return self._offsets[name]
        except KeyError as exc:
            raise UnknownPitchError(name) from exc

    @classmethod
    def from_json(cls, path: str | Path) -> "PitchTable":
        """Load a table from a JSON object of ``{"name": offset}`` pairs."""
        source = Path(path)
        try:
            raw: object = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise MalformedCompositionError(f"Cannot read pitch table {source}: {exc}") from exc
        if not isinstance(raw, dict):
            raise MalformedCompositionError(f"Pitch table {source} must be a JSON object")
        table = cls(raw)
        _LOGGER.info("Loaded pitch table with %d entries from %s", len(table), source)
        return table


@lru_cache(maxsize=1)
def default_pitch_table() -> PitchTable:
    return PitchTable(_build_default_offsets())
