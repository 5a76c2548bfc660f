from __future__ import annotations

import importlib.util
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .pitch import PitchTable, default_pitch_table

_LOGGER = logging.getLogger("tactsynth.config")

SinkName = Literal["wav", "playback", "memory"]

_ENV_PREFIX = "TACTSYNTH_"


def _playback_available() -> bool:
    try:
        return importlib.util.find_spec("sounddevice") is not None
    except ValueError:
        # already imported without a module spec
        return True


def _default_sinks() -> list[SinkName]:
    if _playback_available():
        return ["wav", "playback"]
    _LOGGER.debug("sounddevice not installed; defaulting to WAV output only")
    return ["wav"]


_ENV_FIELDS: Mapping[str, str] = MappingProxyType(
    {
        "sinks": f"{_ENV_PREFIX}SINKS",
        "wav_path": f"{_ENV_PREFIX}WAV_PATH",
        "wav_amplitude": f"{_ENV_PREFIX}WAV_AMPLITUDE",
        "strict_beats": f"{_ENV_PREFIX}STRICT_BEATS",
        "pitch_table": f"{_ENV_PREFIX}PITCH_TABLE",
    }
)


class RenderSettings(BaseModel):
    """Where rendered measures go and how strictly beats are checked."""

    sinks: list[SinkName] = Field(default_factory=_default_sinks)
    wav_path: Path = Path("output.wav")
    wav_amplitude: float = Field(default=0.75, gt=0.0, le=1.0)
    strict_beats: bool = True
    pitch_table: Path | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("sinks", mode="before")
    @classmethod
    def _split_sinks(cls, value: object) -> object:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RenderSettings":
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for field, key in _ENV_FIELDS.items():
            raw = env.get(key)
            if raw:
                values[field] = raw
        if values:
            _LOGGER.debug("Render settings from environment: %s", values)
        return cls.model_validate(values)

    def load_pitch_table(self) -> PitchTable:
        if self.pitch_table is None:
            return default_pitch_table()
        return PitchTable.from_json(self.pitch_table)
