from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    ValidationError,
    model_validator,
)

from .errors import MalformedCompositionError

_LOGGER = logging.getLogger("tactsynth.composition")


class NoteEvent(BaseModel):
    """One note (or rest) lasting ``length`` quarter beats."""

    note: str
    length: StrictFloat = Field(alias="len", allow_inf_nan=False)

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


BeatInstant = Annotated[list[NoteEvent], Field(min_length=1)]
ChannelTact = list[BeatInstant]


class ChannelConfig(BaseModel):
    volume: StrictFloat = Field(allow_inf_nan=False)

    model_config = ConfigDict(frozen=True, extra="ignore")


class Measure(BaseModel):
    """One tact: a beat sequence per channel, parallel to the channel configs."""

    channels: list[ChannelTact]

    model_config = ConfigDict(frozen=True, extra="ignore")


class Composition(BaseModel):
    bpm: StrictInt = Field(gt=0)
    channels: list[ChannelConfig]
    composition: list[Measure]

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="after")
    def _check_channel_counts(self) -> "Composition":
        expected = len(self.channels)
        for index, measure in enumerate(self.composition):
            if len(measure.channels) != expected:
                raise ValueError(
                    f"measure {index} has {len(measure.channels)} channels, expected {expected}"
                )
        return self

    @property
    def measures(self) -> list[Measure]:
        return self.composition

    @property
    def quarter_seconds(self) -> float:
        return 60.0 / self.bpm

    @property
    def volumes(self) -> list[float]:
        return [channel.volume for channel in self.channels]


def parse_composition(data: Mapping[str, Any]) -> Composition:
    try:
        return Composition.model_validate(data)
    except ValidationError as exc:
        raise MalformedCompositionError(f"Invalid composition: {exc}") from exc


def loads_composition(text: str) -> Composition:
    try:
        data: object = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedCompositionError(f"Composition is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedCompositionError("Composition must be a JSON object")
    return parse_composition(data)


def load_composition(path: str | Path) -> Composition:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedCompositionError(f"Cannot read composition {source}: {exc}") from exc
    composition = loads_composition(text)
    _LOGGER.info(
        "Loaded %s: %d bpm, %d channels, %d measures",
        source,
        composition.bpm,
        len(composition.channels),
        len(composition.composition),
    )
    return composition
