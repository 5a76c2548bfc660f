from __future__ import annotations

from .composition import (
    ChannelConfig,
    Composition,
    Measure,
    NoteEvent,
    load_composition,
    loads_composition,
    parse_composition,
)
from .config import RenderSettings
from .errors import (
    InvalidDurationError,
    MalformedCompositionError,
    MismatchedBeatError,
    SinkError,
    TactSynthError,
    UnknownPitchError,
)
from .logging_utils import configure_logging as _configure_logging
from .mixing import mix_beat, mix_measure
from .pitch import REST_MARKER, PitchTable, default_pitch_table
from .renderer import CompositionRenderer, render_to_array
from .sinks import AudioSink, MemorySink, PlaybackSink, WavSink, create_sink
from .synth import REFERENCE_FREQUENCY, SAMPLE_RATE, ToneSynthesizer, frequency_of, render_tone

__all__ = [
    "REFERENCE_FREQUENCY",
    "REST_MARKER",
    "SAMPLE_RATE",
    "AudioSink",
    "ChannelConfig",
    "Composition",
    "CompositionRenderer",
    "InvalidDurationError",
    "MalformedCompositionError",
    "Measure",
    "MemorySink",
    "MismatchedBeatError",
    "NoteEvent",
    "PitchTable",
    "PlaybackSink",
    "RenderSettings",
    "SinkError",
    "TactSynthError",
    "ToneSynthesizer",
    "UnknownPitchError",
    "WavSink",
    "create_sink",
    "default_pitch_table",
    "frequency_of",
    "load_composition",
    "loads_composition",
    "mix_beat",
    "mix_measure",
    "parse_composition",
    "render_to_array",
    "render_tone",
]

_configure_logging()
del _configure_logging
