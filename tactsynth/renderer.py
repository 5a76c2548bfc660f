from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from .composition import BeatInstant, ChannelTact, Composition, Measure
from .errors import InvalidDurationError, MismatchedBeatError, TactSynthError
from .mixing import concat_beats, mix_beat, mix_measure
from .pitch import PitchTable, default_pitch_table
from .sinks import AudioSink, MemorySink
from .synth import FloatArray, ToneSynthesizer

_LOGGER = logging.getLogger("tactsynth.renderer")


class CompositionRenderer:
    """Renders a composition measure by measure into an audio sink.

    The whole composition is checked before the first ``write`` and each
    measure is fully mixed in memory before its single ``write`` call, so a
    bad note never leaves a partial render in the sink.
    """

    def __init__(
        self,
        sink: AudioSink,
        *,
        pitch_table: PitchTable | None = None,
        synthesizer: ToneSynthesizer | None = None,
        strict_beats: bool = True,
    ) -> None:
        self.sink = sink
        self.pitch_table = pitch_table if pitch_table is not None else default_pitch_table()
        self.synthesizer = synthesizer if synthesizer is not None else ToneSynthesizer()
        self.strict_beats = strict_beats

    def _check_lengths(self, instant: BeatInstant) -> None:
        if not self.strict_beats:
            return
        lengths = {note.length for note in instant}
        if len(lengths) > 1:
            raise MismatchedBeatError(
                f"Simultaneous notes must share one length, got {sorted(lengths)}"
            )

    def check(self, composition: Composition) -> None:
        """Reject the composition before any measure reaches the sink.

        Looks up every pitch, requires every note to last longer than zero
        seconds and, with ``strict_beats``, every beat to have one note length.
        """
        quarter_seconds = composition.quarter_seconds
        for m, measure in enumerate(composition.measures, start=1):
            for c, tact in enumerate(measure.channels, start=1):
                for b, instant in enumerate(tact, start=1):
                    try:
                        self._check_lengths(instant)
                        for note in instant:
                            self.pitch_table.lookup(note.note)
                            if not quarter_seconds * note.length > 0:
                                raise InvalidDurationError(
                                    f"Note {note.note!r} has length {note.length}"
                                )
                    except TactSynthError as exc:
                        exc.at(f"measure {m}, channel {c}, beat {b}")
                        raise

    def render_beat(
        self, instant: BeatInstant, volume: float, quarter_seconds: float
    ) -> FloatArray:
        self._check_lengths(instant)
        buffers = [
            self.synthesizer.render_note(
                self.pitch_table.lookup(note.note),
                volume,
                quarter_seconds * note.length,
            )
            for note in instant
        ]
        return mix_beat(buffers)

    def render_channel_tact(
        self, tact: ChannelTact, volume: float, quarter_seconds: float
    ) -> FloatArray:
        beats = [self.render_beat(instant, volume, quarter_seconds) for instant in tact]
        return concat_beats(beats)

    def render_measure(
        self, measure: Measure, volumes: Sequence[float], quarter_seconds: float
    ) -> FloatArray:
        channels = [
            self.render_channel_tact(tact, volume, quarter_seconds)
            for tact, volume in zip(measure.channels, volumes, strict=True)
        ]
        return mix_measure(channels)

    def iter_measures(self, composition: Composition) -> Iterator[FloatArray]:
        """Lazily yield one mixed buffer per measure, in order."""
        quarter_seconds = composition.quarter_seconds
        volumes = composition.volumes
        for index, measure in enumerate(composition.measures):
            samples = self.render_measure(measure, volumes, quarter_seconds)
            _LOGGER.debug("Measure %d: %d samples", index, len(samples))
            yield samples

    def render(self, composition: Composition) -> int:
        """Write every measure to the sink; returns the number of writes."""
        _LOGGER.info(
            "Rendering %d measures at %d bpm across %d channels",
            len(composition.measures),
            composition.bpm,
            len(composition.channels),
        )
        self.check(composition)
        written = 0
        for samples in self.iter_measures(composition):
            self.sink.write(samples)
            written += 1
        return written


def render_to_array(
    composition: Composition,
    *,
    pitch_table: PitchTable | None = None,
    strict_beats: bool = True,
) -> FloatArray:
    """Render the whole composition into one in-memory buffer."""
    sink = MemorySink()
    renderer = CompositionRenderer(sink, pitch_table=pitch_table, strict_beats=strict_beats)
    renderer.render(composition)
    return sink.samples()
