from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np
import soundfile as sf  # type: ignore[import]

from .errors import SinkError
from .synth import SAMPLE_RATE, FloatArray

if TYPE_CHECKING:
    from .config import RenderSettings

_LOGGER = logging.getLogger("tactsynth.sinks")


@runtime_checkable
class AudioSink(Protocol):
    def write(self, samples: FloatArray) -> None: ...

    def close(self) -> None: ...


class BaseSink:
    """Context-managed sink; leaving the block on an exception discards the output."""

    def close(self) -> None:
        pass

    def discard(self) -> None:
        self.close()

    def __enter__(self) -> "BaseSink":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if exc_type is None:
            self.close()
        else:
            self.discard()


class MemorySink(BaseSink):
    """Keeps every written buffer, in order."""

    def __init__(self) -> None:
        self.buffers: list[FloatArray] = []

    def write(self, samples: FloatArray) -> None:
        self.buffers.append(np.asarray(samples, dtype=np.float32))

    def samples(self) -> FloatArray:
        if not self.buffers:
            return np.zeros(0, dtype=np.float32)
        return np.concatenate(self.buffers)

    def discard(self) -> None:
        self.buffers.clear()


class WavSink(BaseSink):
    """Mono 16-bit PCM WAV file at 44.1 kHz."""

    def __init__(self, path: str | Path, *, amplitude: float = 0.75) -> None:
        self.path = Path(path)
        self.amplitude = amplitude
        try:
            self._handle: Any = sf.SoundFile(
                self.path,
                mode="w",
                samplerate=SAMPLE_RATE,
                channels=1,
                format="WAV",
                subtype="PCM_16",
            )
        except (OSError, RuntimeError) as exc:
            raise SinkError(f"Cannot open {self.path} for writing: {exc}") from exc
        _LOGGER.info("Writing WAV output to %s", self.path)

    def write(self, samples: FloatArray) -> None:
        if self._handle is None:
            raise SinkError(f"WAV sink {self.path} is closed")
        scaled = np.clip(np.asarray(samples, dtype=np.float32) * self.amplitude, -1.0, 1.0)
        try:
            self._handle.write(scaled)
        except (OSError, RuntimeError) as exc:
            raise SinkError(f"Failed writing to {self.path}: {exc}") from exc

    def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        handle.close()
        _LOGGER.info("Closed WAV output %s", self.path)

    def discard(self) -> None:
        """Close and delete the file so a failed render leaves no partial WAV."""
        self.close()
        self.path.unlink(missing_ok=True)
        _LOGGER.warning("Discarded partial WAV output %s", self.path)


class PlaybackSink(BaseSink):
    """Live playback through the default output device (needs sounddevice)."""

    def __init__(self) -> None:
        try:
            import sounddevice as sd_module  # type: ignore[import]
        except (ImportError, OSError) as exc:
            _LOGGER.info("sounddevice not available: %s", exc, exc_info=True)
            raise SinkError(
                "Live playback requires sounddevice (pip install 'tactsynth[playback]')"
            ) from exc
        sd: Any = sd_module
        try:
            self._stream: Any = sd.OutputStream(
                samplerate=SAMPLE_RATE,
                channels=1,
                dtype="float32",
            )
            self._stream.start()
        except Exception as exc:
            raise SinkError(f"Cannot open audio output device: {exc}") from exc
        _LOGGER.info("Playing through the default output device")

    def write(self, samples: FloatArray) -> None:
        if self._stream is None:
            raise SinkError("Playback sink is closed")
        try:
            self._stream.write(np.asarray(samples, dtype=np.float32).reshape(-1, 1))
        except Exception as exc:
            raise SinkError(f"Audio device rejected samples: {exc}") from exc

    def close(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            stream.stop()
        finally:
            stream.close()
        _LOGGER.info("Closed audio output device")


SINK_NAMES = ("wav", "playback", "memory")


def create_sink(name: str, settings: "RenderSettings | None" = None) -> BaseSink:
    from .config import RenderSettings

    resolved = settings if settings is not None else RenderSettings()
    match name:
        case "wav":
            return WavSink(resolved.wav_path, amplitude=resolved.wav_amplitude)
        case "playback":
            return PlaybackSink()
        case "memory":
            return MemorySink()
        case _:
            raise SinkError(f"Unknown sink {name!r}; expected one of {', '.join(SINK_NAMES)}")
