from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .synth import FloatArray


def _shortest(buffers: Sequence[FloatArray]) -> int:
    return min(len(buffer) for buffer in buffers)


def mix_beat(buffers: Sequence[FloatArray]) -> FloatArray:
    """Average simultaneous notes with equal weight ``1/N``.

    Buffers longer than the shortest one are truncated to it.
    """
    if not buffers:
        raise ValueError("mix_beat needs at least one note buffer")
    length = _shortest(buffers)
    stacked = np.stack([np.asarray(buffer[:length], dtype=np.float32) for buffer in buffers])
    return (stacked / np.float32(len(buffers))).sum(axis=0, dtype=np.float32)


def mix_measure(buffers: Sequence[FloatArray]) -> FloatArray:
    """Sum channel buffers without normalization, truncated to the shortest."""
    if not buffers:
        return np.zeros(0, dtype=np.float32)
    length = _shortest(buffers)
    stacked = np.stack([np.asarray(buffer[:length], dtype=np.float32) for buffer in buffers])
    return stacked.sum(axis=0, dtype=np.float32)


def concat_beats(beats: Sequence[FloatArray]) -> FloatArray:
    if not beats:
        return np.zeros(0, dtype=np.float32)
    return np.concatenate(beats).astype(np.float32, copy=False)
