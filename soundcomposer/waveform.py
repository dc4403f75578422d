"""Column heights for drawing a PCM waveform."""

from __future__ import annotations

import os
import struct
from typing import Sequence

from .wav import WavFormatError, read_header, read_pcm

SCREEN_WIDTH = 1600
SCREEN_HEIGHT = 1000
WAVEFORM_LEFT = 400
WAVEFORM_WIDTH = SCREEN_WIDTH - WAVEFORM_LEFT
CENTER_Y = SCREEN_HEIGHT // 2
SCALE = 100


def _f32(x: float) -> float:
    return struct.unpack("f", struct.pack("f", x))[0]


def waveform_columns(
    samples: Sequence[int],
    num_samples: int = 0,
    width: int = WAVEFORM_WIDTH,
    center_y: int = CENTER_Y,
    scale: int = SCALE,
    height: int = SCREEN_HEIGHT,
) -> list[int]:
    """Return, for each of ``width`` columns, the y where its line ends.

    Each line runs from ``center_y`` to the returned y. Only the first
    ``num_samples`` samples are spread across the width; a count that is
    not positive or exceeds the samples available means all of them.
    """
    total = len(samples)
    if num_samples <= 0 or num_samples > total:
        num_samples = total
    if num_samples <= 0 or width <= 0:
        return []
    columns = []
    for column in range(width):
        fraction = _f32(_f32(float(column)) / width)
        index = int(_f32(fraction * num_samples))
        index = min(max(index, 0), total - 1)
        y = center_y - int(samples[index] / scale)
        columns.append(min(max(y, 0), height))
    return columns


def file_waveform(
    path: str | os.PathLike,
    num_samples: int = 0,
    width: int = WAVEFORM_WIDTH,
    center_y: int = CENTER_Y,
    scale: int = SCALE,
    height: int = SCREEN_HEIGHT,
) -> list[int]:
    """Column heights for the samples stored in the WAV file at ``path``."""
    header = read_header(path)
    if header.subchunk2_size <= 0 or header.bits_per_sample <= 0:
        raise WavFormatError("invalid WAV header data for waveform drawing")
    bytes_per_sample = header.bits_per_sample // 8 or 2
    total = header.subchunk2_size // bytes_per_sample
    samples = read_pcm(path, header)[:total]
    return waveform_columns(samples, num_samples, width, center_y, scale, height)