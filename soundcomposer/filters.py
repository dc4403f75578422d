"""Low-pass filters over 16-bit PCM samples, with single-precision arithmetic."""

from __future__ import annotations

import math
import os
import struct
from dataclasses import dataclass
from typing import Callable, Sequence

from .wav import read_wav, write_wav

_INT16_MIN = -32768
_INT16_MAX = 32767
_WINDOW = 5


def _f32(x: float) -> float:
    """Round ``x`` to the nearest single-precision value."""
    if math.isnan(x) or math.isinf(x):
        return x
    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _to_int16(x: float) -> int:
    """Truncate toward zero and saturate to the int16 range."""
    if math.isnan(x):
        return 0
    if x >= _INT16_MAX:
        return _INT16_MAX
    if x <= _INT16_MIN:
        return _INT16_MIN
    return int(x)


def _dot(coeffs: Sequence[float], values: Sequence[float]) -> float:
    total = 0.0
    for coeff, value in zip(coeffs, values):
        total = _f32(total + _f32(coeff * value))
    return total


@dataclass
class _Section:
    """A direct-form I section: y = a0*x + a1*x1 + a2*x2 - b1*y1 - b2*y2."""

    a0: float
    a1: float
    a2: float
    b1: float
    b2: float
    x1: float = 0.0
    x2: float = 0.0
    y1: float = 0.0
    y2: float = 0.0

    def __post_init__(self) -> None:
        self.a0, self.a1, self.a2, self.b1, self.b2 = (
            _f32(c) for c in (self.a0, self.a1, self.a2, self.b1, self.b2)
        )

    def step(self, x0: float) -> float:
        y0 = _dot(
            (self.a0, self.a1, self.a2, -self.b1, -self.b2),
            (x0, self.x1, self.x2, self.y1, self.y2),
        )
        self.x2, self.x1 = self.x1, x0
        self.y2, self.y1 = self.y1, y0
        return y0


def _cascade(
    samples: Sequence[int], sections: Sequence[_Section], gain: float
) -> list[int]:
    gain = _f32(gain)
    out = []
    for sample in samples:
        value = float(sample)
        for section in sections:
            value = section.step(value)
        out.append(_to_int16(_f32(value * gain)))
    return out


def moving_average(samples: Sequence[int]) -> list[int]:
    """Five-point moving average; the two samples at each edge are kept."""
    half = _WINDOW // 2
    scale = _f32(1.0 / _WINDOW)
    out = list(samples)
    windows = zip(*(samples[k:] for k in range(_WINDOW)))
    for offset, window in enumerate(windows):
        out[half + offset] = _to_int16(_f32(sum(window) * scale))
    return out


def butterworth_2nd_order(samples: Sequence[int]) -> list[int]:
    """Second-order Butterworth low-pass."""
    return _cascade(
        samples, [_Section(0.0201, 0.0402, 0.0201, -1.5610, 0.6414)], 1.0
    )


def butterworth_3rd_order(samples: Sequence[int]) -> list[int]:
    """Third-order low-pass: a first-order and a second-order section, scaled by 0.85."""
    return _cascade(
        samples,
        [
            _Section(0.0675, 0.0675, 0.0, -0.8650, 0.0),
            _Section(0.0088, 0.0176, 0.0088, -1.7347, 0.7699),
        ],
        0.85,
    )


def butterworth_4th_order(samples: Sequence[int]) -> list[int]:
    """Fourth-order low-pass: two second-order sections, scaled by 0.0001."""
    return _cascade(
        samples,
        [
            _Section(0.0048, 0.0096, 0.0048, -1.8904, 0.8096),
            _Section(1.0, 2.0, 1.0, -1.9159, 0.9355),
        ],
        0.0001,
    )


def _filter_file(
    apply: Callable[[Sequence[int]], list[int]],
    input_file: str | os.PathLike,
    output_file: str | os.PathLike,
) -> None:
    header, samples = read_wav(input_file)
    write_wav(output_file, header, apply(samples))


def low_filter(input_file: str | os.PathLike, output_file: str | os.PathLike) -> None:
    """Write ``input_file`` smoothed by the moving average."""
    _filter_file(moving_average, input_file, output_file)


def butterworth_low_filter(
    input_file: str | os.PathLike, output_file: str | os.PathLike
) -> None:
    """Write ``input_file`` through the second-order Butterworth filter."""
    _filter_file(butterworth_2nd_order, input_file, output_file)


def butterworth_filter_3rd_order(
    input_file: str | os.PathLike, output_file: str | os.PathLike
) -> None:
    """Write ``input_file`` through the third-order filter."""
    _filter_file(butterworth_3rd_order, input_file, output_file)


def butterworth_filter_4th_order(
    input_file: str | os.PathLike, output_file: str | os.PathLike
) -> None:
    """Write ``input_file`` through the fourth-order filter."""
    _filter_file(butterworth_4th_order, input_file, output_file)