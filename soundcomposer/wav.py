"""Reading and writing 16-bit PCM WAV files with a canonical 44-byte header."""

from __future__ import annotations

import os
import struct
import sys
from array import array
from dataclasses import dataclass, replace
from typing import Iterable, Sequence

HEADER_SIZE = 44
RECORDING_SAMPLE_RATE = 44100

_HEADER = struct.Struct("<4si4s4sihhiihh4si")
_SAMPLE_BYTES = 2


class WavFormatError(ValueError):
    """Raised when data is not a readable RIFF/WAVE file."""


@dataclass(frozen=True)
class WavHeader:
    """The canonical RIFF/WAVE header as stored in the first 44 bytes."""

    chunk_id: bytes
    chunk_size: int
    format: bytes
    subchunk1_id: bytes
    subchunk1_size: int
    audio_format: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    subchunk2_id: bytes
    subchunk2_size: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "WavHeader":
        """Parse a header; raise WavFormatError if it is short or not RIFF/WAVE."""
        if len(data) < HEADER_SIZE:
            raise WavFormatError(
                f"header needs {HEADER_SIZE} bytes, got {len(data)}"
            )
        header = cls(*_HEADER.unpack_from(data))
        if header.chunk_id != b"RIFF" or header.format != b"WAVE":
            raise WavFormatError("not a valid WAV file")
        return header

    def to_bytes(self) -> bytes:
        return _HEADER.pack(
            self.chunk_id,
            self.chunk_size,
            self.format,
            self.subchunk1_id,
            self.subchunk1_size,
            self.audio_format,
            self.num_channels,
            self.sample_rate,
            self.byte_rate,
            self.block_align,
            self.bits_per_sample,
            self.subchunk2_id,
            self.subchunk2_size,
        )

    def sample_count(self) -> int:
        """Number of 16-bit values in the data chunk."""
        return max(self.subchunk2_size, 0) // _SAMPLE_BYTES

    @classmethod
    def mono16(cls, sample_rate: int, data_size: int) -> "WavHeader":
        """Header for mono 16-bit PCM holding ``data_size`` bytes of samples."""
        return cls(
            chunk_id=b"RIFF",
            chunk_size=36 + data_size,
            format=b"WAVE",
            subchunk1_id=b"fmt ",
            subchunk1_size=16,
            audio_format=1,
            num_channels=1,
            sample_rate=sample_rate,
            byte_rate=sample_rate * _SAMPLE_BYTES,
            block_align=_SAMPLE_BYTES,
            bits_per_sample=16,
            subchunk2_id=b"data",
            subchunk2_size=data_size,
        )


def _samples_from_bytes(raw: bytes) -> list[int]:
    pcm = array("h")
    pcm.frombytes(raw[: len(raw) - len(raw) % _SAMPLE_BYTES])
    if sys.byteorder == "big":
        pcm.byteswap()
    return pcm.tolist()


def _samples_to_bytes(samples: Iterable[int]) -> bytes:
    pcm = array("h", samples)
    if sys.byteorder == "big":
        pcm.byteswap()
    return pcm.tobytes()


def read_header(path: str | os.PathLike) -> WavHeader:
    """Read and validate the header of a WAV file."""
    with open(path, "rb") as fh:
        return WavHeader.from_bytes(fh.read(HEADER_SIZE))


def read_pcm(path: str | os.PathLike, header: WavHeader) -> list[int]:
    """Read the samples after the header, as many as ``header`` announces."""
    with open(path, "rb") as fh:
        fh.seek(HEADER_SIZE)
        raw = fh.read(header.sample_count() * _SAMPLE_BYTES)
    return _samples_from_bytes(raw)


def read_wav(path: str | os.PathLike) -> tuple[WavHeader, list[int]]:
    """Read a WAV file's header and samples."""
    header = read_header(path)
    return header, read_pcm(path, header)


def write_wav(
    path: str | os.PathLike, header: WavHeader, samples: Iterable[int]
) -> None:
    """Write ``header`` followed by ``samples`` as little-endian int16."""
    payload = _samples_to_bytes(samples)
    with open(path, "wb") as fh:
        fh.write(header.to_bytes())
        fh.write(payload)


def merge_files(
    paths: Sequence[str | os.PathLike], output: str | os.PathLike
) -> WavHeader:
    """Concatenate the samples of ``paths`` into ``output``.

    The format fields are taken from the last file read; the sizes are
    set to cover all merged samples. Returns the header written.
    """
    if not paths:
        raise ValueError("nothing to merge")
    merged: list[int] = []
    header: WavHeader | None = None
    for path in paths:
        header, samples = read_wav(path)
        merged.extend(samples)
    assert header is not None
    data_size = len(merged) * _SAMPLE_BYTES
    merged_header = replace(
        header, subchunk2_size=data_size, chunk_size=36 + data_size
    )
    write_wav(output, merged_header, merged)
    return merged_header


def reverse_file(
    input_file: str | os.PathLike, output_file: str | os.PathLike
) -> None:
    """Write ``input_file`` with its samples in reverse order."""
    header, samples = read_wav(input_file)
    samples.reverse()
    write_wav(output_file, header, samples)


def raw_to_wav(raw_path: str | os.PathLike, wav_path: str | os.PathLike) -> WavHeader:
    """Wrap a raw mono 16-bit recording in a WAV header and remove the raw file."""
    with open(raw_path, "rb") as fh:
        raw = fh.read()
    header = WavHeader.mono16(RECORDING_SAMPLE_RATE, len(raw))
    with open(wav_path, "wb") as fh:
        fh.write(header.to_bytes())
        fh.write(raw)
    os.remove(raw_path)
    return header