import pytest

from soundcomposer.wav import (
    HEADER_SIZE,
    WavFormatError,
    WavHeader,
    merge_files,
    raw_to_wav,
    read_header,
    read_pcm,
    read_wav,
    reverse_file,
    write_wav,
)


def _write(path, samples, rate=44100):
    header = WavHeader.mono16(rate, len(samples) * 2)
    write_wav(path, header, samples)
    return header


def test_mono16_fields_fixed_by_format():
    header = WavHeader.mono16(44100, 10)
    assert header.chunk_id == b"RIFF"
    assert header.format == b"WAVE"
    assert header.subchunk1_id == b"fmt "
    assert header.subchunk2_id == b"data"
    assert header.subchunk1_size == 16
    assert header.audio_format == 1
    assert header.num_channels == 1
    assert header.bits_per_sample == 16
    assert header.block_align == 2
    assert header.byte_rate == 88200
    assert header.chunk_size == 36 + 10
    assert header.subchunk2_size == 10


def test_header_bytes_round_trip():
    header = WavHeader.mono16(22050, 400)
    raw = header.to_bytes()
    assert len(raw) == HEADER_SIZE == 44
    assert raw[:4] == b"RIFF"
    assert raw[8:12] == b"WAVE"
    assert WavHeader.from_bytes(raw) == header


def test_from_bytes_rejects_wrong_magic():
    raw = bytearray(WavHeader.mono16(8000, 0).to_bytes())
    raw[:4] = b"RIFX"
    with pytest.raises(WavFormatError):
        WavHeader.from_bytes(bytes(raw))


def test_from_bytes_rejects_short_data():
    with pytest.raises(WavFormatError):
        WavHeader.from_bytes(b"RIFF")


def test_write_and_read_round_trip(tmp_path):
    samples = [0, 1, -1, 32767, -32768, 1234]
    path = tmp_path / "a.wav"
    header = _write(path, samples)
    got_header, got = read_wav(path)
    assert got_header == header
    assert got == samples
    assert got_header.sample_count() == len(samples)


def test_read_pcm_uses_header_size(tmp_path):
    samples = [5, 6, 7, 8]
    path = tmp_path / "a.wav"
    header = _write(path, samples)
    short = WavHeader.mono16(header.sample_rate, 4)
    assert read_pcm(path, short) == samples[:2]


def test_read_header_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_header(tmp_path / "missing.wav")


def test_read_header_invalid_file(tmp_path):
    path = tmp_path / "bad.wav"
    path.write_bytes(b"x" * 60)
    with pytest.raises(WavFormatError):
        read_header(path)


def test_write_rejects_out_of_range_sample(tmp_path):
    with pytest.raises(OverflowError):
        write_wav(tmp_path / "o.wav", WavHeader.mono16(8000, 2), [40000])


def test_reverse_file(tmp_path):
    samples = [1, 2, 3, 4, 5]
    src = tmp_path / "in.wav"
    dst = tmp_path / "out.wav"
    header = _write(src, samples)
    reverse_file(src, dst)
    got_header, got = read_wav(dst)
    assert got == samples[::-1]
    assert got_header == header


def test_reverse_twice_is_identity(tmp_path):
    samples = [10, -20, 30, -40]
    src = tmp_path / "in.wav"
    _write(src, samples)
    reverse_file(src, tmp_path / "r1.wav")
    reverse_file(tmp_path / "r1.wav", tmp_path / "r2.wav")
    assert read_wav(tmp_path / "r2.wav")[1] == samples


def test_merge_files_concatenates(tmp_path):
    first, second = [1, 2, 3], [4, 5, 6]
    _write(tmp_path / "a.wav", first)
    _write(tmp_path / "b.wav", second)
    out = tmp_path / "m.wav"
    merged = merge_files([tmp_path / "a.wav", tmp_path / "b.wav"], out)
    header, samples = read_wav(out)
    assert samples == first + second
    assert header == merged
    assert header.subchunk2_size == 2 * len(first + second)
    assert header.chunk_size == 36 + header.subchunk2_size


def test_merge_files_needs_input(tmp_path):
    with pytest.raises(ValueError):
        merge_files([], tmp_path / "m.wav")


def test_raw_to_wav(tmp_path):
    raw_path = tmp_path / "rec.raw"
    samples = [100, -100, 7]
    raw_path.write_bytes(b"".join(s.to_bytes(2, "little", signed=True) for s in samples))
    wav_path = tmp_path / "rec.wav"
    header = raw_to_wav(raw_path, wav_path)
    assert not raw_path.exists()
    assert header.sample_rate == 44100
    got_header, got = read_wav(wav_path)
    assert got_header == header
    assert got == samples


def test_raw_to_wav_missing_raw(tmp_path):
    with pytest.raises(FileNotFoundError):
        raw_to_wav(tmp_path / "none.raw", tmp_path / "x.wav")