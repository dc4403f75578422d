import os

import pytest

from soundcomposer.app import (
    DOCK_FILES,
    DOCK_FILTER,
    DOCK_MERGE,
    DOCK_REVERSE,
    Layout,
    handle_click,
    main,
)
from soundcomposer.filters import moving_average
from soundcomposer.session import FilterLevel, Screen, Session
from soundcomposer.wav import WavHeader, read_wav, write_wav


def _make_wav(path, samples):
    write_wav(path, WavHeader.mono16(44100, len(samples) * 2), samples)
    return str(path)


def _static_session(tmp_path, files=(), selected=None):
    session = Session(output_dir=str(tmp_path), screen=Screen.STATIC)
    session.files.extend(files)
    session.selected_index = selected
    return session


def test_first_file_row_matches_source_geometry():
    assert tuple(Layout().file_entry(0)) == (50.0, 85.0, 350.0, 40.0)


def test_file_rows_stack_without_gaps():
    layout = Layout()
    row3, row4 = layout.file_entry(3), layout.file_entry(4)
    assert row4.y - row3.y == row3.height


def test_rect_right_edge_is_exclusive():
    row = Layout().file_entry(0)
    assert row.contains((row.x, row.y))
    assert not row.contains((row.x + row.width, row.y))


def test_dock_hits_each_icon_in_order():
    layout = Layout(dock_icon_sizes=((30, 20), (40, 40), (20, 30), (44, 10)))
    rects = layout.dock_rects
    assert list(rects) == [DOCK_FILES, DOCK_MERGE, DOCK_FILTER, DOCK_REVERSE]
    for name, rect in rects.items():
        assert layout.hit_dock(rect.center) == name
    tops = [rect.y for rect in rects.values()]
    assert tops == sorted(tops)
    assert layout.hit_dock((1000, 1000)) is None


def test_level_hits_and_misses():
    layout = Layout()
    for level, rect in layout.level_rects.items():
        assert layout.hit_level(rect.center) is level
    assert layout.hit_level((0, 0)) is None


def test_layout_rejects_wrong_icon_count():
    with pytest.raises(ValueError):
        Layout(dock_icon_sizes=((10, 10),))


def test_click_on_load_screen_does_nothing(tmp_path):
    session = Session(output_dir=str(tmp_path))
    layout = Layout()
    assert handle_click(session, layout, layout.logo_rect.center) is None
    assert session.recording_path is None
    assert session.screen is Screen.LOAD


def test_files_icon_toggles_list(tmp_path):
    session = _static_session(tmp_path)
    layout = Layout()
    centre = layout.dock_rects[DOCK_FILES].center
    handle_click(session, layout, centre)
    assert session.file_list_open is True
    handle_click(session, layout, centre)
    assert session.file_list_open is False


def test_clicking_row_selects_file(tmp_path):
    a = _make_wav(tmp_path / "a.wav", [1, 2])
    b = _make_wav(tmp_path / "b.wav", [3, 4])
    session = _static_session(tmp_path, [a, b])
    session.file_list_open = True
    layout = Layout()
    handle_click(session, layout, layout.file_entry(1).center)
    assert session.selected_index == 1
    handle_click(session, layout, layout.file_entry(5).center)
    assert session.selected_index == 1


def test_reverse_icon_writes_reversed_file(tmp_path):
    samples = [1, -2, 3, -4, 5]
    source = _make_wav(tmp_path / "in.wav", samples)
    session = _static_session(tmp_path, [source], selected=0)
    layout = Layout()
    output = handle_click(session, layout, layout.dock_rects[DOCK_REVERSE].center)
    assert os.path.basename(output) == "reversed_0.wav"
    assert read_wav(output)[1] == samples[::-1]
    assert session.selected_index == 1


def test_filter_mode_then_level_applies_filter(tmp_path):
    samples = [0, 100, 200, 300, 400, 500, 600]
    source = _make_wav(tmp_path / "in.wav", samples)
    session = _static_session(tmp_path, [source], selected=0)
    layout = Layout()
    assert handle_click(session, layout, layout.dock_rects[DOCK_FILTER].center) is None
    assert session.filter_mode is True
    output = handle_click(session, layout, layout.level_rects[FilterLevel.LEVEL1].center)
    assert os.path.basename(output) == "lowpass_0.wav"
    assert read_wav(output)[1] == moving_average(samples)
    assert session.filter_mode is False
    assert session.selected_path() == output


def test_merge_icon_concatenates_files(tmp_path):
    a = _make_wav(tmp_path / "a.wav", [1, 2])
    b = _make_wav(tmp_path / "b.wav", [3, 4, 5])
    session = _static_session(tmp_path, [a, b])
    layout = Layout()
    output = handle_click(session, layout, layout.dock_rects[DOCK_MERGE].center)
    assert os.path.basename(output) == "merged_audio_0.wav"
    assert read_wav(output)[1] == [1, 2, 3, 4, 5]
    assert session.files[-1] == output


def test_logo_click_starts_and_stops_recording(tmp_path):
    stopped = []
    session = Session(output_dir=str(tmp_path), screen=Screen.REAL, on_stop_recording=stopped.append)
    layout = Layout()
    centre = layout.logo_rect.center
    assert handle_click(session, layout, centre) is None
    expected = os.path.join(str(tmp_path), "real_time_recording_0.wav")
    assert session.recording_path == expected
    assert handle_click(session, layout, centre) == expected
    assert stopped == [expected]
    assert session.recording_path is None
    assert session.files == [expected]
    assert session.selected_index == 0
    assert session.recording_count == 1


def test_click_outside_logo_keeps_recording_state(tmp_path):
    session = Session(output_dir=str(tmp_path), screen=Screen.REAL)
    assert handle_click(session, Layout(), (0, 0)) is None
    assert session.recording_path is None


def test_main_fails_without_assets(tmp_path, monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    assert main(["--assets", str(tmp_path / "missing"), "--output-dir", str(tmp_path)]) == 1