"""Editor state: screens, the file list, and the edit actions on files."""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Iterable

from . import filters
from .wav import WavFormatError, merge_files, read_header, reverse_file

log = logging.getLogger(__name__)

MAX_FILES = 4096


class Screen(enum.Enum):
    LOAD = 0
    REAL = 1
    STATIC = 2


class FilterLevel(enum.Enum):
    """The four filter buttons, from mildest to strongest."""

    LEVEL1 = 1
    LEVEL2 = 2
    LEVEL3 = 3
    LEVEL4 = 4

    @property
    def prefix(self) -> str:
        return _FILTER_PREFIXES[self]

    def apply(self, input_file: str | os.PathLike, output_file: str | os.PathLike) -> None:
        _FILTER_FUNCTIONS[self](input_file, output_file)


_FILTER_PREFIXES = {
    FilterLevel.LEVEL1: "lowpass",
    FilterLevel.LEVEL2: "butterworth1",
    FilterLevel.LEVEL3: "butterworth3",
    FilterLevel.LEVEL4: "butterworth4",
}

_FILTER_FUNCTIONS = {
    FilterLevel.LEVEL1: filters.low_filter,
    FilterLevel.LEVEL2: filters.butterworth_low_filter,
    FilterLevel.LEVEL3: filters.butterworth_filter_3rd_order,
    FilterLevel.LEVEL4: filters.butterworth_filter_4th_order,
}


def _is_wav(path: str) -> bool:
    return os.path.isfile(path) and path.lower().endswith(".wav")


def _readable_wav(path: str) -> bool:
    if not _is_wav(path):
        return False
    try:
        read_header(path)
    except (OSError, WavFormatError):
        return False
    return True


@dataclass
class Session:
    """Everything the editor remembers between frames."""

    output_dir: str = "."
    screen: Screen = Screen.LOAD
    files: list[str] = field(default_factory=list)
    selected_index: int | None = None
    file_list_open: bool = False
    filter_mode: bool = False
    reverse_count: int = 0
    lowpass_count: int = 0
    merge_count: int = 0
    recording_count: int = 0
    recording_path: str | None = None
    on_stop_recording: Callable[[str], None] | None = None

    def _output(self, name: str) -> str:
        return os.path.join(self.output_dir, name)

    def _close_panels(self) -> None:
        self.file_list_open = False
        self.filter_mode = False

    def _stop_recording(self) -> None:
        if self.recording_path is None:
            return
        if self.on_stop_recording is not None:
            self.on_stop_recording(self.recording_path)
        self.recording_path = None
        log.info("Stopped recording due to screen change.")

    def _append_selected(self, path: str) -> None:
        if len(self.files) < MAX_FILES:
            self.files.append(path)
            self.selected_index = len(self.files) - 1
        else:
            log.warning("Max files reached, cannot add %s to list.", path)

    def add_files(self, paths: Iterable[str | os.PathLike]) -> int:
        """Add dropped files up to the list's capacity; return how many were added."""
        paths = [os.fspath(p) for p in paths]
        room = MAX_FILES - len(self.files)
        added = paths[: max(room, 0)]
        self.files.extend(added)
        for path in added:
            log.info("Dropped file added: %s", path)
        if len(paths) > len(added):
            log.warning(
                "Maximum number of file paths reached (%d). %d files were not added.",
                MAX_FILES,
                len(paths) - len(added),
            )
        return len(added)

    def press_enter(self) -> None:
        if self.screen is Screen.LOAD:
            self.screen = Screen.REAL
        elif self.screen is Screen.REAL:
            self.screen = Screen.STATIC
            self._close_panels()
            self._stop_recording()
        else:
            self.screen = Screen.REAL
            self._close_panels()

    def press_space(self) -> None:
        if self.screen is Screen.LOAD:
            self.screen = Screen.STATIC
            self._close_panels()
        elif self.screen is Screen.REAL:
            self.screen = Screen.LOAD
            self._stop_recording()
        else:
            self.screen = Screen.LOAD
            self._close_panels()

    def toggle_file_list(self) -> bool:
        self.file_list_open = not self.file_list_open
        if self.file_list_open:
            self.filter_mode = False
        return self.file_list_open

    def toggle_filter(self) -> bool:
        self.filter_mode = not self.filter_mode
        if self.filter_mode:
            self.file_list_open = False
        return self.filter_mode

    def select(self, index: int) -> str:
        """Select the file at ``index`` and return its path."""
        if not 0 <= index < len(self.files):
            raise IndexError(f"no file at index {index}")
        self.selected_index = index
        return self.files[index]

    def selected_path(self) -> str | None:
        if self.selected_index is None:
            return None
        return self.files[self.selected_index]

    def merge(self) -> str | None:
        """Merge every readable WAV in the list into a new file and select it."""
        if not self.files:
            log.warning("Merge clicked, but no files dropped to merge.")
            return None
        valid = []
        for path in self.files:
            if _readable_wav(path):
                valid.append(path)
            else:
                log.warning("Skipping non-WAV or non-existent file for merging: %s", path)
        if not valid:
            log.warning("No valid files were added to the merge list.")
            return None
        output = self._output(f"merged_audio_{self.merge_count}.wav")
        merge_files(valid, output)
        self.merge_count += 1
        self._append_selected(output)
        return output

    def reverse_selected(self) -> str | None:
        """Reverse the selected file into a new file and select it."""
        source = self.selected_path()
        if source is None:
            log.warning("Reverse clicked, but no file selected.")
            return None
        if not _readable_wav(source):
            log.warning("Cannot reverse: selected item is not a valid WAV file.")
            return None
        output = self._output(f"reversed_{self.reverse_count}.wav")
        reverse_file(source, output)
        self.reverse_count += 1
        self._append_selected(output)
        return output

    def apply_filter(self, level: FilterLevel) -> str | None:
        """Filter the selected file while in filter mode; leave filter mode after."""
        source = self.selected_path()
        if not self.filter_mode or source is None:
            return None
        if not _readable_wav(source):
            log.warning("Cannot apply filter: selected item is not a valid WAV file.")
            return None
        level = FilterLevel(level)
        output = self._output(f"{level.prefix}_{self.lowpass_count}.wav")
        level.apply(source, output)
        log.info("Applied low-pass filter (%s) to: %s -> %s", level.name, source, output)
        self.lowpass_count += 1
        self.filter_mode = False
        self._append_selected(output)
        return output