"""Window, layout and input handling for the sound editor."""

from __future__ import annotations

import argparse
import logging
import math
import os
import threading
from dataclasses import dataclass
from typing import NamedTuple, Sequence

import pygame

from .session import MAX_FILES, FilterLevel, Screen, Session
from .wav import WavFormatError, raw_to_wav, read_header
from .waveform import WAVEFORM_LEFT, file_waveform

log = logging.getLogger(__name__)

SCREEN_WIDTH = 1600
SCREEN_HEIGHT = 1000
DOCK_WIDTH = 50.0
DOCK_PADDING = 30.0
FILE_PANEL_WIDTH = 350.0
FILE_ROW_TOP = 85.0
FILE_ROW_HEIGHT = 40.0
RECORDING_SAMPLE_RATE = 44100
RAW_RECORDING_NAME = "real_time_recording.raw"

DOCK_FILES = "files"
DOCK_MERGE = "merge"
DOCK_FILTER = "filter"
DOCK_REVERSE = "reverse"
_DOCK_ORDER = (DOCK_FILES, DOCK_MERGE, DOCK_FILTER, DOCK_REVERSE)

_LOGO_ASSET = "Group 1 (1).png"
_DOCK_ASSETS = ("Group 1 (7).png", "Group 1 (8).png", "Group 1 (9).png", "Group 1 (10).png")
_LEVEL_ASSETS = ("Group 1 (17).png", "Group 3 (2).png", "Group 6.png", "Group 5.png")
_UNUSED_ASSETS = (
    "Group 1 (20).png",
    "Polygon 1 (2).png",
    "Group 3 (3).png",
    "Group 1 (21).png",
    "Group 2 (6).png",
)

_WHITE = (255, 255, 255)
_GRAY = (130, 130, 130)
_DARKGRAY = (80, 80, 80)
_RED = (230, 41, 55)
_YELLOW = (253, 249, 0)
_SKYBLUE = (102, 191, 255)
_BLUE = (0, 121, 241)
_BLACK = (0, 0, 0)
_LIME = (0, 158, 47)
_SOFT_GRAY = (30, 34, 42, 100)
_SOFT_YELLOW = (255, 255, 153, 100)

Size = tuple[int, int]
Point = Sequence[float]


class _Rect(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    def contains(self, pos: Point) -> bool:
        px, py = pos
        return (
            self.x <= px < self.x + self.width
            and self.y <= py < self.y + self.height
        )

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)


@dataclass(frozen=True)
class Layout:
    """Where the record button, dock icons, file rows and filter buttons sit."""

    logo_size: Size = (200, 200)
    dock_icon_sizes: tuple[Size, ...] = ((32, 32),) * 4
    level_icon_sizes: tuple[Size, ...] = ((250, 250),) * 4

    def __post_init__(self) -> None:
        if len(self.dock_icon_sizes) != len(_DOCK_ORDER):
            raise ValueError("the dock needs exactly four icon sizes")
        if len(self.level_icon_sizes) != len(FilterLevel):
            raise ValueError("the filter panel needs exactly four icon sizes")

    @property
    def logo_rect(self) -> _Rect:
        width, height = self.logo_size
        return _Rect(
            (SCREEN_WIDTH - width) / 2.0,
            (SCREEN_HEIGHT - height) / 6.0,
            float(width),
            float(height),
        )

    @property
    def dock_rects(self) -> dict[str, _Rect]:
        rects = {}
        y = DOCK_PADDING
        for name, (width, height) in zip(_DOCK_ORDER, self.dock_icon_sizes):
            rects[name] = _Rect((DOCK_WIDTH - width) / 2.0, y, float(width), float(height))
            y += height + DOCK_PADDING
        return rects

    @property
    def level_rects(self) -> dict[FilterLevel, _Rect]:
        centre = SCREEN_WIDTH / 2.0
        anchors = ((-300, 250), (300, 250), (-300, 600), (300, 600))
        return {
            level: _Rect(centre + dx - width / 2.0 + 50, float(top), float(width), float(height))
            for level, (dx, top), (width, height) in zip(
                FilterLevel, anchors, self.level_icon_sizes
            )
        }

    def file_entry(self, index: int) -> _Rect:
        """The row of the file list that shows file ``index``."""
        return _Rect(DOCK_WIDTH, FILE_ROW_TOP + FILE_ROW_HEIGHT * index, FILE_PANEL_WIDTH, FILE_ROW_HEIGHT)

    def hit_level(self, pos: Point) -> FilterLevel | None:
        return next(
            (level for level, rect in self.level_rects.items() if rect.contains(pos)),
            None,
        )

    def hit_dock(self, pos: Point) -> str | None:
        return next(
            (name for name, rect in self.dock_rects.items() if rect.contains(pos)),
            None,
        )


def _file_row_at(layout: Layout, pos: Point, count: int) -> int | None:
    first = layout.file_entry(0)
    px, py = pos
    if not first.x <= px < first.x + first.width or py < first.y:
        return None
    index = int((py - first.y) // first.height)
    return index if index < count else None


def _toggle_recording(session: Session, layout: Layout, pos: Point) -> str | None:
    if not layout.logo_rect.contains(pos):
        return None
    if session.recording_path is None:
        name = f"real_time_recording_{session.recording_count}.wav"
        session.recording_path = os.path.join(session.output_dir, name)
        log.info("Started recording to: %s", session.recording_path)
        return None
    path = session.recording_path
    if session.on_stop_recording is not None:
        session.on_stop_recording(path)
    session.recording_path = None
    log.info("Stopped recording.")
    if session.add_files([path]):
        session.select(len(session.files) - 1)
        session.recording_count += 1
    else:
        log.warning("Maximum number of recorded file paths reached. Cannot add new recording.")
    return path


def handle_click(session: Session, layout: Layout, pos: Point) -> str | None:
    """Apply a left click at ``pos``; return the path of any file it produced."""
    if session.screen is Screen.REAL:
        return _toggle_recording(session, layout, pos)
    if session.screen is not Screen.STATIC:
        return None

    produced = None
    button = layout.hit_dock(pos)
    if button == DOCK_FILES:
        state = session.toggle_file_list()
        log.info("File list panel toggled: %s", "ON" if state else "OFF")
    elif button == DOCK_MERGE:
        produced = session.merge()
    elif button == DOCK_FILTER:
        state = session.toggle_filter()
        log.info("Filter mode toggled: %s", "ON" if state else "OFF")
    elif button == DOCK_REVERSE:
        produced = session.reverse_selected()

    if session.file_list_open:
        index = _file_row_at(layout, pos, len(session.files))
        if index is not None:
            path = session.select(index)
            log.info("Selected file index: %d (%s)", index, os.path.basename(path))

    if session.filter_mode and session.selected_path() is not None:
        level = layout.hit_level(pos)
        if level is not None:
            produced = session.apply_filter(level)
    return produced


class _Recorder:
    """Captures mono 16-bit audio into a raw file and wraps it as WAV on stop."""

    def __init__(self, raw_path: str) -> None:
        self.raw_path = raw_path
        self._device = None
        self._file = None
        self._lock = threading.Lock()

    def start(self) -> bool:
        try:
            from pygame._sdl2 import audio as sdl_audio
        except ImportError:
            log.error("Audio capture is not available.")
            return False
        names = sdl_audio.get_audio_device_names(True)
        if not names:
            log.error("Failed to initialize capture device.")
            return False
        self._file = open(self.raw_path, "ab")

        def callback(_device, memory) -> None:
            with self._lock:
                if self._file is not None:
                    self._file.write(bytes(memory))

        try:
            self._device = sdl_audio.AudioDevice(
                devicename=names[0],
                iscapture=True,
                frequency=RECORDING_SAMPLE_RATE,
                audioformat=sdl_audio.AUDIO_S16,
                numchannels=1,
                chunksize=512,
                allowed_changes=0,
                callback=callback,
            )
            self._device.pause(0)
        except pygame.error as exc:
            log.error("Failed to start capture device: %s", exc)
            self._close()
            return False
        return True

    def _close(self) -> None:
        if self._device is not None:
            self._device.close()
            self._device = None
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def stop(self, wav_path: str) -> None:
        if self._device is None:
            return
        self._close()
        log.info("Recording stopped.")
        try:
            raw_to_wav(self.raw_path, wav_path)
        except OSError as exc:
            log.error("Failed to write recording %s: %s", wav_path, exc)


class _Waveforms:
    """Waveform columns per file, recomputed when the file changes."""

    def __init__(self) -> None:
        self._cache: dict[tuple[str, float], list[int] | None] = {}

    def get(self, path: str) -> list[int] | None:
        key = (path, os.path.getmtime(path))
        if key not in self._cache:
            self._cache[key] = self._compute(path)
        return self._cache[key]

    @staticmethod
    def _compute(path: str) -> list[int] | None:
        try:
            header = read_header(path)
            if header.subchunk2_size <= 0 or header.bits_per_sample != 16:
                return None
            channels = header.num_channels or 1
            num_samples = header.subchunk2_size // (channels * 2)
            return file_waveform(path, num_samples)
        except (OSError, WavFormatError):
            return None


def _fill(surface: pygame.Surface, rect: _Rect, rgba: tuple[int, ...]) -> None:
    overlay = pygame.Surface((int(rect.width), int(rect.height)), pygame.SRCALPHA)
    overlay.fill(rgba)
    surface.blit(overlay, (int(rect.x), int(rect.y)))


def _fade(rgb: tuple[int, int, int], alpha: float) -> tuple[int, int, int, int]:
    return (*rgb, int(255 * max(0.0, min(alpha, 1.0))))


def _tinted(image: pygame.Surface, tint: tuple[int, int, int]) -> pygame.Surface:
    if tint == _WHITE:
        return image
    copy = image.copy()
    copy.fill((*tint, 255), special_flags=pygame.BLEND_RGBA_MULT)
    return copy


class _Painter:
    def __init__(self, surface, layout, images, waveforms) -> None:
        self.surface = surface
        self.layout = layout
        self.images = images
        self.waveforms = waveforms
        self._fonts: dict[int, pygame.font.Font] = {}

    def font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def text(self, message, x, y, size, colour) -> None:
        self.surface.blit(self.font(size).render(message, True, colour), (int(x), int(y)))

    def width(self, message: str, size: int) -> int:
        return self.font(size).size(message)[0]

    def frame(self, session: Session, mouse: Point, seconds: float, fps: float) -> None:
        self.surface.fill(_BLACK)
        if session.screen is Screen.LOAD:
            message = "Load Screen - Press [Enter] for Real, [Space] for Static"
            self.text(message, (SCREEN_WIDTH - self.width(message, 20)) / 2, SCREEN_HEIGHT / 2, 20, _WHITE)
        elif session.screen is Screen.REAL:
            self.real(session, seconds)
        else:
            self.static(session, mouse)
        self.text(f"{round(fps)} FPS", SCREEN_WIDTH - 90, 10, 20, _LIME)

    def real(self, session: Session, seconds: float) -> None:
        logo = self.layout.logo_rect
        if session.recording_path is not None:
            pulse = 1.0 + 0.1 * math.sin(seconds * 6.0)
            radius = int((logo.width / 2.0 + 90.0) * pulse)
            glow = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
            pygame.draw.circle(glow, _fade((255, 0, 0), 0.3 * pulse), (radius, radius), radius)
            cx, cy = logo.center
            self.surface.blit(glow, (int(cx) - radius, int(cy) - radius))
        self.surface.blit(self.images["logo"], (int(logo.x), int(logo.y)))
        message = "Click button to Record/Stop. [Enter] for Static, [Space] for Load."
        self.text(message, 10, SCREEN_HEIGHT - 22 - 10, 22, _GRAY)

    def static(self, session: Session, mouse: Point) -> None:
        _fill(self.surface, _Rect(0, 0, DOCK_WIDTH, SCREEN_HEIGHT), _SOFT_GRAY[:3] + (50,))
        for name, rect in self.layout.dock_rects.items():
            tint = _SKYBLUE if name == DOCK_FILTER and session.filter_mode else _WHITE
            self.surface.blit(_tinted(self.images[name], tint), (int(rect.x), int(rect.y)))

        main_x = DOCK_WIDTH
        main_width = SCREEN_WIDTH - DOCK_WIDTH
        if session.file_list_open:
            self.file_list(session, mouse)
        elif session.filter_mode:
            for level, rect in self.layout.level_rects.items():
                tint = _YELLOW if rect.contains(mouse) else _WHITE
                self.surface.blit(_tinted(self.images[level], tint), (int(rect.x), int(rect.y)))
            selected = session.selected_path()
            if selected is None:
                message = "Select a file first (click file icon), then click level"
            else:
                message = f"Apply Filter to: {os.path.basename(selected)}"
            self.text(message, main_x + (main_width - self.width(message, 30)) / 2, 50, 30, _GRAY)
        else:
            if session.files:
                message = "Drop more files or click icon"
            else:
                message = "Drop your files to this window!"
            self.text(
                message,
                main_x + (main_width - self.width(message, 30)) / 2,
                SCREEN_HEIGHT / 2 - 15,
                30,
                _GRAY,
            )

    def file_list(self, session: Session, mouse: Point) -> None:
        _fill(self.surface, _Rect(DOCK_WIDTH, 0, FILE_PANEL_WIDTH, SCREEN_HEIGHT), _SOFT_GRAY)
        self.text("Dropped files:", DOCK_WIDTH + 10, 40, 20, _DARKGRAY)
        for index, path in enumerate(session.files):
            row = self.layout.file_entry(index)
            if session.selected_index == index:
                colour = _fade(_BLUE, 0.3)
            elif row.contains(mouse):
                colour = _fade(_YELLOW, 0.3)
            elif index % 2 == 0:
                colour = _fade(_DARKGRAY, 0.3)
            else:
                colour = _fade(_DARKGRAY, 0.1)
            _fill(self.surface, row, colour)
            self.text(os.path.basename(path), row.x + 10, row.y + 10, 20, _WHITE)

        area_x = DOCK_WIDTH + FILE_PANEL_WIDTH
        area_width = SCREEN_WIDTH - area_x
        selected = session.selected_path()
        if selected is None:
            message = "Select a file"
            self.text(message, area_x + (area_width - self.width(message, 30)) / 2, SCREEN_HEIGHT / 2 - 15, 30, _GRAY)
            return
        if not (os.path.isfile(selected) and selected.lower().endswith(".wav")):
            self.text("Selected file is not a WAV or does not exist.", area_x + 20, SCREEN_HEIGHT / 2, 20, _RED)
            return
        columns = self.waveforms.get(selected)
        if columns is None:
            self.text("Cannot display waveform for this file format", area_x + 20, SCREEN_HEIGHT / 2, 20, _RED)
            return
        centre = SCREEN_HEIGHT // 2
        pygame.draw.line(self.surface, _BLACK, (WAVEFORM_LEFT, centre), (SCREEN_WIDTH, centre))
        overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        for offset, y in enumerate(columns):
            x = WAVEFORM_LEFT + offset
            pygame.draw.line(overlay, _SOFT_YELLOW, (x, centre), (x, y))
        self.surface.blit(overlay, (0, 0))


def _load_images(assets: str) -> dict:
    keys: list = ["logo", *_DOCK_ORDER, *FilterLevel]
    names = [_LOGO_ASSET, *_DOCK_ASSETS, *_LEVEL_ASSETS]
    images = {key: pygame.image.load(os.path.join(assets, name)) for key, name in zip(keys, names)}
    for name in _UNUSED_ASSETS:
        pygame.image.load(os.path.join(assets, name))
    return images


def main(argv: Sequence[str] | None = None) -> int:
    """Open the editor window and run until it is closed."""
    parser = argparse.ArgumentParser(prog="soundcomposer", description="Record, merge, reverse and filter WAV files.")
    parser.add_argument("--assets", default="assets", help="directory holding the interface images")
    parser.add_argument("--output-dir", default=".", help="directory for recordings and edited files")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        images = _load_images(args.assets)
    except (OSError, pygame.error) as exc:
        log.warning("Failed to load image: %s", exc)
        return 1

    layout = Layout(
        logo_size=images["logo"].get_size(),
        dock_icon_sizes=tuple(images[name].get_size() for name in _DOCK_ORDER),
        level_icon_sizes=tuple(images[level].get_size() for level in FilterLevel),
    )

    pygame.init()
    try:
        surface = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Audio Waveform")
        images = {key: image.convert_alpha() for key, image in images.items()}
        recorder = _Recorder(os.path.join(args.output_dir, RAW_RECORDING_NAME))
        session = Session(output_dir=args.output_dir, on_stop_recording=recorder.stop)
        painter = _Painter(surface, layout, images, _Waveforms())
        clock = pygame.time.Clock()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_RETURN:
                        session.press_enter()
                    elif event.key == pygame.K_SPACE:
                        session.press_space()
                elif event.type == pygame.DROPFILE:
                    session.add_files([event.file])
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    was_recording = session.recording_path is not None
                    handle_click(session, layout, event.pos)
                    if not was_recording and session.recording_path is not None:
                        recorder.start()
            painter.frame(session, pygame.mouse.get_pos(), pygame.time.get_ticks() / 1000.0, clock.get_fps())
            pygame.display.flip()
            clock.tick(60)

        if session.recording_path is not None:
            recorder.stop(session.recording_path)
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())