# soundcomposer

soundcomposer is a small desktop editor for 16-bit PCM WAV files with a
canonical 44-byte header. Drop files onto its window, or record from the
default capture device, then:

- **merge** every readable WAV file in the list into one file (`merged_audio_N.wav`)
- **reverse** the selected file (`reversed_N.wav`)
- **low-pass filter** the selected file at one of four levels:
  1. a 5-sample moving average (`lowpass_N.wav`)
  2. a 2nd-order Butterworth section (`butterworth1_N.wav`)
  3. a cascaded 3rd-order filter, scaled by 0.85 (`butterworth3_N.wav`)
  4. a cascaded 4th-order filter, scaled by 0.0001 (`butterworth4_N.wav`)

Every new file is written to the output directory, added to the file list and
selected. With the file list open, the selected WAV is drawn as a waveform.

## Installation

```
pip install .
```

This installs `pygame`, which the window and audio capture use.

## Running

```
soundcomposer --assets path/to/images --output-dir path/to/output
```

- `--assets` (default `assets`): directory holding the interface images. The
  window does not open unless all of them load: `Group 1 (1).png` (record
  button), `Group 1 (7).png`, `Group 1 (8).png`, `Group 1 (9).png`,
  `Group 1 (10).png` (dock icons), `Group 1 (17).png`, `Group 3 (2).png`,
  `Group 6.png`, `Group 5.png` (filter levels), and `Group 1 (20).png`,
  `Polygon 1 (2).png`, `Group 3 (3).png`, `Group 1 (21).png`,
  `Group 2 (6).png`.
- `--output-dir` (default `.`): where recordings and edited files go.

The window opens on the load screen. Escape or closing the window quits.

| Screen | Enter          | Space          |
|--------|----------------|----------------|
| Load   | go to Real     | go to Static   |
| Real   | go to Static   | go to Load     |
| Static | go to Real     | go to Load     |

On the **Real** screen, click the button to start recording and again to stop.
Audio is captured as mono 16-bit at 44100 Hz into
`real_time_recording.raw`, which on stop is wrapped into
`real_time_recording_N.wav` and removed. Leaving the screen also stops a
recording.

The **Static** screen has a dock on the left with four icons, from top to
bottom: file list, merge, filter and reverse. Clicking a row of the open file
list selects that file. When filter mode is on, click one of the four level
tiles to filter the selected file; filter mode then turns off.

## Using the library

The WAV and filter functions work without a window:

```python
from soundcomposer.wav import read_wav, reverse_file, merge_files, raw_to_wav
from soundcomposer.filters import butterworth_2nd_order, low_filter
from soundcomposer.waveform import file_waveform

header, samples = read_wav("take.wav")
smoothed = butterworth_2nd_order(samples)

reverse_file("take.wav", "take_reversed.wav")
low_filter("take.wav", "take_smoothed.wav")
merge_files(["a.wav", "b.wav"], "both.wav")
columns = file_waveform("take.wav")
```

- `soundcomposer.wav`: `WavHeader` (`from_bytes`, `to_bytes`,
  `sample_count`, `mono16`), `read_header`, `read_pcm`, `read_wav`,
  `write_wav`, `merge_files`, `reverse_file`, `raw_to_wav`. A file that is not
  a RIFF/WAVE file raises `WavFormatError`. `merge_files` takes the format
  fields from the last file and raises `ValueError` when given no paths.
- `soundcomposer.filters`: `moving_average`, `butterworth_2nd_order`,
  `butterworth_3rd_order`, `butterworth_4th_order` on lists of samples, and
  `low_filter`, `butterworth_low_filter`, `butterworth_filter_3rd_order`,
  `butterworth_filter_4th_order` from file to file. Arithmetic is done in
  single precision and results saturate to the int16 range.
- `soundcomposer.waveform`: `waveform_columns` and `file_waveform` give, for
  each screen column, the y coordinate where its waveform line ends.
- `soundcomposer.session`: `Session` holds the editor's state (screen, file
  list of up to 4096 paths, selection, panels and output counters) and can be
  driven directly with `add_files`, `press_enter`, `press_space`,
  `toggle_file_list`, `toggle_filter`, `select`, `selected_path`, `merge`,
  `reverse_selected` and `apply_filter` with a `FilterLevel`.
- `soundcomposer.app`: `Layout` places the on-screen controls, and
  `handle_click(session, layout, pos)` applies a left click to a `Session`.

## Limitations

- The interface images are not included; the window needs them in the
  `--assets` directory.
- Filters, reversing and merging treat the data as one stream of 16-bit
  values, whatever the channel count, and expect the samples to start at
  byte 44.
- Recording needs a capture device that pygame can open; without one an
  error is logged and nothing is captured.
- There is no playback.

## Tests

```
pip install .[test]
pytest
```