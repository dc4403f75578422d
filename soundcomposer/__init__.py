"""Record, merge, reverse, filter and view 16-bit PCM WAV files."""

__version__ = "0.1.0"