[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "soundcomposer"
version = "0.1.0"
description = "A small WAV editor: record, merge, reverse and low-pass filter 16-bit PCM files, with a waveform view."
requires-python = ">=3.10"
keywords = ["audio", "wav", "pcm", "low-pass", "butterworth", "waveform", "editor"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Editors",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
soundcomposer = "soundcomposer.app:main"

[tool.hatch.build.targets.wheel]
packages = ["soundcomposer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
