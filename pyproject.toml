[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gbsplay"
version = "0.1.0"
description = "Game Boy sound player toolkit: output plugins, MIDI/VGM/WAV writers, bank mappers and player logic"
requires-python = ">=3.10"
dependencies = []
keywords = ["gameboy", "gbs", "chiptune", "midi", "vgm", "wav", "sound"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gbsplay-gen-impulse = "gbsplay.impulsegen:main"

[tool.hatch.build.targets.wheel]
packages = ["gbsplay"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
