[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pocketgb"
version = "0.1.0"
description = "Emulator core pieces for the original monochrome handheld console: memory map, cartridge banking, timers, joypad and a dot-stepped PPU."
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "gameboy", "dmg", "ppu", "mbc1", "retro"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pocketgb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
