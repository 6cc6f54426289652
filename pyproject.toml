[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nesemu"
version = "0.1.0"
description = "Building blocks of a Nintendo Entertainment System emulator: cartridge mappers, joypad controllers and the audio processing unit."
requires-python = ">=3.10"
dependencies = []
keywords = ["nes", "emulator", "apu", "mapper", "mmc1", "mmc3", "cartridge", "joypad"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: System :: Emulators",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nesemu"]

[tool.pytest.ini_options]
addopts = "-ra"
