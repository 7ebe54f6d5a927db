[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "battlecity"
version = "0.1.0"
description = "A tile-based tank battle arcade game with level files, bonuses and a keyboard-driven menu"
requires-python = ">=3.10"
keywords = ["game", "arcade", "tanks", "battle city", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
battlecity = "battlecity.app:main"

[tool.hatch.build.targets.wheel]
packages = ["battlecity"]

[tool.pytest.ini_options]
addopts = "-ra"
