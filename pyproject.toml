[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aworld"
version = "0.1.0"
description = "A small multiplayer simulation world served over UDP with JSON messages"
requires-python = ">=3.10"
dependencies = []
keywords = ["simulation", "game", "world", "udp", "multiplayer", "raycast"]
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
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
aworld-server = "aworld.server:main"

[tool.hatch.build.targets.wheel]
packages = ["aworld"]

[tool.pytest.ini_options]
addopts = "-ra"
