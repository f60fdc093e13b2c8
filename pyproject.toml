[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vnstory"
version = "0.1.0"
description = "Dialogue graph, branching choices, affection tracking and save slots for visual novels"
requires-python = ">=3.10"
dependencies = []
keywords = ["visual novel", "dialogue", "branching story", "save game", "interactive fiction"]
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
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vnstory"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
