[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "maglevsim"
version = "0.1.0"
description = "Interactive simulator for Maglev consistent hashing lookup tables"
requires-python = ">=3.10"
dependencies = []
keywords = ["maglev", "consistent-hashing", "load-balancing", "simulator", "hashing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
maglev-simulator = "maglevsim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["maglevsim"]

[tool.pytest.ini_options]
addopts = "-ra"
