[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pandactl"
version = "0.9.2"
description = "Robot state types, error flags, low-pass filtering and rate limiting for a seven-joint research arm"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["robotics", "control", "rate-limiting", "lowpass-filter", "robot-state"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pandactl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
