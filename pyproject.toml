[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysclk"
version = "0.1.0"
description = "Clock profiles, configuration values, power-management helpers and a request client for a console clock-control service"
requires-python = ">=3.10"
dependencies = []
keywords = ["overclocking", "clocks", "i2c", "pmic", "battery", "ipc"]
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
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sysclk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
