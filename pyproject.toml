[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metricflow"
version = "0.1.0"
description = "Thread-safe gauges and counters with a background writer that appends timestamped snapshots to a file"
requires-python = ">=3.10"
dependencies = []
keywords = ["metrics", "monitoring", "gauge", "counter", "collector", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
metricflow = "metricflow.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["metricflow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
