[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hybridcvrp"
version = "0.1.0"
description = "Building blocks of a hybrid genetic metaheuristic for the Capacitated Vehicle Routing Problem"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = [
    "cvrp",
    "vehicle routing",
    "metaheuristic",
    "genetic algorithm",
    "optimization",
    "operations research",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hybridcvrp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
