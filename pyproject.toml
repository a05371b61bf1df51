[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nullspace-nav"
version = "0.1.1"
description = "Building blocks for nullspace model predictive control of four-wheel independent steering vehicles: HQP tasks and solver, sampling helpers, markers and joystick teleoperation"
requires-python = ">=3.10"
keywords = [
    "model predictive control",
    "mppi",
    "hierarchical quadratic programming",
    "nullspace",
    "navigation",
    "mobile robot",
    "swerve drive",
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
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["nullspace_nav"]

[tool.hatch.build.targets.sdist]
include = [
    "nullspace_nav",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
