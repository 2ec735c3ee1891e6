[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "liesmooth"
version = "0.1.0"
description = "Lie groups, tangent-space differentiation, ODE integration and Bezier splines on Lie groups"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = [
    "lie group",
    "so2",
    "so3",
    "se2",
    "manifold",
    "jacobian",
    "runge-kutta",
    "bezier",
    "spline",
    "robotics",
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
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["liesmooth"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
