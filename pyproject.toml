[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "depscan"
version = "0.1.0"
description = "Parsers that list the libraries and dependency graphs recorded in Rust and Swift lock files and auditable Rust binaries"
requires-python = ">=3.11"
dependencies = [
    "pyyaml",
]
keywords = [
    "dependencies",
    "lockfile",
    "cargo",
    "cargo-auditable",
    "cocoapods",
    "swift",
    "sbom",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Security",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["depscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
