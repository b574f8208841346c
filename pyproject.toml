[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "eqminer"
version = "0.4b0"
description = "Building blocks for an Equihash mining client: a typed JSON value model and writer, block header serialization and solution encoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["equihash", "stratum", "mining", "zcash", "json", "block-header", "merkle"]
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
    "Topic :: Internet",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["eqminer"]

[tool.pytest.ini_options]
addopts = "-ra"
