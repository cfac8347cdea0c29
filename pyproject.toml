[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ratacat"
version = "0.3.0"
description = "SQLite history, search and jump marks for NEAR blocks and transactions, JSON helpers, and a small todo store"
requires-python = ">=3.10"
dependencies = []
keywords = ["near", "blockchain", "sqlite", "history", "json", "todo"]
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
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ratacat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
