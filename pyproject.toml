[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arkvault"
version = "0.0.2"
description = "Data model for backup arks: typed keys, manifests, vaults, client configuration, progress and cost receipts"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "backup",
    "archive",
    "vault",
    "manifest",
    "bech32m",
    "bls12-381",
    "progress",
]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Backup",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["arkvault"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
