[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "drawbridge"
version = "0.1.0"
description = "Core types for a content-addressed module registry: digests, names, contexts and trees"
requires-python = ">=3.10"
dependencies = [
    "semver",
]
keywords = ["content-digest", "sha-2", "registry", "tree", "hashing", "semver"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["drawbridge"]

[tool.pytest.ini_options]
addopts = "-ra"
