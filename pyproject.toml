[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "helixvcs"
version = "0.1.0"
description = "A small content-addressed version control library with signed commits"
requires-python = ">=3.11"
keywords = ["version control", "vcs", "commits", "branches", "merge", "ed25519"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control",
]
dependencies = [
    "click",
    "cryptography",
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["helixvcs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
