[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitin"
version = "0.1.0"
description = "Building blocks for the Git smart protocol: object hashes, pkt-lines, pack data and push/fetch request parsing."
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "pack", "pkt-line", "smart-protocol", "version-control"]
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
    "Topic :: Software Development :: Version Control :: Git",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gitin"]

[tool.pytest.ini_options]
addopts = "-ra"
