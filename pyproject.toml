[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nexusfmt"
version = "0.1.0"
description = "Read, build and write NEXUS phylogenetic data files, with TNT/NONA xread export."
requires-python = ">=3.10"
dependencies = [
    "jinja2",
]
keywords = ["nexus", "phylogenetics", "bioinformatics", "newick", "tnt", "nona", "xread", "parser"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["nexusfmt"]

[tool.pytest.ini_options]
addopts = "-ra"
