"""Read, build and write NEXUS phylogenetic data files."""

__version__ = "0.1.0"