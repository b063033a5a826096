"""High-level entry point for building, reading and writing NEXUS files."""

from __future__ import annotations

from typing import TextIO

from . import parser
from .blocks import generic, taxa, trees
from .blocks.characters import block as characters
from .core import Block, Core, get_block
from .scanner import Source


class Nexus:
    """A NEXUS file: an ordered collection of blocks with a convenient API."""

    def __init__(self, core: Core | None = None) -> None:
        self.core = core if core is not None else Core()

    @property
    def blocks(self) -> list[Block]:
        """The blocks of the file, in order."""
        return self.core.blocks

    def new_characters_block(self, data_type: str) -> characters.CharactersBlock:
        """Append and return a new CHARACTERS block of data_type."""
        return characters.new_block(self.core, data_type)

    def get_characters_block(self) -> characters.CharactersBlock | None:
        """Return the first CHARACTERS block, or None."""
        return get_block(self.core, characters.CharactersBlock)

    def new_taxa_block(self) -> taxa.TaxaBlock:
        """Append and return a new TAXA block."""
        return taxa.new_block(self.core)

    def get_taxa_block(self) -> taxa.TaxaBlock | None:
        """Return the first TAXA block, or None."""
        return get_block(self.core, taxa.TaxaBlock)

    def new_trees_block(self) -> trees.TreesBlock:
        """Append and return a new TREES block."""
        return trees.new_block(self.core)

    def get_trees_block(self) -> trees.TreesBlock | None:
        """Return the first TREES block, or None."""
        return get_block(self.core, trees.TreesBlock)

    def new_unknown_block(self, name: str) -> generic.GenericBlock:
        """Append and return a block called name that holds raw text."""
        return generic.new_block(self.core, name)

    def get_block_by_name(self, name: str) -> Block | None:
        """Return the first block whose name is exactly name, or None."""
        return next((b for b in self.core.blocks if b.name == name), None)

    def export(self, stream: TextIO) -> None:
        """Write the file in NEXUS format to stream."""
        self.core.export(stream)


def parse(stream: Source) -> Nexus:
    """Read NEXUS text from a string, bytes or file object.

    Raises NexusSyntaxError if the input is not valid NEXUS.
    """
    return Nexus(parser.parse(stream))