"""Root container for NEXUS blocks and the registry of block types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TextIO, TypeVar

from .names import decode_name
from .scanner import Scanner


class Block(ABC):
    """A single NEXUS block that can parse itself and render itself."""

    name: str = ""

    @abstractmethod
    def parse(self, scanner: Scanner) -> None:
        """Read the block's commands from scanner, up to and including END;."""

    @abstractmethod
    def render(self) -> str:
        """Return the block as NEXUS text."""


class TaxaRegistry(ABC):
    """A block that other blocks may register taxon names with."""

    @abstractmethod
    def add_taxon(self, name: str) -> None:
        """Record a taxon name."""


BlockFactory = Callable[[str], Block]

BLOCK_REGISTRY: dict[str, BlockFactory] = {}

B = TypeVar("B", bound=Block)


def register_block(name: str, factory: BlockFactory) -> None:
    """Make the parser build blocks called name with factory."""
    BLOCK_REGISTRY[name.upper()] = factory


def get_block(core: Core, block_type: type[B]) -> B | None:
    """Return the first block of block_type in core, or None."""
    for block in core.blocks:
        if isinstance(block, block_type):
            return block
    return None


class Core:
    """The ordered list of blocks that makes up a NEXUS file."""

    def __init__(self) -> None:
        self.blocks: list[Block] = []

    def export(self, stream: TextIO) -> None:
        """Write the whole file in NEXUS format to stream."""
        stream.write("#NEXUS\n")
        for block in self.blocks:
            rendered = block.render()
            stream.write(f"\n{rendered}\n")

    def register_taxon(self, name: str) -> None:
        """Hand a decoded taxon name to the first block that keeps a taxa registry."""
        decoded = decode_name(name)
        for block in self.blocks:
            if isinstance(block, TaxaRegistry):
                block.add_taxon(decoded)
                return