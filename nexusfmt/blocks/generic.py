"""A block that keeps the raw text of blocks the library does not model."""

from __future__ import annotations

from ..core import Block, Core, register_block
from ..scanner import NexusSyntaxError, Scanner


class GenericBlock(Block):
    """Any NEXUS block, held as its raw body text."""

    def __init__(self, name: str, core: Core | None = None, content: str = "") -> None:
        self.name = name
        self.core = core
        self.content = content

    def parse(self, scanner: Scanner) -> None:
        """Store the raw text up to END; with surrounding blank space trimmed."""
        try:
            content = scanner.read_raw_until_block_end()
        except (EOFError, NexusSyntaxError) as exc:
            raise NexusSyntaxError(
                f"error reading content for GENERIC block: {exc}"
            ) from exc
        content = content.rstrip(" \t\r\n")
        content = content.removeprefix("\r\n")
        content = content.removeprefix("\n")
        self.content = content

    def render(self) -> str:
        """Return the block wrapped in BEGIN and END commands."""
        body = f"{self.content}\n" if self.content else ""
        return f"BEGIN {self.name};\n{body}END;"


def new_block(core: Core, name: str) -> GenericBlock:
    """Create a generic block called name and append it to core."""
    block = GenericBlock(name, core)
    core.blocks.append(block)
    return block


register_block("GENERIC", GenericBlock)