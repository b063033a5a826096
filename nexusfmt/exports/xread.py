"""Export of a CHARACTERS matrix to the xread format of NONA and TNT."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..blocks.characters.block import CharactersBlock
from ..blocks.characters.model import CharacterState, StateType
from ..names import encode_name
from ..nexus import Nexus


class Variant(str, Enum):
    """The program dialect to write."""

    NONA = "NONA"
    TNT = "TNT"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Row:
    """One matrix line: the padded taxon name and its state sequence."""

    name: str
    sequence: str


@dataclass(frozen=True)
class CharLabel:
    """A character's 0-based index, name and state labels for cnames."""

    index: int
    name: str
    state_labels: list[str] = field(default_factory=list)


def _symbol(state: CharacterState) -> str:
    if state.type == StateType.MISSING:
        return "?"
    if state.type == StateType.GAP:
        return "-"
    if state.type == StateType.SINGLE:
        return state.values[0].symbol if state.values else "?"
    if state.type in (StateType.POLYMORPHIC, StateType.UNCERTAIN):
        return "[" + "".join(v.symbol for v in state.values) + "]"
    return "?"


class Exporter:
    """Writes the first CHARACTERS block of a file as an xread document."""

    def __init__(self, nexus: Nexus, variant: Variant) -> None:
        self.nexus = nexus
        self.variant = variant
        self.project = ""
        self.author = ""
        self.commands: list[str] = []
        # TNT truncates long names unless taxname is set.
        self.use_taxname = variant == Variant.TNT

    def set_project(self, project: str) -> Exporter:
        """Set the project named in the header and return the exporter."""
        self.project = project
        return self

    def set_author(self, author: str) -> Exporter:
        """Set the author named in the header and return the exporter."""
        self.author = author
        return self

    def set_taxname(self, use: bool) -> Exporter:
        """Choose whether to emit "taxname=;" (TNT only) and return the exporter."""
        self.use_taxname = use
        return self

    def add_command(self, cmd: str) -> Exporter:
        """Add a command written before the matrix (TNT only); return the exporter."""
        self.commands.append(cmd)
        return self

    def _block(self) -> CharactersBlock | None:
        return self.nexus.get_characters_block()

    def title(self) -> str:
        """Return the CHARACTERS block title, or "" without a block."""
        block = self._block()
        return block.title if block is not None else ""

    def nchar(self) -> int:
        """Return the number of characters, or 0 without a block."""
        block = self._block()
        return block.dimensions if block is not None else 0

    def ntax(self) -> int:
        """Return the number of taxa in the matrix, or 0 without a block."""
        block = self._block()
        return len(block.matrix.taxa) if block is not None else 0

    def rows(self) -> list[Row]:
        """Return the matrix lines with names padded to a common width."""
        block = self._block()
        if block is None:
            return []
        matrix = block.matrix
        names = [encode_name(t.name) for t in matrix.taxa]
        width = max((len(n) for n in names), default=0)
        return [
            Row(
                name.ljust(width),
                "".join(_symbol(taxon.get_state(c)) for c in matrix.characters),
            )
            for taxon, name in zip(matrix.taxa, names)
        ]

    def has_labels(self) -> bool:
        """Return True if any character has a name or state labels."""
        block = self._block()
        return block is not None and block.has_char_state_labels()

    def characters(self) -> list[CharLabel]:
        """Return the labelled characters; unnamed ones are called Char_<index>."""
        block = self._block()
        if block is None:
            return []
        return [
            CharLabel(
                index,
                encode_name(char.name or f"Char_{index}"),
                [encode_name(label) for label in char.state_labels],
            )
            for index, char in enumerate(block.matrix.characters)
            if char.name or char.state_labels
        ]

    def render(self) -> str:
        """Return the xread document for the chosen variant."""
        lines: list[str] = []

        header = []
        if self.project:
            header.append(f"Project: {self.project}")
        if self.author:
            header.append(f"Author: {self.author}")
        if header:
            lines.extend(["quote", *header, ";"])

        if self.variant == Variant.TNT:
            if self.use_taxname:
                lines.append("taxname=;")
            lines.extend(self.commands)

        lines.append("xread")
        title = self.title()
        if title:
            lines.append("'" + title.replace("'", "") + "'")
        lines.append(f"{self.nchar()} {self.ntax()}")
        lines.extend(f"{row.name} {row.sequence}" for row in self.rows())
        lines.append(";")

        if self.has_labels():
            lines.append("cnames")
            lines.extend(
                " ".join(["{", str(c.index), c.name, *c.state_labels, ";"])
                for c in self.characters()
            )
            lines.append(";")

        lines.append("proc/;")
        return "\n".join(lines) + "\n"