"""The CHARACTERS block: character definitions and the data matrix."""

from __future__ import annotations

from ...core import Block, Core, register_block
from ...names import quote_name
from ...scanner import Scanner
from ...templater import pad
from .matrix import Character, Matrix, MatrixChunk, Taxon
from .model import DEFAULT_SYMBOLS, CharacterState, DataType, Format, StateType
from .parsing import parse_characters

_NO_MATCH = (StateType.MISSING, StateType.GAP)


def _same_state(state: CharacterState, reference: CharacterState) -> bool:
    return (
        state.type == reference.type
        and state.type not in _NO_MATCH
        and state.values == reference.values
    )


def _label(text: str) -> str:
    return quote_name(text) if text.strip() else "_"


class CharactersBlock(Block):
    """A CHARACTERS block holding a FORMAT and a data matrix."""

    def __init__(
        self,
        name: str = "CHARACTERS",
        data_type: str = DataType.STANDARD,
        core: Core | None = None,
    ) -> None:
        self.name = name
        self.core = core
        self.title = ""
        self.dimensions = 0
        self.format = Format(
            data_type=data_type,
            symbols=list(DEFAULT_SYMBOLS.get(data_type, ())),  # type: ignore[call-overload]
        )
        self.matrix = Matrix(self)
        self.eliminate: set[int] = set()

    def parse(self, scanner: Scanner) -> None:
        """Read the block's commands up to and including END;."""
        parse_characters(self, scanner)

    def add_taxon(self, name: str) -> Taxon:
        """Add a row to the matrix and return its taxon."""
        return self.matrix.add_taxon(name)

    def has_char_state_labels(self) -> bool:
        """Return True if any character has a name or state labels."""
        return any(char.name or char.state_labels for char in self.matrix.characters)

    def max_taxon_name_length(self) -> int:
        """Return the length of the longest taxon name."""
        return max((len(t.name) for t in self.matrix.taxa), default=0)

    def interleaved_chunks(self, chunk_size: int) -> list[MatrixChunk]:
        """Split the columns into consecutive chunks of at most chunk_size."""
        if chunk_size <= 0:
            raise ValueError("chunk size must be a positive integer")
        return [
            MatrixChunk(start, min(start + chunk_size, self.dimensions))
            for start in range(0, self.dimensions, chunk_size)
        ]

    # -- rendering -------------------------------------------------------

    def render(self) -> str:
        """Return the block as NEXUS text."""
        lines = [f"BEGIN {self.name};"]
        if self.title:
            lines.append(f"\tTITLE {quote_name(self.title)};")
        lines.append(f"\tDIMENSIONS NCHAR={self.dimensions};")
        format_line = str(self.format)
        if format_line:
            lines.append(format_line)
        if self.has_char_state_labels():
            lines.extend(self._render_char_state_labels())
        lines.extend(self._render_matrix())
        lines.append("END;")
        return "\n".join(lines)

    def _render_char_state_labels(self) -> list[str]:
        entries = []
        for char in self.matrix.characters:
            entry = f"\t\t{char.index}"
            if char.name:
                entry += f" {_label(char.name)}"
            if char.state_labels:
                entry += " / " + " ".join(_label(s) for s in char.state_labels)
            entries.append(entry)
        return ["\tCHARSTATELABELS", ",\n".join(entries), "\t;"]

    def _cell(self, taxon: Taxon, char: Character, first: Taxon | None) -> str:
        state = self.matrix.get_state(taxon, char)
        if (
            self.format.match_char
            and first is not None
            and taxon.index != first.index
            and _same_state(state, self.matrix.get_state(first, char))
        ):
            return self.format.match_char
        return state.render(self.format)

    def _render_matrix(self) -> list[str]:
        fmt = self.format
        taxa = self.matrix.taxa
        characters = self.matrix.characters
        first = taxa[0] if taxa else None
        separator = " " if fmt.tokens and fmt.data_type != DataType.STANDARD else ""

        labels = [quote_name(t.name) for t in taxa]
        width = max((len(label) for label in labels), default=0)

        if fmt.interleave:
            chunks = self.interleaved_chunks(fmt.interleave_size)
        else:
            chunks = [MatrixChunk(0, len(characters))]

        lines = ["\tMATRIX"]
        for chunk_no, chunk in enumerate(chunks):
            if chunk_no:
                lines.append("")
            columns = characters[chunk.start : chunk.end]
            for taxon, label in zip(taxa, labels):
                cells = separator.join(self._cell(taxon, c, first) for c in columns)
                lines.append(f"\t\t{pad(width, label)}{cells}")
        lines.append("\t;")
        return lines


def new_block(core: Core, data_type: str) -> CharactersBlock:
    """Create a CHARACTERS block of data_type and append it to core.

    A block created this way starts with no state symbols declared.
    """
    block = CharactersBlock("CHARACTERS", data_type, core)
    block.format.symbols = []
    core.blocks.append(block)
    return block


register_block("CHARACTERS", CharactersBlock)