"""The data matrix of a CHARACTERS block: characters, taxa and cells."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ...names import decode_name
from .model import CharacterState, Format, StateType, StateValue


class MatrixOwner(Protocol):
    """What a matrix needs from the block that holds it."""

    dimensions: int
    format: Format


@dataclass
class Character:
    """One column of the matrix; index is 1-based."""

    index: int
    name: str = ""
    state_labels: list[str] = field(default_factory=list)


@dataclass
class Taxon:
    """One row of the matrix; index is 0-based."""

    index: int
    name: str
    matrix: Matrix = field(repr=False, compare=False)

    def set_state(self, char: Character, state_type: StateType, *args: str) -> None:
        """Set this taxon's cell for char, resolving state labels to symbols."""
        values = [
            StateValue(self.matrix.resolve_state_symbol(char, state), 1.0)
            for state in args
        ]
        self.matrix.set_state(
            self, char, CharacterState(index=char.index, type=state_type, values=values)
        )

    def get_state(self, char: Character) -> CharacterState:
        """Return this taxon's cell for char."""
        return self.matrix.get_state(self, char)


@dataclass(frozen=True)
class MatrixChunk:
    """Start (inclusive) and end (exclusive) columns of an interleaved chunk."""

    start: int
    end: int


def _missing(index: int) -> CharacterState:
    return CharacterState(index=index, type=StateType.MISSING)


class Matrix:
    """The grid of character states, one row per taxon."""

    def __init__(self, parent: MatrixOwner) -> None:
        self.parent = parent
        self.characters: list[Character] = []
        self.taxa: list[Taxon] = []
        self._data: list[list[CharacterState]] = []

    def _in_range(self, taxon_index: int, char_index: int) -> bool:
        return 0 <= taxon_index < len(self._data) and 0 <= char_index < len(
            self._data[taxon_index]
        )

    def get_state_by_index(self, taxon_index: int, char_index: int) -> CharacterState:
        """Return the cell at a 0-based row and column.

        Outside the grid an empty SINGLE state is returned.
        """
        if self._in_range(taxon_index, char_index):
            return self._data[taxon_index][char_index]
        return CharacterState(index=char_index + 1, type=StateType.SINGLE)

    def set_state_by_index(
        self, taxon_index: int, char_index: int, state: CharacterState
    ) -> None:
        """Replace the cell at a 0-based row and column; ignored outside the grid."""
        if self._in_range(taxon_index, char_index):
            self._data[taxon_index][char_index] = state

    def get_state(self, taxon: Taxon, char: Character) -> CharacterState:
        """Return the cell for taxon and char."""
        return self.get_state_by_index(taxon.index, char.index - 1)

    def set_state(self, taxon: Taxon, char: Character, state: CharacterState) -> None:
        """Replace the cell for taxon and char."""
        self.set_state_by_index(taxon.index, char.index - 1, state)

    def add_character(self, name: str, *args: str) -> Character:
        """Append a character with optional state labels; existing rows get MISSING."""
        char = Character(
            index=len(self.characters) + 1,
            name=decode_name(name),
            state_labels=list(args),
        )
        self.characters.append(char)
        self.parent.dimensions = len(self.characters)
        for row in self._data:
            row.append(_missing(char.index))
        return char

    def add_taxon(self, name: str) -> Taxon:
        """Append a taxon whose row is filled with MISSING states."""
        taxon = Taxon(index=len(self.taxa), name=decode_name(name), matrix=self)
        self.taxa.append(taxon)
        self._data.append([_missing(i + 1) for i in range(self.parent.dimensions)])
        return taxon

    def get_taxon(self, name: str) -> Taxon | None:
        """Return the taxon with that name, ignoring case and underscores."""
        wanted = decode_name(name).lower()
        return next(
            (t for t in self.taxa if decode_name(t.name).lower() == wanted), None
        )

    def get_character_by_index(self, index: int) -> Character | None:
        """Return the character at a 1-based index, or None."""
        if 0 < index <= len(self.characters):
            return self.characters[index - 1]
        return None

    def resolve_state_symbol(self, char: Character, state: str) -> str:
        """Translate a state label of char into its symbol; other text is kept."""
        wanted = state.casefold()
        symbols = self.parent.format.symbols
        for idx, label in enumerate(char.state_labels):
            if label.casefold() == wanted:
                return symbols[idx] if idx < len(symbols) else str(idx)
        return state