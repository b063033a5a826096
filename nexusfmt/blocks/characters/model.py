"""Data types, state values and FORMAT settings of a CHARACTERS block."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DataType(str, Enum):
    """Standard NEXUS data types."""

    STANDARD = "STANDARD"
    DNA = "DNA"
    RNA = "RNA"
    NUCLEOTIDE = "NUCLEOTIDE"
    PROTEIN = "PROTEIN"
    CONTINUOUS = "CONTINUOUS"

    def __str__(self) -> str:
        return self.value


class StateType(str, Enum):
    """Whether a cell holds one state, several, or none."""

    SINGLE = "SINGLE"
    POLYMORPHIC = "POLYMORPHIC"
    UNCERTAIN = "UNCERTAIN"
    MISSING = "MISSING"
    GAP = "GAP"

    def __str__(self) -> str:
        return self.value


DEFAULT_SYMBOLS: dict[DataType, tuple[str, ...]] = {
    DataType.DNA: ("A", "C", "G", "T"),
    DataType.RNA: ("A", "C", "G", "U"),
    DataType.NUCLEOTIDE: ("A", "C", "G", "T", "U"),
    DataType.PROTEIN: (
        "A", "R", "N", "D", "C", "Q", "E", "G", "H", "I", "L",
        "K", "M", "F", "P", "S", "T", "W", "Y", "V", "*",
    ),
    DataType.STANDARD: ("0", "1"),
}

DEFAULT_EQUATES: dict[DataType, dict[str, str]] = {
    DataType.DNA: {
        "R": "(A G)", "Y": "(C T)", "M": "(A C)", "K": "(G T)",
        "S": "(C G)", "W": "(A T)", "H": "(A C T)", "B": "(C G T)",
        "V": "(A C G)", "D": "(A G T)", "N": "(A C G T)",
    },
    DataType.RNA: {
        "R": "(A G)", "Y": "(C U)", "M": "(A C)", "K": "(G U)",
        "S": "(C G)", "W": "(A U)", "H": "(A C U)", "B": "(C G U)",
        "V": "(A C G)", "D": "(A G U)", "N": "(A C G U)",
    },
    DataType.NUCLEOTIDE: {
        "R": "(A G)", "Y": "(C T U)", "M": "(A C)", "K": "(G T U)",
        "S": "(C G)", "W": "(A T U)", "H": "(A C T U)", "B": "(C G T U)",
        "V": "(A C G)", "D": "(A G T U)", "N": "(A C G T U)",
    },
    DataType.PROTEIN: {
        "B": "(D N)",
        "Z": "(E Q)",
        "X": "(A R N D C Q E G H I L K M F P S T W Y V)",
    },
}


def _format_weight(weight: float) -> str:
    if weight.is_integer() and abs(weight) < 1e21:
        return str(int(weight))
    return repr(weight)


@dataclass
class StateValue:
    """A state symbol with its count or frequency (1.0 when none is given)."""

    symbol: str
    weight: float = 1.0


@dataclass
class CharacterState:
    """The contents of one matrix cell."""

    index: int = 0
    type: StateType = StateType.SINGLE
    values: list[StateValue] = field(default_factory=list)

    def render(self, fmt: Format) -> str:
        """Return the cell as matrix text under the given format."""
        if self.type == StateType.MISSING:
            return fmt.missing
        if self.type == StateType.GAP:
            return fmt.gap

        resolved = [
            value.symbol
            if value.weight in (1.0, 0.0)
            else f"{value.symbol}:{_format_weight(value.weight)}"
            for value in self.values
        ]

        if self.type == StateType.POLYMORPHIC:
            return "(" + " ".join(resolved) + ")"
        if self.type == StateType.UNCERTAIN:
            return "{" + " ".join(resolved) + "}"
        return resolved[0] if resolved else fmt.missing


@dataclass
class Format:
    """The settings of a FORMAT command."""

    data_type: str = DataType.STANDARD
    missing: str = "?"
    gap: str = "-"
    symbols: list[str] = field(default_factory=list)
    equate: dict[str, str] = field(default_factory=dict)
    match_char: str = ""
    respect_case: bool = False
    interleave: bool = False
    interleave_size: int = 70
    tokens: bool = False
    labels: bool = True
    transpose: bool = False
    items: str = ""
    states_format: str = ""
    nstates: int = 0

    def __str__(self) -> str:
        parts: list[str] = []
        if self.data_type:
            parts.append(f"DATATYPE={self.data_type!s}")
        if self.missing and self.missing != "?":
            parts.append(f"MISSING={self.missing}")
        if self.gap and self.gap != "-":
            parts.append(f"GAP={self.gap}")
        if self.match_char:
            parts.append(f"MATCHCHAR={self.match_char}")
        if self.respect_case:
            parts.append("RESPECTCASE")
        if self.interleave:
            parts.append("INTERLEAVE")
        if self.tokens and self.data_type != DataType.STANDARD:
            parts.append("TOKENS")
        if not self.labels:
            parts.append("LABELS=NO")

        if not parts:
            return ""
        return "\tFORMAT " + " ".join(parts) + ";"