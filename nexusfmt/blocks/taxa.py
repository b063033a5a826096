"""The TAXA block: taxon labels, taxon sets and taxon partitions."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from ..core import Block, Core, register_block
from ..names import decode_name
from ..parser import expect_semicolon, is_all_digits, read_until_semicolon
from ..scanner import NexusSyntaxError, Scanner
from ..templater import quote

_BLOCK_END = ("END", "ENDBLOCK")
_INTEGER = re.compile(r"[+-]?[0-9]+")
VECTOR_DATA = "VECTOR_DATA"


class SetFormat(str, Enum):
    """How the members of a set or partition are written."""

    STANDARD = "STANDARD"
    VECTOR = "VECTOR"

    def __str__(self) -> str:
        return self.value


@dataclass
class TaxSet:
    """A named collection of taxa."""

    format: SetFormat = SetFormat.STANDARD
    taxa_list: list[str] = field(default_factory=list)


@dataclass
class TaxPartition:
    """A division of the taxa into named subsets."""

    format: SetFormat = SetFormat.STANDARD
    subsets: dict[str, list[str]] = field(default_factory=dict)


def _normalize(name: str) -> str:
    return name.lower()


def _to_int(token: str) -> int | None:
    return int(token) if _INTEGER.fullmatch(token) else None


def _find_equals(tokens: list[str], start: int) -> int:
    for idx in range(start, len(tokens)):
        if tokens[idx] == "=":
            return idx
    return -1


def _parse_set_header(
    command: str, tokens: list[str]
) -> tuple[str, SetFormat, list[str]]:
    """Split a TAXSET/TAXPARTITION command into name, format and definition."""
    if len(tokens) < 3:
        raise NexusSyntaxError(f"malformed {command} command")

    name = decode_name(tokens[0])
    fmt = SetFormat.STANDARD
    definition_start = 1

    if tokens[1] == "(":
        for idx in range(2, len(tokens)):
            if tokens[idx] == ")":
                definition_start = idx + 1
                break
            if tokens[idx].upper() == "VECTOR":
                fmt = SetFormat.VECTOR

    eq_idx = _find_equals(tokens, definition_start)
    if eq_idx == -1:
        raise NexusSyntaxError(f"expected '=' in {command} command")
    return name, fmt, tokens[eq_idx + 1 :]


def _standard_subsets(definition: list[str]) -> dict[str, list[str]]:
    """Read `name: taxa..., name: taxa...` into a mapping."""
    subsets: dict[str, list[str]] = {}
    current_subset = ""
    current_list: list[str] = []

    for idx, tok in enumerate(definition):
        if tok == ":" and idx > 0:
            # The token before the colon was the subset name, not a member.
            current_subset = decode_name(definition[idx - 1])
            if current_list:
                current_list.pop()
            continue
        if tok == ",":
            if current_subset:
                subsets[current_subset] = current_list
            current_subset = ""
            current_list = []
            continue
        current_list.append(tok)

    if current_subset:
        subsets[current_subset] = current_list
    return subsets


class TaxaBlock(Block):
    """A TAXA block."""

    def __init__(self, name: str = "TAXA", core: Core | None = None) -> None:
        self.name = name
        self.core = core
        self.title = ""
        self.dimensions = 0
        self.tax_labels: list[str] = []
        self.tax_partitions: dict[str, TaxPartition] = {}
        self.tax_sets: dict[str, TaxSet] = {}

    # -- parsing ---------------------------------------------------------

    def parse(self, scanner: Scanner) -> None:
        """Read the block's commands up to and including END;."""
        has_dimensions = False
        has_tax_labels = False

        while True:
            command = scanner.next_token().upper()
            if command in _BLOCK_END:
                expect_semicolon(scanner)
                return

            if command in ("TITLE", "ENTITLE"):
                tokens = read_until_semicolon(scanner)
                if tokens:
                    self.title = decode_name(" ".join(tokens))
            elif command == "DIMENSIONS":
                if has_dimensions:
                    raise NexusSyntaxError(
                        "DIMENSIONS command can only appear once per TAXA block"
                    )
                has_dimensions = True
                self._parse_dimensions(read_until_semicolon(scanner))
            elif command == "TAXLABELS":
                if not has_dimensions:
                    raise NexusSyntaxError(
                        "DIMENSIONS must be defined before TAXLABELS"
                    )
                if has_tax_labels:
                    raise NexusSyntaxError(
                        "TAXLABELS command can only appear once per TAXA block"
                    )
                has_tax_labels = True
                self._parse_tax_labels(read_until_semicolon(scanner))
            elif command == "TAXSET":
                self._parse_tax_set(read_until_semicolon(scanner))
            elif command == "TAXPARTITION":
                self._parse_tax_partition(read_until_semicolon(scanner))
            else:
                read_until_semicolon(scanner)

    def _parse_dimensions(self, tokens: list[str]) -> None:
        ntax_found = False
        for idx, tok in enumerate(tokens):
            if tok.upper() != "NTAX":
                continue
            value_idx = idx + 1
            if value_idx < len(tokens) and tokens[value_idx] == "=":
                value_idx += 1
            if value_idx < len(tokens):
                count = _to_int(tokens[value_idx])
                if count is None or count <= 0:
                    raise NexusSyntaxError(
                        "invalid NTAX value: must be a positive integer"
                    )
                self.dimensions = count
                ntax_found = True

        if not ntax_found:
            raise NexusSyntaxError("DIMENSIONS command must include an NTAX parameter")

    def _parse_tax_labels(self, labels: list[str]) -> None:
        if len(labels) != self.dimensions:
            raise NexusSyntaxError(
                f"dimension mismatch: NTAX declared as {self.dimensions} "
                f"but found {len(labels)} TAXLABELS"
            )

        for label in labels:
            decoded = decode_name(label)
            normalized = _normalize(decoded)
            if is_all_digits(normalized):
                raise NexusSyntaxError(
                    f"invalid taxon name '{decoded}': cannot consist entirely of digits"
                )
            if any(_normalize(existing) == normalized for existing in self.tax_labels):
                raise NexusSyntaxError(
                    f"duplicate taxon name found during parsing: '{decoded}'"
                )
            self.tax_labels.append(decoded)

    def _parse_tax_set(self, tokens: list[str]) -> None:
        name, fmt, definition = _parse_set_header("TAXSET", tokens)
        self.tax_sets[name] = TaxSet(fmt, list(definition))

    def _parse_tax_partition(self, tokens: list[str]) -> None:
        name, fmt, definition = _parse_set_header("TAXPARTITION", tokens)
        if fmt == SetFormat.STANDARD:
            subsets = _standard_subsets(definition)
        else:
            subsets = {VECTOR_DATA: list(definition)}
        self.tax_partitions[name] = TaxPartition(fmt, subsets)

    # -- rendering -------------------------------------------------------

    def render(self) -> str:
        """Return the block as NEXUS text."""
        lines = ["BEGIN TAXA;"]
        if self.title:
            lines.append(f"\tTITLE {quote(self.title)};")
        lines.append(f"\tDIMENSIONS NTAX={self.dimensions};")
        if self.tax_labels:
            lines.append("\tTAXLABELS")
            lines.extend(f"\t\t{quote(label)}" for label in self.tax_labels)
            lines.append("\t;")

        for name in sorted(self.tax_sets):
            tax_set = self.tax_sets[name]
            if tax_set.format == SetFormat.VECTOR:
                members = " ".join(tax_set.taxa_list)
                lines.append(f"\tTAXSET {quote(name)} (VECTOR) = {members};")
            else:
                members = " ".join(quote(t) for t in tax_set.taxa_list)
                lines.append(f"\tTAXSET {quote(name)} = {members};")

        for name in sorted(self.tax_partitions):
            partition = self.tax_partitions[name]
            if partition.format == SetFormat.VECTOR:
                values = " ".join(
                    item
                    for key in sorted(partition.subsets)
                    for item in partition.subsets[key]
                )
                lines.append(f"\tTAXPARTITION {quote(name)} (VECTOR) = {values};")
            else:
                body = ", ".join(
                    f"{quote(key)}: "
                    + " ".join(quote(t) for t in partition.subsets[key])
                    for key in sorted(partition.subsets)
                )
                lines.append(f"\tTAXPARTITION {quote(name)} ={body};")

        lines.append("END;")
        return "\n".join(lines)

    # -- editing ---------------------------------------------------------

    def contains_taxon(self, name: str) -> bool:
        """Return True if a taxon of that name exists, ignoring case."""
        normalized = _normalize(name)
        return any(_normalize(label) == normalized for label in self.tax_labels)

    def add_taxon(self, name: str) -> None:
        """Append a taxon; raise ValueError for all-digit names or duplicates."""
        if is_all_digits(_normalize(name)):
            raise ValueError(
                f"invalid taxon name '{name}': cannot consist entirely of digits"
            )
        if self.contains_taxon(name):
            raise ValueError(f"taxon '{name}' already exists")
        self.tax_labels.append(name)
        self.dimensions = len(self.tax_labels)

    def remove_taxon(self, name: str) -> None:
        """Remove a taxon; raise KeyError if it does not exist."""
        if not self.contains_taxon(name):
            raise KeyError(f"taxon '{name}' not found")
        normalized = _normalize(name)
        self.tax_labels = [
            label for label in self.tax_labels if _normalize(label) != normalized
        ]
        self.dimensions = len(self.tax_labels)

    def add_tax_set(self, name: str, fmt: SetFormat, taxa_list: list[str]) -> None:
        """Add a TAXSET; raise ValueError if a member is not a known taxon."""
        for taxon in taxa_list:
            if not self.contains_taxon(taxon):
                raise ValueError(
                    f"cannot add taxon '{taxon}' to set '{name}': "
                    "taxon does not exist in TAXA block"
                )
        self.tax_sets[name] = TaxSet(fmt, list(taxa_list))

    def remove_tax_set(self, name: str) -> None:
        """Remove a TAXSET; raise KeyError if it does not exist."""
        if name not in self.tax_sets:
            raise KeyError(f"tax set '{name}' not found")
        del self.tax_sets[name]

    def add_tax_partition(
        self, name: str, fmt: SetFormat, subsets: dict[str, list[str]]
    ) -> None:
        """Add or replace a TAXPARTITION."""
        self.tax_partitions[name] = TaxPartition(fmt, subsets)

    def remove_tax_partition(self, name: str) -> None:
        """Remove a TAXPARTITION; raise KeyError if it does not exist."""
        if name not in self.tax_partitions:
            raise KeyError(f"tax partition '{name}' not found")
        del self.tax_partitions[name]


def new_block(core: Core) -> TaxaBlock:
    """Create a TAXA block and append it to core."""
    block = TaxaBlock("TAXA", core)
    core.blocks.append(block)
    return block


register_block("TAXA", TaxaBlock)