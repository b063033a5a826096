"""Top-level NEXUS parser and helpers shared by block parsers."""

from __future__ import annotations

import re

from .core import BLOCK_REGISTRY, Block, Core
from .scanner import NexusSyntaxError, Scanner, Source

_DIGITS = re.compile(r"[0-9]+")
_BLOCK_END = ("END", "ENDBLOCK")


def expect_semicolon(scanner: Scanner) -> None:
    """Consume the next token and raise unless it is ';'."""
    token = scanner.next_token()
    if token != ";":
        raise NexusSyntaxError(f"expected ';', got '{token}'")


def skip_block(scanner: Scanner) -> None:
    """Consume tokens up to and including END; or ENDBLOCK;."""
    while True:
        token = scanner.next_token()
        if token.upper() in _BLOCK_END:
            expect_semicolon(scanner)
            return


def read_until_semicolon(scanner: Scanner) -> list[str]:
    """Return the tokens before the next ';', consuming the ';'."""
    tokens: list[str] = []
    while True:
        token = scanner.next_token()
        if token == ";":
            return tokens
        tokens.append(token)


def is_all_digits(s: str) -> bool:
    """Return True if s is non-empty and made only of the digits 0-9."""
    return _DIGITS.fullmatch(s) is not None


def _parse_block(scanner: Scanner) -> Block:
    try:
        block_name = scanner.next_token()
    except EOFError as exc:
        raise NexusSyntaxError(f"expected block name after BEGIN: {exc}") from exc
    try:
        expect_semicolon(scanner)
    except EOFError as exc:
        raise NexusSyntaxError(
            f"expected ';' after BEGIN {block_name}: unexpected end of input"
        ) from exc

    name = block_name.upper()
    factory = BLOCK_REGISTRY.get(name)
    if factory is not None:
        context = f"error parsing {block_name} block"
    else:
        factory = BLOCK_REGISTRY.get("GENERIC")
        if factory is None:
            raise NexusSyntaxError(
                f"unknown block type '{block_name}' and no GENERIC block registered"
            )
        context = f"error parsing GENERIC block for unknown block {block_name}"

    block = factory(name)
    try:
        block.parse(scanner)
    except (NexusSyntaxError, EOFError) as exc:
        raise NexusSyntaxError(f"{context}: {exc}") from exc
    return block


def parse(stream: Source) -> Core:
    """Read a NEXUS file and return its blocks.

    Raises NexusSyntaxError if the input is not valid NEXUS.
    """
    scanner = Scanner(stream)
    nexus = Core()

    try:
        header = scanner.next_token()
    except EOFError as exc:
        raise NexusSyntaxError(f"failed to read file: {exc}") from exc
    if header.upper() != "#NEXUS":
        raise NexusSyntaxError(f"invalid file format: expected #NEXUS, got {header}")

    while True:
        try:
            token = scanner.next_token()
        except EOFError:
            break
        if token.upper() == "BEGIN":
            nexus.blocks.append(_parse_block(scanner))

    return nexus