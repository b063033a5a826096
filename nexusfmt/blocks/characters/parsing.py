"""Parsing of the commands inside a CHARACTERS block."""

from __future__ import annotations

import re
from typing import Protocol

from ...names import decode_name
from ...parser import expect_semicolon, read_until_semicolon
from ...scanner import NexusSyntaxError, Scanner
from .matrix import Character, Matrix, Taxon
from .model import (
    DEFAULT_EQUATES,
    DEFAULT_SYMBOLS,
    CharacterState,
    DataType,
    Format,
    StateType,
    StateValue,
)

_BLOCK_END = ("END", "ENDBLOCK")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_FORMAT_FLAGS = {
    "INTERLEAVE": "interleave",
    "TOKENS": "tokens",
    "RESPECTCASE": "respect_case",
    "TRANSPOSE": "transpose",
}


class CharactersLike(Protocol):
    """What the CHARACTERS parser needs from the block it fills."""

    title: str
    dimensions: int
    format: Format
    matrix: Matrix
    eliminate: set[int]

    def add_taxon(self, name: str) -> Taxon: ...


def _to_int(token: str) -> int | None:
    return int(token) if _INTEGER.fullmatch(token) else None


def parse_value(token: str) -> StateValue:
    """Split a "symbol:weight" token; the weight defaults to 1.0."""
    symbol, sep, weight_text = token.partition(":")
    value = StateValue(symbol, 1.0)
    if sep:
        try:
            value.weight = float(weight_text)
        except ValueError:
            pass
    return value


def expand_range(symbols: list[str], token: str) -> list[StateValue]:
    """Expand a range such as "0~3" into every symbol between its ends.

    A token without "~" yields a single value. Raises NexusSyntaxError for
    malformed, unknown or out-of-order ranges.
    """
    if "~" not in token:
        return [parse_value(token)]

    parts = token.split("~")
    if len(parts) != 2:
        raise NexusSyntaxError(f"invalid range format: {token}")

    start, end = parse_value(parts[0]), parse_value(parts[1])
    start_index = end_index = -1
    for idx, sym in enumerate(symbols):
        if sym == start.symbol:
            start_index = idx
        if sym == end.symbol:
            end_index = idx

    if start_index == -1 or end_index == -1 or start_index > end_index:
        raise NexusSyntaxError(f"invalid or out-of-order range symbols: {token}")

    return [StateValue(sym, start.weight) for sym in symbols[start_index : end_index + 1]]


def apply_equates(equate: dict[str, str], values: list[StateValue]) -> list[StateValue]:
    """Replace each equated symbol (e.g. "R") by the symbols it stands for."""
    result: list[StateValue] = []
    for value in values:
        mapping = equate.get(value.symbol)
        if mapping is None:
            result.append(value)
            continue
        result.extend(
            StateValue(sym, value.weight) for sym in mapping.strip("() ").split()
        )
    return result


def parse_characters(block: CharactersLike, scanner: Scanner) -> None:
    """Read a CHARACTERS block's commands into block, up to and including END;."""
    has_dimensions = False

    while True:
        command = scanner.next_token().upper()
        if command in _BLOCK_END:
            expect_semicolon(scanner)
            return

        if command in ("TITLE", "ENTITLE"):
            tokens = read_until_semicolon(scanner)
            if tokens:
                block.title = decode_name(" ".join(tokens))
        elif command == "DIMENSIONS":
            if has_dimensions:
                raise NexusSyntaxError("multiple DIMENSIONS commands are not allowed")
            has_dimensions = True
            _parse_dimensions(block, read_until_semicolon(scanner))
        elif command == "FORMAT":
            _parse_format(block.format, read_until_semicolon(scanner))
        elif command == "CHARSTATELABELS":
            _parse_char_state_labels(block.matrix, read_until_semicolon(scanner))
        elif command == "MATRIX":
            _parse_matrix(block, scanner)
        elif command == "CHARLABELS":
            _parse_char_labels(block.matrix, read_until_semicolon(scanner))
        elif command == "STATELABELS":
            _parse_state_labels(block.matrix, read_until_semicolon(scanner))
        elif command == "ELIMINATE":
            if not has_dimensions:
                raise NexusSyntaxError("ELIMINATE command must come after DIMENSIONS")
            _parse_eliminate(block, read_until_semicolon(scanner))
        else:
            # TAXLABELS and unrecognised commands are skipped.
            read_until_semicolon(scanner)


def _parse_dimensions(block: CharactersLike, tokens: list[str]) -> None:
    for idx, tok in enumerate(tokens):
        key = tok.upper()
        if key == "NEWTAXA":
            continue

        value_idx = idx + 1
        if value_idx < len(tokens) and tokens[value_idx] == "=":
            value_idx += 1
        if value_idx >= len(tokens):
            continue

        if key == "NCHAR":
            count = _to_int(tokens[value_idx])
            if count is None or count <= 0:
                raise NexusSyntaxError("invalid NCHAR value: must be a positive integer")
            block.dimensions = count
            block.matrix.characters.extend(
                Character(index=j) for j in range(1, count + 1)
            )
        elif key == "NTAX":
            count = _to_int(tokens[value_idx])
            if count is None or count <= 0:
                raise NexusSyntaxError("invalid NTAX value: must be a positive integer")


def _parse_format(fmt: Format, tokens: list[str]) -> None:
    fmt.labels = True
    idx = 0
    while idx < len(tokens):
        key = tokens[idx].upper()

        flag = _FORMAT_FLAGS.get(key)
        if flag is not None:
            setattr(fmt, flag, True)
            idx += 1
            continue

        value_idx = idx + 1
        if value_idx < len(tokens) and tokens[value_idx] == "=":
            value_idx += 1
            idx = value_idx

        if value_idx < len(tokens):
            _apply_format_value(fmt, key, tokens[value_idx])
        idx += 1


def _apply_format_value(fmt: Format, key: str, val: str) -> None:
    if key == "DATATYPE":
        upper = val.upper()
        try:
            data_type: str = DataType(upper)
        except ValueError:
            data_type = upper
        fmt.data_type = data_type
        if data_type in DEFAULT_SYMBOLS:
            fmt.symbols = list(DEFAULT_SYMBOLS[data_type])  # type: ignore[index]
        if data_type in DEFAULT_EQUATES:
            fmt.equate.update(DEFAULT_EQUATES[data_type])  # type: ignore[index]
    elif key == "MISSING":
        fmt.missing = val.strip("\"'")
    elif key == "GAP":
        fmt.gap = val.strip("\"'")
    elif key == "SYMBOLS":
        clean = val.strip("\"'")
        fmt.symbols = clean.split() if " " in clean else list(clean)
    elif key == "MATCHCHAR":
        fmt.match_char = val.strip("\"'")
    elif key == "LABELS":
        if val.upper() == "NO":
            fmt.labels = False
    elif key == "EQUATE":
        for pair in val.strip("\"'").split():
            symbol, sep, meaning = pair.partition("=")
            if sep:
                fmt.equate[symbol] = meaning
    elif key == "NSTATES":
        count = _to_int(val)
        if count is not None:
            fmt.nstates = count
    elif key == "ITEMS":
        fmt.items = val.strip("\"'( )")
    elif key == "STATESFORMAT":
        fmt.states_format = val.strip("\"'")


def _state_label(token: str) -> str:
    label = decode_name(token)
    return "" if label == "_" else label


def _parse_char_state_labels(matrix: Matrix, tokens: list[str]) -> None:
    current_id = 0
    reading_states = False

    for tok in tokens:
        if tok == ",":
            reading_states = False
            current_id = 0
            continue

        number = _to_int(tok)
        if number is not None and not reading_states:
            current_id = number
            continue

        if tok == "/":
            reading_states = True
            continue

        if 0 < current_id <= len(matrix.characters):
            char = matrix.characters[current_id - 1]
            if reading_states:
                char.state_labels.append(_state_label(tok))
            else:
                char.name = decode_name(tok)


def _parse_char_labels(matrix: Matrix, tokens: list[str]) -> None:
    names = (tok for tok in tokens if tok != ",")
    for char, name in zip(matrix.characters, names):
        char.name = decode_name(name)


def _parse_state_labels(matrix: Matrix, tokens: list[str]) -> None:
    current_id = 0
    for tok in tokens:
        if tok == ",":
            current_id = 0
            continue
        if current_id == 0:
            current_id = _to_int(tok) or 0
            continue
        if 0 < current_id <= len(matrix.characters):
            matrix.characters[current_id - 1].state_labels.append(_state_label(tok))


def _parse_eliminate(block: CharactersLike, tokens: list[str]) -> None:
    for part in "".join(tokens).split(","):
        if "-" in part:
            bounds = part.split("-")
            if len(bounds) == 2:
                start, end = _to_int(bounds[0]), _to_int(bounds[1])
                if start is not None and end is not None:
                    block.eliminate.update(range(start, end + 1))
        else:
            value = _to_int(part)
            if value is not None:
                block.eliminate.add(value)


def _parse_matrix(block: CharactersLike, scanner: Scanner) -> None:
    nchar = block.dimensions
    fmt = block.format
    matrix = block.matrix
    progress: dict[int, int] = {}

    while True:
        token = scanner.next_token()
        if token == ";":
            return

        taxon = matrix.get_taxon(token) or block.add_taxon(token)
        progress.setdefault(taxon.index, 0)

        while progress[taxon.index] < nchar:
            state_token = scanner.next_token()
            if state_token == ";":
                raise NexusSyntaxError(
                    f"unexpected ';' in matrix for taxon {taxon.name}"
                )

            for state in _decompose_state_token(fmt, state_token, scanner):
                column = progress[taxon.index]
                if column >= nchar:
                    break

                if len(state.values) == 1 and state.values[0].symbol == fmt.match_char:
                    if taxon.index > 0:
                        first = matrix.get_state_by_index(0, column)
                        state.type = first.type
                        copied = [StateValue(v.symbol, v.weight) for v in first.values]
                        state.values = apply_equates(fmt.equate, copied)
                else:
                    state.values = apply_equates(fmt.equate, state.values)

                matrix.set_state_by_index(taxon.index, column, state)
                progress[taxon.index] += 1

            if fmt.interleave:
                try:
                    peek = scanner.peek_token()
                except (EOFError, NexusSyntaxError):
                    peek = ""
                # One smushed token is one chunk; otherwise stop at the next
                # known taxon or at the end of the matrix.
                if not fmt.tokens or matrix.get_taxon(peek) is not None or peek == ";":
                    break


def _decompose_state_token(
    fmt: Format, token: str, scanner: Scanner
) -> list[CharacterState]:
    """Turn one matrix token into the cell states it stands for."""
    if token in ("(", "{"):
        if token == "(":
            state_type, closing = StateType.POLYMORPHIC, ")"
        else:
            state_type, closing = StateType.UNCERTAIN, "}"
        state = CharacterState(type=state_type)
        while True:
            inner = scanner.next_token()
            if inner == closing:
                break
            if not fmt.tokens and "~" not in inner and len(inner) > 1:
                state.values.extend(parse_value(ch) for ch in inner)
            else:
                state.values.extend(expand_range(fmt.symbols, inner))
        return [state]

    if token == fmt.missing:
        return [CharacterState(type=StateType.MISSING)]
    if token == fmt.gap:
        return [CharacterState(type=StateType.GAP)]

    if fmt.tokens:
        return [CharacterState(type=StateType.SINGLE, values=[parse_value(token)])]

    states: list[CharacterState] = []
    for ch in token:
        if ch == fmt.missing:
            states.append(CharacterState(type=StateType.MISSING))
        elif ch == fmt.gap:
            states.append(CharacterState(type=StateType.GAP))
        else:
            states.append(CharacterState(type=StateType.SINGLE, values=[parse_value(ch)]))
    return states