"""Tokeniser for the NEXUS file format."""

from __future__ import annotations

from collections.abc import Iterator
from typing import IO, Union

_PUNCTUATION = frozenset("(){}[]/\\,;:=*\"+-<>~")
_BLOCK_END = ("END", "ENDBLOCK")

Source = Union[str, bytes, IO[str], IO[bytes]]


class NexusSyntaxError(ValueError):
    """Raised when NEXUS input is malformed."""


def is_punctuation(ch: str) -> bool:
    """Return True if ch is a NEXUS punctuation mark."""
    return ch in _PUNCTUATION


class Scanner:
    """Splits NEXUS text into tokens, skipping whitespace and comments.

    Reading past the end of input raises EOFError.
    """

    def __init__(self, stream: Source) -> None:
        text = stream if isinstance(stream, (str, bytes)) else stream.read()
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        self._text: str = text
        self._pos = 0
        self._has_peek = False
        self._peeked: str = ""
        self._peeked_error: Exception | None = None

    def _read(self) -> str | None:
        if self._pos >= len(self._text):
            return None
        ch = self._text[self._pos]
        self._pos += 1
        return ch

    def _unread(self) -> None:
        self._pos -= 1

    def _clear_peek(self) -> tuple[str, Exception | None]:
        token, error = self._peeked, self._peeked_error
        self._has_peek = False
        self._peeked = ""
        self._peeked_error = None
        return token, error

    def next_token(self) -> str:
        """Return the next token, consuming it."""
        if self._has_peek:
            token, error = self._clear_peek()
            if error is not None:
                raise error
            return token
        return self._read_next_token()

    def peek_token(self) -> str:
        """Return the next token without consuming it."""
        if not self._has_peek:
            self._has_peek = True
            try:
                self._peeked = self._read_next_token()
            except (EOFError, NexusSyntaxError) as exc:
                self._peeked = ""
                self._peeked_error = exc
        if self._peeked_error is not None:
            raise self._peeked_error
        return self._peeked

    def __iter__(self) -> Iterator[str]:
        while True:
            try:
                token = self.next_token()
            except EOFError:
                return
            yield token

    def read_raw_until_block_end(self) -> str:
        """Return the raw text up to END; or ENDBLOCK;, excluding that command."""
        content: list[str] = []
        token = ""
        if self._has_peek:
            peeked, _ = self._clear_peek()
            content.append(peeked)
            token = peeked

        in_comment = 0
        in_quote = False

        while True:
            ch = self._read()
            if ch is None:
                raise EOFError("end of input before END; of block")
            content.append(ch)

            if ch == "'":
                in_quote = not in_quote
                token = ""
                continue
            if in_quote:
                continue

            if ch == "[":
                in_comment += 1
                token = ""
                continue
            if ch == "]":
                if in_comment > 0:
                    in_comment -= 1
                token = ""
                continue
            if in_comment > 0:
                continue

            if ch.isspace():
                # Keep a pending END so that "END  ;" is still recognised.
                if token.upper() not in _BLOCK_END:
                    token = ""
                continue

            if is_punctuation(ch):
                if ch == ";":
                    command = token.upper()
                    if command in _BLOCK_END:
                        full = "".join(content)
                        idx = full.upper().rfind(command)
                        return full[:idx] if idx != -1 else full
                token = ""
                continue

            token += ch

    def _read_next_token(self) -> str:
        while True:
            ch = self._read()
            if ch is None:
                raise EOFError("end of input")
            if ch.isspace():
                continue
            if ch == "[":
                self._skip_comment()
                continue
            if ch == "'":
                return self._read_quoted_word()
            if is_punctuation(ch):
                return ch
            self._unread()
            return self._read_word()

    def _skip_comment(self) -> None:
        depth = 1
        while depth > 0:
            ch = self._read()
            if ch is None:
                raise NexusSyntaxError("unexpected EOF inside comment")
            if ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1

    def _read_quoted_word(self) -> str:
        chars: list[str] = []
        while True:
            ch = self._read()
            if ch is None:
                raise NexusSyntaxError("unexpected EOF in quoted string")
            if ch == "'":
                following = self._read()
                if following == "'":
                    chars.append("'")
                    continue
                if following is not None:
                    self._unread()
                break
            chars.append(ch)
        return "".join(chars)

    def _read_word(self) -> str:
        chars: list[str] = []
        while True:
            ch = self._read()
            if ch is None:
                break
            if ch.isspace() or is_punctuation(ch):
                self._unread()
                break
            chars.append(ch)
        return "".join(chars)