"""Helpers for encoding and decoding NEXUS identifiers."""

from __future__ import annotations

_UNSAFE_CHARS = frozenset(" \t\n(){}[]/\\,;:=*\"+-<>~'")


def decode_name(name: str) -> str:
    """Normalise a NEXUS word: strip quotes, or turn underscores into spaces."""
    name = name.strip()
    if len(name) < 2:
        return name.replace("_", " ")

    if name.startswith("'") and name.endswith("'"):
        return name[1:-1].replace("''", "'")

    if name.startswith('"') and name.endswith('"'):
        return name[1:-1]

    return name.replace("_", " ")


def encode_name(name: str) -> str:
    """Replace spaces with underscores for unquoted NEXUS output."""
    return name.strip().replace(" ", "_")


def quote_name(name: str) -> str:
    """Wrap a name in single quotes when it holds spaces or punctuation."""
    name = name.strip()
    if not any(ch in _UNSAFE_CHARS for ch in name):
        return name
    escaped = name.replace("'", "''")
    return f"'{escaped}'"