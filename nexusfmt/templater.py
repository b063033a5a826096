"""Jinja2 templates with NEXUS-specific helper functions.

Helpers are available as globals, called with their own argument order
(``pad(5, name)``), and as filters taking the piped value first
(``name | pad(5)``). Extra functions are registered the same two ways.
The rendered object is available as ``data``; when it is a mapping, its
keys are also available directly.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import jinja2


@dataclass(frozen=True)
class Pair:
    """A key and its value, as produced by sort_map."""

    key: str
    value: Any


def snake(s: str) -> str:
    """Replace spaces with underscores."""
    return s.replace(" ", "_")


def quote(s: str) -> str:
    """Single-quote a string holding spaces or quotes, doubling inner quotes."""
    normalized = s.replace("''", "'")
    if not any(ch in normalized for ch in " '\""):
        return normalized
    escaped = normalized.replace("'", "''")
    return f"'{escaped}'"


def pad(width: int, s: str) -> str:
    """Left-align s in a field of width + 2 characters."""
    return f"{s:<{width + 2}}"


def null_name(s: str) -> str:
    """Return "_" for an empty string, otherwise the quoted string."""
    return "_" if s == "" else quote(s)


def wrap(start: str, end: str, content: str) -> str:
    """Surround content with start and end, unless content is empty."""
    return f"{start}{content}{end}" if content else ""


def join(sep: str, items: list[str]) -> str:
    """Join items with sep."""
    return sep.join(items)


def sort_map(mapping: Mapping[str, Any]) -> list[Pair]:
    """Return the mapping's items as Pairs sorted by key."""
    return [Pair(key, mapping[key]) for key in sorted(mapping)]


_GLOBALS: dict[str, Callable[..., Any]] = {
    "snake": snake,
    "quote": quote,
    "pad": pad,
    "null_name": null_name,
    "wrap": wrap,
    "join": join,
    "sort_map": sort_map,
}

_FILTERS: dict[str, Callable[..., Any]] = {
    "snake": snake,
    "quote": quote,
    "pad": lambda s, width: pad(width, s),
    "null_name": null_name,
    "wrap": lambda content, start, end: wrap(start, end, content),
    "join": lambda items, sep="": join(sep, items),
    "sort_map": sort_map,
}


class Template:
    """A named template compiled with the NEXUS helpers."""

    def __init__(
        self, name: str, source: str, *args: Mapping[str, Callable[..., Any]]
    ) -> None:
        self.name = name
        env = jinja2.Environment(
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        env.globals.update(_GLOBALS)
        env.filters.update(_FILTERS)
        for extra in args:
            env.globals.update(extra)
            env.filters.update(extra)
        self._inner = env.from_string(source)

    def render(self, data: Any) -> str:
        """Render the template with data; jinja2 errors propagate."""
        context: dict[str, Any] = {"data": data}
        if isinstance(data, Mapping):
            context.update(data)
        return self._inner.render(context)


def render_string(layout: str, data: Any) -> str:
    """Compile and render a template in one step."""
    return Template("one-off", layout).render(data)