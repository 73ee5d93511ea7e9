"""Helper library exposed to macros as ``util``.

Macros cannot ``import``, so the few modules and helpers they commonly need
are reachable from here instead.
"""

from __future__ import annotations

import asyncio
import re
import textwrap
from collections.abc import Hashable
from types import SimpleNamespace
from typing import Iterable, List, Sequence, Tuple, TypeVar

from macro_engine.buffer.search import PatternLike, compile_pattern

T = TypeVar("T")


def escape(text: str) -> str:
    return re.escape(text)


def lines(text: str) -> List[str]:
    return text.split("\n")


def join_lines(items: Iterable[str]) -> str:
    return "\n".join(items)


def indent(text: str, prefix: str = "    ") -> str:
    return textwrap.indent(text, prefix)


def dedent(text: str) -> str:
    return textwrap.dedent(text)


def find_all(text: str, pattern: PatternLike) -> List[Tuple[int, int]]:
    """Spans of every non-overlapping match, ready for ``TextBuffer.replace``."""

    return [found.span() for found in compile_pattern(pattern).finditer(text)]


def unique(items: Iterable[T]) -> List[T]:
    seen = set()
    result: List[T] = []
    for item in items:
        key = item if isinstance(item, Hashable) else repr(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def chunks(items: Sequence[T], size: int) -> List[Sequence[T]]:
    if size <= 0:
        raise ValueError("size must be positive")
    return [items[i : i + size] for i in range(0, len(items), size)]


async def sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


def build_util() -> SimpleNamespace:
    return SimpleNamespace(
        re=re,
        escape=escape,
        lines=lines,
        join_lines=join_lines,
        indent=indent,
        dedent=dedent,
        find_all=find_all,
        unique=unique,
        chunks=chunks,
        sleep=sleep,
    )


__all__ = [
    "build_util",
    "chunks",
    "dedent",
    "escape",
    "find_all",
    "indent",
    "join_lines",
    "lines",
    "sleep",
    "unique",
]
