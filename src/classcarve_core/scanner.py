from __future__ import annotations

from typing import Iterator

from .protocol import MAGIC_CLASS


def find_magic(buf, start: int = 0, end: int | None = None) -> int:
    """Return the offset of the next class magic at or after ``start``.

    Matches at any byte alignment. Returns -1 when no complete magic fits
    before ``end``.
    """
    if end is None:
        end = len(buf)
    if start < 0 or end - start < len(MAGIC_CLASS):
        return -1
    return buf.find(MAGIC_CLASS, start, end)


def iter_magic(buf, start: int = 0, end: int | None = None) -> Iterator[int]:
    """Yield every magic offset, including overlapping ones, left to right."""
    pos = find_magic(buf, start, end)
    while pos != -1:
        yield pos
        pos = find_magic(buf, pos + 1, end)
