from __future__ import annotations

import struct

from .errors import TruncatedClassError

_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")


class Cursor:
    """Big-endian reader over ``buf[pos:end]``.

    Every read and skip is checked against ``end`` first, so the position
    never moves past it. A failed check raises TruncatedClassError and
    leaves the position untouched.
    """

    __slots__ = ("buf", "pos", "end")

    def __init__(self, buf, pos: int = 0, end: int | None = None):
        if end is None:
            end = len(buf)
        if not (0 <= pos <= end <= len(buf)):
            raise ValueError(f"cursor window [{pos}, {end}) outside buffer of {len(buf)} bytes")
        self.buf = buf
        self.pos = pos
        self.end = end

    def remaining(self) -> int:
        return self.end - self.pos

    def tell(self) -> int:
        return self.pos

    def _need(self, n: int) -> None:
        if n > self.end - self.pos:
            raise TruncatedClassError(
                f"need {n} bytes at offset {self.pos}, only {self.end - self.pos} left"
            )

    def skip(self, n: int) -> None:
        self._need(n)
        self.pos += n

    def u1(self) -> int:
        self._need(1)
        val = self.buf[self.pos]
        self.pos += 1
        return val

    def u2(self) -> int:
        self._need(2)
        val = _U2.unpack_from(self.buf, self.pos)[0]
        self.pos += 2
        return val

    def u4(self) -> int:
        self._need(4)
        val = _U4.unpack_from(self.buf, self.pos)[0]
        self.pos += 4
        return val
