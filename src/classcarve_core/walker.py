"""Structural length walker for Java class files.

Each strider consumes exactly one record from a Cursor and returns the
number of bytes it occupied. Nothing is resolved or validated beyond what
is needed to find the end of the record.
"""
from __future__ import annotations

from .cursor import Cursor
from .errors import ClassFormatError, MalformedClassError
from .protocol import (
    ATTRIBUTE_NAME_LEN,
    CLASS_HEADER_LEN,
    CLASS_INFO_LEN,
    CONSTANT_SIZES,
    INTERFACE_INDEX_LEN,
    MEMBER_HEADER_LEN,
    TAG_UTF8,
    WIDE_TAGS,
)


def skip_constant(cur: Cursor, tag: int) -> int:
    """Skip one cp_info body; the cursor sits just past its tag byte."""
    start = cur.tell()
    if tag == TAG_UTF8:
        length = cur.u2()
        cur.skip(length)
    else:
        size = CONSTANT_SIZES.get(tag)
        if size is None:
            raise MalformedClassError(f"unknown constant pool tag {tag} at offset {start - 1}")
        cur.skip(size)
    return cur.tell() - start


def skip_attribute(cur: Cursor) -> int:
    start = cur.tell()
    cur.skip(ATTRIBUTE_NAME_LEN)
    length = cur.u4()
    cur.skip(length)
    return cur.tell() - start


def skip_member(cur: Cursor) -> int:
    """Skip one field_info or method_info (they share a layout)."""
    start = cur.tell()
    cur.skip(MEMBER_HEADER_LEN)
    for _ in range(cur.u2()):
        skip_attribute(cur)
    return cur.tell() - start


def skip_constant_pool(cur: Cursor) -> int:
    start = cur.tell()
    count = cur.u2()
    if count == 0:
        raise MalformedClassError(f"constant_pool_count is 0 at offset {start}")

    # Slot 0 is unused; long and double constants take two slots.
    index = 1
    while index < count:
        tag = cur.u1()
        skip_constant(cur, tag)
        index += 2 if tag in WIDE_TAGS else 1
    return cur.tell() - start


def walk_class(cur: Cursor) -> int:
    """Walk a whole ClassFile starting at its magic and return its length."""
    start = cur.tell()

    # magic, minor_version, major_version
    cur.skip(CLASS_HEADER_LEN)

    skip_constant_pool(cur)

    cur.skip(CLASS_INFO_LEN)

    interfaces_count = cur.u2()
    cur.skip(INTERFACE_INDEX_LEN * interfaces_count)

    # fields, then methods
    for _ in range(2):
        for _ in range(cur.u2()):
            skip_member(cur)

    for _ in range(cur.u2()):
        skip_attribute(cur)

    return cur.tell() - start


def measure_class(buf, offset: int = 0, end: int | None = None) -> int:
    """Return the exact length of the class file starting at ``offset``.

    Raises ClassFormatError if the bytes do not walk as a class file
    before ``end`` (default: end of ``buf``).
    """
    return walk_class(Cursor(buf, offset, end))


def try_measure_class(buf, offset: int = 0, end: int | None = None) -> int | None:
    try:
        return measure_class(buf, offset, end)
    except ClassFormatError:
        return None
