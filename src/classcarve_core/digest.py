from __future__ import annotations

import hashlib
import struct
from typing import Iterable

# [offset(8) | length(8)] of the carved range in the source
_RANGE = struct.Struct(">QQ")


def content_hash(data) -> str:
    return hashlib.sha256(data).hexdigest()


def artifact_leaf(file: str, offset: int, length: int, digest_hex: str) -> bytes:
    """Bind one artifact's name and content hash to the source range it came from."""
    h = hashlib.sha256()
    h.update(file.encode("utf-8"))
    h.update(b"\x00")
    h.update(_RANGE.pack(offset, length))
    h.update(bytes.fromhex(digest_hex))
    return h.digest()


def carve_root(records: Iterable[dict]) -> str:
    """sha256 over the artifact leaves in ordinal order.

    Each record needs ``ordinal``, ``file``, ``offset``, ``length`` and
    ``content_hash``.
    """
    acc = hashlib.sha256()
    for r in sorted(records, key=lambda r: int(r["ordinal"])):
        acc.update(artifact_leaf(str(r["file"]), int(r["offset"]), int(r["length"]), str(r["content_hash"])))
    return acc.hexdigest()
