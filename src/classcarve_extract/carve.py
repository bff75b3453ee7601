from __future__ import annotations

import json
import mmap
import struct
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator
from warnings import warn

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from classcarve_core.digest import carve_root, content_hash
from classcarve_core.errors import ClassFormatError
from classcarve_core.protocol import (
    ARTIFACT_SUFFIX,
    CLASS_HEADER_FMT,
    DEFAULT_MAX_CLASS_SIZE,
    INDEX_FILE,
    MANIFEST_FILE,
    MANIFEST_FORMAT,
)
from classcarve_core.scanner import find_magic
from classcarve_core.walker import measure_class

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

INDEX_SCHEMA = pa.schema(
    [
        ("ordinal", pa.int64()),
        ("file", pa.string()),
        ("offset", pa.int64()),
        ("length", pa.int64()),
        ("major_version", pa.int32()),
        ("minor_version", pa.int32()),
        ("content_hash", pa.string()),
    ]
)


@dataclass(frozen=True)
class Candidate:
    """An accepted byte range ``[offset, offset + length)`` of the input."""

    ordinal: int
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def filename(self) -> str:
        return f"{self.ordinal}{ARTIFACT_SUFFIX}"

    def read(self, buf) -> bytes:
        return bytes(buf[self.offset:self.end])


def carve(buf, max_class_size: int = DEFAULT_MAX_CLASS_SIZE, stats: dict | None = None) -> Iterator[Candidate]:
    """Yield every class file found in ``buf``, in discovery order.

    After each magic hit, accepted or not, scanning resumes one byte past
    the hit, so overlapping and nested candidates are still reported.
    """
    if stats is None:
        stats = {}
    ordinal = 0
    pos = 0
    while True:
        hit = find_magic(buf, pos)
        if hit == -1:
            return
        stats["magics"] = stats.get("magics", 0) + 1
        pos = hit + 1

        try:
            length = measure_class(buf, hit)
        except ClassFormatError:
            stats["rejected"] = stats.get("rejected", 0) + 1
            continue

        if length > max_class_size:
            stats["oversized"] = stats.get("oversized", 0) + 1
            continue

        yield Candidate(ordinal, hit, length)
        ordinal += 1


@contextmanager
def open_input(path: Path):
    """Map ``path`` read-only; files mmap refuses (e.g. empty) are read."""
    with open(path, "rb") as f:
        try:
            buf = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
            is_mmap = True
        except (ValueError, OSError):
            buf = f.read()
            is_mmap = False

        try:
            yield buf
        finally:
            if is_mmap:
                buf.close()


class ClassCarver:
    """Extract every class file in a buffer into ``out_dir`` as ``N.class``."""

    def __init__(self, out_dir: Path, max_class_size: int = DEFAULT_MAX_CLASS_SIZE):
        self.out_dir = Path(out_dir)
        self.max_class_size = max_class_size
        self._reset()

    def _reset(self) -> None:
        self.records: list[dict] = []
        self.scan_stats = {
            "magics": 0,
            "rejected": 0,
            "oversized": 0,
            "extracted": 0,
            "write_failures": 0,
        }

    def get_scan_stats(self) -> dict:
        return dict(self.scan_stats)

    def _write(self, data: bytes, path: Path) -> bool:
        try:
            path.write_bytes(data)
        except OSError as e:
            self.scan_stats["write_failures"] += 1
            warn(f"Can't save class to {path} ({e}). Does the directory exist and is it writeable?")
            return False
        return True

    def run(self, buf) -> list[dict]:
        """Carve ``buf`` and return one record per artifact written."""
        self._reset()
        for cand in carve(buf, self.max_class_size, self.scan_stats):
            path = self.out_dir / cand.filename
            print(f"Found {cand.length} byte class at offset 0x{cand.offset:x}. Saving to {path}")

            data = cand.read(buf)
            if not self._write(data, path):
                continue

            _, minor, major = struct.unpack_from(CLASS_HEADER_FMT, data)
            self.records.append({
                "ordinal": cand.ordinal,
                "file": cand.filename,
                "offset": cand.offset,
                "length": cand.length,
                "major_version": major,
                "minor_version": minor,
                "content_hash": content_hash(data),
            })
            self.scan_stats["extracted"] += 1
        return list(self.records)

    def write_index(self, source_path: Path, buf, timestamp: str | None = None) -> dict:
        """Write index.parquet and manifest.json next to the artifacts."""
        if timestamp is None:
            timestamp = datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")

        df = pd.DataFrame(self.records, columns=INDEX_SCHEMA.names).sort_values("ordinal")
        if df.empty:
            table = INDEX_SCHEMA.empty_table()
        else:
            table = pa.Table.from_pandas(df, schema=INDEX_SCHEMA, preserve_index=False)
        pq.write_table(table, self.out_dir / INDEX_FILE)

        manifest = {
            "format": MANIFEST_FORMAT,
            "created": timestamp,
            "source": {
                "name": Path(source_path).name,
                "size": len(buf),
                "sha256": content_hash(buf),
            },
            "max_class_size": self.max_class_size,
            "integrity": {
                "algorithm": "sha256",
                "leaf": "sha256(file || 0x00 || offset:u64be || length:u64be || content_sha256)",
                "count": len(self.records),
                "root": carve_root(self.records),
            },
        }
        man_bytes = json.dumps(manifest, **CANONICAL_JSON_KW).encode("utf-8")
        (self.out_dir / MANIFEST_FILE).write_bytes(man_bytes)
        return manifest


def carve_file(
    source_path: Path,
    out_dir: Path,
    max_class_size: int = DEFAULT_MAX_CLASS_SIZE,
    write_index: bool = False,
) -> ClassCarver:
    carver = ClassCarver(out_dir, max_class_size)
    with open_input(source_path) as buf:
        carver.run(buf)
        if write_index:
            carver.write_index(source_path, buf)
    return carver
