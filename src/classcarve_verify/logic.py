import json
import struct
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from classcarve_core.digest import carve_root, content_hash
from classcarve_core.errors import ClassFormatError
from classcarve_core.protocol import ARTIFACT_SUFFIX, INDEX_FILE, MANIFEST_FILE
from classcarve_core.walker import measure_class
from classcarve_extract.carve import INDEX_SCHEMA
from .const import ERRORS

def _fail(errors: list, code: str, **detail) -> dict:
    errors.append({"code": code, "message": ERRORS[code], **detail})
    return {"status": "FAIL", "error_count": len(errors), "errors": errors}

def _walk_error(path: Path, data: bytes) -> dict | None:
    """Re-walk an artifact on its own; None when it measures to its full size."""
    try:
        length = measure_class(data)
    except ClassFormatError as e:
        return {"path": str(path), "detail": str(e)}
    if length != len(data):
        return {"path": str(path), "measured": length, "size": len(data)}
    return None

def _artifact_key(p: Path):
    return (0, int(p.stem)) if p.stem.isdigit() else (1, p.name)

def verify_classes(out_dir: Path) -> dict:
    errors = []
    if not out_dir.is_dir():
        return _fail(errors, "E_LAYOUT_MISSING", path=str(out_dir))

    for p in sorted(out_dir.glob(f"*{ARTIFACT_SUFFIX}"), key=_artifact_key):
        bad = _walk_error(p, p.read_bytes())
        if bad is not None:
            return _fail(errors, "E_CLASS_WALK", **bad)

    return {"status": "PASS", "error_count": 0, "errors": []}

def verify_output(out_dir: Path) -> dict:
    errors = []
    manifest_path = out_dir / MANIFEST_FILE
    index_path = out_dir / INDEX_FILE

    for p in [manifest_path, index_path]:
        if not p.exists():
            return _fail(errors, "E_LAYOUT_MISSING", path=str(p))

    try:
        manifest_obj = json.loads(manifest_path.read_text(encoding="utf-8"))
        expected_root = manifest_obj["integrity"]["root"]
    except (ValueError, KeyError, TypeError) as e:
        return _fail(errors, "E_MANIFEST_JSON", detail=str(e))

    try:
        table = pq.read_table(index_path)
    except (pa.ArrowException, OSError) as e:
        return _fail(errors, "E_INDEX_READ", path=str(index_path), detail=str(e))

    missing = [n for n in INDEX_SCHEMA.names if n not in table.schema.names]
    if missing:
        return _fail(errors, "E_INDEX_SCHEMA", path=str(index_path), missing=missing)

    try:
        table = table.select(INDEX_SCHEMA.names).cast(INDEX_SCHEMA)
    except (pa.ArrowException, ValueError) as e:
        return _fail(errors, "E_INDEX_SCHEMA", path=str(index_path), detail=str(e))
    nulls = [n for n in INDEX_SCHEMA.names if table.column(n).null_count]
    if nulls:
        return _fail(errors, "E_INDEX_SCHEMA", path=str(index_path), nulls=nulls)

    # The root is recomputed from the artifacts on disk, not from the
    # hashes stored in the index.
    rows = table.to_pylist()
    entries = []
    for row in rows:
        p = out_dir / str(row["file"])
        if not p.is_file():
            return _fail(errors, "E_LAYOUT_MISSING", path=str(p))
        entries.append({**row, "content_hash": content_hash(p.read_bytes())})

    try:
        computed = carve_root(entries)
    except struct.error as e:
        return _fail(errors, "E_INDEX_MISMATCH", path=str(index_path), detail=str(e))
    if expected_root != computed:
        return _fail(errors, "E_INTEGRITY_MISMATCH", expected=expected_root, computed=computed)

    for row in sorted(rows, key=lambda r: int(r["ordinal"])):
        p = out_dir / str(row["file"])
        data = p.read_bytes()
        bad = _walk_error(p, data)
        if bad is not None:
            return _fail(errors, "E_CLASS_WALK", **bad)

        if len(data) != int(row["length"]) or content_hash(data) != row["content_hash"]:
            return _fail(errors, "E_INDEX_MISMATCH", path=str(p), length=int(row["length"]))

    return {"status": "PASS", "error_count": 0, "errors": []}
