"""classcarve - extract Java class files embedded in a binary blob."""
from __future__ import annotations

from pathlib import Path

import click

from classcarve_core.protocol import DEFAULT_MAX_CLASS_SIZE, MIN_CLASS_SIZE
from classcarve_extract.carve import carve_file


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(exists=True, file_okay=False, writable=True, path_type=Path))
@click.option(
    "--max-class-size",
    type=click.IntRange(min=MIN_CLASS_SIZE),
    default=DEFAULT_MAX_CLASS_SIZE,
    show_default=True,
    help="Discard candidates larger than this many bytes as corrupted",
)
@click.option("--index", "write_index", is_flag=True, help="Also write index.parquet and manifest.json")
def main(source: Path, out: Path, max_class_size: int, write_index: bool) -> None:
    """Extract every class file in SOURCE into OUT as 0.class, 1.class, ..."""
    try:
        carver = carve_file(source, out, max_class_size=max_class_size, write_index=write_index)
    except Exception as e:
        # Fail closed with a single-line reason, no traceback.
        print(f"FATAL: {e}")
        raise SystemExit(1)

    if write_index:
        stats = carver.get_scan_stats()
        print(f"Indexed {stats['extracted']} classes ({stats['magics']} magic hits) in {out}")


if __name__ == "__main__":
    main()
