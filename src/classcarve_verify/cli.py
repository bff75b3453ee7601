import json
from pathlib import Path
import click
from .logic import verify_classes, verify_output

def _emit(result: dict):
    click.echo(json.dumps(result, sort_keys=True, separators=(",", ":"), ensure_ascii=False))
    if result["status"] != "PASS":
        raise SystemExit(1)

@click.group()
def main():
    pass

@main.command("output")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
def output_cmd(path: Path):
    """Check a directory written with `classcarve --index`."""
    _emit(verify_output(path))

@main.command("classes")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
def classes_cmd(path: Path):
    """Re-walk every extracted class file on its own."""
    _emit(verify_classes(path))

if __name__ == "__main__":
    main()
