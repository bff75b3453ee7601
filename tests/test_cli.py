import json
import os
import subprocess
import sys
from pathlib import Path

def run(args, cwd):
    env = dict(os.environ)
    src = str(Path(cwd) / "src")
    env["PYTHONPATH"] = src + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run([sys.executable, *args], cwd=cwd, env=env, check=False, capture_output=True, text=True)

def test_carve_verify_and_corrupt(tmp_path, repo):
    blob = tmp_path / "firmware.bin"
    out = tmp_path / "out"
    out.mkdir()

    r = run(["tools/make_blob.py", str(blob), "--count", "3", "--seed", "11"], cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout
    layout = json.loads(r.stdout.strip().splitlines()[-1])

    r = run(["-m", "classcarve_extract.cli", str(blob), str(out), "--index"], cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout
    found = [line for line in r.stdout.splitlines() if line.startswith("Found ")]
    assert found == [
        f"Found {e['length']} byte class at offset 0x{e['offset']:x}. Saving to {out / f'{i}.class'}"
        for i, e in enumerate(layout)
    ]

    r = run(["-m", "classcarve_verify.cli", "output", str(out)], cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout
    assert json.loads(r.stdout)["status"] == "PASS"

    # Corrupt the first class's constant pool count and re-carve
    r = run(["scripts/corrupt_one_byte.py", str(blob), str(layout[0]["offset"] + 8)], cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout

    out2 = tmp_path / "out2"
    out2.mkdir()
    r = run(["-m", "classcarve_extract.cli", str(blob), str(out2)], cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout
    assert r.stdout.count("Found ") == 2
    assert sorted(p.name for p in out2.iterdir()) == ["0.class", "1.class"]
    assert (out2 / "0.class").read_bytes() == (out / "1.class").read_bytes()

def test_usage_errors(tmp_path, repo):
    r = run(["-m", "classcarve_extract.cli", str(tmp_path)], cwd=repo)
    assert r.returncode != 0
    assert "Usage" in r.stderr

    blob = tmp_path / "blob.bin"
    blob.write_bytes(b"\x00" * 8)
    r = run(["-m", "classcarve_extract.cli", str(blob), str(tmp_path / "nope")], cwd=repo)
    assert r.returncode != 0

    r = run(["-m", "classcarve_extract.cli", str(tmp_path / "nope.bin"), str(tmp_path)], cwd=repo)
    assert r.returncode != 0

def test_no_classes_exits_zero(tmp_path, repo):
    blob = tmp_path / "blob.bin"
    blob.write_bytes(b"\xca\xfe\xba\xbe" + b"\x00" * 3)
    r = run(["-m", "classcarve_extract.cli", str(blob), str(tmp_path)], cwd=repo)
    assert r.returncode == 0, r.stderr + r.stdout
    assert r.stdout == ""
    assert list(tmp_path.glob("*.class")) == []

def test_fatal_error_exits_one(tmp_path, repo):
    blob = tmp_path / "blob.bin"
    blob.write_bytes(b"\x00" * 32)
    out = tmp_path / "out"
    out.mkdir()
    # a directory where the manifest file must go makes the index write fail
    (out / "manifest.json").mkdir()

    r = run(["-m", "classcarve_extract.cli", str(blob), str(out), "--index"], cwd=repo)
    assert r.returncode == 1, r.stderr + r.stdout
    lines = r.stdout.splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("FATAL: ")
    assert "Traceback" not in r.stderr
