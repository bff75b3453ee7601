import sys
from pathlib import Path

def main():
    if len(sys.argv) != 3:
        print("Usage: corrupt_one_byte.py <file> <offset>")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    idx = int(sys.argv[2], 0)
    b = bytearray(p.read_bytes())
    if not 0 <= idx < len(b):
        print(f"Offset {idx} outside file of {len(b)} bytes.")
        raise SystemExit(2)

    # Flipping a high bit in a length or count field usually sends the
    # walk past the end of the blob.
    b[idx] ^= 0x80
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
