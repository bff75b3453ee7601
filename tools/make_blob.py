"""Generate synthetic class files and firmware-like blobs that embed them."""
import json
import random
import struct
from pathlib import Path

MAGIC = b"\xca\xfe\xba\xbe"


def u1(n: int) -> bytes:
    return struct.pack(">B", n)

def u2(n: int) -> bytes:
    return struct.pack(">H", n)

def u4(n: int) -> bytes:
    return struct.pack(">I", n)


# --- Constant pool entries: (tag, body) ---

def utf8(text: str) -> tuple[int, bytes]:
    raw = text.encode("utf-8")
    return 1, u2(len(raw)) + raw

def integer(value: int) -> tuple[int, bytes]:
    return 3, struct.pack(">i", value)

def long_(value: int) -> tuple[int, bytes]:
    return 5, struct.pack(">q", value)

def double(value: float) -> tuple[int, bytes]:
    return 6, struct.pack(">d", value)

def class_ref(name_index: int) -> tuple[int, bytes]:
    return 7, u2(name_index)

def name_and_type(name_index: int, descriptor_index: int) -> tuple[int, bytes]:
    return 12, u2(name_index) + u2(descriptor_index)

def method_handle(kind: int, ref_index: int) -> tuple[int, bytes]:
    return 15, u1(kind) + u2(ref_index)

def method_type(descriptor_index: int) -> tuple[int, bytes]:
    return 16, u2(descriptor_index)


def attribute(name_index: int, body: bytes) -> bytes:
    return u2(name_index) + u4(len(body)) + body

def member(attributes: list[bytes], access: int = 0x0001, name_index: int = 1, descriptor_index: int = 1) -> bytes:
    return u2(access) + u2(name_index) + u2(descriptor_index) + u2(len(attributes)) + b"".join(attributes)


def build_class(
    constants: list[tuple[int, bytes]] = (),
    interfaces: list[int] = (),
    fields: list[bytes] = (),
    methods: list[bytes] = (),
    attributes: list[bytes] = (),
    major: int = 52,
    minor: int = 0,
) -> bytes:
    """Assemble a ClassFile. With no arguments this is the 24 byte minimum."""
    # Slot 0 is unused; long and double constants take two slots.
    pool_count = 1 + sum(2 if tag in (5, 6) else 1 for tag, _ in constants)
    out = bytearray()
    out += MAGIC + u2(minor) + u2(major)
    out += u2(pool_count)
    for tag, body in constants:
        out += u1(tag) + body
    out += u2(0x0021) + u2(0) + u2(0)
    out += u2(len(interfaces)) + b"".join(u2(i) for i in interfaces)
    out += u2(len(fields)) + b"".join(fields)
    out += u2(len(methods)) + b"".join(methods)
    out += u2(len(attributes)) + b"".join(attributes)
    return bytes(out)


def sample_class(name: str, rng: random.Random | None = None) -> bytes:
    """A plausible class: a few constants, one field, one method and a SourceFile."""
    rng = rng or random.Random(0)
    constants = [
        utf8(name),                      # 1
        class_ref(1),                    # 2
        utf8("java/lang/Object"),        # 3
        class_ref(3),                    # 4
        utf8("Code"),                    # 5
        utf8("SourceFile"),              # 6
        long_(rng.randint(0, 2**40)),    # 7, 8
        double(rng.random()),            # 9, 10
        integer(rng.randint(-1000, 1000)),  # 11
        name_and_type(1, 3),             # 12
        method_type(3),                  # 13
        utf8(f"{name.rsplit('/', 1)[-1]}.java"),  # 14
    ]
    code = bytes(rng.randrange(0, 0xCA) for _ in range(rng.randint(4, 40)))
    methods = [member([attribute(5, u2(2) + u2(1) + u4(len(code)) + code + u2(0) + u2(0))])]
    fields = [member([], access=0x0002)]
    return build_class(
        constants,
        interfaces=[4],
        fields=fields,
        methods=methods,
        attributes=[attribute(6, u2(14))],
    )


def noise(rng: random.Random, size: int) -> bytes:
    """Random filler that can never contain the class magic."""
    return bytes(rng.randrange(0, 0xCA) for _ in range(size))


def generate_blob(out_path: str, count: int = 3, seed: int = 0) -> list[dict]:
    """Write a blob with ``count`` classes between noise runs.

    Returns one {"offset", "length"} entry per embedded class.
    """
    rng = random.Random(seed)
    blob = bytearray(noise(rng, rng.randint(1, 64)))
    layout = []
    for i in range(count):
        cls = sample_class(f"com/example/Gen{i}", rng)
        layout.append({"offset": len(blob), "length": len(cls)})
        blob += cls
        blob += noise(rng, rng.randint(0, 64))

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(bytes(blob))
    print(f"GENERATED: {out}")
    return layout


if __name__ == "__main__":
    import sys

    # Usage:
    #   python tools/make_blob.py OUT_FILE [--count N] [--seed S]

    args = [a for a in sys.argv[1:] if a]

    def pop_option(arg_list: list[str], flag: str, default: int) -> tuple[int, list[str]]:
        """Remove an integer option from an argv-style list."""
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return int(arg_list[i + 1]), arg_list[:i] + arg_list[i + 2:]

    count, args = pop_option(args, "--count", 3)
    seed, args = pop_option(args, "--seed", 0)

    out = args[0] if args else "sample_blob.bin"
    print(json.dumps(generate_blob(out, count=count, seed=seed)))
