"""Java class file layout constants.

Single source of truth for the magic value, fixed header sizes and the
constant pool tag table used by the walker.
See https://docs.oracle.com/javase/specs/jvms/se16/html/jvms-4.html
"""

MAGIC_CLASS = b"\xca\xfe\xba\xbe"

# Header: [Magic(4) | Minor(2) | Major(2)] = 8 bytes
CLASS_HEADER_FMT = ">4sHH"
CLASS_HEADER_LEN = 8

# access_flags, this_class, super_class
CLASS_INFO_LEN = 6

# access_flags, name_index, descriptor_index
MEMBER_HEADER_LEN = 6

# attribute_name_index
ATTRIBUTE_NAME_LEN = 2

INTERFACE_INDEX_LEN = 2

# Header, empty pool count, class info and the four zero counts
MIN_CLASS_SIZE = CLASS_HEADER_LEN + 2 + CLASS_INFO_LEN + 4 * 2

# Constant pool tags
TAG_UTF8 = 1
TAG_LONG = 5
TAG_DOUBLE = 6

# Long and Double constants occupy two constant pool slots
WIDE_TAGS = frozenset({TAG_LONG, TAG_DOUBLE})

# Body size of every fixed-size constant. CONSTANT_Utf8 is variable and
# carries its own u2 length.
CONSTANT_SIZES = {
    3: 4,   # Integer
    4: 4,   # Float
    5: 8,   # Long
    6: 8,   # Double
    7: 2,   # Class
    8: 2,   # String
    9: 4,   # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}

# If the class is any larger than this, it's probably corrupted.
DEFAULT_MAX_CLASS_SIZE = 10 * 1024 * 1024  # 10 MiB

# Output layout
ARTIFACT_SUFFIX = ".class"
INDEX_FILE = "index.parquet"
MANIFEST_FILE = "manifest.json"
MANIFEST_FORMAT = "classcarve-manifest-v1"
