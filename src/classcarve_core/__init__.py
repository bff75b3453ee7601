"""classcarve core - class file scanning and structural measurement."""
from .errors import ClassFormatError, MalformedClassError, TruncatedClassError
from .scanner import find_magic, iter_magic
from .walker import measure_class, try_measure_class

__all__ = [
    "ClassFormatError",
    "MalformedClassError",
    "TruncatedClassError",
    "find_magic",
    "iter_magic",
    "measure_class",
    "try_measure_class",
]
