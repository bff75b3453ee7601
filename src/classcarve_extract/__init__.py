"""classcarve extract - carve embedded class files out of binary blobs."""
from .carve import Candidate, ClassCarver, carve, carve_file, open_input

__all__ = ["Candidate", "ClassCarver", "carve", "carve_file", "open_input"]
