class ClassFormatError(ValueError):
    """Candidate bytes are not a well-formed class file."""


class TruncatedClassError(ClassFormatError):
    """A read or skip would run past the end of the buffer."""


class MalformedClassError(ClassFormatError):
    """A structural field holds a value the class grammar does not allow."""
