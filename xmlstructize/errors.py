"""Exceptions raised while observing XML documents and generating Go source."""

from typing import Iterable, Tuple


class XmlStructError(Exception):
    """Base class for all xmlstructize errors."""


class ParseError(XmlStructError):
    """Exception raised when an observed document is not well-formed XML."""

    def __init__(self, message: str, position: Tuple[int, int] | None = None):
        self.message = message
        self.position = position
        if position:
            super().__init__(f"{message} at line {position[0]}, column {position[1]}")
        else:
            super().__init__(message)


class DuplicateNameError(XmlStructError):
    """Exception raised when distinct XML names map to the same Go identifier."""

    def __init__(self, display_name: str, names: Iterable = (), kind: str = 'type'):
        self.display_name = display_name
        self.names = tuple(names)
        self.kind = kind
        colliding = ', '.join(str(n) for n in self.names)
        if colliding:
            super().__init__(f"{display_name}: duplicate {kind} name ({colliding})")
        else:
            super().__init__(f"{display_name}: duplicate {kind} name")


class FormatError(XmlStructError):
    """Exception raised when the generated source cannot be formatted."""


class RecursiveTypeError(XmlStructError):
    """Exception raised when an element contains itself and named types are disabled."""

    def __init__(self, display_name: str):
        self.display_name = display_name
        super().__init__(f"{display_name}: recursive element cannot be expanded inline")


# Failures of the underlying byte stream are not wrapped.
InputIOError = OSError
