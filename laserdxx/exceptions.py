"""Errors raised by the LaserDXX pipeline"""


class LaserDXXError(Exception):
    """Base class for pipeline errors"""


class MalformedInputError(LaserDXXError):
    """The input text could not be read as a DXF drawing"""


class UnknownContourError(LaserDXXError, KeyError):
    """No contour with the requested id"""

    def __init__(self, contour_id: int):
        super().__init__(contour_id)
        self.contour_id = contour_id

    def __str__(self) -> str:
        return f"No contour with id {self.contour_id}"
