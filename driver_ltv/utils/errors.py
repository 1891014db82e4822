"""
Error types raised by the driver lifetime value pipeline.

Every error is fatal to a run: library code raises, the command line entry
point reports the message and exits non-zero.
"""


class DLVError(Exception):
    """Base class for all analysis errors"""


class InputFormatError(DLVError):
    """The ride file has missing or malformed fields"""


class MalformedInputError(InputFormatError):
    """A specific row of the ride file could not be parsed"""

    def __init__(self, message: str, row: int = None):
        self.row = row
        if row is not None:
            message = f"row {row}: {message}"
        super().__init__(message)


class DegenerateRegressionError(DLVError):
    """Not enough usable survival points to fit the decay rate"""


class EmptyPopulationError(DLVError):
    """The input contains no drivers"""


__all__ = [
    "DLVError",
    "InputFormatError",
    "MalformedInputError",
    "DegenerateRegressionError",
    "EmptyPopulationError",
]
