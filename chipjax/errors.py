"""Exceptions raised by the chipjax emulator."""

from chipjax.constants import MAX_PROGRAM_SIZE


class ChipJaxError(Exception):
    """Base class for all chipjax errors."""


class LoadError(ChipJaxError):
    """A program could not be loaded into memory."""


class ProgramTooLargeError(LoadError):
    """Program does not fit between PROGRAM_START and the end of memory."""

    def __init__(self, size: int, limit: int = MAX_PROGRAM_SIZE):
        self.size = size
        self.limit = limit
        super().__init__(f"Program is {size} bytes, limit is {limit} bytes")
