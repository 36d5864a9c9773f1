"""Exceptions raised by the convolution and spectral routines."""


class EmptyInputError(ValueError):
    """An operand was missing or contained no samples."""


class AllocationError(MemoryError):
    """A working buffer could not be allocated."""
