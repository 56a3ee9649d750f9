"""Centralized failure kinds for climgrid.

Every error the toolkit raises on purpose derives from ClimGridError so a
caller can handle data-integrity failures uniformly. None of them is
transient: they are raised once, immediately, and never retried.

I/O failures (missing or unwritable files) use the builtin OSError family.
"""


class ClimGridError(Exception):
    """Base class for all climgrid errors."""


class ContractViolation(ClimGridError, RuntimeError):
    """Raised when a stage does not produce the invariants it promised.

    This indicates a bug in the calling code or an unsupported input layout,
    not a recoverable science edge case.
    """


class FormatError(ClimGridError):
    """A time-units string (or a date) cannot be interpreted."""


class UnsupportedCalendarError(ClimGridError):
    """The time axis uses a calendar other than the 365-day calendar."""


class MissingAttributeError(ClimGridError):
    """A required global attribute, variable attribute or variable is absent."""


class ArgumentTypeError(ClimGridError, TypeError):
    """A calculator received a grid carrying the wrong variable tag."""


class ShapeMismatchError(ClimGridError):
    """Elementwise operands, or a grid's own components, differ in shape."""


class InvalidGridMappingError(ClimGridError):
    """A grid mapping holds neither or both of its identifying keys."""


class IrregularTimeAxisError(ClimGridError):
    """Raw time offsets are not a gap-free daily series."""
