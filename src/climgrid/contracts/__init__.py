"""Grid contracts: fail-fast enforcement of grid invariants.

Contracts fail immediately and loudly when a grid, or the arguments of a
derived-variable calculator, do not satisfy their invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate grid correctness
- Formulas handle science
"""

from climgrid.contracts.failure import (
    ClimGridError,
    ContractViolation,
    FormatError,
    UnsupportedCalendarError,
    MissingAttributeError,
    ArgumentTypeError,
    ShapeMismatchError,
    InvalidGridMappingError,
    IrregularTimeAxisError,
)
from climgrid.contracts.base import require
from climgrid.contracts.grid import assert_climgrid, assert_typeofvar, assert_same_shape

__all__ = [
    "ClimGridError",
    "ContractViolation",
    "FormatError",
    "UnsupportedCalendarError",
    "MissingAttributeError",
    "ArgumentTypeError",
    "ShapeMismatchError",
    "InvalidGridMappingError",
    "IrregularTimeAxisError",
    "require",
    "assert_climgrid",
    "assert_typeofvar",
    "assert_same_shape",
]
