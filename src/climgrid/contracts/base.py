"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts.
"""

from climgrid.contracts.failure import ContractViolation


def require(condition: bool, message: str, error: type = ContractViolation) -> None:
    """Enforce a contract.

    Called at stage boundaries to verify that a grid, or the arguments of a
    calculator, satisfy their invariants. It is fail-fast: no recovery,
    no fallback, no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true. If False, ``error`` is raised.

    message : str
        Error message explaining the violation.

    error : type, optional
        Exception class to raise. Defaults to ContractViolation; the named
        error kinds of climgrid.contracts.failure are used where the caller
        must be able to tell failures apart.

    Raises
    ------
    ContractViolation
        Or ``error``, if condition is False.

    Examples
    --------
    >>> require(grid.data.ndim == 3, "Grid contract: expected 3 dims")
    >>> require(a.shape == b.shape, "shapes differ", ShapeMismatchError)
    """
    if not condition:
        raise error(message)
