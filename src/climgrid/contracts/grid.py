"""Grid contracts.

Enforces the guarantees every ClimGrid carries after construction, and the
preconditions the derived-variable calculators check on their arguments.
"""

from typing import TYPE_CHECKING

import numpy as np

from climgrid.contracts.base import require
from climgrid.contracts.failure import (
    ArgumentTypeError,
    IrregularTimeAxisError,
    ShapeMismatchError,
)

if TYPE_CHECKING:
    from climgrid.core.climgrid import ClimGrid


def assert_climgrid(grid: "ClimGrid") -> None:
    """Enforce the ClimGrid contract.

    Called by the ClimGrid model validator, so no grid that violates it can
    exist.

    Parameters
    ----------
    grid : ClimGrid
        Freshly constructed grid.

    Raises
    ------
    ContractViolation
        If the data cube is not 3D or its dims disagree with dimension_dict
    ShapeMismatchError
        If timevec, mask or coordinate grids disagree with the cube
    IrregularTimeAxisError
        If timevec is not strictly increasing
    InvalidGridMappingError
        If grid_mapping holds neither or both identifying keys
    """
    for role in ("lon", "lat", "time"):
        require(
            role in grid.dimension_dict,
            f"Grid contract violated: dimension_dict has no '{role}' entry"
        )

    data = grid.data
    require(
        data.ndim == 3,
        f"Grid contract violated: data has {data.ndim} dims, expected 3"
    )
    expected_dims = (grid.time_dim, grid.lon_dim, grid.lat_dim)
    require(
        tuple(data.dims) == expected_dims,
        f"Grid contract violated: data dims are {tuple(data.dims)}, expected {expected_dims}"
    )

    ntime = data.sizes[grid.time_dim]
    require(
        len(grid.timevec) == ntime,
        f"Grid contract violated: timevec has {len(grid.timevec)} dates, data has {ntime} time steps",
        ShapeMismatchError,
    )
    require(
        grid.timevec.is_monotonic_increasing and grid.timevec.is_unique,
        "Grid contract violated: timevec is not strictly increasing",
        IrregularTimeAxisError,
    )

    spatial = grid.spatial_shape
    require(
        np.shape(grid.mask) == spatial,
        f"Grid contract violated: mask shape {np.shape(grid.mask)} != spatial shape {spatial}",
        ShapeMismatchError,
    )

    # Raises InvalidGridMappingError on zero or two identifying keys
    if grid.mapping.is_regular:
        require(
            grid.longrid.shape == (spatial[0],) and grid.latgrid.shape == (spatial[1],),
            f"Grid contract violated: regular grid expects 1D lon/lat of lengths {spatial}, "
            f"got {grid.longrid.shape} and {grid.latgrid.shape}",
            ShapeMismatchError,
        )
    else:
        require(
            grid.longrid.shape == spatial and grid.latgrid.shape == spatial,
            f"Grid contract violated: {grid.mapping.name} grid expects 2D lon/lat of shape {spatial}, "
            f"got {grid.longrid.shape} and {grid.latgrid.shape}",
            ShapeMismatchError,
        )


def assert_typeofvar(grid: "ClimGrid", expected: str, caller: str) -> None:
    """Enforce that a calculator argument carries the expected variable tag.

    Raises
    ------
    ArgumentTypeError
        If ``grid.typeofvar`` differs from ``expected``.
    """
    require(
        grid.typeofvar == expected,
        f"{caller}: expected a grid with typeofvar '{expected}', got '{grid.typeofvar}'",
        ArgumentTypeError,
    )


def assert_same_shape(*grids: "ClimGrid") -> None:
    """Enforce identical data shapes across elementwise operands.

    Raises
    ------
    ShapeMismatchError
        If any two grids differ in shape.
    """
    shapes = [g.data.shape for g in grids]
    require(
        all(shape == shapes[0] for shape in shapes),
        "Elementwise operands differ in shape: "
        + ", ".join(f"{g.typeofvar}{shape}" for g, shape in zip(grids, shapes)),
        ShapeMismatchError,
    )
