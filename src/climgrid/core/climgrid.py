"""ClimGrid: one climate variable over a spatiotemporal grid.

A ClimGrid bundles the data cube, its spatial coordinates, its time axis and
the CF metadata that must survive every derived computation and the NetCDF
round trip. It is a frozen pydantic model: grids are built by the importer
or by a calculator and never mutated afterwards.

The data cube is an xarray.DataArray with dims ``(time, lon, lat)`` named by
``dimension_dict``, so downstream code indexes axes by name.
"""

from enum import Enum
from typing import Any, NamedTuple

import numpy as np
import pandas as pd
import xarray as xr
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from climgrid.contracts import InvalidGridMappingError, assert_climgrid

__all__ = ['ClimGrid', 'GridKind', 'GridMapping', 'resolve_grid_mapping']

MAPPING_KEYS = ("grid_mapping", "grid_mapping_name")
REGULAR_MAPPING_NAMES = ("Regular_longitude_latitude", "latitude_longitude")
ROTATED_MAPPING_NAMES = ("rotated_latitude_longitude", "rotated_pole")
ROTATED_POLE_KEYS = ("grid_north_pole_latitude", "grid_north_pole_longitude")


class GridKind(str, Enum):
    """Coordinate system family of a grid."""
    REGULAR = "regular"
    ROTATED = "rotated"
    PROJECTED = "projected"


class GridMapping(NamedTuple):
    """Resolved grid mapping: which identifying key was present, and its value.

    ``pole`` is set when the attributes carry a rotated north pole, which
    identifies a rotated grid whatever the mapping is called.
    """
    key: str
    name: str
    pole: bool = False

    @property
    def kind(self) -> GridKind:
        if self.name in REGULAR_MAPPING_NAMES:
            return GridKind.REGULAR
        if self.pole or self.name in ROTATED_MAPPING_NAMES:
            return GridKind.ROTATED
        return GridKind.PROJECTED

    @property
    def is_regular(self) -> bool:
        return self.kind is GridKind.REGULAR


def resolve_grid_mapping(mapping: dict) -> GridMapping:
    """Resolve the identifying key of a CF grid-mapping attribute dict.

    Exactly one of ``grid_mapping`` and ``grid_mapping_name`` must be present.

    Parameters
    ----------
    mapping : dict
        Grid-mapping attributes, e.g. ``{"grid_mapping_name":
        "rotated_latitude_longitude", "grid_north_pole_latitude": 42.5}``.

    Returns
    -------
    GridMapping
        The key found and its value (the mapping name).

    Raises
    ------
    InvalidGridMappingError
        If neither or both keys are present.

    Examples
    --------
    >>> resolve_grid_mapping({"grid_mapping_name": "Regular_longitude_latitude"}).is_regular
    True
    """
    present = [key for key in MAPPING_KEYS if key in mapping]
    if len(present) != 1:
        raise InvalidGridMappingError(
            f"Grid mapping must hold exactly one of {MAPPING_KEYS}, found {present or 'none'}"
        )
    key = present[0]
    pole = any(attr in mapping for attr in ROTATED_POLE_KEYS)
    return GridMapping(key=key, name=str(mapping[key]), pole=pole)


class ClimGrid(BaseModel):
    """A climate variable on a spatiotemporal grid, with its CF metadata.

    Attributes
    ----------
    data : xr.DataArray
        Cube with dims ``(time, lon, lat)``; coordinates are the time axis
        and the native 1D x/y axes (lon/lat for regular grids, rotated or
        projected axes otherwise).
    longrid, latgrid : np.ndarray
        Geographic coordinates. 1D for regular lon/lat grids, 2D ``(lon, lat)``
        fields for rotated-pole and projected grids.
    timevec : pd.DatetimeIndex
        One date per time step, strictly increasing.
    mask : np.ndarray
        Boolean ``(lon, lat)`` array, True where the cell holds data.
    grid_mapping : dict
        CF grid-mapping attributes; exactly one of ``grid_mapping`` /
        ``grid_mapping_name``.
    dimension_dict : dict
        Canonical role (``lon``, ``lat``, ``time``) to physical dimension name.
    timeattrib : dict
        Stored time ``units`` and ``calendar``.
    variable, typeofvar : str
        CF short name, and the tag calculators check their arguments against.
    varattribs, globalattribs : dict
        Variable-level and file-level attributes.

    Notes
    -----
    Construction runs climgrid.contracts.assert_climgrid, so an instance
    always satisfies the grid invariants. Assignment after construction
    raises a pydantic ValidationError.

    Examples
    --------
    >>> grid = load_climgrid("tas_day_model_rcp85.nc", "tas")
    >>> grid.data.sel(time="2006-07-01")
    >>> grid.mapping.kind
    <GridKind.REGULAR: 'regular'>
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra='forbid',
        frozen=True,
    )

    data: xr.DataArray
    longrid: np.ndarray
    latgrid: np.ndarray
    timevec: pd.DatetimeIndex
    mask: np.ndarray
    grid_mapping: dict[str, Any]
    dimension_dict: dict[str, str] = {"lon": "lon", "lat": "lat", "time": "time"}
    timeattrib: dict[str, str] = {}

    model: str = ""
    experiment: str = ""
    run: str = ""
    project: str = ""
    institute: str = ""
    filename: str = ""
    frequency: str = ""
    typeofcal: str = ""

    dataunits: str = ""
    latunits: str = ""
    lonunits: str = ""

    variable: str
    typeofvar: str

    varattribs: dict[str, Any] = {}
    globalattribs: dict[str, Any] = {}

    @field_validator("grid_mapping", "dimension_dict", "timeattrib", "varattribs", "globalattribs")
    @classmethod
    def copy_mapping(cls, v):
        """Never share a metadata dict with the grid it came from."""
        return dict(v)

    @model_validator(mode="after")
    def check_invariants(self):
        assert_climgrid(self)
        return self

    @property
    def mapping(self) -> GridMapping:
        """Resolved grid mapping (raises InvalidGridMappingError)."""
        return resolve_grid_mapping(self.grid_mapping)

    @property
    def is_regular(self) -> bool:
        return self.mapping.is_regular

    @property
    def lon_dim(self) -> str:
        return self.dimension_dict["lon"]

    @property
    def lat_dim(self) -> str:
        return self.dimension_dict["lat"]

    @property
    def time_dim(self) -> str:
        return self.dimension_dict["time"]

    @property
    def spatial_shape(self) -> tuple[int, int]:
        return (self.data.sizes[self.lon_dim], self.data.sizes[self.lat_dim])

    @property
    def values(self) -> np.ndarray:
        """The data cube as a numpy array, ordered (time, lon, lat)."""
        return self.data.values

    def __repr__(self) -> str:
        span = f"{self.timevec[0].date()}..{self.timevec[-1].date()}" if len(self.timevec) else "empty"
        return (
            f"ClimGrid(variable={self.variable!r}, shape={self.data.shape}, "
            f"dims={tuple(self.data.dims)}, units={self.dataunits!r}, time={span}, "
            f"grid_mapping={self.mapping.name!r}, model={self.model!r})"
        )
