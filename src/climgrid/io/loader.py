"""Read a variable from a CF NetCDF file into a ClimGrid.

This module handles loading gridded climate model output (CMIP-style daily
files) and assembling the ClimGrid container: the data cube reordered to
``(time, lon, lat)``, its coordinates, a calendar-aware time axis, and the
provenance and CF metadata needed to write it back.

Key capabilities:
- Regular lon/lat grids (1D coordinates) and rotated-pole/projected grids
  (2D lon/lat fields over native x/y axes)
- Unit normalization: K to Celsius, precipitation rates to mm/day
- No-leap time axis reconstruction (see climgrid.core.timeaxis)
- Fails fast: missing attributes and unreadable files raise
"""

from pathlib import Path
from typing import Optional
import logging

import numpy as np
import xarray as xr

from climgrid.contracts import MissingAttributeError, require
from climgrid.core.climgrid import ClimGrid, resolve_grid_mapping
from climgrid.core.timeaxis import build_timevec
from climgrid.schemas import InternalConfig, resolve_config

__all__ = ['ClimGridLoader', 'load_climgrid']

logger = logging.getLogger(__name__)

REQUIRED_GLOBAL_ATTRS = {
    "experiment": "experiment_id",
    "run": "parent_experiment_rip",
    "model": "model_id",
}
OPTIONAL_GLOBAL_ATTRS = {
    "project": "project_id",
    "institute": "institute_id",
    "frequency": "frequency",
}
REGULAR_GRID_MAPPING = {"grid_mapping_name": "Regular_longitude_latitude"}
X_STANDARD_NAMES = ("grid_longitude", "projection_x_coordinate")


class ClimGridLoader:
    """Load one variable of a NetCDF file as a ClimGrid.

    The loader reads the file with xarray (raw time offsets, CF masking
    applied), validates the attributes a ClimGrid needs, normalizes units
    according to ``config.units``, and builds the container.

    Configuration
    =============
    Uses ``config.units`` (InternalUnitsConfig):

    - `precipitation_vars`, `precipitation_scale`, `precipitation_units`
        Precipitation rates are multiplied by the scale (86400 s/day) and
        relabelled, unless already stored in the daily label.
    - `kelvin_units`, `kelvin_offset`, `celsius_units`
        Data stored in exactly "K" is shifted to Celsius, for any variable.
    - `promote_float64`
        Single precision data is promoted to double precision.

    Notes
    -----
    - The file handle is released before load() returns, on every path
    - Polygon subsetting is not implemented; a polygon is logged and ignored

    Examples
    --------
    >>> loader = ClimGridLoader(resolve_config())
    >>> grid = loader.load("tas_day_CanESM2_rcp85_r1i1p1_20060101-20101231.nc", "tas")
    >>> grid.dataunits
    'Celsius'
    """

    def __init__(self, config: Optional[InternalConfig] = None):
        """Initialize loader with a resolved configuration.

        Parameters
        ----------
        config : InternalConfig, optional
            Runtime configuration. Expert defaults when None.
        """
        self.config = config if config is not None else resolve_config()
        self.units_config = self.config.units

    def load(self, filepath: Path | str, variable: str, poly: Optional[np.ndarray] = None) -> ClimGrid:
        """Read ``variable`` from ``filepath`` into a ClimGrid.

        Parameters
        ----------
        filepath : Path or str
            NetCDF file to read.

        variable : str
            CF short name of the data variable, e.g. "tas", "pr", "huss".

        poly : np.ndarray, optional
            Polygon vertices, shape (2, n) (see climgrid.io.shapes). Accepted
            for interface compatibility; spatial subsetting is not applied.

        Returns
        -------
        ClimGrid

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        OSError
            If the file cannot be decoded as NetCDF.
        MissingAttributeError
            If a required variable or attribute is absent.
        FormatError, UnsupportedCalendarError, IrregularTimeAxisError
            From the time-axis builder.
        """
        path = Path(filepath)
        if not path.exists():
            logger.error("NetCDF file not found: %s", path)
            raise FileNotFoundError(f"NetCDF file not found: {path}")

        if poly is not None:
            logger.warning("Polygon subsetting is not implemented; returning the full domain of %s", path)

        try:
            ds = xr.open_dataset(path, decode_times=False)
        except ValueError as exc:
            logger.error("Unable to decode NetCDF file %s", path)
            raise OSError(f"Unable to read NetCDF file {path}: {exc}") from exc

        with ds:
            logger.debug("Opened %s (variables: %s)", path, list(ds.variables))
            grid = self._build(ds, path, variable)

        logger.info("Loaded %s from %s: shape=%s units=%s grid=%s",
                    variable, path.name, grid.data.shape, grid.dataunits, grid.mapping.name)
        return grid

    # -------------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------------

    def _build(self, ds: xr.Dataset, path: Path, variable: str) -> ClimGrid:
        self._check_required(ds, variable)

        provenance = {field: str(ds.attrs[name]) for field, name in REQUIRED_GLOBAL_ATTRS.items()}
        provenance.update(
            {field: str(ds.attrs.get(name, "")) for field, name in OPTIONAL_GLOBAL_ATTRS.items()}
        )

        source = ds[variable]
        time_var = ds["time"]
        time_dim = time_var.dims[0]
        units = str(time_var.attrs["units"])
        calendar = str(time_var.attrs["calendar"])
        timevec = build_timevec(units, calendar, time_var.values)

        lon_dim, lat_dim = self._spatial_dims(ds, source, time_dim)
        grid_mapping = self._read_grid_mapping(ds, source)
        regular = resolve_grid_mapping(grid_mapping).is_regular

        lon = ds["lon"]
        lat = ds["lat"]
        if lon.ndim == 1:
            longrid = lon.values
            latgrid = lat.values
            if not regular:
                longrid, latgrid = np.meshgrid(longrid, latgrid, indexing="ij")
        else:
            require(
                not regular,
                f"{path.name}: 2D lon/lat fields on a regular grid mapping",
            )
            longrid = lon.transpose(lon_dim, lat_dim).values
            latgrid = lat.transpose(lon_dim, lat_dim).values

        values, dataunits = self._normalize(source.transpose(time_dim, lon_dim, lat_dim), variable)

        data = xr.DataArray(
            values,
            dims=(time_dim, lon_dim, lat_dim),
            coords={
                time_dim: timevec,
                lon_dim: self._axis_values(ds, lon_dim, values.shape[1]),
                lat_dim: self._axis_values(ds, lat_dim, values.shape[2]),
            },
            name=variable,
        )

        varattribs = dict(source.attrs)
        varattribs["units"] = dataunits

        return ClimGrid(
            data=data,
            longrid=np.asarray(longrid),
            latgrid=np.asarray(latgrid),
            timevec=timevec,
            mask=np.isfinite(values).any(axis=0),
            grid_mapping=grid_mapping,
            dimension_dict={"lon": lon_dim, "lat": lat_dim, "time": time_dim},
            timeattrib={"units": units, "calendar": calendar},
            filename=str(path),
            typeofcal=calendar,
            dataunits=dataunits,
            latunits=str(lat.attrs["units"]),
            lonunits=str(lon.attrs["units"]),
            variable=variable,
            typeofvar=variable,
            varattribs=varattribs,
            globalattribs=dict(ds.attrs),
            **provenance,
        )

    @staticmethod
    def _check_required(ds: xr.Dataset, variable: str) -> None:
        missing = [f"variable '{name}'" for name in (variable, "lat", "lon", "time")
                   if name not in ds.variables]
        missing += [f"global attribute '{name}'" for name in REQUIRED_GLOBAL_ATTRS.values()
                    if name not in ds.attrs]
        for name, attrs in ((variable, ("units",)), ("lat", ("units",)),
                            ("lon", ("units",)), ("time", ("units", "calendar"))):
            if name in ds.variables:
                missing += [f"'{name}:{attr}'" for attr in attrs if attr not in ds[name].attrs]

        if missing:
            raise MissingAttributeError(f"Missing required {', '.join(missing)}")

    @staticmethod
    def _spatial_dims(ds: xr.Dataset, source: xr.DataArray, time_dim: str) -> tuple[str, str]:
        """Return the (lon, lat) dimension names of ``source``."""
        spatial = [d for d in source.dims if d != time_dim]
        require(
            time_dim in source.dims and len(spatial) == 2,
            f"Variable '{source.name}' has dims {source.dims}, expected time and two spatial dims",
        )

        lon, lat = ds["lon"], ds["lat"]
        if lon.ndim == 1 and lat.ndim == 1:
            require(
                set(spatial) == {lon.dims[0], lat.dims[0]},
                f"Variable '{source.name}' dims {source.dims} do not match lon/lat dims",
            )
            return lon.dims[0], lat.dims[0]

        for dim in spatial:
            if dim not in ds.variables:
                continue
            attrs = ds[dim].attrs
            if attrs.get("axis") == "X" or attrs.get("standard_name") in X_STANDARD_NAMES:
                return dim, next(d for d in spatial if d != dim)

        # CF order is (..., y, x)
        return spatial[1], spatial[0]

    @staticmethod
    def _read_grid_mapping(ds: xr.Dataset, source: xr.DataArray) -> dict:
        """Collect the grid-mapping attributes referenced by ``source``."""
        name = source.attrs.get("grid_mapping")
        if name in ds.variables:
            attrs = dict(ds[name].attrs)
            if "grid_mapping_name" not in attrs and "grid_mapping" not in attrs:
                attrs["grid_mapping"] = name
            return attrs

        for var in ds.variables.values():
            if "grid_mapping_name" in var.attrs:
                return dict(var.attrs)

        return dict(REGULAR_GRID_MAPPING)

    @staticmethod
    def _axis_values(ds: xr.Dataset, dim: str, size: int) -> np.ndarray:
        if dim in ds.variables:
            return ds[dim].values
        return np.arange(size)

    def _normalize(self, source: xr.DataArray, variable: str) -> tuple[np.ndarray, str]:
        """Apply the unit policy to a cube already ordered (time, lon, lat)."""
        cfg = self.units_config
        dataunits = str(source.attrs["units"])
        values = np.asarray(source.values)

        if variable in cfg.precipitation_vars and dataunits != cfg.precipitation_units:
            logger.debug("Scaling %s by %s (%s -> %s)", variable, cfg.precipitation_scale,
                         dataunits, cfg.precipitation_units)
            values = values * cfg.precipitation_scale
            dataunits = cfg.precipitation_units
        elif variable in cfg.temperature_vars:
            logger.debug("Temperature variable %s read unscaled", variable)

        if cfg.promote_float64 and values.dtype == np.float32:
            values = values.astype(np.float64)

        if dataunits == cfg.kelvin_units:
            values = values - cfg.kelvin_offset
            dataunits = cfg.celsius_units

        return values, dataunits


def load_climgrid(filepath: Path | str, variable: str, poly: Optional[np.ndarray] = None,
                  config: Optional[InternalConfig] = None) -> ClimGrid:
    """Read ``variable`` from a NetCDF file into a ClimGrid (convenience function).

    See ClimGridLoader.load.

    Examples
    --------
    >>> tas = load_climgrid("tas_day_model_rcp85.nc", "tas")
    """
    return ClimGridLoader(config).load(filepath, variable, poly=poly)
