"""Write a ClimGrid to a CF-compliant NetCDF file.

The writer lays out the coordinate variables according to the grid's
mapping kind, writes the grid-mapping descriptor, re-encodes the time axis
into the grid's stored no-leap units, and writes the data variable with its
CF attributes and the file-level attributes.

Writes are atomic from the caller's perspective: the file is produced under
a temporary name in the target directory and renamed over the target only
after the NetCDF library has closed it.
"""

from pathlib import Path
from typing import Optional
import logging
import os
import tempfile

import numpy as np
import xarray as xr

from climgrid.contracts import MissingAttributeError, require
from climgrid.core.climgrid import ClimGrid, GridKind
from climgrid.core.timeaxis import encode_timevec
from climgrid.schemas import InternalConfig, resolve_config

__all__ = ['ClimGridWriter', 'write_climgrid']

logger = logging.getLogger(__name__)

NATIVE_AXIS_ATTRS = {
    GridKind.ROTATED: {
        "X": {"long_name": "longitude in rotated pole grid", "units": "degrees",
              "standard_name": "grid_longitude"},
        "Y": {"long_name": "latitude in rotated pole grid", "units": "degrees",
              "standard_name": "grid_latitude"},
    },
    GridKind.PROJECTED: {
        "X": {"long_name": "x coordinate of projection", "units": "m",
              "standard_name": "projection_x_coordinate"},
        "Y": {"long_name": "y coordinate of projection", "units": "m",
              "standard_name": "projection_y_coordinate"},
    },
}


def _actual_range(values) -> np.ndarray:
    return np.array([np.nanmin(values), np.nanmax(values)], dtype=np.float64)


def _geographic_attrs(name: str, units: str, values) -> dict:
    return {
        "units": units,
        "long_name": name,
        "standard_name": name,
        "actual_range": _actual_range(values),
    }


class ClimGridWriter:
    """Serialize ClimGrid instances to NetCDF.

    Configuration
    =============
    Uses ``config.export`` (InternalExportConfig):

    - `data_dtype` : on-disk precision of the data variable (float32)
    - `zlib`, `complevel` : compression of the data variable
    - `extensions` : recognised file extensions; anything else gets ".nc"
    - `netcdf_format` : NETCDF4 or NETCDF4_CLASSIC

    Examples
    --------
    >>> writer = ClimGridWriter(resolve_config())
    >>> writer.write(wbgt_grid, "wbgt_day_model_rcp85")
    PosixPath('wbgt_day_model_rcp85.nc')
    """

    def __init__(self, config: Optional[InternalConfig] = None):
        self.config = config if config is not None else resolve_config()
        self.export_config = self.config.export

    def target_path(self, filepath: Path | str) -> Path:
        """Return ``filepath`` with ".nc" appended unless its extension is recognised."""
        path = Path(filepath)
        if path.suffix.lower() not in self.export_config.extensions:
            path = path.with_name(path.name + ".nc")
        return path

    def write(self, grid: ClimGrid, filepath: Path | str) -> Path:
        """Write ``grid`` to ``filepath``, replacing any existing file.

        Parameters
        ----------
        grid : ClimGrid
            Grid to serialize.

        filepath : Path or str
            Target file. ".nc" is appended if the extension is not recognised.

        Returns
        -------
        Path
            The file written.

        Raises
        ------
        InvalidGridMappingError
            If the grid mapping is ambiguous.
        MissingAttributeError
            If the grid has no stored time units.
        OSError
            If the target directory is missing or not writable.
        """
        target = self.target_path(filepath)
        ds = self.to_dataset(grid)
        encoding = self._encoding(ds, grid.variable)

        fd, tmp = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".part", dir=target.parent)
        os.close(fd)
        tmp_path = Path(tmp)

        try:
            ds.to_netcdf(tmp_path, mode="w", format=self.export_config.netcdf_format,
                         engine="netcdf4", encoding=encoding)
            os.replace(tmp_path, target)
        except Exception:
            logger.error("Failed to write %s; removing partial output", target)
            tmp_path.unlink(missing_ok=True)
            raise
        finally:
            ds.close()

        logger.info("Wrote %s to %s (%s grid, %d time steps)",
                    grid.variable, target, grid.mapping.name, len(grid.timevec))
        return target

    def to_dataset(self, grid: ClimGrid) -> xr.Dataset:
        """Lay out ``grid`` as a CF xarray.Dataset ready for to_netcdf."""
        mapping = grid.mapping
        lon_dim, lat_dim, time_dim = grid.lon_dim, grid.lat_dim, grid.time_dim
        x = grid.data[lon_dim].values
        y = grid.data[lat_dim].values

        coords = {}
        if mapping.is_regular:
            coords["lon"] = ((lon_dim,), x, _geographic_attrs("longitude", grid.lonunits, x))
            coords["lat"] = ((lat_dim,), y, _geographic_attrs("latitude", grid.latunits, y))
        else:
            require(
                not {lon_dim, lat_dim} & {"lon", "lat"},
                f"{mapping.name} grid needs native dimensions distinct from lon/lat, "
                f"got ({lon_dim}, {lat_dim})",
            )
            coords["lon"] = ((lat_dim, lon_dim), grid.longrid.T,
                             _geographic_attrs("longitude", grid.lonunits, grid.longrid))
            coords["lat"] = ((lat_dim, lon_dim), grid.latgrid.T,
                             _geographic_attrs("latitude", grid.latunits, grid.latgrid))
            axis_attrs = NATIVE_AXIS_ATTRS[mapping.kind]
            for dim, axis, values in ((lon_dim, "X", x), (lat_dim, "Y", y)):
                attrs = dict(axis_attrs[axis])
                attrs.update(axis=axis, coordinate_defines="point", actual_range=_actual_range(values))
                coords[dim] = ((dim,), values, attrs)

        coords[time_dim] = ((time_dim,), self._encode_time(grid), {
            "long_name": "time",
            "standard_name": "time",
            "axis": "T",
            "calendar": grid.typeofcal,
            "units": grid.timeattrib["units"],
            "coordinate_defines": "point",
        })

        varattribs = dict(grid.varattribs)
        if not mapping.is_regular or "grid_mapping" in varattribs:
            varattribs["grid_mapping"] = mapping.name

        dtype = np.dtype(self.export_config.data_dtype)
        data_vars = {
            mapping.name: ((), np.int32(0), dict(grid.grid_mapping)),
            grid.variable: (
                (time_dim, lat_dim, lon_dim),
                grid.data.transpose(time_dim, lat_dim, lon_dim).values.astype(dtype),
                varattribs,
            ),
        }

        return xr.Dataset(data_vars, coords=coords, attrs=dict(grid.globalattribs))

    @staticmethod
    def _encode_time(grid: ClimGrid) -> np.ndarray:
        if "units" not in grid.timeattrib:
            raise MissingAttributeError(f"Grid '{grid.variable}' has no stored time units")
        return encode_timevec(grid.timevec, grid.timeattrib["units"], grid.typeofcal)

    def _encoding(self, ds: xr.Dataset, variable: str) -> dict:
        encoding = {name: {"_FillValue": None} for name in ds.variables if name != variable}
        encoding[variable] = {"dtype": self.export_config.data_dtype, "zlib": self.export_config.zlib}
        if self.export_config.zlib:
            encoding[variable]["complevel"] = self.export_config.complevel
        return encoding


def write_climgrid(grid: ClimGrid, filepath: Path | str,
                   config: Optional[InternalConfig] = None) -> Path:
    """Write ``grid`` to a NetCDF file (convenience function).

    See ClimGridWriter.write.
    """
    return ClimGridWriter(config).write(grid, filepath)
