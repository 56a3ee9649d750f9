"""climgrid user configuration.

This is the user-facing configuration file. Modify settings here to customize
import and export behavior. Expert defaults live in climgrid.schemas.param.

Usage:
    climgrid --config scripts/user_config.py convert tas.nc tas out/tas.nc
    climgrid --config scripts/user_config.py wbgt --tdiu tdiu.nc --huss huss.nc --ps ps.nc -o out/wbgt
"""

CONFIG = {
    # ========================================================================
    # IMPORT (unit normalization)
    # ========================================================================
    "PRECIP_SCALE": 86400,     # Seconds per day: kg m-2 s-1 -> mm/day
    "PRECIP_UNITS": "mm/day",
    "CELSIUS_UNITS": "Celsius",
    "PROMOTE_FLOAT64": True,   # Compute in double precision

    # ========================================================================
    # EXPORT
    # ========================================================================
    "DATA_DTYPE": "float32",   # On-disk precision of the data variable
    "COMPLEVEL": 4,            # zlib level, 0-9

    # ========================================================================
    # LOGGING
    # ========================================================================
    "LOG_LEVEL": "INFO",

    # Nested overrides (advanced)
    # "units": {"precipitation_vars": ["pr", "prc", "prsn"]},
    # "export": {"extensions": [".nc", ".nc4", ".cdf"], "netcdf_format": "NETCDF4_CLASSIC"},
}
