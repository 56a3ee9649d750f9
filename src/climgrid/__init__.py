"""`climgrid` - gridded climate model output on CF NetCDF.

Subpackages:
- core: ClimGrid container, no-leap time axis
- io: NetCDF import/export, shapefile polygons
- indicators: Derived variables (surface pressure, vapor pressure, WBGT)
- schemas: Layered pydantic configuration
- contracts: Grid invariants and the error hierarchy
"""

__version__ = "0.1.0"

from climgrid.core import ClimGrid
from climgrid.io import load_climgrid, write_climgrid
