"""NetCDF import/export and shapefile polygon reading."""

from climgrid.io.loader import ClimGridLoader, load_climgrid
from climgrid.io.writer import ClimGridWriter, write_climgrid
from climgrid.io.shapes import shapefile_polygon

__all__ = [
    'ClimGridLoader',
    'load_climgrid',
    'ClimGridWriter',
    'write_climgrid',
    'shapefile_polygon',
]
