"""Core data model: the ClimGrid container and its time axis."""

from climgrid.core.climgrid import ClimGrid, GridKind, GridMapping, resolve_grid_mapping
from climgrid.core.timeaxis import build_timevec, encode_timevec

__all__ = [
    'ClimGrid',
    'GridKind',
    'GridMapping',
    'resolve_grid_mapping',
    'build_timevec',
    'encode_timevec',
]
