"""Derived climate indicators computed from ClimGrid inputs."""

from climgrid.indicators.derived import approx_surfacepressure, vaporpressure, wbgt

__all__ = [
    'approx_surfacepressure',
    'vaporpressure',
    'wbgt',
]
