"""Derived-variable calculators.

Each calculator checks the variable tag (``typeofvar``) of every argument
before touching any data, checks that the operands have identical shapes,
computes elementwise on the numpy cubes (no xarray alignment), and returns a
new ClimGrid. The result inherits coordinates, mask, time axis and
provenance from its primary argument; only the variable tag, the units and
the ``standard_name``/``units``/``history`` attributes change.

Formulas
--------
- Surface pressure: ``sp = psl * 10**(-orog / (18400 * tas / 273.15))``
- Vapor pressure: ``vp = q * sp / (q + 0.622)``
- Simplified WBGT: ``wbgt = 0.567 * Tday + 0.00393 * vp + 3.94``
"""

import logging
from typing import Optional

import numpy as np

from climgrid.contracts import ArgumentTypeError, assert_same_shape, assert_typeofvar
from climgrid.core.climgrid import ClimGrid
from climgrid.schemas import InternalConfig, InternalUnitsConfig, resolve_config

__all__ = ['approx_surfacepressure', 'vaporpressure', 'wbgt']

logger = logging.getLogger(__name__)

KELVIN_UNITS = ("K", "Kelvin")
CELSIUS_UNITS = ("Celsius", "C", "degC")
KELVIN_OFFSET = 273.15

# Epsilon: ratio of the gas constants of dry air and water vapour
EPSILON = 0.622
SCALE_HEIGHT = 18400.0

INHERITED_FIELDS = (
    "longrid", "latgrid", "timevec", "mask", "grid_mapping", "dimension_dict",
    "timeattrib", "model", "experiment", "run", "project", "institute",
    "filename", "frequency", "typeofcal", "latunits", "lonunits", "globalattribs",
)


def _derived_grid(primary: ClimGrid, values: np.ndarray, variable: str, units: str,
                  standard_name: str, history: str) -> ClimGrid:
    """Wrap ``values`` in a new ClimGrid carrying the metadata of ``primary``."""
    varattribs = dict(primary.varattribs)
    varattribs["standard_name"] = standard_name
    varattribs["units"] = units
    varattribs["history"] = history

    data = primary.data.copy(data=values).rename(variable)
    data.attrs = {}

    return ClimGrid(
        data=data,
        dataunits=units,
        variable=variable,
        typeofvar=variable,
        varattribs=varattribs,
        **{name: getattr(primary, name) for name in INHERITED_FIELDS},
    )


def _kelvin(temperature: ClimGrid, caller: str, units: InternalUnitsConfig) -> np.ndarray:
    """Return the temperature cube in Kelvin.

    The configured unit labels are accepted next to the common spellings.
    """
    if temperature.dataunits in KELVIN_UNITS + (units.kelvin_units,):
        return temperature.values
    if temperature.dataunits in CELSIUS_UNITS + (units.celsius_units,):
        return temperature.values + units.kelvin_offset
    raise ArgumentTypeError(
        f"{caller}: temperature must be in Kelvin or Celsius, got '{temperature.dataunits}'"
    )


def approx_surfacepressure(sealevel_pressure: ClimGrid, orography: ClimGrid,
                           daily_temperature: ClimGrid,
                           config: Optional[InternalConfig] = None) -> ClimGrid:
    """Approximate surface pressure from sea-level pressure and orography.

    ``sp = psl * 10**x`` where ``x = -orog / (18400 * tas / 273.15)``.

    Parameters
    ----------
    sealevel_pressure : ClimGrid
        Sea-level pressure (``psl``), Pa. Primary argument.
    orography : ClimGrid
        Surface altitude (``orog``), m.
    daily_temperature : ClimGrid
        Daily mean temperature (``tas``). Kelvin is used in the formula; a
        grid imported in Celsius is converted back.
    config : InternalConfig, optional
        Supplies the Kelvin and Celsius unit labels and the Kelvin offset
        (``config.units``). Expert defaults when None.

    Returns
    -------
    ClimGrid
        Surface pressure, tag ``ps``, Pa.

    Raises
    ------
    ArgumentTypeError
        If an argument has the wrong tag, or the temperature unit is unknown.
    ShapeMismatchError
        If the operands differ in shape.

    Examples
    --------
    >>> ps = approx_surfacepressure(psl, orog, tas)
    >>> ps.varattribs["standard_name"]
    'surface_pressure'
    """
    caller = "approx_surfacepressure"
    assert_typeofvar(sealevel_pressure, "psl", caller)
    assert_typeofvar(orography, "orog", caller)
    assert_typeofvar(daily_temperature, "tas", caller)
    assert_same_shape(sealevel_pressure, orography, daily_temperature)

    config = config if config is not None else resolve_config()
    tas = _kelvin(daily_temperature, caller, config.units)
    exponent = -orography.values / (SCALE_HEIGHT * tas / KELVIN_OFFSET)
    sp = sealevel_pressure.values * np.power(10.0, exponent)

    logger.info("Estimated surface pressure for %s %s", sealevel_pressure.model, sealevel_pressure.experiment)
    return _derived_grid(
        sealevel_pressure, sp, "ps", "Pa", "surface_pressure",
        "Surface pressure estimated with the sealevel pressure, the orography and the daily temperature",
    )


def vaporpressure(specific_humidity: ClimGrid, *args: ClimGrid,
                  config: Optional[InternalConfig] = None) -> ClimGrid:
    """Water vapor pressure from specific humidity and surface pressure.

    ``vp = q * sp / (q + 0.622)``

    Two call forms::

        vaporpressure(huss, ps)
        vaporpressure(huss, psl, orog, tas)

    The second form estimates ``ps`` with approx_surfacepressure first,
    passing ``config`` on.

    Returns
    -------
    ClimGrid
        Vapor pressure, tag ``vp``, Pa. Metadata comes from the surface
        pressure grid.

    Raises
    ------
    TypeError
        If called with other than 2 or 4 grids.
    ArgumentTypeError
        If an argument has the wrong tag.
    ShapeMismatchError
        If the operands differ in shape.
    """
    caller = "vaporpressure"
    if len(args) == 3:
        assert_typeofvar(specific_humidity, "huss", caller)
        surface_pressure = approx_surfacepressure(*args, config=config)
        return vaporpressure(specific_humidity, surface_pressure)
    if len(args) != 1:
        raise TypeError(
            f"{caller}() takes 2 or 4 grids (huss, ps) or (huss, psl, orog, tas), got {len(args) + 1}"
        )

    surface_pressure = args[0]
    assert_typeofvar(specific_humidity, "huss", caller)
    assert_typeofvar(surface_pressure, "ps", caller)
    assert_same_shape(specific_humidity, surface_pressure)

    q = specific_humidity.values
    vp = (q * surface_pressure.values) / (q + EPSILON)

    logger.info("Computed vapor pressure for %s %s", surface_pressure.model, surface_pressure.experiment)
    return _derived_grid(
        surface_pressure, vp, "vp", "Pa", "water_vapor_pressure",
        "Water vapor pressure calculated by a function of surface_pressure and specific humidity",
    )


def wbgt(diurnal_temperature: ClimGrid, vapor_pressure: ClimGrid) -> ClimGrid:
    """Simplified wet-bulb globe temperature.

    ``wbgt = 0.567 * Tday + 0.00393 * vp + 3.94``, with Tday the mean
    diurnal temperature (Celsius, 7:00 to 17:00) and vp in Pa.

    Returns
    -------
    ClimGrid
        WBGT, tag ``wbgt``, Celsius. Metadata comes from the diurnal
        temperature grid.
    """
    caller = "wbgt"
    assert_typeofvar(diurnal_temperature, "tdiu", caller)
    assert_typeofvar(vapor_pressure, "vp", caller)
    assert_same_shape(diurnal_temperature, vapor_pressure)

    values = 0.567 * diurnal_temperature.values + 0.00393 * vapor_pressure.values + 3.94

    logger.info("Computed WBGT for %s %s", diurnal_temperature.model, diurnal_temperature.experiment)
    return _derived_grid(
        diurnal_temperature, values, "wbgt", "Celsius", "simplified_wetbulb_globe_temperature",
        "Wet-bulb globe temperature estimated with the vapor pressure and the diurnal temperature",
    )
