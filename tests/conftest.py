"""Root-level pytest fixtures for the climgrid test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus small NetCDF files and in-memory grids.
"""

import pytest

from climgrid.schemas import ParamConfig, UserConfig, resolve_config
from tests.helpers.fake_climgrid import make_fake_climgrid
from tests.helpers.fake_netcdf import write_fake_cmip_netcdf, write_fake_rotated_netcdf


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults."""
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_loader_init(internal_config):
    ...     loader = ClimGridLoader(internal_config)
    ...     assert loader.units_config.precipitation_scale == 86400.0
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_double_precision_export(make_config):
    ...     config = make_config(DATA_DTYPE="float64")
    ...     assert config.export.data_dtype == "float64"
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def regular_nc(tmp_path):
    """Daily tas file in Kelvin on a regular lon/lat grid, 4 x 3 x 5 (time, lat, lon)."""
    return write_fake_cmip_netcdf(tmp_path / "tas_day_FAKE-ESM_rcp85_r1i1p1.nc")


@pytest.fixture
def rotated_nc(tmp_path):
    """Daily pr file in kg m-2 s-1 on a rotated-pole grid, 3 x 4 x 6 (time, rlat, rlon)."""
    return write_fake_rotated_netcdf(tmp_path / "pr_day_FAKE-RCM_rcp85_r1i1p1.nc")


@pytest.fixture
def make_grid():
    """Factory fixture for in-memory ClimGrid instances (see make_fake_climgrid)."""
    return make_fake_climgrid
