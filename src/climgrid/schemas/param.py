"""ParamConfig: Expert defaults for climgrid.

This module defines the complete default configuration. ALL tunable
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Optional
from pydantic import Field, field_validator
from climgrid.schemas.base import ClimGridBaseModel, DataDtype, LogLevel, NetCDFFormat, normalize_extensions, normalize_level


# =============================================================================
# Nested Configuration Models
# =============================================================================

class UnitsConfig(ClimGridBaseModel):
    """Unit normalization applied on import."""
    precipitation_vars: list[str] = Field(default_factory=lambda: ["pr"])
    precipitation_scale: float = Field(86400.0, gt=0, description="Seconds per day: rate to daily accumulation")
    precipitation_units: str = "mm/day"
    temperature_vars: list[str] = Field(default_factory=lambda: ["tas", "tasmax", "tasmin"])
    kelvin_units: str = "K"
    kelvin_offset: float = 273.15
    celsius_units: str = "Celsius"
    promote_float64: bool = True

    @field_validator("precipitation_scale", "kelvin_offset", mode="before")
    @classmethod
    def coerce_to_float(cls, v):
        """Allow int or float."""
        return float(v)


class ExportConfig(ClimGridBaseModel):
    """NetCDF output configuration."""
    data_dtype: DataDtype = "float32"
    zlib: bool = True
    complevel: int = Field(4, ge=0, le=9)
    extensions: list[str] = Field(default_factory=lambda: [".nc", ".nc4"])
    netcdf_format: NetCDFFormat = "NETCDF4"

    @field_validator("extensions", mode="before")
    @classmethod
    def dot_extensions(cls, v):
        return normalize_extensions(v)


class LoggingConfig(ClimGridBaseModel):
    """Logging configuration."""
    level: LogLevel = "INFO"
    log_file: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def uppercase_level(cls, v):
        return normalize_level(v)


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(ClimGridBaseModel):
    """Complete expert configuration with all defaults.
    
    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:
    
        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    
    Runtime code only sees InternalConfig.
    """
    
    units: UnitsConfig = Field(default_factory=UnitsConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
