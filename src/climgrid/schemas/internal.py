"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.
"""

from typing import Optional
from pydantic import ConfigDict, Field, field_validator
from climgrid.schemas.base import ClimGridBaseModel, DataDtype, LogLevel, NetCDFFormat, normalize_extensions


class InternalUnitsConfig(ClimGridBaseModel):
    """Runtime unit normalization."""
    precipitation_vars: list[str]
    precipitation_scale: float
    precipitation_units: str
    temperature_vars: list[str]
    kelvin_units: str
    kelvin_offset: float
    celsius_units: str
    promote_float64: bool


class InternalExportConfig(ClimGridBaseModel):
    """Runtime NetCDF output configuration."""
    data_dtype: DataDtype
    zlib: bool
    complevel: int = Field(ge=0, le=9)
    extensions: list[str]
    netcdf_format: NetCDFFormat

    @field_validator("extensions", mode="before")
    @classmethod
    def dot_extensions(cls, v):
        return normalize_extensions(v)


class InternalLoggingConfig(ClimGridBaseModel):
    """Runtime logging configuration."""
    level: LogLevel
    log_file: Optional[str]


class InternalConfig(ClimGridBaseModel):
    """Authoritative runtime configuration.
    
    Usage
    -----
    Runtime classes receive InternalConfig and access fields directly:
    
        def __init__(self, config: InternalConfig):
            self.scale = config.units.precipitation_scale  # NOT .get()
    
    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation in runtime code
    """
    
    units: InternalUnitsConfig
    export: InternalExportConfig
    logging: InternalLoggingConfig
    
    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
