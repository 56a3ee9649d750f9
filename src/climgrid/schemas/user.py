"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., PRECIP_SCALE → precipitation_scale).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults.
"""

from typing import Optional
from pydantic import Field, field_validator
from climgrid.schemas.base import ClimGridBaseModel, DataDtype, LogLevel, NetCDFFormat, normalize_extensions, normalize_level


class UserUnitsConfig(ClimGridBaseModel):
    """User-facing unit normalization overrides."""
    precipitation_vars: Optional[list[str]] = None
    precipitation_scale: Optional[float] = None
    precipitation_units: Optional[str] = None
    temperature_vars: Optional[list[str]] = None
    kelvin_units: Optional[str] = None
    kelvin_offset: Optional[float] = None
    celsius_units: Optional[str] = None
    promote_float64: Optional[bool] = None


class UserExportConfig(ClimGridBaseModel):
    """User-facing export overrides."""
    data_dtype: Optional[DataDtype] = None
    zlib: Optional[bool] = None
    complevel: Optional[int] = None
    extensions: Optional[list[str]] = None
    netcdf_format: Optional[NetCDFFormat] = None

    @field_validator("extensions", mode="before")
    @classmethod
    def dot_extensions(cls, v):
        return normalize_extensions(v)


class UserConfig(ClimGridBaseModel):
    """User-facing configuration schema.
    
    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.
    
    Usage
    -----
        user_cfg = UserConfig(
            PRECIP_SCALE=86400,
            DATA_DTYPE="float64",
            LOG_LEVEL="debug",
        )
        
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """
    
    # Import settings (flat aliases)
    precipitation_scale: Optional[float] = Field(None, alias="PRECIP_SCALE")
    precipitation_units: Optional[str] = Field(None, alias="PRECIP_UNITS")
    celsius_units: Optional[str] = Field(None, alias="CELSIUS_UNITS")
    promote_float64: Optional[bool] = Field(None, alias="PROMOTE_FLOAT64")
    
    # Export settings (flat aliases)
    data_dtype: Optional[DataDtype] = Field(None, alias="DATA_DTYPE")
    complevel: Optional[int] = Field(None, alias="COMPLEVEL")
    
    # Logging
    log_level: Optional[LogLevel] = Field(None, alias="LOG_LEVEL")
    
    # Nested overrides (advanced users)
    units: Optional[UserUnitsConfig] = None
    export: Optional[UserExportConfig] = None
    
    model_config = ClimGridBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("precipitation_scale", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v
    
    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Normalize log levels to uppercase."""
        return normalize_level(v)
    
    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.
        
        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}
        
        # Units section
        units = {}
        if self.precipitation_scale is not None:
            units["precipitation_scale"] = self.precipitation_scale
        if self.precipitation_units is not None:
            units["precipitation_units"] = self.precipitation_units
        if self.celsius_units is not None:
            units["celsius_units"] = self.celsius_units
        if self.promote_float64 is not None:
            units["promote_float64"] = self.promote_float64
        
        # Merge with explicit units config
        if self.units is not None:
            units.update(self.units.model_dump(exclude_none=True))
        
        if units:
            overrides["units"] = units
        
        # Export section
        export = {}
        if self.data_dtype is not None:
            export["data_dtype"] = self.data_dtype
        if self.complevel is not None:
            export["complevel"] = self.complevel
        
        # Merge with explicit export config
        if self.export is not None:
            export.update(self.export.model_dump(exclude_none=True))
        
        if export:
            overrides["export"] = export
        
        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}
        
        return overrides
