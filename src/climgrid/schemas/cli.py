"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: verbosity and log destination.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Optional
from pydantic import field_validator
from climgrid.schemas.base import ClimGridBaseModel, LogLevel, normalize_level


class CLIConfig(ClimGridBaseModel):
    """Command-line configuration overrides.
    
    Operational-only settings that override user and param configs.
    Highest priority in config resolution.
    
    Usage
    -----
        cli_cfg = CLIConfig(log_level="DEBUG", log_file="/tmp/climgrid.log")
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """
    
    log_level: Optional[LogLevel] = None
    log_file: Optional[str] = None
    
    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Normalize log levels to uppercase."""
        return normalize_level(v)
    
    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.
        
        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        logging_overrides = {}
        if self.log_level is not None:
            logging_overrides["level"] = self.log_level
        if self.log_file is not None:
            logging_overrides["log_file"] = str(self.log_file)
        
        return {"logging": logging_overrides} if logging_overrides else {}
