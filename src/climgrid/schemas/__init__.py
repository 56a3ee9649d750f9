"""Configuration for climgrid.

Three input layers are merged into one frozen runtime config:

    ParamConfig   expert defaults (units policy, export encoding, logging)
    UserConfig    a CONFIG dict from the user's file, flat aliases allowed
    CLIConfig     command-line overrides (log level, log file)

resolve_config() is the only way to build an InternalConfig; loaders,
writers and the CLI receive InternalConfig and nothing else.
"""

from climgrid.schemas.resolve import resolve_config
from climgrid.schemas.internal import (
    InternalConfig,
    InternalExportConfig,
    InternalLoggingConfig,
    InternalUnitsConfig,
)
from climgrid.schemas.param import ParamConfig
from climgrid.schemas.user import UserConfig
from climgrid.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'InternalUnitsConfig',
    'InternalExportConfig',
    'InternalLoggingConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
