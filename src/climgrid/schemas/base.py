"""Shared base model and field types for climgrid configuration.

Every config layer (param, user, CLI, internal) derives from
ClimGridBaseModel, so unknown keys, assignment and whitespace are handled
the same way everywhere. The value types reused across layers live here too.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DataDtype = Literal["float32", "float64"]
NetCDFFormat = Literal["NETCDF4", "NETCDF4_CLASSIC"]


def normalize_level(v):
    """Uppercase a log level given as text (``" debug"`` -> ``"DEBUG"``)."""
    if isinstance(v, str):
        return v.upper().strip()
    return v


def normalize_extensions(v):
    """Lowercase and dot-prefix file extensions (``"NC4"`` -> ``".nc4"``)."""
    if v is None:
        return v
    if isinstance(v, str):
        v = [v]
    extensions = []
    for ext in v:
        ext = str(ext).strip().lower()
        extensions.append(ext if ext.startswith(".") else "." + ext)
    return extensions


class ClimGridBaseModel(BaseModel):
    """Base model for all climgrid configuration schemas.

    - Unknown fields are rejected (UserConfig relaxes this)
    - Assignments are validated
    - Strings are stripped
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )
