"""Formal grid invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "timeaxis": [
        "Anchor date parsed from the first YYYY-MM-DD substring of the units",
        "Calendar is noleap / 365_day",
        "One date per raw offset, strictly increasing, daily, no 29 February",
    ],

    "climgrid": [
        "data is 3D with dims (time, lon, lat) named by dimension_dict",
        "len(timevec) equals the time extent of data",
        "mask has the spatial shape (lon, lat) of data",
        "grid_mapping holds exactly one of grid_mapping / grid_mapping_name",
        "Regular grids carry 1D longrid/latgrid, other grids 2D (lon, lat) fields",
    ],

    "import": [
        "Data is float64 when promotion is enabled",
        "Data stored in K is converted to Celsius, pr rates to mm/day",
        "varattribs['units'] matches dataunits",
    ],

    "derived": [
        "Every positional argument carries its expected typeofvar",
        "All operands have identical shapes (no broadcasting)",
        "standard_name, units and history describe the new quantity",
        "All other metadata is copied from the primary argument",
    ],

    "export": [
        "File is written completely and closed, or not produced at all",
        "Time axis re-encoded with the grid's stored units and calendar",
        "Grid mapping variable carries every grid_mapping entry",
    ],
}

# Which stages every grid passes through
STAGE_REQUIREMENTS = {
    "timeaxis": "REQUIRED",
    "climgrid": "REQUIRED",
    "import": "OPTIONAL",    # Grids can also come from a calculator
    "derived": "OPTIONAL",
    "export": "OPTIONAL",
}
