"""``climgrid`` console script.

Usage:
    climgrid convert tas_day_model_rcp85.nc tas out/tas_celsius.nc
    climgrid wbgt --tdiu tdiu.nc --huss huss.nc --ps ps.nc -o out/wbgt
    climgrid wbgt --tdiu tdiu.nc --huss huss.nc --psl psl.nc --orog orog.nc --tas tas.nc -o out/wbgt
    climgrid --config my_config.py --log-level DEBUG convert pr.nc pr out/pr.nc

The optional config file is a Python file holding a ``CONFIG`` dict of
UserConfig keys (see scripts/user_config.py).
"""

import argparse
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Optional

from climgrid.contracts import ClimGridError
from climgrid.indicators import vaporpressure, wbgt
from climgrid.io import load_climgrid, write_climgrid
from climgrid.schemas import (
    CLIConfig,
    InternalConfig,
    InternalLoggingConfig,
    ParamConfig,
    UserConfig,
    resolve_config,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("climgrid_user_config", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    config = getattr(module, "CONFIG", None)
    if isinstance(config, dict):
        return config

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(logging_config: InternalLoggingConfig) -> None:
    """Configure the root logger with a console handler and an optional file handler.

    Existing root handlers are removed, so repeated calls do not duplicate
    output.
    """
    log_level = getattr(logging, logging_config.level, logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if logging_config.log_file:
        log_path = Path(logging_config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    logger.debug("Logging: level=%s, file=%s", logging_config.level, logging_config.log_file)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="climgrid",
        description="Import, derive and export gridded climate variables (CF NetCDF)",
    )
    parser.add_argument("--config", help="Python file holding a CONFIG dict of user overrides")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        type=str.upper, help="Override log level")
    parser.add_argument("--log-file", help="Also write the log to this file")

    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Import a variable and write it back with normalized units")
    convert.add_argument("file", help="Input NetCDF file")
    convert.add_argument("variable", help="Variable short name, e.g. tas")
    convert.add_argument("output", help="Output NetCDF file")

    heat = sub.add_parser("wbgt", help="Compute the simplified wet-bulb globe temperature")
    heat.add_argument("--tdiu", required=True, help="Mean diurnal temperature file (tdiu)")
    heat.add_argument("--huss", required=True, help="Specific humidity file (huss)")
    heat.add_argument("--ps", help="Surface pressure file (ps)")
    heat.add_argument("--psl", help="Sea-level pressure file (psl), used when --ps is absent")
    heat.add_argument("--orog", help="Orography file (orog), used when --ps is absent")
    heat.add_argument("--tas", help="Daily mean temperature file (tas), used when --ps is absent")
    heat.add_argument("-o", "--output", required=True, help="Output NetCDF file")

    return parser


def resolve_cli_config(args: argparse.Namespace) -> InternalConfig:
    """Resolve the runtime configuration (Param < User < CLI) from parsed arguments."""
    param_cfg = ParamConfig()
    user_cfg = UserConfig.model_validate(load_user_config_dict(args.config)) if args.config else UserConfig()
    cli_cfg = CLIConfig.model_validate({
        k: v
        for k, v in {"log_level": args.log_level, "log_file": args.log_file}.items()
        if v is not None
    })
    return resolve_config(param_cfg, user_cfg, cli_cfg)


def run_convert(args: argparse.Namespace, config: InternalConfig) -> Path:
    grid = load_climgrid(args.file, args.variable, config=config)
    return write_climgrid(grid, args.output, config=config)


def run_wbgt(args: argparse.Namespace, config: InternalConfig) -> Path:
    tdiu = load_climgrid(args.tdiu, "tdiu", config=config)
    huss = load_climgrid(args.huss, "huss", config=config)

    if args.ps:
        vp = vaporpressure(huss, load_climgrid(args.ps, "ps", config=config), config=config)
    else:
        psl = load_climgrid(args.psl, "psl", config=config)
        orog = load_climgrid(args.orog, "orog", config=config)
        tas = load_climgrid(args.tas, "tas", config=config)
        vp = vaporpressure(huss, psl, orog, tas, config=config)

    return write_climgrid(wbgt(tdiu, vp), args.output, config=config)


COMMANDS = {
    "convert": run_convert,
    "wbgt": run_wbgt,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "wbgt" and not args.ps and not (args.psl and args.orog and args.tas):
        parser.error("wbgt needs either --ps or all of --psl, --orog and --tas")

    config = resolve_cli_config(args)
    setup_logging(config.logging)

    try:
        output = COMMANDS[args.command](args, config)
    except (ClimGridError, OSError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1

    print(f"Wrote {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
