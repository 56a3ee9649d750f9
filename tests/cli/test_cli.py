"""Tests for the climgrid console script."""

import logging

import numpy as np
import pytest
import xarray as xr

pytestmark = pytest.mark.unit

from climgrid.cli.main import build_parser, load_user_config_dict, main, setup_logging
from climgrid.schemas import resolve_config
from tests.helpers.fake_netcdf import write_fake_cmip_netcdf


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestUserConfigFile:

    def test_loads_config_dict(self, tmp_path):
        path = tmp_path / "user_config.py"
        path.write_text('CONFIG = {"DATA_DTYPE": "float64"}\n')

        assert load_user_config_dict(str(path)) == {"DATA_DTYPE": "float64"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_user_config_dict(str(tmp_path / "nope.py"))

    def test_no_config_dict(self, tmp_path):
        path = tmp_path / "empty.py"
        path.write_text("SETTINGS = 1\n")

        with pytest.raises(ValueError, match="No CONFIG"):
            load_user_config_dict(str(path))


class TestSetupLogging:

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        config = resolve_config(None, None, {"log_level": "DEBUG", "log_file": str(log_file)})

        setup_logging(config.logging)
        logging.getLogger("climgrid.test").info("hello from the test")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert logging.getLogger().level == logging.DEBUG
        assert "climgrid.test - INFO - hello from the test" in log_file.read_text()

    def test_repeated_setup_does_not_duplicate(self):
        config = resolve_config()

        setup_logging(config.logging)
        setup_logging(config.logging)

        assert len(logging.getLogger().handlers) == 1


class TestCommands:

    def test_convert(self, tmp_path, regular_nc, capsys):
        out = tmp_path / "converted"

        assert main(["convert", str(regular_nc), "tas", str(out)]) == 0

        assert "converted.nc" in capsys.readouterr().out
        with xr.open_dataset(tmp_path / "converted.nc", decode_times=False) as ds:
            assert ds["tas"].attrs["units"] == "Celsius"
            assert ds["tas"].dims == ("time", "lat", "lon")

    def test_convert_missing_input(self, tmp_path):
        assert main(["convert", str(tmp_path / "missing.nc"), "tas", str(tmp_path / "out.nc")]) == 1

    def test_convert_with_user_config(self, tmp_path, regular_nc):
        config_file = tmp_path / "user_config.py"
        config_file.write_text('CONFIG = {"DATA_DTYPE": "float64", "LOG_LEVEL": "warning"}\n')

        code = main(["--config", str(config_file), "convert", str(regular_nc), "tas",
                     str(tmp_path / "out.nc")])

        assert code == 0
        with xr.open_dataset(tmp_path / "out.nc", decode_times=False) as ds:
            assert ds["tas"].dtype == np.float64

    def test_wbgt_from_surface_pressure(self, tmp_path):
        shape = (2, 3, 4)
        tdiu = write_fake_cmip_netcdf(tmp_path / "tdiu.nc", variable="tdiu", units="Celsius",
                                      shape=shape, values=np.full(shape, 30.0))
        huss = write_fake_cmip_netcdf(tmp_path / "huss.nc", variable="huss", units="1",
                                      shape=shape, values=np.full(shape, 0.01))
        ps = write_fake_cmip_netcdf(tmp_path / "ps.nc", variable="ps", units="Pa",
                                    shape=shape, values=np.full(shape, 100000.0))

        code = main(["wbgt", "--tdiu", str(tdiu), "--huss", str(huss), "--ps", str(ps),
                     "-o", str(tmp_path / "wbgt.nc")])

        assert code == 0
        expected = 0.567 * 30.0 + 0.00393 * 1582.2784810126582 + 3.94
        with xr.open_dataset(tmp_path / "wbgt.nc", decode_times=False) as ds:
            np.testing.assert_allclose(ds["wbgt"].values, expected, rtol=1e-6)
            assert ds["wbgt"].attrs["standard_name"] == "simplified_wetbulb_globe_temperature"

    def test_wbgt_requires_pressure_inputs(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["wbgt", "--tdiu", "a.nc", "--huss", "b.nc", "--psl", "c.nc", "-o", "out.nc"])


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
