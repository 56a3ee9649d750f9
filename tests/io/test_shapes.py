"""Tests for shapefile polygon extraction."""

import geopandas as gpd
import numpy as np
import pytest
from shapely.geometry import MultiPolygon, Point, Polygon

pytestmark = pytest.mark.unit

from climgrid.contracts import ContractViolation
from climgrid.io.shapes import shapefile_polygon


def _write(path, geometries):
    gpd.GeoDataFrame({"id": list(range(len(geometries)))}, geometry=geometries,
                     crs="EPSG:4326").to_file(path)
    return path


@pytest.fixture
def square_shp(tmp_path):
    square = Polygon([(-75.0, 42.0), (-65.0, 42.0), (-65.0, 48.0), (-75.0, 48.0)])
    triangle = Polygon([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)])
    return _write(tmp_path / "regions.shp", [square, triangle])


def test_first_polygon_closed(square_shp):
    poly = shapefile_polygon(square_shp)

    assert poly.shape == (2, 5)
    np.testing.assert_array_equal(poly[:, 0], poly[:, -1])
    assert set(poly[0]) == {-75.0, -65.0}
    assert set(poly[1]) == {42.0, 48.0}


def test_selected_polygon(square_shp):
    poly = shapefile_polygon(square_shp, index=1)

    assert poly.shape == (2, 4)
    assert poly[0].max() == 1.0


def test_index_out_of_range(square_shp):
    with pytest.raises(IndexError, match="out of range"):
        shapefile_polygon(square_shp, index=2)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        shapefile_polygon(tmp_path / "missing.shp")


def test_point_geometry_rejected(tmp_path):
    path = _write(tmp_path / "points.shp", [Point(0.0, 0.0)])

    with pytest.raises(ContractViolation, match="expected a polygon"):
        shapefile_polygon(path)


def test_multipolygon_uses_largest_part(tmp_path):
    small = Polygon([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)])
    large = Polygon([(10.0, 10.0), (20.0, 10.0), (20.0, 20.0), (10.0, 20.0)])
    path = _write(tmp_path / "multi.shp", [MultiPolygon([small, large])])

    poly = shapefile_polygon(path)

    assert poly[0].min() == 10.0
