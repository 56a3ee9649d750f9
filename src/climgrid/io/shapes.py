"""Read polygon vertices from a shapefile.

The vertex arrays produced here are the ``poly`` argument accepted by the
importer.
"""

from pathlib import Path
import logging

import geopandas as gpd
import numpy as np

from climgrid.contracts import require

__all__ = ['shapefile_polygon']

logger = logging.getLogger(__name__)


def shapefile_polygon(path: Path | str, index: int = 0) -> np.ndarray:
    """Return the exterior ring of one polygon of a shapefile.

    Parameters
    ----------
    path : Path or str
        Shapefile (or any vector format geopandas reads).

    index : int
        Row of the feature to extract.

    Returns
    -------
    np.ndarray
        Shape (2, n+1): x (longitude) vertices in row 0, y (latitude) in
        row 1, closed back onto the first vertex. For a multipolygon the
        largest part is used.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    IndexError
        If ``index`` is outside the features of the file.
    ContractViolation
        If the selected geometry is not a polygon.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Shapefile not found: {path}")

    gdf = gpd.read_file(path)
    if not 0 <= index < len(gdf):
        raise IndexError(f"Feature {index} out of range; {path.name} holds {len(gdf)} features")

    geom = gdf.geometry.iloc[index]
    require(
        geom is not None and geom.geom_type in ("Polygon", "MultiPolygon"),
        f"Feature {index} of {path.name} is a {getattr(geom, 'geom_type', 'missing geometry')}, "
        f"expected a polygon",
    )
    if geom.geom_type == "MultiPolygon":
        geom = max(geom.geoms, key=lambda part: part.area)
        logger.debug("Feature %d of %s is a multipolygon; using its largest part", index, path.name)

    coords = np.asarray(geom.exterior.coords)[:, :2]
    if not np.array_equal(coords[0], coords[-1]):
        coords = np.vstack([coords, coords[:1]])

    logger.info("Read polygon %d from %s (%d vertices)", index, path.name, len(coords) - 1)
    return coords.T.copy()
