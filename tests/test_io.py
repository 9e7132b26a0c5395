# tests/test_io.py

import fiona
import laspy
import numpy as np
import pytest
import rasterio
from rasterio.crs import CRS

from pyitc import CrownSegmenter, segment_from_imagery
from pyitc.cli import main
from pyitc.io_utils import (read_height_grid, read_point_cloud, save_crowns,
                            save_label_grid, save_seeds)


@pytest.fixture
def chm_tif(tmp_path, two_cone_chm, unit_transform):
    path = tmp_path / "chm.tif"
    data = two_cone_chm.astype("float32")
    data[0, 0] = -9999.0
    with rasterio.open(
        path, "w", driver="GTiff", height=20, width=20, count=1, dtype="float32",
        crs=CRS.from_epsg(32632), transform=unit_transform, nodata=-9999.0
    ) as dst:
        dst.write(data, 1)
    return path


def test_read_height_grid(chm_tif, unit_transform):
    arr, transform, crs = read_height_grid(chm_tif)
    assert arr.shape == (20, 20)
    assert np.isnan(arr[0, 0])
    assert transform == unit_transform
    assert crs.to_epsg() == 32632


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_height_grid(tmp_path / "missing.tif")


def test_segmenter_from_file(chm_tif):
    seg = CrownSegmenter.from_file(chm_tif)
    seg.smooth()
    seg.tree_detection(hmin=2)
    assert seg.n_trees == 2


def test_save_crowns(tmp_path, two_cone_chm, unit_transform):
    crowns = segment_from_imagery(two_cone_chm, unit_transform, min_dn=2, is_chm=True)
    out = tmp_path / "crowns.gpkg"
    save_crowns(crowns, out, crs_wkt=CRS.from_epsg(32632).to_wkt())

    with fiona.open(out) as src:
        feats = list(src)
    assert len(feats) == 2
    props = feats[0].properties
    assert props["id"] == 1
    assert props["x"] == 6.5 and props["y"] == 13.5
    assert props["ca_m2"] == round(crowns[0].area, 2)
    assert props["height_m"] == round(crowns[0].height, 2)


def test_save_seeds(tmp_path, two_cone_chm, unit_transform):
    seg = CrownSegmenter(two_cone_chm, unit_transform)
    seg.smooth()
    seeds = seg.tree_detection(hmin=2)
    out = tmp_path / "tops.gpkg"
    save_seeds(seeds, out, unit_transform, height=seg.grid)
    with fiona.open(out) as src:
        feats = list(src)
    assert [f.properties["id"] for f in feats] == [1, 2]
    assert tuple(feats[0].geometry.coordinates) == (6.5, 13.5)


def test_save_label_grid(tmp_path, unit_transform):
    labels = np.zeros((20, 20), dtype=np.int32)
    labels[5:10, 5:10] = 1
    labels[7, 7] = 0
    labels[12:15, 12:15] = 2
    out = tmp_path / "crowns.tif"
    save_label_grid(labels, out, unit_transform, crs=CRS.from_epsg(32632), closing_radius=1)
    with rasterio.open(out) as src:
        saved = src.read(1)
    # the hole inside crown 1 is closed, crown 2 is untouched
    assert saved[7, 7] == 1
    assert np.array_equal(saved == 2, labels == 2)


def test_read_point_cloud(tmp_path):
    header = laspy.LasHeader(point_format=3, version="1.2")
    header.scales = np.array([0.01, 0.01, 0.01])
    header.offsets = np.array([0.0, 0.0, 0.0])
    las = laspy.LasData(header)
    las.x = np.array([1.0, 2.0, 3.0])
    las.y = np.array([4.0, 5.0, 6.0])
    las.z = np.array([7.0, 8.0, 9.0])
    las.return_number = np.array([1, 2, 1], dtype=np.uint8)
    path = tmp_path / "points.las"
    las.write(path)

    x, y, z = read_point_cloud(path)
    assert np.allclose(z, [7.0, 8.0, 9.0])
    x, y, z = read_point_cloud(path, first_returns=True)
    assert np.allclose(x, [1.0, 3.0])


def test_cli_image(tmp_path, chm_tif):
    out = tmp_path / "cli.gpkg"
    assert main(["image", str(chm_tif), str(out), "--chm", "--min-dn", "2"]) == 0
    with fiona.open(out) as src:
        assert len(src) == 2


def test_cli_reports_bad_parameters(tmp_path, chm_tif):
    out = tmp_path / "bad.gpkg"
    assert main(["image", str(chm_tif), str(out), "--window-size", "4"]) == 1
    assert not out.exists()
