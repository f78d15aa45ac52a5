# tests/integration/test_pipeline.py
from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import pytest

from starphot.config import load_config
from starphot.errors import CutoutOutOfBounds, NoSourceDetected
from starphot.phot.grid import PixelGrid
from starphot.pipeline import process_file, process_grid, run_batch


@pytest.fixture
def cfg():
    return load_config(xpos=100, ypos=100, radii="1-5")


def test_end_to_end_single_image(write_fits, make_star_frame, cfg):
    path = write_fits("star.fits", make_star_frame())
    results, failures = process_file(path, cfg)
    assert failures == []
    assert len(results) == 1
    res = results[0]
    assert (res.centroid.x, res.centroid.y) == (100.0, 100.0)
    assert res.sky_background == 0.0
    r3 = res.records[2]
    assert r3.radius == 3.0
    assert r3.raw_sum == pytest.approx(1000.0 * (21 + 4 * (3.5 - math.sqrt(8))))


def test_failing_slice_does_not_stop_the_file(write_fits, make_star_frame, cfg):
    cube = np.stack([make_star_frame(), make_star_frame(amp=0.0), make_star_frame(sky=5.0)])
    path = write_fits("cube.fits", cube)
    results, failures = process_file(path, cfg)

    assert [r.slice_index for r in results] == [1, 3]
    assert len(failures) == 1
    f = failures[0]
    assert f.slice_index == 2
    assert f.kind == "NoSourceDetected"
    assert isinstance(f.error, NoSourceDetected)
    assert f.error.context["slice"] == 2
    assert f.error.context["source"] == str(path)
    assert results[1].sky_background == 5.0


def test_failing_file_does_not_stop_the_batch(write_fits, make_star_frame, cfg):
    good_a = write_fits("a.fits", make_star_frame())
    small = write_fits("b.fits", make_star_frame(60, 60, x=30, y=30))
    good_c = write_fits("c.fits", make_star_frame(amp=2000.0))

    seen = []
    report = run_batch([good_a, small, good_c], cfg, on_file_done=lambda p, r, f: seen.append((p, len(r), len(f))))

    assert not report.ok
    assert [r.source for r in report.results] == [good_a, good_c]
    assert len(report.failures) == 1
    assert report.failures[0].source == small
    assert report.failures[0].slice_index is None
    assert isinstance(report.failures[0].error, CutoutOutOfBounds)
    assert seen == [(good_a, 1, 0), (small, 0, 1), (good_c, 1, 0)]


def test_parallel_batch_keeps_input_order(write_fits, make_star_frame, cfg):
    paths = [write_fits(f"f{i}.fits", make_star_frame(amp=700.0 + 100 * i)) for i in range(6)]
    serial = run_batch(paths, cfg, jobs=1)
    parallel = run_batch(paths, cfg, jobs=3)
    assert parallel.ok
    assert [r.source for r in parallel.results] == paths
    assert parallel.results == serial.results


def test_process_grid_tags_errors():
    g = PixelGrid(np.zeros((50, 50)), 100, 100)
    cfg = load_config(xpos=100, ypos=100)
    with pytest.raises(NoSourceDetected) as ei:
        process_grid(g, cfg, source=Path("x.fits"), slice_index=4)
    assert ei.value.context["slice"] == 4
    assert ei.value.context["source"] == "x.fits"
