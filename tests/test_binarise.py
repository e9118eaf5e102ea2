"""Tests for Sauvola and Otsu binarisation."""

import math

import numpy as np
import pytest

from blobcount.binarise import binarise, sauvola_threshold, threshold
from blobcount.grid import Grid


def naive_sauvola(px, radius, k, r):
    """Direct window loop, clipped at the border."""
    h, w = len(px), len(px[0])
    out = [[0] * w for _ in range(h)]
    for i in range(h):
        for j in range(w):
            s = sq = n = 0
            for ii in range(max(0, i - radius), min(h - 1, i + radius) + 1):
                for jj in range(max(0, j - radius), min(w - 1, j + radius) + 1):
                    v = px[ii][jj]
                    s += v; sq += v * v; n += 1
            mean = s / n
            std = math.sqrt(max(sq / n - mean * mean, 0.0))
            thr = mean * (1 + k * ((std / r) - 1))
            out[i][j] = 0 if px[i][j] < thr else 255
    return out


def test_end_to_end_example_classification(bean_grid):
    threshold(bean_grid, window_radius=1, k=0.5, r=128)
    px = bean_grid.pixels
    # paper ring stays background
    assert (px[0, :] == 255).all() and (px[-1, :] == 255).all()
    assert (px[:, 0] == 255).all() and (px[:, -1] == 255).all()
    # the bean's edge pixels are ink
    block = px[1:4, 1:4].copy()
    block[1, 1] = 0
    assert (block == 0).all()
    # flat 3x3 window at the very centre: sigma = 0, threshold = 10 * (1 - k) = 5
    assert px[2, 2] == 255


def test_output_is_binary(noisy_scan):
    threshold(noisy_scan)
    assert set(np.unique(noisy_scan.pixels)) <= {0, 255}


@pytest.mark.parametrize("radius,k,r", [(0, 0.5, 128.0), (1, 0.5, 128.0), (2, 0.92, 128.0),
                                        (5, 0.3, 64.0), (40, 0.92, 128.0)])
def test_matches_direct_window_loop(radius, k, r):
    rng = np.random.default_rng(radius)
    px = rng.integers(0, 256, size=(13, 17))
    g = Grid(px.copy())
    threshold(g, radius, k, r)
    assert g.pixels.tolist() == naive_sauvola(px.tolist(), radius, k, r)


def test_deterministic(noisy_scan):
    a, b = noisy_scan.copy(), noisy_scan.copy()
    threshold(a, 3, 0.6, 100.0)
    threshold(b, 3, 0.6, 100.0)
    assert np.array_equal(a.pixels, b.pixels)


def test_reads_only_original_values():
    # a left-to-right in-place update would feed 0/255 into later windows
    rng = np.random.default_rng(3)
    px = rng.integers(50, 200, size=(9, 9))
    g = Grid(px.copy())
    thr = sauvola_threshold(px, 2, 0.5, 128.0)
    threshold(g, 2, 0.5, 128.0)
    assert np.array_equal(g.pixels, np.where(px < thr, 0, 255))


def test_border_windows_are_clipped():
    px = np.arange(16).reshape(4, 4)
    thr = sauvola_threshold(px, 1, 0.0, 128.0)  # k = 0: threshold is the mean
    assert thr[0, 0] == pytest.approx((0 + 1 + 4 + 5) / 4)
    assert thr[1, 1] == pytest.approx(px[0:3, 0:3].mean())
    assert thr[3, 3] == pytest.approx((10 + 11 + 14 + 15) / 4)


def test_radius_zero_is_all_background():
    g = Grid.from_rows([[0, 10], [200, 255]])
    threshold(g, 0, 0.9, 128.0)
    assert (g.pixels == 255).all()


def test_negative_radius_behaves_like_zero():
    g = Grid.from_rows([[0, 10], [200, 255]])
    threshold(g, -3, 0.9, 128.0)
    assert (g.pixels == 255).all()


def test_empty_grid_is_untouched():
    g = Grid.from_rows([])
    assert threshold(g) is g
    assert g.pixels.size == 0


def test_single_pixel():
    g = Grid.from_rows([[42]])
    threshold(g, 17, 0.92, 128.0)
    assert g.pixels.tolist() == [[255]]


def test_otsu_splits_bimodal_histogram():
    g, level = binarise(Grid.from_rows([[10, 12, 11, 200], [9, 205, 210, 198]]))
    assert 12 <= level < 198
    assert g.pixels.tolist() == [[0, 0, 0, 255], [0, 255, 255, 255]]


def test_global_binarise(bean_grid):
    g, level = binarise(bean_grid)
    assert g is bean_grid
    assert 10 <= level < 240
    assert (g.pixels[1:4, 1:4] == 0).all()
    assert int((g.pixels == 255).sum()) == 16


def test_global_binarise_explicit_level():
    g, level = binarise(Grid.from_rows([[3, 4, 5]]), threshold=4)
    assert level == 4
    assert g.pixels.tolist() == [[0, 0, 255]]
