"""
Tests for terrain generators.
"""

import numpy as np
import pytest

from py_mapgen.core.heightmap_generator import (
    Diamond2d,
    Fractal2d,
    Midpoint2d,
    grid_size,
    next_power_of_two,
)
from py_mapgen.core.interpolation import Interpolation
from py_mapgen.core.noise import NoiseKind, build_noise

SEED = 20240501


def _seeded_grid(size, rng):
    """Zeroed grid[y][x] with corners drawn one at a time."""
    grid = [[0.0] * size for _ in range(size)]
    grid[0][0] = rng.uniform(0.0, 1.0)
    grid[0][size - 1] = rng.uniform(0.0, 1.0)
    grid[size - 1][0] = rng.uniform(0.0, 1.0)
    grid[size - 1][size - 1] = rng.uniform(0.0, 1.0)
    return grid


def _diamond_by_hand(size, rng):
    """Diamond-square on a nested list, one scalar draw per cell update."""
    grid = _seeded_grid(size, rng)

    d = size - 1
    while d > 1:
        h = d // 2
        for x in range(h, size, d):
            for y in range(h, size, d):
                total = grid[y - h][x - h] + grid[y + h][x - h] + grid[y - h][x + h] + grid[y + h][x + h]
                grid[y][x] = total / 4.0 + rng.uniform(-d, d)

        for x in range(h, size, d):
            for y in range(h, size, d):
                for cx, cy in ((x - h, y), (x + h, y), (x, y - h), (x, y + h)):
                    neighbours = [
                        grid[ny][nx]
                        for nx, ny in ((cx - h, cy), (cx + h, cy), (cx, cy - h), (cx, cy + h))
                        if 0 <= nx < size and 0 <= ny < size
                    ]
                    grid[cy][cx] = sum(neighbours) / len(neighbours) + rng.uniform(-d, d)
        d = h

    return np.array(grid)


def _midpoint_by_hand(size, rng):
    """Midpoint displacement on a nested list, one scalar draw per cell update."""
    grid = _seeded_grid(size, rng)

    d = size - 1
    while d > 1:
        h = d // 2
        for x in range(h, size, d):
            for y in range(h, size, d):
                tl = grid[y - h][x - h]
                bl = grid[y + h][x - h]
                tr = grid[y - h][x + h]
                br = grid[y + h][x + h]
                grid[y][x] = (tl + bl + tr + br) / 4.0 + rng.uniform(-d, d)
                grid[y][x - h] = (tl + bl) / 2.0 + rng.uniform(-d, d)
                grid[y][x + h] = (tr + br) / 2.0 + rng.uniform(-d, d)
                grid[y - h][x] = (tl + tr) / 2.0 + rng.uniform(-d, d)
                grid[y + h][x] = (bl + br) / 2.0 + rng.uniform(-d, d)
        d = h

    return np.array(grid)


@pytest.fixture(params=[Diamond2d, Midpoint2d], ids=["diamond", "midpoint"])
def subdivision(request):
    return request.param()


class TestGridSize:
    """Test working grid sizing."""

    @pytest.mark.parametrize(
        "n,expected",
        [(0, 1), (1, 1), (2, 2), (3, 4), (4, 4), (5, 8), (255, 256), (256, 256), (257, 512)],
    )
    def test_next_power_of_two(self, n, expected):
        assert next_power_of_two(n) == expected

    @pytest.mark.parametrize(
        "width,height,expected",
        [(1, 1, 2), (2, 2, 2), (3, 3, 3), (5, 2, 5), (6, 4, 9), (512, 256, 513), (100, 300, 513)],
    )
    def test_grid_size(self, width, height, expected):
        assert grid_size(width, height) == expected

    @pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, -1)])
    def test_grid_size_rejects_empty(self, width, height):
        with pytest.raises(ValueError):
            grid_size(width, height)


class TestSubdivision:
    """Behaviour shared by diamond-square and midpoint displacement."""

    @pytest.mark.parametrize("width,height", [(1, 1), (2, 2), (3, 5), (17, 9), (64, 64), (33, 100)])
    def test_output_size(self, subdivision, width, height):
        hmap = subdivision.generate(width, height, np.random.default_rng(SEED))
        assert hmap.width == width
        assert hmap.height == height

    def test_reproducible(self, subdivision):
        first = subdivision.generate(40, 24, np.random.default_rng(SEED))
        second = subdivision.generate(40, 24, np.random.default_rng(SEED))
        assert list(first.heights()) == list(second.heights())

    def test_seed_changes_output(self, subdivision):
        first = subdivision.generate(16, 16, np.random.default_rng(1))
        second = subdivision.generate(16, 16, np.random.default_rng(2))
        assert list(first.heights()) != list(second.heights())

    def test_corners_seeded_in_order(self, subdivision):
        """A 2x2 map has no subdivision levels and holds only the corners."""
        expected = np.random.default_rng(SEED).uniform(0.0, 1.0, size=4)
        hmap = subdivision.generate(2, 2, np.random.default_rng(SEED))

        assert hmap.get(0, 0) == expected[0]
        assert hmap.get(1, 0) == expected[1]
        assert hmap.get(0, 1) == expected[2]
        assert hmap.get(1, 1) == expected[3]

    def test_single_cell(self, subdivision):
        expected = np.random.default_rng(SEED).uniform(0.0, 1.0, size=4)
        hmap = subdivision.generate(1, 1, np.random.default_rng(SEED))
        assert hmap.get(0, 0) == expected[0]

    def test_crop_is_prefix_of_full_grid(self, subdivision):
        full = subdivision.generate(9, 9, np.random.default_rng(SEED))
        cropped = subdivision.generate(7, 5, np.random.default_rng(SEED))
        assert list(cropped.heights()) == list(full.submap(0, 0, 7, 5).heights())

    def test_values_finite(self, subdivision):
        hmap = subdivision.generate(65, 65, np.random.default_rng(SEED))
        assert np.all(np.isfinite(hmap.as_array()))


class TestDiamond2d:
    """Test diamond-square specifics."""

    def test_three_by_three(self):
        rng = np.random.default_rng(SEED)
        corners = rng.uniform(0.0, 1.0, size=4)
        square_offset = rng.uniform(-2, 2, size=1)[0]
        diamond_offsets = rng.uniform(-2, 2, size=4)

        hmap = Diamond2d().generate(3, 3, np.random.default_rng(SEED))
        tl, tr, bl, br = corners
        center = (tl + tr + bl + br) / 4.0 + square_offset

        assert hmap.get(1, 1) == pytest.approx(center)
        # left edge midpoint averages its three in-bounds neighbours
        assert hmap.get(0, 1) == pytest.approx((tl + bl + center) / 3.0 + diamond_offsets[0])
        # bottom edge midpoint
        assert hmap.get(1, 2) == pytest.approx((bl + br + center) / 3.0 + diamond_offsets[3])

    @pytest.mark.parametrize("size", [5, 9, 17])
    def test_matches_step_by_step(self, size):
        hmap = Diamond2d().generate(size, size, np.random.default_rng(SEED))
        expected = _diamond_by_hand(size, np.random.default_rng(SEED))
        np.testing.assert_allclose(hmap.as_array(), expected, rtol=0, atol=1e-12)

    def test_cropped_matches_step_by_step(self):
        hmap = Diamond2d().generate(17, 9, np.random.default_rng(SEED))
        expected = _diamond_by_hand(17, np.random.default_rng(SEED))
        np.testing.assert_allclose(hmap.as_array(), expected[:9, :17], rtol=0, atol=1e-12)

    def test_interior_diamond_cell(self):
        """(2, 1) on a 5x5 grid averages four neighbours; its last write comes from center (3, 1)."""
        rng = np.random.default_rng(SEED)
        rng.uniform(0.0, 1.0, size=4)
        rng.uniform(-4, 4, size=1)
        rng.uniform(-4, 4, size=4)
        rng.uniform(-2, 2, size=4)
        diamond_offsets = rng.uniform(-2, 2, size=16)

        hmap = Diamond2d().generate(5, 5, np.random.default_rng(SEED))
        neighbours = hmap.get(1, 1) + hmap.get(3, 1) + hmap.get(2, 0) + hmap.get(2, 2)

        # Centers run (1, 1), (1, 3), (3, 1), (3, 3); (3, 1) is the third, left is its first draw
        assert hmap.get(2, 1) == pytest.approx(neighbours / 4.0 + diamond_offsets[2 * 4])


class TestMidpoint2d:
    """Test midpoint displacement specifics."""

    def test_three_by_three(self):
        rng = np.random.default_rng(SEED)
        tl, tr, bl, br = rng.uniform(0.0, 1.0, size=4)
        offsets = rng.uniform(-2, 2, size=5)

        hmap = Midpoint2d().generate(3, 3, np.random.default_rng(SEED))

        assert hmap.get(1, 1) == pytest.approx((tl + tr + bl + br) / 4.0 + offsets[0])
        assert hmap.get(0, 1) == pytest.approx((tl + bl) / 2.0 + offsets[1])
        assert hmap.get(2, 1) == pytest.approx((tr + br) / 2.0 + offsets[2])
        assert hmap.get(1, 0) == pytest.approx((tl + tr) / 2.0 + offsets[3])
        assert hmap.get(1, 2) == pytest.approx((bl + br) / 2.0 + offsets[4])

    @pytest.mark.parametrize("size", [5, 9, 17])
    def test_matches_step_by_step(self, size):
        hmap = Midpoint2d().generate(size, size, np.random.default_rng(SEED))
        expected = _midpoint_by_hand(size, np.random.default_rng(SEED))
        np.testing.assert_allclose(hmap.as_array(), expected, rtol=0, atol=1e-12)

    def test_draw_order_within_level(self):
        """On a 5x5 grid the second level visits (1, 1), (1, 3), (3, 1), (3, 3)."""
        rng = np.random.default_rng(SEED)
        rng.uniform(0.0, 1.0, size=4)
        rng.uniform(-4, 4, size=5)
        offsets = rng.uniform(-2, 2, size=20)

        hmap = Midpoint2d().generate(5, 5, np.random.default_rng(SEED))
        corners = hmap.get(0, 2) + hmap.get(0, 4) + hmap.get(2, 2) + hmap.get(2, 4)

        # (1, 3) is the second center, so its center draw is the sixth offset
        assert hmap.get(1, 3) == pytest.approx(corners / 4.0 + offsets[5])


class TestFractal2d:
    """Test fractal summation."""

    @pytest.fixture
    def gradient(self):
        return build_noise(NoiseKind.GRADIENT, np.random.default_rng(SEED), Interpolation.CUBIC)

    def test_single_octave_origin(self, gradient):
        hmap = Fractal2d(gradient, octave=1).generate(4, 4)
        assert hmap.get(0, 0) == gradient.at(0.0, 0.0)
        assert hmap.get(0, 0) == 0.5

    def test_single_octave_matches_noise(self, gradient):
        hmap = Fractal2d(gradient, scale=2.0, octave=1).generate(8, 4)
        # x is stretched by the 2:1 aspect ratio
        assert hmap.get(3, 1) == gradient.at(3 / 8 * 2.0 * 2.0, 1 / 4 * 2.0)
        assert hmap.get(5, 3) == gradient.at(5 / 8 * 2.0 * 2.0, 3 / 4 * 2.0)
        assert hmap.get(5, 3) != 0.5

    def test_grid_matches_point_queries(self, gradient):
        fractal = Fractal2d(gradient, scale=3.0, octave=5)
        hmap = fractal.generate(6, 5)
        ratio = 6 / 5
        for y in range(5):
            for x in range(6):
                expected = fractal.get(np.float64(x / 6 * 3.0 * ratio), np.float64(y / 5 * 3.0))
                assert hmap.get(x, y) == float(expected)

    def test_octave_sum(self, gradient):
        fractal = Fractal2d(gradient, octave=3, lacunarity=2.0, persistence=0.5)
        x, y = 0.3, 0.7
        expected = (
            gradient.at(x, y)
            + gradient.at(x * 2, y * 2) * 0.5
            + gradient.at(x * 4, y * 4) * 0.25
        )
        assert float(fractal.get(x, y)) == pytest.approx(expected)

    def test_zero_octaves(self, gradient):
        hmap = Fractal2d(gradient, octave=0).generate(5, 3)
        assert hmap.width == 5
        assert hmap.height == 3
        assert all(v == 0.0 for v in hmap.heights())

    def test_negative_octave_rejected(self, gradient):
        with pytest.raises(ValueError):
            Fractal2d(gradient, octave=-1)

    def test_rng_not_used(self, gradient):
        fractal = Fractal2d(gradient, octave=4)
        rng = np.random.default_rng(7)
        first = fractal.generate(12, 12, rng)
        second = fractal.generate(12, 12, np.random.default_rng(99))
        assert list(first.heights()) == list(second.heights())
        assert rng.uniform() == np.random.default_rng(7).uniform()

    @pytest.mark.parametrize("kind", list(NoiseKind))
    def test_all_kernels(self, kind):
        noise = build_noise(kind, np.random.default_rng(SEED))
        hmap = Fractal2d(noise, octave=6).generate(32, 16)
        values = hmap.as_array()
        assert values.shape == (16, 32)
        assert np.all(np.isfinite(values))
        assert values.max() > values.min()

    def test_rejects_empty_size(self, gradient):
        with pytest.raises(ValueError):
            Fractal2d(gradient).generate(0, 10)
