"""Tests for adaptive_mandelbrot/geometry.py: image geometry, partitions, pixel mapping."""

import dataclasses
import itertools

import mpmath
import pytest

from adaptive_mandelbrot import (
    MIN_PRECISION,
    ConfigurationError,
    ImageGeometry,
    Partition,
    pixel_to_point,
    precision_context,
    required_precision,
)

DEEP_UPPER_LEFT = ("-0.75", "0.1")
DEEP_LOWER_RIGHT = ("-0.74999999999999999999999999999", "0.09999999999999999999999999999")


def make_geometry(width=100, height=200, precision=40):
    return ImageGeometry(width, height, (-1.0, 1.0), (1.0, -1.0), precision, 255)


class TestPixelToPoint:
    """Test the pixel -> complex plane mapping."""

    def test_known_pixel(self):
        assert pixel_to_point((25, 175), make_geometry()) == complex(-0.5, -0.75)

    def test_origin_is_upper_left(self):
        geometry = make_geometry()
        assert pixel_to_point((0, 0), geometry) == geometry.upper_left

    def test_last_pixel_within_one_pixel_of_lower_right(self):
        geometry = make_geometry()
        point = pixel_to_point((geometry.width - 1, geometry.height - 1), geometry)
        pixel_width = (geometry.lower_right.real - geometry.upper_left.real) / geometry.width
        pixel_height = (geometry.upper_left.imag - geometry.lower_right.imag) / geometry.height

        assert float(geometry.lower_right.real - point.real) == pytest.approx(float(pixel_width))
        assert float(point.imag - geometry.lower_right.imag) == pytest.approx(float(pixel_height))

    def test_rows_increase_downward(self):
        geometry = make_geometry()
        assert pixel_to_point((0, 10), geometry).imag < pixel_to_point((0, 9), geometry).imag

    def test_deep_zoom_keeps_adjacent_pixels_distinct(self):
        """At 200 bits, pixels 1e-30 apart stay distinct though doubles collapse them."""
        geometry = ImageGeometry(4, 4, DEEP_UPPER_LEFT, DEEP_LOWER_RIGHT, precision=200)
        first = pixel_to_point((0, 0), geometry)
        second = pixel_to_point((1, 0), geometry)

        assert first != second
        assert first.real < second.real
        assert float(first.real) == float(second.real)


class TestImageGeometry:
    """Test ImageGeometry validation and precision handling."""

    def test_immutable(self):
        geometry = make_geometry()
        with pytest.raises(dataclasses.FrozenInstanceError):
            geometry.width = 3

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-1, 5)])
    def test_rejects_empty_dimensions(self, width, height):
        with pytest.raises(ConfigurationError):
            ImageGeometry(width, height, (-1, 1), (1, -1))

    def test_rejects_non_increasing_real_axis(self):
        with pytest.raises(ConfigurationError):
            ImageGeometry(10, 10, (1, 1), (1, -1))

    def test_rejects_inverted_imaginary_axis(self):
        with pytest.raises(ConfigurationError):
            ImageGeometry(10, 10, (-1, -1), (1, 1))

    def test_rejects_low_precision(self):
        with pytest.raises(ConfigurationError):
            ImageGeometry(10, 10, (-1, 1), (1, -1), precision=MIN_PRECISION - 1)

    def test_rejects_zero_iteration_cap(self):
        with pytest.raises(ConfigurationError):
            ImageGeometry(10, 10, (-1, 1), (1, -1), max_iterations=0)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            ImageGeometry(10, 10, (1, 1), (-1, -1))

    def test_insufficient_precision_collapses_bounds(self):
        """Corners that only differ beyond 53 bits are rejected at double precision."""
        with pytest.raises(ConfigurationError):
            ImageGeometry(4, 4, DEEP_UPPER_LEFT, DEEP_LOWER_RIGHT, precision=53)

    def test_corners_rounded_to_precision(self):
        geometry = ImageGeometry(10, 10, ("0.1", "1"), ("0.9", "0"), precision=20)
        ctx = precision_context(20)
        assert geometry.upper_left.real == ctx.mpf("0.1")
        assert geometry.upper_left.real != mpmath.mpf("0.1")

    def test_accepts_complex_corners(self):
        geometry = ImageGeometry(10, 10, complex(-2, 1), complex(1, -1))
        assert geometry.upper_left == complex(-2, 1)
        assert geometry.lower_right == complex(1, -1)

    def test_root_partition_covers_image(self):
        geometry = ImageGeometry(7, 5, (-1, 1), (1, -1))
        assert geometry.root_partition() == Partition(0, 0, 7, 5)
        assert geometry.pixel_count == 35


class TestRequiredPrecision:
    """Test precision derivation from pixel spacing."""

    def test_shallow_view_uses_minimum(self):
        assert required_precision(1, 1) == MIN_PRECISION

    def test_deep_view_needs_more_bits(self):
        bits = required_precision(1, mpmath.mpf("1e-100"))
        assert bits >= 333

    def test_monotone_in_depth(self):
        assert required_precision(2, "1e-20") < required_precision(2, "1e-40")

    def test_zero_spacing_rejected(self):
        with pytest.raises(ConfigurationError):
            required_precision(1, 0)


class TestPartition:
    """Test partition bounds, perimeter enumeration and quadrant splitting."""

    def test_bounds(self):
        p = Partition(2, 3, 4, 5)
        assert (p.min_x, p.max_x, p.min_y, p.max_y) == (2, 5, 3, 7)
        assert p.area == 20

    def test_from_bounds(self):
        assert Partition.from_bounds(2, 3, 5, 7) == Partition(2, 3, 4, 5)

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            Partition(0, 0, 0, 1)

    @pytest.mark.parametrize("width,height", [(1, 1), (1, 4), (4, 1), (2, 2), (5, 3), (6, 6)])
    def test_perimeter_yields_each_edge_pixel_once(self, width, height):
        p = Partition(1, 2, width, height)
        perimeter = list(p.perimeter())
        expected = {
            (x, y) for x, y in p.pixels()
            if x in (p.min_x, p.max_x) or y in (p.min_y, p.max_y)
        }
        assert len(perimeter) == len(set(perimeter))
        assert set(perimeter) == expected

    def test_interior_complements_perimeter(self):
        p = Partition(0, 0, 6, 4)
        interior = set(p.interior())
        assert len(interior) == 4 * 2
        assert interior | set(p.perimeter()) == set(p.pixels())
        assert not interior & set(p.perimeter())

    def test_split_odd_span(self):
        assert Partition(0, 0, 5, 5).split() == (
            Partition(0, 0, 3, 3),
            Partition(3, 0, 2, 3),
            Partition(0, 3, 3, 2),
            Partition(3, 3, 2, 2),
        )

    def test_split_rounds_toward_far_edge(self):
        assert Partition(0, 0, 4, 4).split() == (
            Partition(0, 0, 3, 3),
            Partition(3, 0, 1, 3),
            Partition(0, 3, 3, 1),
            Partition(3, 3, 1, 1),
        )

    def test_split_rejects_thin_partitions(self):
        with pytest.raises(ValueError):
            Partition(0, 0, 2, 10).split()

    @pytest.mark.parametrize("width,height", list(itertools.product(range(3, 12), range(3, 12))))
    def test_split_is_exact_disjoint_cover(self, width, height):
        parent = Partition(2, 5, width, height)
        quadrants = parent.split()
        pixel_sets = [set(q.pixels()) for q in quadrants]

        assert all(pixels for pixels in pixel_sets)
        assert set().union(*pixel_sets) == set(parent.pixels())
        for a, b in itertools.combinations(pixel_sets, 2):
            assert not a & b
        assert all(q.area < parent.area for q in quadrants)
