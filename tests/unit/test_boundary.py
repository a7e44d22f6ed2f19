"""
Unit tests for boundary initialization.
"""

import pytest

import numpy as np

from heated_plate.core.boundary import (
    REFERENCE_BOUNDARY,
    BoundaryInitializer,
    BoundaryRule,
    apply_boundary,
    boundary_cell_count,
    boundary_mean,
    boundary_sum,
)
from heated_plate.core.grid_state import GridState


class TestBoundaryRule:
    def test_reference_temperatures(self):
        assert REFERENCE_BOUNDARY.top == 0.0
        assert REFERENCE_BOUNDARY.bottom == 100.0
        assert REFERENCE_BOUNDARY.left == 100.0
        assert REFERENCE_BOUNDARY.right == 100.0

    def test_frozen(self):
        with pytest.raises(AttributeError):
            REFERENCE_BOUNDARY.top = 50.0

    @pytest.mark.parametrize("rows, cols, expected", [(3, 3, 8), (500, 500, 1996), (1, 1, 0), (1, 4, 6)])
    def test_cell_count(self, rows, cols, expected):
        assert boundary_cell_count(rows, cols) == expected


class TestApplyBoundary:
    """Test the border write order and values."""

    def test_reference_border(self):
        field = np.full((5, 6), -1.0)
        apply_boundary(field)
        assert np.all(field[0, :] == 0.0)
        assert np.all(field[-1, :] == 100.0)
        assert np.all(field[1:-1, 0] == 100.0)
        assert np.all(field[1:-1, -1] == 100.0)
        # Interior untouched
        assert np.all(field[1:-1, 1:-1] == -1.0)

    def test_top_corners_belong_to_top_row(self):
        field = np.zeros((4, 4))
        apply_boundary(field)
        assert field[0, 0] == 0.0
        assert field[0, -1] == 0.0
        assert field[-1, 0] == 100.0
        assert field[-1, -1] == 100.0

    def test_single_row_is_top_row(self):
        field = np.full((1, 5), -1.0)
        apply_boundary(field)
        assert np.all(field == 0.0)

    def test_right_wins_on_single_column(self):
        field = np.zeros((4, 1))
        apply_boundary(field, BoundaryRule(top=0.0, bottom=10.0, left=20.0, right=30.0))
        np.testing.assert_array_equal(field[:, 0], [0.0, 30.0, 30.0, 10.0])

    def test_custom_rule(self):
        rule = BoundaryRule(top=1.0, bottom=2.0, left=3.0, right=4.0)
        field = np.zeros((3, 3))
        apply_boundary(field, rule)
        np.testing.assert_array_equal(field, [[1.0, 1.0, 1.0], [3.0, 0.0, 4.0], [2.0, 2.0, 2.0]])


class TestBoundaryMean:
    """Test the boundary sum and mean."""

    def test_three_by_three_mean(self):
        field = np.zeros((3, 3))
        apply_boundary(field)
        assert boundary_sum(field) == 500.0
        assert boundary_mean(field) == 62.5

    def test_large_grid_mean(self):
        field = np.zeros((500, 500))
        apply_boundary(field)
        # 498 * 2 side cells + 500 bottom cells at 100, top row at 0
        expected = (498 * 2 * 100.0 + 500 * 100.0) / 1996
        assert boundary_mean(field) == pytest.approx(expected)

    def test_one_by_one_mean_is_zero(self):
        field = np.zeros((1, 1))
        apply_boundary(field)
        assert boundary_mean(field) == 0.0

    def test_two_row_grid(self):
        field = np.zeros((2, 5))
        apply_boundary(field)
        # Bottom row 100, top row 0, no side cells
        assert boundary_mean(field) == pytest.approx(500.0 / 10)

    def test_single_row_counts_row_twice(self):
        field = np.zeros((1, 4))
        apply_boundary(field, BoundaryRule(top=6.0, bottom=100.0, left=100.0, right=100.0))
        # The one row is read as both bottom and top row
        assert boundary_sum(field) == 48.0
        assert boundary_mean(field) == pytest.approx(48.0 / 6)


class TestBoundaryInitializer:
    def test_initialize_three_by_three(self):
        grid = GridState(3, 3)
        mean = BoundaryInitializer().initialize(grid)
        assert mean == 62.5
        assert grid.get(1, 1) == 62.5
        np.testing.assert_array_equal(grid.previous, grid.current)

    def test_interior_seeded_with_mean(self):
        grid = GridState(6, 9)
        mean = BoundaryInitializer().initialize(grid)
        assert np.all(grid.interior() == mean)
        assert np.all(grid.interior("previous") == mean)

    def test_apply_returns_mean(self):
        field = np.zeros((3, 3))
        assert BoundaryInitializer().apply(field) == 62.5
        assert field[1, 1] == 62.5

    def test_custom_rule_mean(self):
        rule = BoundaryRule(top=100.0, bottom=100.0, left=100.0, right=100.0)
        grid = GridState(5, 5)
        assert BoundaryInitializer(rule).initialize(grid) == 100.0
        assert np.all(grid.current == 100.0)
