"""Tests for simulation/linear_solver.py — complex Gaussian elimination."""

import numpy as np
import pytest
from simulation.linear_solver import NON_FINITE, SINGULAR, solve_linear


class TestSolveLinear:
    def test_real_system(self):
        A = np.array([[2, 1], [1, 3]], dtype=complex)
        z = np.array([3, 5], dtype=complex)
        result = solve_linear(A, z)
        assert result.success
        np.testing.assert_allclose(result.x, [0.8, 1.4])

    def test_complex_system(self):
        A = np.array([[1 + 1j, 2], [0, 1j]])
        x_true = np.array([1 - 2j, 3 + 0.5j])
        result = solve_linear(A, A @ x_true)
        assert result.success
        np.testing.assert_allclose(result.x, x_true)

    def test_needs_pivoting(self):
        A = np.array([[0, 1], [1, 0]], dtype=complex)
        result = solve_linear(A, np.array([2, 3], dtype=complex))
        assert result.success
        np.testing.assert_allclose(result.x, [3, 2])

    def test_inputs_not_modified(self):
        A = np.array([[0, 1], [1, 0]], dtype=complex)
        z = np.array([2, 3], dtype=complex)
        solve_linear(A, z)
        np.testing.assert_array_equal(A, [[0, 1], [1, 0]])
        np.testing.assert_array_equal(z, [2, 3])

    def test_singular(self):
        A = np.array([[1, 1], [1, 1]], dtype=complex)
        result = solve_linear(A, np.array([1, 2], dtype=complex))
        assert not result.success
        assert result.error_code == SINGULAR
        assert result.pivot_column == 1

    def test_tiny_pivot_is_singular(self):
        A = np.array([[1e-15]], dtype=complex)
        assert solve_linear(A, np.array([1], dtype=complex)).error_code == SINGULAR

    def test_pivot_threshold_is_configurable(self):
        A = np.array([[1e-15]], dtype=complex)
        result = solve_linear(A, np.array([1], dtype=complex), pivot_epsilon=1e-20)
        assert result.success
        assert result.x[0] == pytest.approx(1e15)

    def test_nan_pivot_is_singular(self):
        A = np.array([[np.nan]], dtype=complex)
        assert solve_linear(A, np.array([1], dtype=complex)).error_code == SINGULAR

    def test_overflow_is_non_finite(self):
        A = np.array([[1e-10]], dtype=complex)
        result = solve_linear(A, np.array([1e308], dtype=complex))
        assert not result.success
        assert result.error_code == NON_FINITE

    def test_nan_rhs_is_non_finite(self):
        A = np.eye(2, dtype=complex)
        result = solve_linear(A, np.array([1, np.nan], dtype=complex))
        assert result.error_code == NON_FINITE
