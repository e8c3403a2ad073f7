"""Tests for the quadrature and linear-algebra engines."""

import numpy as np
import pytest

from galerkin1d import SingularSystemError, integrate, lu_decompose, lu_solve


def step(x):
    return 1.0 if x < 1.0 / 3.0 else 0.0


class TestIntegrate:
    """Adaptive quadrature with explicit convergence status."""

    def test_polynomial(self):
        result = integrate(lambda x: x**2, 0.0, 1.0, 1e-10, 1e-10, 50)
        assert result.converged
        assert np.isclose(result.value, 1.0 / 3.0, atol=1e-12)
        assert result.error < 1e-10
        assert result.message == ""

    def test_empty_interval(self):
        result = integrate(np.sin, 0.5, 0.5, 1e-3, 1e-3, 100)
        assert result.converged
        assert result.value == 0.0

    def test_breakpoints(self):
        result = integrate(step, 0.0, 1.0, 1e-12, 1e-12, 50, points=[1.0 / 3.0])
        assert result.converged
        assert np.isclose(result.value, 1.0 / 3.0, atol=1e-12)

    def test_points_outside_interval_ignored(self):
        result = integrate(lambda x: x, 0.0, 1.0, 1e-10, 1e-10, 50, points=[-1.0, 0.0, 1.0, 2.0])
        assert result.converged
        assert np.isclose(result.value, 0.5)

    @pytest.mark.parametrize("max_subintervals", [4, 5])
    def test_breakpoints_at_budget_edge(self, max_subintervals):
        """Three kinks split [0, 1] into four exact panels."""
        kinks = [0.25, 0.5, 0.75]
        result = integrate(
            lambda x: sum(abs(x - c) for c in kinks),
            0.0,
            1.0,
            1e-3,
            1e-3,
            max_subintervals,
            points=kinks,
        )
        assert result.converged
        assert np.isclose(result.value, 0.875, atol=1e-12)
        assert result.error < 1e-10

    def test_non_convergence_reported(self):
        result = integrate(step, 0.0, 1.0, 1e-12, 1e-12, 1)
        assert not result.converged
        assert result.message
        assert result.n_subintervals == 1


class TestLU:
    """LU factorization with pivoting and singularity detection."""

    def test_solve_matches_numpy(self):
        rng = np.random.default_rng(0)
        M = rng.standard_normal((6, 6))
        A = M @ M.T + 6 * np.eye(6)
        b = rng.standard_normal(6)
        x = lu_solve(lu_decompose(A), b)
        assert np.allclose(x, np.linalg.solve(A, b))

    def test_permutation_sign(self):
        swap = lu_decompose(np.array([[0.0, 1.0], [1.0, 0.0]]))
        assert swap.sign == -1
        assert np.allclose(lu_solve(swap, np.array([2.0, 3.0])), [3.0, 2.0])

        no_swap = lu_decompose(np.array([[4.0, 1.0], [1.0, 3.0]]))
        assert no_swap.sign == 1
        assert 0.0 < no_swap.pivot_ratio <= 1.0

    @pytest.mark.parametrize(
        "matrix",
        [
            np.array([[1.0, 2.0], [2.0, 4.0]]),
            np.zeros((3, 3)),
            np.ones((2, 3)),
            np.zeros((0, 0)),
            np.array([[1.0, np.nan], [0.0, 1.0]]),
        ],
    )
    def test_singular(self, matrix):
        with pytest.raises(SingularSystemError):
            lu_decompose(matrix)

    def test_nearly_singular_threshold(self):
        A = np.array([[1.0, 0.0], [0.0, 1e-12]])
        with pytest.raises(SingularSystemError, match="numerically singular"):
            lu_decompose(A)
        assert lu_decompose(A, pivot_rtol=1e-14).n == 2

    def test_rhs_shape(self):
        factorization = lu_decompose(np.eye(3))
        with pytest.raises(SingularSystemError):
            lu_solve(factorization, np.ones(2))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
