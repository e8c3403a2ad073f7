"""Tests for hat basis functions.

Run with: uv run pytest tests/test_basis.py -v
"""

import warnings
from pathlib import Path

import numpy as np
import pytest

import galerkin1d.basis
from galerkin1d import (
    BasisFunction,
    Hat,
    LeftHalfHat,
    Mesh1d,
    RightHalfHat,
    build_basis,
)

GRID = [0.0, 0.25, 0.5, 0.75, 1.0]


class TestLeftHalfHat:
    """Falling half element at the left boundary."""

    def test_values(self):
        hat = LeftHalfHat(0, GRID)
        assert np.isclose(hat.value(0.0), 1.0, atol=1e-10)
        assert np.isclose(hat.value(0.25 / 2), 0.5, atol=1e-10)
        assert np.isclose(hat.value(0.25), 0.0, atol=1e-10)
        assert np.isclose(hat.value(0.35), 0.0, atol=1e-10)

    def test_boundary_value_exact(self):
        assert LeftHalfHat(0, GRID).value(GRID[0]) == 1.0

    def test_derivative(self):
        hat = LeftHalfHat(0, GRID)
        assert np.isclose(hat.deriv(0.1), -4.0)
        assert hat.deriv(0.3) == 0.0

    def test_domain_half_open(self):
        hat = LeftHalfHat(0, GRID)
        assert hat.domain() == (0.0, 0.25)
        assert hat.within(0.0)
        assert not hat.within(0.25)


class TestRightHalfHat:
    """Rising half element at the right boundary (closed support)."""

    def test_values(self):
        hat = RightHalfHat(len(GRID) - 1, GRID)
        assert np.isclose(hat.value(1.0), 1.0, atol=1e-10)
        assert np.isclose(hat.value(0.75 + 0.25 / 2), 0.5, atol=1e-10)
        assert np.isclose(hat.value(0.75), 0.0, atol=1e-10)
        assert np.isclose(hat.value(0.65), 0.0, atol=1e-10)

    def test_boundary_value_exact(self):
        last = len(GRID) - 1
        assert RightHalfHat(last, GRID).value(GRID[last]) == 1.0

    def test_domain_closed_at_right(self):
        hat = RightHalfHat(len(GRID) - 1, GRID)
        assert hat.domain() == (0.75, 1.0)
        assert hat.within(1.0)
        assert not hat.within(1.0 + 1e-12)

    def test_derivative(self):
        hat = RightHalfHat(len(GRID) - 1, GRID)
        assert np.isclose(hat.deriv(0.9), 4.0)
        assert np.isclose(hat.deriv(1.0), 4.0)
        assert hat.deriv(0.5) == 0.0


class TestHat:
    """Interior tent functions."""

    def test_values(self):
        hat = Hat(1, GRID)
        assert np.isclose(hat.value(0.25), 1.0, atol=1e-10)
        assert np.isclose(hat.value(0.25 + 0.25 / 2), 0.5, atol=1e-10)
        assert np.isclose(hat.value(0.25 - 0.25 / 2), 0.5, atol=1e-10)
        assert np.isclose(hat.value(0.5), 0.0, atol=1e-10)
        assert np.isclose(hat.value(0.0), 0.0, atol=1e-10)
        assert np.isclose(hat.value(0.65), 0.0, atol=1e-10)

    def test_node_values_exact(self):
        for i in range(1, len(GRID) - 1):
            hat = Hat(i, GRID)
            assert hat.value(GRID[i]) == 1.0
            assert hat.value(GRID[i - 1]) == 0.0

    def test_derivative_branches(self):
        hat = Hat(1, GRID)
        assert np.isclose(hat.deriv(0.2), 4.0)
        assert np.isclose(hat.deriv(0.3), -4.0)
        # Right-hand slope at the centre node
        assert np.isclose(hat.deriv(0.25), -4.0)

    def test_continuous_at_center(self):
        hat = Hat(2, GRID)
        assert np.isclose(hat.value(0.5 - 1e-12), 1.0, atol=1e-9)
        assert np.isclose(hat.value(0.5 + 1e-12), 1.0, atol=1e-9)

    def test_nonuniform_mesh(self):
        hat = Hat(1, [0.0, 0.1, 0.4])
        assert hat.domain() == (0.0, 0.4)
        assert np.isclose(hat.value(0.05), 0.5)
        assert np.isclose(hat.value(0.25), 0.5)
        assert np.isclose(hat.deriv(0.05), 10.0)
        assert np.isclose(hat.deriv(0.25), -1.0 / 0.3)

    def test_call_is_value(self):
        hat = Hat(2, GRID)
        for x in [0.3, 0.5, 0.6, 0.9]:
            assert hat(x) == hat.value(x)


class TestCompactSupport:
    """value() and deriv() vanish outside the declared domain."""

    @pytest.mark.parametrize(
        "nodes",
        [GRID, [0.0, 0.1, 0.3, 0.6, 0.8, 1.0], [-2.0, -1.5, 0.0, 3.0]],
    )
    def test_zero_outside_domain(self, nodes):
        basis = build_basis(nodes, False, False)
        xs = np.linspace(nodes[0] - 1.0, nodes[-1] + 1.0, 401)
        for phi in basis:
            lo, hi = phi.domain()
            outside = xs[(xs < lo) | (xs > hi)]
            assert len(outside) > 0
            for x in outside:
                assert phi.value(x) == 0.0
                assert phi.deriv(x) == 0.0

    def test_accepts_mesh_object(self):
        mesh = Mesh1d(GRID)
        assert Hat(2, mesh).domain() == Hat(2, GRID).domain()


class TestConstruction:
    """Invalid neighbour indices and the abstract contract."""

    def test_hat_needs_both_neighbours(self):
        with pytest.raises(IndexError):
            Hat(0, GRID)
        with pytest.raises(IndexError):
            Hat(len(GRID) - 1, GRID)

    def test_half_hats_need_neighbour(self):
        with pytest.raises(IndexError):
            LeftHalfHat(len(GRID) - 1, GRID)
        with pytest.raises(IndexError):
            RightHalfHat(0, GRID)

    def test_abstract_base(self):
        with pytest.raises(TypeError):
            BasisFunction()

    def test_subclass_uses_shared_clipping(self):
        """Custom shapes only implement the formula inside the support."""

        class Constant(BasisFunction):
            def domain(self):
                return 0.0, 1.0

            def _value(self, x):
                return 2.0

            def _deriv(self, x):
                return 0.0

        phi = Constant()
        assert phi.value(0.5) == 2.0
        assert phi.value(1.0) == 0.0
        assert phi.value(-0.1) == 0.0


class TestModuleSource:
    def test_docstring_compiles_without_warnings(self):
        """The ASCII sketch in the module docstring holds backslashes."""
        path = Path(galerkin1d.basis.__file__)
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(path.read_text(encoding="utf-8"), str(path), "exec")
        assert "\\" in galerkin1d.basis.__doc__


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
