"""Error kinds raised by the Galerkin pipeline.

Every error aborts the current solve. The kinds let callers tell bad
geometry (mesh, basis) apart from numerical difficulty (quadrature budget,
singular system).
"""

from __future__ import annotations


class GalerkinError(Exception):
    """Base class for all solver errors."""


class InvalidMeshError(GalerkinError, ValueError):
    """Mesh has fewer than 2 nodes, non-finite nodes, or is not strictly increasing."""


class InvalidBasisError(GalerkinError, ValueError):
    """Basis set is inconsistent with the mesh or the boundary flags."""


class QuadratureNonConvergenceError(GalerkinError, ArithmeticError):
    """An integral did not converge within the subinterval budget."""

    def __init__(self, message: str, value: float = float("nan"),
                 error: float = float("inf"), bounds: tuple[float, float] | None = None):
        super().__init__(message)
        self.value = value
        self.error = error
        self.bounds = bounds


class SingularSystemError(GalerkinError, ArithmeticError):
    """Stiffness matrix is numerically singular."""
