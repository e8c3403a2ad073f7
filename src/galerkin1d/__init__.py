"""1D Galerkin finite element solver for two-point boundary-value problems.

This package solves u''(x) + f(x) = 0 on [a, b] with Dirichlet or free
boundary conditions using piecewise-linear (hat) basis functions.

Main components:
- Mesh1d: validated, immutable 1D node sequence
- LeftHalfHat, RightHalfHat, Hat: compact-support basis functions
- build_basis: ordered basis set from a mesh and boundary flags
- GalerkinSolver: load/stiffness assembly by quadrature and LU solve

Example
-------
>>> from galerkin1d import Mesh1d, build_basis, GalerkinSolver, evaluate_solution
>>>
>>> mesh = Mesh1d([0.0, 0.25, 0.5, 0.75, 1.0])
>>> basis = build_basis(mesh, dirichlet_left=True, dirichlet_right=True)
>>> coeffs = GalerkinSolver().solve(mesh, basis)
>>> u_mid = evaluate_solution(coeffs, basis, 0.5)
"""

from .exceptions import (
    GalerkinError,
    InvalidMeshError,
    InvalidBasisError,
    QuadratureNonConvergenceError,
    SingularSystemError,
)
from .datastructures import (
    Mesh1d,
    uniform_mesh,
    GalerkinParameters,
    Metrics,
    QuadratureResult,
    LUFactorization,
)
from .basis import BasisFunction, LeftHalfHat, RightHalfHat, Hat
from .factory import ShapeFamily, build_basis, expected_basis_size, validate_basis
from .quadrature import integrate
from .linalg import lu_decompose, lu_solve
from .solvers import (
    sin_forcing,
    derivative_product,
    assemble_load,
    assemble_stiffness,
    GalerkinSolver,
    solve_bvp_1d,
)
from .postprocessing import (
    exact_solution_sin,
    evaluate_solution,
    sample_points,
    sample_solution,
    max_abs_error,
    l2_error,
    save_samples,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "GalerkinError",
    "InvalidMeshError",
    "InvalidBasisError",
    "QuadratureNonConvergenceError",
    "SingularSystemError",
    # Data structures
    "Mesh1d",
    "uniform_mesh",
    "GalerkinParameters",
    "Metrics",
    "QuadratureResult",
    "LUFactorization",
    # Basis
    "BasisFunction",
    "LeftHalfHat",
    "RightHalfHat",
    "Hat",
    "ShapeFamily",
    "build_basis",
    "expected_basis_size",
    "validate_basis",
    # Engines
    "integrate",
    "lu_decompose",
    "lu_solve",
    # Solvers
    "sin_forcing",
    "derivative_product",
    "assemble_load",
    "assemble_stiffness",
    "GalerkinSolver",
    "solve_bvp_1d",
    # Post-processing
    "exact_solution_sin",
    "evaluate_solution",
    "sample_points",
    "sample_solution",
    "max_abs_error",
    "l2_error",
    "save_samples",
]
