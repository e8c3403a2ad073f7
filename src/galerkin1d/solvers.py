"""Galerkin solver for u'' + f = 0 on a 1D mesh.

Weak form: find u_h = sum_j c_j phi_j with

    sum_j c_j ∫ phi_i' phi_j' dx = ∫ f phi_i dx    for every basis function phi_i

so the coefficients solve K c = b with stiffness K_ij = a(phi_i, phi_j) and
load b_i = (f, phi_i). Both are integrated numerically; the bilinear form and
the forcing are plain callables, so other symmetric forms fit the same
pipeline.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .basis import BasisFunction
from .datastructures import GalerkinParameters, Mesh1d, Metrics, QuadratureResult
from .exceptions import QuadratureNonConvergenceError
from .factory import ShapeFamily, build_basis, validate_basis
from .linalg import lu_decompose, lu_solve
from .quadrature import integrate

log = logging.getLogger(__name__)

Forcing = Callable[[float], float]
BilinearForm = Callable[[BasisFunction, BasisFunction, float], float]


def sin_forcing(x: float) -> float:
    """f(x) = sin(pi x); exact solution with u(0) = u(1) = 0 is sin(pi x) / pi^2."""
    return np.sin(np.pi * x)


def derivative_product(phi_i: BasisFunction, phi_j: BasisFunction, x: float) -> float:
    """Integrand of the stiffness bilinear form a(u, v) = ∫ u' v' dx."""
    return phi_i.deriv(x) * phi_j.deriv(x)


def _bounds(mesh: Mesh1d, params: GalerkinParameters, *phis: BasisFunction) -> tuple[float, float]:
    """Integration interval: full mesh range, or the overlap of the supports."""
    if not params.restrict_to_support:
        return mesh.a, mesh.b
    lo, hi = mesh.a, mesh.b
    for phi in phis:
        d_lo, d_hi = phi.domain()
        lo, hi = max(lo, d_lo), min(hi, d_hi)
    return lo, hi


def _overlaps(
    mesh: Mesh1d, params: GalerkinParameters, phi_i: BasisFunction, phi_j: BasisFunction
) -> bool:
    """False for pairs with disjoint supports; their entry is an exact zero."""
    lo, hi = _bounds(mesh, params, phi_i, phi_j)
    return lo < hi


def _integrate_entry(
    fn: Callable[[float], float],
    mesh: Mesh1d,
    lo: float,
    hi: float,
    params: GalerkinParameters,
    label: str,
) -> QuadratureResult:
    result = integrate(
        fn,
        lo,
        hi,
        abs_tol=params.abs_tol,
        rel_tol=params.rel_tol,
        max_subintervals=params.max_subintervals,
        points=mesh.nodes_between(lo, hi),
    )
    if not result.converged:
        raise QuadratureNonConvergenceError(
            f"Quadrature for {label} on [{lo}, {hi}] did not converge within "
            f"{params.max_subintervals} subintervals (error estimate {result.error:.3e}): "
            f"{result.message}",
            value=result.value,
            error=result.error,
            bounds=(lo, hi),
        )
    return result


def assemble_load(
    mesh: Mesh1d,
    basis: Sequence[BasisFunction],
    forcing: Forcing = sin_forcing,
    params: GalerkinParameters | None = None,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Assemble the load vector b_i = ∫ f(x) phi_i(x) dx.

    Parameters
    ----------
    mesh : Mesh1d
        Mesh nodes
    basis : sequence of BasisFunction
        Ordered basis set
    forcing : callable
        Right-hand side f(x)
    params : GalerkinParameters, optional
        Quadrature settings

    Returns
    -------
    load : ndarray (dof,)
        Load vector
    errors : ndarray (dof,)
        Quadrature error estimates
    """
    params = params or GalerkinParameters()
    dof = len(basis)
    load = np.zeros(dof)
    errors = np.zeros(dof)

    for i, phi in enumerate(basis):
        lo, hi = _bounds(mesh, params, phi)
        result = _integrate_entry(
            lambda x, phi=phi: forcing(x) * phi.value(x), mesh, lo, hi, params, f"load[{i}]"
        )
        load[i] = result.value
        errors[i] = result.error

    return load, errors


def assemble_stiffness(
    mesh: Mesh1d,
    basis: Sequence[BasisFunction],
    bilinear_form: BilinearForm = derivative_product,
    params: GalerkinParameters | None = None,
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Assemble the dense stiffness matrix K_ij = ∫ a(phi_i, phi_j)(x) dx.

    With ``params.symmetric_assembly`` only the upper triangle is integrated
    and mirrored; the returned matrix is always full.

    Returns
    -------
    stiffness : ndarray (dof, dof)
        Stiffness matrix
    errors : ndarray (dof, dof)
        Quadrature error estimates
    """
    params = params or GalerkinParameters()
    dof = len(basis)
    stiffness = np.zeros((dof, dof))
    errors = np.zeros((dof, dof))

    for i, phi_i in enumerate(basis):
        j_start = i if params.symmetric_assembly else 0
        for j in range(j_start, dof):
            phi_j = basis[j]
            lo, hi = _bounds(mesh, params, phi_i, phi_j)
            if lo >= hi:
                # Disjoint supports
                continue
            result = _integrate_entry(
                lambda x, phi_i=phi_i, phi_j=phi_j: bilinear_form(phi_i, phi_j, x),
                mesh,
                lo,
                hi,
                params,
                f"stiffness[{i}, {j}]",
            )
            stiffness[i, j] = result.value
            errors[i, j] = result.error
            if params.symmetric_assembly:
                stiffness[j, i] = result.value
                errors[j, i] = result.error

    return stiffness, errors


class GalerkinSolver:
    """One-shot Galerkin solver: assemble, factor, solve.

    Handles:
    - Mesh and basis validation
    - Load vector and stiffness matrix assembly by adaptive quadrature
    - LU solve with singularity detection
    - Metrics tracking

    Parameters
    ----------
    params : GalerkinParameters, optional
        Solver settings. If not provided, kwargs are used to create them.
    forcing : callable, optional
        Right-hand side f(x). Defaults to sin(pi x).
    bilinear_form : callable, optional
        Integrand a(phi_i, phi_j, x). Defaults to phi_i'(x) * phi_j'(x).
    **kwargs
        Passed to GalerkinParameters if params is None.
    """

    Parameters = GalerkinParameters

    def __init__(
        self,
        params: GalerkinParameters | None = None,
        forcing: Forcing | None = None,
        bilinear_form: BilinearForm | None = None,
        **kwargs,
    ):
        if params is None:
            params = self.Parameters(**kwargs)
        elif kwargs:
            raise TypeError("Pass either params or keyword settings, not both")

        self.params = params
        self.forcing = forcing or sin_forcing
        self.bilinear_form = bilinear_form or derivative_product
        self.metrics = Metrics()
        # Last assembled system, kept for inspection only
        self.stiffness: NDArray[np.float64] | None = None
        self.load: NDArray[np.float64] | None = None

    def solve(
        self,
        mesh: Union[Mesh1d, Sequence[float]],
        basis: Sequence[BasisFunction],
        dirichlet: tuple[bool, bool] | None = None,
    ) -> NDArray[np.float64]:
        """
        Solve for the Galerkin coefficients.

        Parameters
        ----------
        mesh : Mesh1d or sequence of float
            Mesh the basis was built on
        basis : sequence of BasisFunction
            Ordered basis set
        dirichlet : (bool, bool), optional
            Boundary flags used to build the basis; enables the basis size check

        Returns
        -------
        coeffs : ndarray (dof,)
            Coefficients aligned with ``basis``

        Raises
        ------
        InvalidMeshError, InvalidBasisError, QuadratureNonConvergenceError, SingularSystemError
        """
        time_start = time.perf_counter()
        mesh = Mesh1d.from_nodes(mesh)
        if dirichlet is None:
            validate_basis(mesh, basis)
        else:
            validate_basis(mesh, basis, *dirichlet)
        dof = len(basis)

        load, load_err = assemble_load(mesh, basis, self.forcing, self.params)
        stiffness, stiff_err = assemble_stiffness(mesh, basis, self.bilinear_form, self.params)
        self.load, self.stiffness = load, stiffness

        factorization = lu_decompose(stiffness, pivot_rtol=self.params.pivot_rtol)
        coeffs = lu_solve(factorization, load)

        n_pairs = sum(
            1
            for i, phi_i in enumerate(basis)
            for phi_j in basis[(i if self.params.symmetric_assembly else 0) :]
            if _overlaps(mesh, self.params, phi_i, phi_j)
        )
        self.metrics = Metrics(
            n_dof=dof,
            n_integrals=dof + n_pairs,
            max_quadrature_error=float(max(load_err.max(), stiff_err.max())),
            min_pivot_ratio=factorization.pivot_ratio,
            wall_time_seconds=time.perf_counter() - time_start,
        )
        log.info(
            f"Solved {dof} dof on {mesh.nonodes} nodes in {self.metrics.wall_time_seconds:.3f}s "
            f"(max quadrature error {self.metrics.max_quadrature_error:.2e}, "
            f"pivot ratio {factorization.pivot_ratio:.2e})"
        )
        return coeffs


def solve_bvp_1d(
    nodes: Union[Mesh1d, Sequence[float]],
    dirichlet_left: bool = True,
    dirichlet_right: bool = True,
    forcing: Forcing | None = None,
    family: Union[ShapeFamily, str] = ShapeFamily.HAT,
    **kwargs,
) -> tuple[Mesh1d, list[BasisFunction], NDArray[np.float64]]:
    """
    Solve u'' + f = 0 on the given nodes with a freshly built basis.

    Returns
    -------
    mesh, basis, coeffs : tuple
        Validated mesh, ordered basis set and Galerkin coefficients
    """
    mesh = Mesh1d.from_nodes(nodes)
    basis = build_basis(mesh, dirichlet_left, dirichlet_right, family)
    solver = GalerkinSolver(forcing=forcing, **kwargs)
    coeffs = solver.solve(mesh, basis, dirichlet=(dirichlet_left, dirichlet_right))
    return mesh, basis, coeffs
