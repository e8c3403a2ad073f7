"""Reconstruction of u_h = sum_i c_i phi_i and error measures."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Sequence

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from .basis import BasisFunction
from .datastructures import Mesh1d

log = logging.getLogger(__name__)


def exact_solution_sin(x):
    """u(x) = sin(pi x) / pi^2 solves u'' + sin(pi x) = 0 with u(0) = u(1) = 0."""
    return np.sin(np.pi * np.asarray(x)) / np.pi**2


def evaluate_solution(coeffs: ArrayLike, basis: Sequence[BasisFunction], x):
    """
    Evaluate u_h(x) = sum_i coeffs[i] * phi_i(x).

    Parameters
    ----------
    coeffs : array_like (dof,)
        Galerkin coefficients
    basis : sequence of BasisFunction
        Basis set the coefficients belong to
    x : float or array_like
        Evaluation point(s)

    Returns
    -------
    float or ndarray
        Scalar for scalar ``x``, array of the same shape otherwise
    """
    coeffs = np.asarray(coeffs, dtype=np.float64)
    if len(coeffs) != len(basis):
        raise ValueError(f"Got {len(coeffs)} coefficients for {len(basis)} basis functions")

    def u_h(xi: float) -> float:
        return float(sum(c * phi.value(xi) for c, phi in zip(coeffs, basis)))

    if np.ndim(x) == 0:
        return u_h(float(x))
    xs = np.asarray(x, dtype=np.float64)
    return np.array([u_h(xi) for xi in xs.ravel()]).reshape(xs.shape)


def sample_points(a: float, b: float, step: float) -> NDArray[np.float64]:
    """Points a, a + step, ... up to and including b."""
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")
    n = int(np.floor((b - a) / step + 1e-12)) + 1
    return np.minimum(a + step * np.arange(n), b)


def sample_solution(
    coeffs: ArrayLike,
    basis: Sequence[BasisFunction],
    exact: Callable | None = None,
    a: float = 0.0,
    b: float = 1.0,
    step: float = 0.05,
) -> pd.DataFrame:
    """Tabulate u_h (and the exact solution and error, if given) on a uniform grid."""
    x = sample_points(a, b, step)
    df = pd.DataFrame({"x": x, "u_h": evaluate_solution(coeffs, basis, x)})
    if exact is not None:
        df["u_exact"] = exact(x)
        df["error"] = df["u_h"] - df["u_exact"]
    return df


def max_abs_error(coeffs: ArrayLike, basis: Sequence[BasisFunction], exact: Callable, x) -> float:
    """Compute max|u_h - u| over the points ``x``."""
    x = np.asarray(x, dtype=np.float64)
    return float(np.max(np.abs(evaluate_solution(coeffs, basis, x) - exact(x))))


def l2_error(
    coeffs: ArrayLike,
    basis: Sequence[BasisFunction],
    exact: Callable,
    mesh: Mesh1d,
    n_points: int = 5,
) -> float:
    """Compute ||u_h - u||_2 with Gauss-Legendre quadrature on every element."""
    mesh = Mesh1d.from_nodes(mesh)
    xi, w = np.polynomial.legendre.leggauss(n_points)
    error_sq = 0.0

    for e in range(mesh.noelms):
        x_l, x_r = mesh.VX[e], mesh.VX[e + 1]
        J = 0.5 * (x_r - x_l)
        x = x_l + J * (xi + 1.0)
        diff = evaluate_solution(coeffs, basis, x) - exact(x)
        error_sq += J * np.sum(w * diff**2)

    return float(np.sqrt(error_sq))


def save_samples(df: pd.DataFrame, path: str | Path) -> Path:
    """Write a sample table as tab-separated text."""
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(filepath, sep="\t", index=False, float_format="%.10g")
    log.info(f"Saved samples to {filepath}")
    return filepath
