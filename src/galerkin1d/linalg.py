"""Dense linear-algebra engine: LU with partial pivoting (LAPACK via SciPy)."""

from __future__ import annotations

import logging
import warnings

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import LinAlgWarning, lu_factor
from scipy.linalg import lu_solve as _lu_solve

from .datastructures import DEFAULT_PIVOT_RTOL, LUFactorization
from .exceptions import SingularSystemError

log = logging.getLogger(__name__)


def lu_decompose(matrix: NDArray[np.float64], pivot_rtol: float = DEFAULT_PIVOT_RTOL) -> LUFactorization:
    """
    Factor ``matrix`` as P L U.

    Parameters
    ----------
    matrix : ndarray (n, n)
        Square system matrix
    pivot_rtol : float
        The matrix is treated as singular when
        ``min|U_ii| <= pivot_rtol * max|U_ii|``

    Returns
    -------
    LUFactorization

    Raises
    ------
    SingularSystemError
        Empty, non-square or non-finite matrix, or a degenerate pivot
    """
    A = np.asarray(matrix, dtype=np.float64)
    if A.ndim != 2 or A.shape[0] != A.shape[1] or A.shape[0] == 0:
        raise SingularSystemError(f"Expected a non-empty square matrix, got shape {A.shape}")
    if not np.all(np.isfinite(A)):
        raise SingularSystemError("Matrix contains non-finite entries")

    # Exactly zero pivots are reported below with more context than LAPACK's warning
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", LinAlgWarning)
        lu, piv = lu_factor(A)

    pivots = np.abs(np.diag(lu))
    largest = pivots.max()
    if largest == 0.0:
        raise SingularSystemError("Matrix is zero")
    ratio = float(pivots.min() / largest)
    if ratio <= pivot_rtol:
        k = int(np.argmin(pivots))
        raise SingularSystemError(
            f"Matrix is numerically singular: pivot {k} has |U_kk|/max|U_ii| = {ratio:.3e} "
            f"(threshold {pivot_rtol:.1e})"
        )
    if ratio <= 1e3 * pivot_rtol:
        log.warning(f"Ill-conditioned system: smallest pivot ratio {ratio:.3e}")

    sign = -1 if np.count_nonzero(piv != np.arange(len(piv))) % 2 else 1
    return LUFactorization(lu=lu, piv=piv, sign=sign, pivot_ratio=ratio)


def lu_solve(factorization: LUFactorization, rhs: NDArray[np.float64]) -> NDArray[np.float64]:
    """Solve ``A x = rhs`` given the LU factors of ``A``."""
    b = np.asarray(rhs, dtype=np.float64)
    if b.shape != (factorization.n,):
        raise SingularSystemError(
            f"Right-hand side has shape {b.shape}, expected ({factorization.n},)"
        )
    x = _lu_solve((factorization.lu, factorization.piv), b)
    if not np.all(np.isfinite(x)):
        raise SingularSystemError("Linear solve produced non-finite values")
    return x
