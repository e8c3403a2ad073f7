"""Data structures for the 1D Galerkin solver.

Architecture: Params vs Metrics

             Params (input/config)         Metrics (output/results)
             ─────────────────────         ────────────────────────
Geometry     Mesh1d                        -
             VX nodes, a, b, h

Solver       GalerkinParameters            Metrics
             tolerances, budget, pivots    n_dof, quadrature error, timing

Engines      -                             QuadratureResult, LUFactorization
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Iterator, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from .exceptions import InvalidMeshError

# Reference quadrature settings (absolute/relative tolerance, subinterval budget)
DEFAULT_ABS_TOL = 1e-3
DEFAULT_REL_TOL = 1e-3
DEFAULT_MAX_SUBINTERVALS = 100

# Smallest accepted |U_ii| / max|U_jj| in the LU factorization
DEFAULT_PIVOT_RTOL = 1e-10


# ============================================================================
# Geometry
# ============================================================================


@dataclass(frozen=True, eq=False)
class Mesh1d:
    """Ordered, strictly increasing 1D node sequence.

    The node array is copied on construction and made read-only, so a mesh
    can be shared between the basis factory and the solver without copies.

    Attributes
    ----------
    VX : ndarray (n_nodes,)
        Node coordinates
    """

    VX: NDArray[np.float64]

    def __post_init__(self) -> None:
        VX = np.array(self.VX, dtype=np.float64)
        if VX.ndim != 1:
            raise InvalidMeshError(f"Mesh nodes must be a 1D sequence, got shape {VX.shape}")
        if VX.size < 2:
            raise InvalidMeshError(f"Mesh needs at least 2 nodes, got {VX.size}")
        if not np.all(np.isfinite(VX)):
            raise InvalidMeshError("Mesh nodes must be finite")

        bad = np.flatnonzero(np.diff(VX) <= 0)
        if bad.size:
            i = int(bad[0])
            raise InvalidMeshError(
                f"Mesh nodes must be strictly increasing: "
                f"VX[{i}]={VX[i]!r} >= VX[{i + 1}]={VX[i + 1]!r}"
            )

        VX.flags.writeable = False
        object.__setattr__(self, "VX", VX)

    @classmethod
    def from_nodes(cls, nodes: Union["Mesh1d", Sequence[float], NDArray]) -> "Mesh1d":
        """Return ``nodes`` if it already is a mesh, otherwise validate and wrap it."""
        if isinstance(nodes, cls):
            return nodes
        return cls(nodes)

    @property
    def nonodes(self) -> int:
        return len(self.VX)

    @property
    def noelms(self) -> int:
        return len(self.VX) - 1

    @property
    def a(self) -> float:
        return float(self.VX[0])

    @property
    def b(self) -> float:
        return float(self.VX[-1])

    @property
    def h(self) -> NDArray[np.float64]:
        """Element lengths."""
        return np.diff(self.VX)

    @property
    def interior(self) -> NDArray[np.float64]:
        return self.VX[1:-1]

    @property
    def EToV(self) -> NDArray[np.int64]:
        """Element-to-vertex connectivity (0-based)."""
        return np.column_stack([np.arange(self.noelms), np.arange(1, self.nonodes)])

    def nodes_between(self, lo: float, hi: float) -> NDArray[np.float64]:
        """Nodes strictly inside (lo, hi)."""
        return self.VX[(self.VX > lo) & (self.VX < hi)]

    def __len__(self) -> int:
        return len(self.VX)

    def __getitem__(self, idx):
        return self.VX[idx]

    def __iter__(self) -> Iterator[float]:
        return (float(x) for x in self.VX)

    def __repr__(self) -> str:
        return f"Mesh1d(nonodes={self.nonodes}, a={self.a}, b={self.b})"


def uniform_mesh(a: float, b: float, n_elem: int) -> Mesh1d:
    """Create an equispaced 1D mesh on [a, b] with ``n_elem`` elements."""
    if n_elem < 1:
        raise InvalidMeshError(f"Need at least one element, got n_elem={n_elem}")
    return Mesh1d(np.linspace(a, b, n_elem + 1))


# ============================================================================
# Parameters (Input Configuration)
# ============================================================================


@dataclass
class GalerkinParameters:
    """Quadrature and linear-solve settings for the Galerkin solver."""

    abs_tol: float = DEFAULT_ABS_TOL
    rel_tol: float = DEFAULT_REL_TOL
    max_subintervals: int = DEFAULT_MAX_SUBINTERVALS
    # Integrate over the support overlap instead of the full mesh range
    restrict_to_support: bool = True
    # Integrate only j >= i and mirror
    symmetric_assembly: bool = True
    pivot_rtol: float = DEFAULT_PIVOT_RTOL

    def __post_init__(self) -> None:
        if self.abs_tol < 0 or self.rel_tol < 0:
            raise ValueError("Quadrature tolerances must be non-negative")
        if self.abs_tol == 0 and self.rel_tol == 0:
            raise ValueError("At least one quadrature tolerance must be positive")
        if int(self.max_subintervals) < 1:
            raise ValueError(f"max_subintervals must be >= 1, got {self.max_subintervals}")
        if self.pivot_rtol < 0:
            raise ValueError("pivot_rtol must be non-negative")
        self.max_subintervals = int(self.max_subintervals)

    def to_dict(self) -> dict:
        return asdict(self)


# ============================================================================
# Metrics (Output Results)
# ============================================================================


@dataclass
class Metrics:
    """Solve metrics - filled in by GalerkinSolver.solve()."""

    n_dof: int = 0
    # Load and stiffness integrals evaluated; disjoint pairs are skipped
    n_integrals: int = 0
    max_quadrature_error: float = 0.0
    min_pivot_ratio: float = float("nan")
    wall_time_seconds: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


# ============================================================================
# Engine results
# ============================================================================


@dataclass(frozen=True)
class QuadratureResult:
    """Outcome of one adaptive integration."""

    value: float
    error: float
    converged: bool
    message: str = ""
    n_subintervals: int = 0


@dataclass(frozen=True, eq=False)
class LUFactorization:
    """LU factors with partial pivoting (LAPACK ``getrf`` layout).

    Attributes
    ----------
    lu : ndarray (n, n)
        Combined L (unit diagonal, below) and U (on and above diagonal)
    piv : ndarray (n,)
        Row i was interchanged with row piv[i]
    sign : int
        Parity of the permutation, +1 or -1
    """

    lu: NDArray[np.float64]
    piv: NDArray[np.int32]
    sign: int
    pivot_ratio: float = field(default=float("nan"))

    @property
    def n(self) -> int:
        return self.lu.shape[0]
