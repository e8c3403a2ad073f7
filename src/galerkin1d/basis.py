r"""Piecewise-linear basis functions with compact support.

Every basis function exposes the same evaluation contract:

- ``domain()`` returns the support interval ``(lo, hi)``
- ``value(x)`` and ``deriv(x)`` return exactly 0.0 outside the support

The support test lives in :meth:`BasisFunction.within` (half-open
``lo <= x < hi`` by default), so concrete shapes only implement the formula
valid inside their support.

Shape family ("hat" functions on a mesh x_0 < x_1 < ... < x_N):

    LeftHalfHat(0)        Hat(i)                 RightHalfHat(N)
    1 \                     /\                          / 1
       \                   /  \                        /
    0   \____        ____/    \____           ____/   0
      x_0  x_1        x_{i-1} x_i x_{i+1}        x_{N-1} x_N
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

__all__ = ["BasisFunction", "LeftHalfHat", "RightHalfHat", "Hat"]


def _node(mesh: Sequence[float], idx: int) -> float:
    """Node coordinate at ``idx``; negative indices are rejected, not wrapped."""
    if idx < 0 or idx >= len(mesh):
        raise IndexError(f"Node index {idx} out of range for mesh with {len(mesh)} nodes")
    return float(mesh[idx])


class BasisFunction(ABC):
    """Abstract basis function with compact support."""

    @abstractmethod
    def domain(self) -> tuple[float, float]:
        """Support interval ``(lo, hi)``."""

    @abstractmethod
    def _value(self, x: float) -> float:
        """Shape value, only called for ``x`` inside the support."""

    @abstractmethod
    def _deriv(self, x: float) -> float:
        """Shape derivative, only called for ``x`` inside the support."""

    def within(self, x: float) -> bool:
        """Half-open membership test ``lo <= x < hi``."""
        lo, hi = self.domain()
        return lo <= x < hi

    def value(self, x: float) -> float:
        if not self.within(x):
            return 0.0
        return self._value(x)

    def deriv(self, x: float) -> float:
        if not self.within(x):
            return 0.0
        return self._deriv(x)

    def __call__(self, x: float) -> float:
        return self.value(x)

    def __repr__(self) -> str:
        lo, hi = self.domain()
        return f"{type(self).__name__}(support=[{lo}, {hi}))"


class LeftHalfHat(BasisFunction):
    """Falls from 1 at node ``idx`` to 0 at node ``idx + 1``."""

    def __init__(self, idx: int, mesh: Sequence[float]):
        self._left = _node(mesh, idx)
        self._right = _node(mesh, idx + 1)

    def domain(self) -> tuple[float, float]:
        return self._left, self._right

    def _value(self, x: float) -> float:
        return (self._right - x) / (self._right - self._left)

    def _deriv(self, x: float) -> float:
        return -1.0 / (self._right - self._left)


class RightHalfHat(BasisFunction):
    """Rises from 0 at node ``idx - 1`` to 1 at node ``idx``.

    This is the last element of the mesh, so the support is closed at the
    right edge and the function evaluates to 1.0 at the final node.
    """

    def __init__(self, idx: int, mesh: Sequence[float]):
        self._left = _node(mesh, idx - 1)
        self._right = _node(mesh, idx)

    def domain(self) -> tuple[float, float]:
        return self._left, self._right

    def within(self, x: float) -> bool:
        lo, hi = self.domain()
        return lo <= x <= hi

    def _value(self, x: float) -> float:
        return (x - self._left) / (self._right - self._left)

    def _deriv(self, x: float) -> float:
        return 1.0 / (self._right - self._left)

    def __repr__(self) -> str:
        return f"RightHalfHat(support=[{self._left}, {self._right}])"


class Hat(BasisFunction):
    """Tent centred on node ``idx``: 0 at ``idx - 1``, 1 at ``idx``, 0 at ``idx + 1``.

    The value is continuous at the centre node; the derivative jumps there and
    takes the right-hand slope at ``x == mid``.
    """

    def __init__(self, idx: int, mesh: Sequence[float]):
        self._lower = _node(mesh, idx - 1)
        self._mid = _node(mesh, idx)
        self._upper = _node(mesh, idx + 1)

    @property
    def center(self) -> float:
        return self._mid

    def domain(self) -> tuple[float, float]:
        return self._lower, self._upper

    def _value(self, x: float) -> float:
        if x < self._mid:
            return (x - self._lower) / (self._mid - self._lower)
        return (self._upper - x) / (self._upper - self._mid)

    def _deriv(self, x: float) -> float:
        if x < self._mid:
            return 1.0 / (self._mid - self._lower)
        return -1.0 / (self._upper - self._mid)
