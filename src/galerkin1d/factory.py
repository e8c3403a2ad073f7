"""Build ordered basis sets from a mesh and boundary-condition flags."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence, Union

from .basis import BasisFunction, Hat, LeftHalfHat, RightHalfHat
from .datastructures import Mesh1d
from .exceptions import InvalidBasisError

log = logging.getLogger(__name__)


class ShapeFamily(Enum):
    """Available shape families: (left boundary, interior, right boundary) classes."""

    HAT = "hat"

    @property
    def shapes(self) -> tuple[type[BasisFunction], type[BasisFunction], type[BasisFunction]]:
        return _FAMILY_SHAPES[self]

    @classmethod
    def parse(cls, family: Union["ShapeFamily", str]) -> "ShapeFamily":
        if isinstance(family, cls):
            return family
        try:
            return cls(str(family).lower())
        except ValueError:
            known = ", ".join(f.value for f in cls)
            raise ValueError(f"Unknown shape family: {family!r}. Use one of: {known}") from None


_FAMILY_SHAPES = {
    ShapeFamily.HAT: (LeftHalfHat, Hat, RightHalfHat),
}


def expected_basis_size(n_nodes: int, dirichlet_left: bool, dirichlet_right: bool) -> int:
    """Number of degrees of freedom: interior nodes plus one per free boundary."""
    return n_nodes - 2 + (0 if dirichlet_left else 1) + (0 if dirichlet_right else 1)


def build_basis(
    mesh: Union[Mesh1d, Sequence[float]],
    dirichlet_left: bool,
    dirichlet_right: bool,
    family: Union[ShapeFamily, str] = ShapeFamily.HAT,
) -> list[BasisFunction]:
    """
    Build the ordered basis set for ``mesh``.

    A Dirichlet boundary drops its boundary node from the degrees of freedom;
    a free boundary contributes a half-element shape anchored at the first
    (left) or last (right) mesh interval.

    Parameters
    ----------
    mesh : Mesh1d or sequence of float
        Strictly increasing nodes, at least 2
    dirichlet_left, dirichlet_right : bool
        Whether each end is Dirichlet-eliminated
    family : ShapeFamily or str
        Shape family to instantiate (default: hat functions)

    Returns
    -------
    basis : list of BasisFunction
        Ordered by degree-of-freedom index, size
        ``len(mesh) - 2 + (not dirichlet_left) + (not dirichlet_right)``
    """
    mesh = Mesh1d.from_nodes(mesh)
    left_shape, interior_shape, right_shape = ShapeFamily.parse(family).shapes

    basis: list[BasisFunction] = []
    if not dirichlet_left:
        basis.append(left_shape(0, mesh))
    for i in range(1, mesh.nonodes - 1):
        basis.append(interior_shape(i, mesh))
    if not dirichlet_right:
        basis.append(right_shape(mesh.nonodes - 1, mesh))

    log.debug(
        f"Built {len(basis)} basis functions on {mesh.nonodes} nodes "
        f"(dirichlet_left={dirichlet_left}, dirichlet_right={dirichlet_right})"
    )
    return basis


def validate_basis(
    mesh: Mesh1d,
    basis: Sequence[BasisFunction],
    dirichlet_left: bool | None = None,
    dirichlet_right: bool | None = None,
) -> None:
    """Check that ``basis`` is consistent with ``mesh`` (and the flags, if given)."""
    n = len(basis)
    if n == 0:
        raise InvalidBasisError("Basis set is empty: no degrees of freedom")
    if n > mesh.nonodes:
        raise InvalidBasisError(
            f"Basis has {n} functions but a mesh with {mesh.nonodes} nodes allows at most {mesh.nonodes}"
        )
    if dirichlet_left is not None and dirichlet_right is not None:
        expected = expected_basis_size(mesh.nonodes, dirichlet_left, dirichlet_right)
        if n != expected:
            raise InvalidBasisError(
                f"Basis has {n} functions, expected {expected} for {mesh.nonodes} nodes "
                f"(dirichlet_left={dirichlet_left}, dirichlet_right={dirichlet_right})"
            )

    for i, phi in enumerate(basis):
        lo, hi = phi.domain()
        if not lo < hi:
            raise InvalidBasisError(f"basis[{i}] has an empty or inverted domain ({lo}, {hi})")
        if lo < mesh.a or hi > mesh.b:
            raise InvalidBasisError(
                f"basis[{i}] domain ({lo}, {hi}) falls outside the mesh range [{mesh.a}, {mesh.b}]"
            )
