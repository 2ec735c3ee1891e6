"""A list of manifold elements treated as a single manifold element."""

from __future__ import annotations

import itertools
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .diff import _dof, _minus, _plus


class ManifoldVector(list):
    """List of manifold elements ``(m_1, ..., m_k)`` in ``M x ... x M``.

    ``size()`` returns the total degrees of freedom, not the number of
    elements; use ``vector_size()`` or ``len()`` for the latter.
    """

    def vector_size(self) -> int:
        """Number of elements."""
        return len(self)

    def size(self) -> int:
        """Total degrees of freedom of the elements."""
        return sum(_dof(m) for m in self)

    def _split(self, a: ArrayLike) -> list[NDArray[np.float64]]:
        arr = np.ravel(np.asarray(a, dtype=float))
        sizes = [_dof(m) for m in self]
        total = sum(sizes)
        if arr.size != total:
            raise ValueError(f"tangent must have {total} elements, got {arr.size}")
        ends = list(itertools.accumulate(sizes))
        starts = [0, *ends[:-1]]
        return [arr[s:e] for s, e in zip(starts, ends)]

    def __iadd__(self, a: ArrayLike) -> ManifoldVector:  # type: ignore[override]
        """In-place geodesic addition of a stacked tangent vector."""
        self[:] = [_plus(m, seg) for m, seg in zip(self, self._split(a))]
        return self

    def __add__(self, a: ArrayLike) -> ManifoldVector:  # type: ignore[override]
        """Geodesic addition of a stacked tangent vector."""
        ret = ManifoldVector(self)
        ret += a
        return ret

    def __sub__(self, other: Any) -> NDArray[np.float64]:
        """Stacked element-wise right-minus ``self[i] - other[i]``."""
        if len(other) != len(self):
            raise ValueError(
                f"cannot subtract vectors of {len(other)} and {len(self)} elements"
            )
        parts = [_minus(m, o) for m, o in zip(self, other)]
        return np.concatenate(parts) if parts else np.zeros(0)

    def __str__(self) -> str:
        lines = [f"ManifoldVector with {len(self)} elements:"]
        lines.extend(f"{i}: {m}" for i, m in enumerate(self))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ManifoldVector({list.__repr__(self)})"