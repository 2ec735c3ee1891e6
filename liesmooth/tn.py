"""The Lie group T(n) of n-dimensional translations."""

from __future__ import annotations

import functools
import operator

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .lie_group import LieGroup


class Tn(LieGroup):
    """Translations in R^n.

    Group and tangent are both the vector ``[x_1, ..., x_n]``; the matrix form
    is ``[[I, t], [0, 1]]``. Use ``Tn.of(n)`` for the class of a given
    dimension, or ``Tn(v)`` to infer the dimension from ``v``.
    """

    __slots__ = ()

    def __new__(cls, rn: ArrayLike):
        if cls is Tn:
            cls = Tn.of(np.asarray(rn, dtype=float).size)
        return object.__new__(cls)

    def __init__(self, rn: ArrayLike) -> None:
        arr = np.array(rn, dtype=float)
        if arr.shape != (self.DOF,):
            raise ValueError(f"{type(self).__name__} expects shape ({self.DOF},), got {arr.shape}")
        arr.flags.writeable = False
        self._coeffs = arr

    @classmethod
    def of(cls, dim: int) -> type[Tn]:
        """The translation group class of dimension ``dim``."""
        return _tn_class(operator.index(dim))

    def rn(self) -> NDArray[np.float64]:
        """Euclidean vector representation."""
        return self._coeffs.copy()

    def act(self, v: ArrayLike) -> NDArray[np.float64]:
        """Translate vector ``v``."""
        return self._coeffs + self._as_tangent(v)

    def __reduce__(self):
        return (Tn.from_coeffs, (self._coeffs.tolist(),))

    # -- implementation hooks -------------------------------------------------

    @classmethod
    def _concrete_for(cls, coeffs: NDArray[np.float64]) -> type[LieGroup]:
        if cls is Tn:
            return Tn.of(coeffs.size)
        return cls

    @classmethod
    def _n(cls) -> int:
        if cls is Tn:
            raise TypeError("dimension unknown: use Tn.of(n) to select a dimension")
        return cls.DOF

    @classmethod
    def _identity_coeffs(cls) -> NDArray[np.float64]:
        return np.zeros(cls._n())

    @classmethod
    def _random_coeffs(cls, rng: np.random.Generator) -> NDArray[np.float64]:
        return rng.uniform(-1.0, 1.0, cls._n())

    @classmethod
    def _matrix(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        n = cls._n()
        m = np.eye(n + 1)
        m[:n, n] = c
        return m

    @classmethod
    def _compose(cls, c1: NDArray[np.float64], c2: NDArray[np.float64]) -> NDArray[np.float64]:
        return c1 + c2

    @classmethod
    def _inverse(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return -c

    @classmethod
    def _log(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return c.copy()

    @classmethod
    def _Ad(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.eye(cls._n())

    @classmethod
    def _exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return a.copy()

    @classmethod
    def _hat(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        n = cls._n()
        m = np.zeros((n + 1, n + 1))
        m[:n, n] = a
        return m

    @classmethod
    def _vee(cls, A: NDArray[np.float64]) -> NDArray[np.float64]:
        n = cls._n()
        return A[:n, n].copy()

    @classmethod
    def _ad(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        n = cls._n()
        return np.zeros((n, n))

    @classmethod
    def _dr_exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.eye(cls._n())

    @classmethod
    def _dr_expinv(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.eye(cls._n())


@functools.lru_cache(maxsize=None)
def _tn_class(dim: int) -> type[Tn]:
    if dim <= 0:
        raise ValueError(f"dimension must be positive, got {dim}")
    return type(
        f"T{dim}",
        (Tn,),
        {
            "__slots__": (),
            "__module__": __name__,
            "__doc__": f"Translations in R^{dim}.",
            "REP_SIZE": dim,
            "DOF": dim,
            "DIM": dim + 1,
        },
    )