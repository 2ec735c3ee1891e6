"""The Lie group SE(2) of planar rigid motions."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .lie_group import EPS2, LieGroup
from .so2 import SO2


class SE2(LieGroup):
    """Rigid motions in the plane, represented as U(1) x R^2.

    Group coefficients are ``[x, y, qz, qw]``; the tangent is
    ``[vx, vy, wz]``. The matrix form is ``[[qw, -qz, x], [qz, qw, y], [0, 0, 1]]``.
    """

    REP_SIZE = 4
    DOF = 3
    DIM = 3

    __slots__ = ()

    def __init__(self, so2: SO2, r2: ArrayLike) -> None:
        """Create from an orientation ``so2`` and a translation ``r2``."""
        if not isinstance(so2, SO2):
            raise TypeError(f"expected SO2 orientation, got {type(so2).__name__}")
        t = np.asarray(r2, dtype=float)
        if t.shape != (2,):
            raise ValueError(f"SE2 translation must have shape (2,), got {t.shape}")
        arr = np.concatenate([t, so2.coeffs()])
        arr.flags.writeable = False
        self._coeffs = arr

    def so2(self) -> SO2:
        """Orientation part."""
        return SO2._make(self._coeffs[2:])

    def r2(self) -> NDArray[np.float64]:
        """Translation part."""
        return self._coeffs[:2].copy()

    def act(self, v: ArrayLike) -> NDArray[np.float64]:
        """Transform the 2D vector ``v``."""
        vec = np.asarray(v, dtype=float)
        if vec.shape != (2,):
            raise ValueError(f"SE2 acts on vectors of shape (2,), got {vec.shape}")
        return SO2._matrix(self._coeffs[2:]) @ vec + self._coeffs[:2]

    def __reduce__(self):
        return (SE2.from_coeffs, (self._coeffs.tolist(),))

    # -- implementation hooks -------------------------------------------------

    @classmethod
    def _identity_coeffs(cls) -> NDArray[np.float64]:
        return np.array([0.0, 0.0, 0.0, 1.0])

    @classmethod
    def _random_coeffs(cls, rng: np.random.Generator) -> NDArray[np.float64]:
        head = rng.uniform(-1.0, 1.0, 2)
        return np.concatenate([head, SO2._random_coeffs(rng)])

    @classmethod
    def _matrix(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        m = np.eye(3)
        m[:2, :2] = SO2._matrix(c[2:])
        m[:2, 2] = c[:2]
        return m

    @classmethod
    def _compose(cls, c1: NDArray[np.float64], c2: NDArray[np.float64]) -> NDArray[np.float64]:
        rot = SO2._compose(c1[2:], c2[2:])
        trans = SO2._matrix(c1[2:]) @ c2[:2] + c1[:2]
        return np.concatenate([trans, rot])

    @classmethod
    def _inverse(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        so2inv = SO2._inverse(c[2:])
        trans = -(SO2._matrix(so2inv) @ c[:2])
        return np.concatenate([trans, so2inv])

    @classmethod
    def _log(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        th = float(SO2._log(c[2:])[0])
        th2 = th * th
        B = th / 2.0
        if th2 < EPS2:
            A = 1.0 - th2 / 12.0
        else:
            A = B / math.tan(B)
        sinv = np.array([[A, B], [-B, A]])
        head = sinv @ c[:2]
        return np.array([head[0], head[1], th])

    @classmethod
    def _Ad(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        m = np.zeros((3, 3))
        m[:2, :2] = SO2._matrix(c[2:])
        m[0, 2] = c[1]
        m[1, 2] = -c[0]
        m[2, 2] = 1.0
        return m

    @classmethod
    def _exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        th = float(a[2])
        th2 = th * th
        if th2 < EPS2:
            A = 1.0 - th2 / 6.0
            B = -th / 2.0 + th * th2 / 24.0
        else:
            A = math.sin(th) / th
            B = (math.cos(th) - 1.0) / th
        s = np.array([[A, B], [-B, A]])
        head = s @ a[:2]
        return np.concatenate([head, SO2._exp(a[2:])])

    @classmethod
    def _hat(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        m = np.zeros((3, 3))
        m[:2, :2] = SO2._hat(a[2:])
        m[:2, 2] = a[:2]
        return m

    @classmethod
    def _vee(cls, A: NDArray[np.float64]) -> NDArray[np.float64]:
        wz = SO2._vee(A[:2, :2])[0]
        return np.array([A[0, 2], A[1, 2], wz])

    @classmethod
    def _ad(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        m = np.zeros((3, 3))
        m[:2, :2] = SO2._hat(a[2:])
        m[0, 2] = a[1]
        m[1, 2] = -a[0]
        return m

    @classmethod
    def _dr_exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        th = float(a[2])
        th2 = th * th
        if th2 < EPS2:
            A = 0.5 - th2 / 24.0
            B = 1.0 / 6.0 - th2 / 120.0
        else:
            A = (1.0 - math.cos(th)) / th2
            B = (th - math.sin(th)) / (th2 * th)
        ad_a = cls._ad(a)
        return np.eye(3) - A * ad_a + B * (ad_a @ ad_a)

    @classmethod
    def _dr_expinv(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        th = float(a[2])
        th2 = th * th
        if th2 < EPS2:
            A = 1.0 / 12.0 + th2 / 720.0
        else:
            A = 1.0 / th2 - (1.0 + math.cos(th)) / (2.0 * th * math.sin(th))
        ad_a = cls._ad(a)
        return np.eye(3) + ad_a / 2.0 + A * (ad_a @ ad_a)