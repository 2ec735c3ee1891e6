"""The Lie group SO(3) of 3D rotations, represented by unit quaternions."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .lie_group import EPS2, LieGroup


def _quat_matrix(c: NDArray[np.float64]) -> NDArray[np.float64]:
    x, y, z, w = c
    return np.array(
        [
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - z * w), 2.0 * (x * z + y * w)],
            [2.0 * (x * y + z * w), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - x * w)],
            [2.0 * (x * z - y * w), 2.0 * (y * z + x * w), 1.0 - 2.0 * (x * x + y * y)],
        ]
    )


class SO3(LieGroup):
    """Rotations in 3D.

    Group coefficients are the quaternion ``[qx, qy, qz, qw]``; the tangent is
    ``[wx, wy, wz]``. The matrix form is the 3x3 rotation matrix.
    """

    REP_SIZE = 4
    DOF = 3
    DIM = 3

    __slots__ = ()

    def __init__(self, coeffs: ArrayLike) -> None:
        """Create from quaternion coefficients ``[qx, qy, qz, qw]`` (normalised)."""
        arr = np.array(coeffs, dtype=float)
        if arr.shape != (4,):
            raise ValueError(f"SO3 expects 4 quaternion coefficients, got shape {arr.shape}")
        norm = float(np.linalg.norm(arr))
        if norm == 0.0 or not np.isfinite(norm):
            raise ValueError("quaternion must have finite, non-zero norm")
        arr = arr / norm
        arr.flags.writeable = False
        self._coeffs = arr

    def act(self, v: ArrayLike) -> NDArray[np.float64]:
        """Rotate the 3D vector ``v``."""
        vec = np.asarray(v, dtype=float)
        if vec.shape != (3,):
            raise ValueError(f"SO3 acts on vectors of shape (3,), got {vec.shape}")
        return _quat_matrix(self._coeffs) @ vec

    def __reduce__(self):
        return (SO3.from_coeffs, (self._coeffs.tolist(),))

    # -- implementation hooks -------------------------------------------------

    @classmethod
    def _identity_coeffs(cls) -> NDArray[np.float64]:
        return np.array([0.0, 0.0, 0.0, 1.0])

    @classmethod
    def _random_coeffs(cls, rng: np.random.Generator) -> NDArray[np.float64]:
        q = rng.normal(size=4)
        while np.linalg.norm(q) == 0.0:
            q = rng.normal(size=4)
        q = q / np.linalg.norm(q)
        if q[3] < 0:
            q = -q
        return q

    @classmethod
    def _matrix(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return _quat_matrix(c)

    @classmethod
    def _compose(cls, c1: NDArray[np.float64], c2: NDArray[np.float64]) -> NDArray[np.float64]:
        v1, w1 = c1[:3], c1[3]
        v2, w2 = c2[:3], c2[3]
        v = w1 * v2 + w2 * v1 + np.cross(v1, v2)
        w = w1 * w2 - float(np.dot(v1, v2))
        return np.array([v[0], v[1], v[2], w])

    @classmethod
    def _inverse(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        n2 = float(np.dot(c, c))
        return np.array([-c[0], -c[1], -c[2], c[3]]) / n2

    @classmethod
    def _log(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        xyz2 = float(c[0] * c[0] + c[1] * c[1] + c[2] * c[2])
        w = float(c[3])
        if xyz2 < EPS2:
            phi = 2.0 / w - 2.0 * xyz2 / (3.0 * w * w * w)
        else:
            xyz = np.sqrt(xyz2)
            phi = 2.0 * np.arctan2(xyz, w) / xyz
        return phi * c[:3].copy()

    @classmethod
    def _Ad(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return _quat_matrix(c)

    @classmethod
    def _exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        th2 = float(np.dot(a, a))
        if th2 < EPS2:
            A = 0.5 - th2 / 48.0
            B = 1.0 - th2 / 8.0
        else:
            th = np.sqrt(th2)
            A = np.sin(th / 2.0) / th
            B = np.cos(th / 2.0)
        return np.array([A * a[0], A * a[1], A * a[2], B])

    @classmethod
    def _hat(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array(
            [
                [0.0, -a[2], a[1]],
                [a[2], 0.0, -a[0]],
                [-a[1], a[0], 0.0],
            ]
        )

    @classmethod
    def _vee(cls, A: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array(
            [
                (A[2, 1] - A[1, 2]) / 2.0,
                (A[0, 2] - A[2, 0]) / 2.0,
                (A[1, 0] - A[0, 1]) / 2.0,
            ]
        )

    @classmethod
    def _ad(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return cls._hat(a)

    @classmethod
    def _dr_exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        th2 = float(np.dot(a, a))
        if th2 < EPS2:
            A = 0.5 - th2 / 24.0
            B = 1.0 / 6.0 - th2 / 120.0
        else:
            th = np.sqrt(th2)
            A = (1.0 - np.cos(th)) / th2
            B = (th - np.sin(th)) / (th2 * th)
        ad_a = cls._ad(a)
        return np.eye(3) - A * ad_a + B * (ad_a @ ad_a)

    @classmethod
    def _dr_expinv(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        th2 = float(np.dot(a, a))
        if th2 < EPS2:
            A = 1.0 / 12.0 + th2 / 720.0
        else:
            th = np.sqrt(th2)
            A = 1.0 / th2 - (1.0 + np.cos(th)) / (2.0 * th * np.sin(th))
        ad_a = cls._ad(a)
        return np.eye(3) + ad_a / 2.0 + A * (ad_a @ ad_a)