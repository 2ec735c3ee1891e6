"""The Lie group SO(2) of planar rotations, represented by unit complex numbers."""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .lie_group import LieGroup
from .so3 import SO3


class SO2(LieGroup):
    """Rotations in the plane.

    Group coefficients are ``[qz, qw]`` (sine and cosine of the angle); the
    tangent is ``[wz]``. The matrix form is ``[[qw, -qz], [qz, qw]]``.
    """

    REP_SIZE = 2
    DOF = 1
    DIM = 2

    __slots__ = ()

    def __init__(self, qz: float, qw: float) -> None:
        """Create from coefficients; the input is normalised."""
        n = math.hypot(float(qz), float(qw))
        if n == 0.0 or not math.isfinite(n):
            raise ValueError("coefficients must have finite, non-zero norm")
        arr = np.array([float(qz) / n, float(qw) / n])
        arr.flags.writeable = False
        self._coeffs = arr

    @classmethod
    def from_angle(cls, angle: float) -> SO2:
        """Rotation by ``angle`` radians."""
        return cls._make(np.array([math.sin(angle), math.cos(angle)]))

    @classmethod
    def from_complex(cls, c: complex) -> SO2:
        """Rotation given by the complex number ``c`` (normalised)."""
        c = complex(c)
        return cls(c.imag, c.real)

    def angle(self) -> float:
        """Rotation angle in (-pi, pi]."""
        return float(self.log()[0])

    def u1(self) -> complex:
        """Unit complex number representation."""
        return complex(self._coeffs[1], self._coeffs[0])

    def act(self, v: ArrayLike) -> NDArray[np.float64]:
        """Rotate the 2D vector ``v``."""
        vec = np.asarray(v, dtype=float)
        if vec.shape != (2,):
            raise ValueError(f"SO2 acts on vectors of shape (2,), got {vec.shape}")
        return self.matrix() @ vec

    def lift_so3(self) -> SO3:
        """Embed as a rotation about the z axis in SO(3)."""
        yaw = self.angle()
        return SO3([0.0, 0.0, math.sin(yaw / 2.0), math.cos(yaw / 2.0)])

    def __reduce__(self):
        return (SO2.from_coeffs, (self._coeffs.tolist(),))

    # -- implementation hooks -------------------------------------------------

    @classmethod
    def _identity_coeffs(cls) -> NDArray[np.float64]:
        return np.array([0.0, 1.0])

    @classmethod
    def _random_coeffs(cls, rng: np.random.Generator) -> NDArray[np.float64]:
        u = rng.uniform(0.0, 2.0 * math.pi)
        return np.array([math.sin(u), math.cos(u)])

    @classmethod
    def _matrix(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array([[c[1], -c[0]], [c[0], c[1]]])

    @classmethod
    def _compose(cls, c1: NDArray[np.float64], c2: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array(
            [c1[0] * c2[1] + c1[1] * c2[0], c1[1] * c2[1] - c1[0] * c2[0]]
        )

    @classmethod
    def _inverse(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array([-c[0], c[1]])

    @classmethod
    def _log(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array([math.atan2(c[0], c[1])])

    @classmethod
    def _Ad(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.eye(1)

    @classmethod
    def _exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array([math.sin(a[0]), math.cos(a[0])])

    @classmethod
    def _hat(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array([[0.0, -a[0]], [a[0], 0.0]])

    @classmethod
    def _vee(cls, A: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.array([(A[1, 0] - A[0, 1]) / 2.0])

    @classmethod
    def _ad(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.zeros((1, 1))

    @classmethod
    def _dr_exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.eye(1)

    @classmethod
    def _dr_expinv(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        return np.eye(1)