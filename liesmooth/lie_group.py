"""Common interface and generic operations shared by all Lie group types."""

from __future__ import annotations

import abc
from typing import ClassVar, TypeVar

import numpy as np
from numpy.typing import ArrayLike, NDArray

#: Squared threshold below which closed-form expressions switch to series expansions.
EPS2 = 1e-8

#: Default relative precision used by :meth:`LieGroup.is_approx`.
DUMMY_PRECISION = 1e-12

G = TypeVar("G", bound="LieGroup")


class LieGroup(abc.ABC):
    """Base class for Lie group elements.

    An element is an immutable coefficient vector of length ``REP_SIZE``.
    Tangent elements are vectors of length ``DOF``, and the matrix
    representation is ``DIM`` x ``DIM``.

    Concrete groups set the three class constants and implement the
    coefficient-level hooks; everything else is provided here.
    """

    REP_SIZE: ClassVar[int]
    DOF: ClassVar[int]
    DIM: ClassVar[int]

    __slots__ = ("_coeffs",)

    _coeffs: NDArray[np.float64]

    # -- hooks implemented by concrete groups ---------------------------------

    @classmethod
    @abc.abstractmethod
    def _identity_coeffs(cls) -> NDArray[np.float64]:
        """Coefficients of the identity element."""

    @classmethod
    @abc.abstractmethod
    def _random_coeffs(cls, rng: np.random.Generator) -> NDArray[np.float64]:
        """Coefficients of a random element."""

    @classmethod
    @abc.abstractmethod
    def _matrix(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        """Matrix representation of coefficients ``c``."""

    @classmethod
    @abc.abstractmethod
    def _compose(cls, c1: NDArray[np.float64], c2: NDArray[np.float64]) -> NDArray[np.float64]:
        """Coefficients of the composition ``c1 * c2``."""

    @classmethod
    @abc.abstractmethod
    def _inverse(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        """Coefficients of the inverse."""

    @classmethod
    @abc.abstractmethod
    def _log(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        """Logarithm of coefficients ``c``."""

    @classmethod
    @abc.abstractmethod
    def _Ad(cls, c: NDArray[np.float64]) -> NDArray[np.float64]:
        """Group adjoint of coefficients ``c``."""

    @classmethod
    @abc.abstractmethod
    def _exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        """Coefficients of the exponential of tangent ``a``."""

    @classmethod
    @abc.abstractmethod
    def _hat(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        """Matrix Lie algebra element of tangent ``a``."""

    @classmethod
    @abc.abstractmethod
    def _vee(cls, A: NDArray[np.float64]) -> NDArray[np.float64]:
        """Tangent parameterisation of algebra matrix ``A``."""

    @classmethod
    @abc.abstractmethod
    def _ad(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        """Algebra adjoint of tangent ``a``."""

    @classmethod
    @abc.abstractmethod
    def _dr_exp(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        """Right jacobian of the exponential at ``a``."""

    @classmethod
    @abc.abstractmethod
    def _dr_expinv(cls, a: NDArray[np.float64]) -> NDArray[np.float64]:
        """Inverse right jacobian of the exponential at ``a``."""

    # -- construction ---------------------------------------------------------

    @classmethod
    def _concrete_for(cls, coeffs: NDArray[np.float64]) -> type[LieGroup]:
        """Class that should hold ``coeffs``; overridden by families of groups."""
        return cls

    @classmethod
    def _make(cls: type[G], coeffs: NDArray[np.float64]) -> G:
        obj = object.__new__(cls)
        arr = np.array(coeffs, dtype=float)
        arr.flags.writeable = False
        obj._coeffs = arr
        return obj

    @classmethod
    def from_coeffs(cls, coeffs: ArrayLike) -> LieGroup:
        """Create an element from its raw coefficient vector."""
        arr = np.asarray(coeffs, dtype=float)
        target = cls._concrete_for(arr)
        if arr.shape != (target.REP_SIZE,):
            raise ValueError(
                f"{target.__name__} expects {target.REP_SIZE} coefficients, got shape {arr.shape}"
            )
        return target._make(arr)

    def coeffs(self) -> NDArray[np.float64]:
        """Copy of the coefficient vector."""
        return self._coeffs.copy()

    @classmethod
    def identity(cls: type[G]) -> G:
        """The group identity element."""
        return cls._make(cls._identity_coeffs())

    @classmethod
    def random(cls: type[G], rng: np.random.Generator | None = None) -> G:
        """A random element drawn with ``rng`` (a fresh generator if omitted)."""
        if rng is None:
            rng = np.random.default_rng()
        return cls._make(cls._random_coeffs(rng))

    # -- validation helpers ---------------------------------------------------

    @classmethod
    def _as_tangent(cls, a: ArrayLike) -> NDArray[np.float64]:
        arr = np.asarray(a, dtype=float)
        if arr.shape != (cls.DOF,):
            raise ValueError(f"{cls.__name__} tangent must have shape ({cls.DOF},), got {arr.shape}")
        return arr

    @classmethod
    def _as_algebra(cls, A: ArrayLike) -> NDArray[np.float64]:
        arr = np.asarray(A, dtype=float)
        if arr.shape != (cls.DIM, cls.DIM):
            raise ValueError(
                f"{cls.__name__} algebra element must have shape ({cls.DIM}, {cls.DIM}), "
                f"got {arr.shape}"
            )
        return arr

    def _check_same_group(self, other: object) -> LieGroup:
        if not isinstance(other, LieGroup) or type(other) is not type(self):
            raise TypeError(
                f"expected {type(self).__name__}, got {type(other).__name__}"
            )
        return other

    # -- group API ------------------------------------------------------------

    def size(self) -> int:
        """Degrees of freedom (tangent space dimension)."""
        return self.DOF

    def matrix(self) -> NDArray[np.float64]:
        """Matrix Lie group representation of size ``DIM`` x ``DIM``."""
        return self._matrix(self._coeffs)

    def is_approx(self, other: LieGroup, eps: float = DUMMY_PRECISION) -> bool:
        """True if the coefficients are relatively close to those of ``other``."""
        other = self._check_same_group(other)
        a, b = self._coeffs, other._coeffs
        diff = float(np.sum((a - b) ** 2))
        return diff <= eps * eps * min(float(np.sum(a * a)), float(np.sum(b * b)))

    def inverse(self: G) -> G:
        """Group inverse."""
        return self._make(self._inverse(self._coeffs))

    def log(self) -> NDArray[np.float64]:
        """Lie group logarithm."""
        return self._log(self._coeffs)

    def Ad(self) -> NDArray[np.float64]:
        """Group adjoint: ``Ad_X a = (X a^ X^-1)^v``."""
        return self._Ad(self._coeffs)

    def __mul__(self, other: object):
        if isinstance(other, LieGroup) and type(other) is type(self):
            return self._make(self._compose(self._coeffs, other._coeffs))
        return NotImplemented

    def __add__(self: G, a: ArrayLike) -> G:
        """Right-plus: ``x * exp(a)``."""
        if isinstance(a, LieGroup):
            return NotImplemented
        return self * self.exp(a)

    def __sub__(self, other: object):
        """Right-minus: ``log(other^-1 * self)``."""
        if isinstance(other, LieGroup) and type(other) is type(self):
            return (other.inverse() * self).log()
        return NotImplemented

    # -- tangent API ----------------------------------------------------------

    @classmethod
    def exp(cls: type[G], a: ArrayLike) -> G:
        """Lie group exponential map."""
        return cls._make(cls._exp(cls._as_tangent(a)))

    @classmethod
    def hat(cls, a: ArrayLike) -> NDArray[np.float64]:
        """Map a tangent vector to its matrix Lie algebra element."""
        return cls._hat(cls._as_tangent(a))

    @classmethod
    def vee(cls, A: ArrayLike) -> NDArray[np.float64]:
        """Map a matrix Lie algebra element to its tangent vector."""
        return cls._vee(cls._as_algebra(A))

    @classmethod
    def ad(cls, a: ArrayLike) -> NDArray[np.float64]:
        """Lie algebra adjoint: ``ad_a b = [a, b]``."""
        return cls._ad(cls._as_tangent(a))

    @classmethod
    def lie_bracket(cls, a: ArrayLike, b: ArrayLike) -> NDArray[np.float64]:
        """Lie algebra bracket ``[a, b]``."""
        return cls.ad(a) @ cls._as_tangent(b)

    @classmethod
    def dr_exp(cls, a: ArrayLike) -> NDArray[np.float64]:
        """Right jacobian of the exponential map."""
        return cls._dr_exp(cls._as_tangent(a))

    @classmethod
    def dr_expinv(cls, a: ArrayLike) -> NDArray[np.float64]:
        """Inverse of the right jacobian of the exponential map."""
        return cls._dr_expinv(cls._as_tangent(a))

    @classmethod
    def dl_exp(cls, a: ArrayLike) -> NDArray[np.float64]:
        """Left jacobian of the exponential map."""
        return cls.exp(a).Ad() @ cls.dr_exp(a)

    @classmethod
    def dl_expinv(cls, a: ArrayLike) -> NDArray[np.float64]:
        """Inverse of the left jacobian of the exponential map."""
        return -cls.ad(a) + cls.dr_expinv(a)

    # -- dunder helpers -------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LieGroup) or type(other) is not type(self):
            return NotImplemented
        return bool(np.array_equal(self._coeffs, other._coeffs))

    def __hash__(self) -> int:
        return hash((type(self), self._coeffs.tobytes()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}.from_coeffs({self._coeffs.tolist()!r})"

    def __str__(self) -> str:
        return " ".join(f"{x:g}" for x in self._coeffs)