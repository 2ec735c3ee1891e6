"""Differentiation of functions between manifolds in tangent space."""

from __future__ import annotations

import enum
import math
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray

from .tn import Tn

_EPS = math.sqrt(float(np.finfo(float).eps))


class DiffType(enum.Enum):
    """Differentiation methods."""

    NUMERICAL = "numerical"  #: forward finite differences in tangent space
    ANALYTIC = "analytic"  #: the function itself returns ``(value, jacobian)``
    DEFAULT = "default"  #: the default method (numerical)


DEFAULT_TYPE = DiffType.NUMERICAL


def wrt(*args: Any) -> tuple[Any, ...]:
    """Group function arguments into the tuple expected by :func:`dr`."""
    return tuple(args)


def _is_structured(m: Any) -> bool:
    """True for manifold objects with a ``size()`` method (not plain arrays)."""
    return callable(getattr(m, "size", None))


def _dof(m: Any) -> int:
    """Degrees of freedom of a manifold element or a plain vector."""
    if _is_structured(m):
        return int(m.size())
    return int(np.size(m))


def _plus(m: Any, a: NDArray[np.float64]) -> Any:
    """Geodesic addition ``m + a``."""
    if _is_structured(m):
        return m + a
    arr = np.asarray(m, dtype=float)
    return arr + np.reshape(a, arr.shape)


def _minus(m1: Any, m0: Any) -> NDArray[np.float64]:
    """Inverse of geodesic addition, as a flat tangent vector."""
    if _is_structured(m1):
        return np.ravel(np.asarray(m1 - m0, dtype=float))
    return np.ravel(np.asarray(m1, dtype=float) - np.asarray(m0, dtype=float))


def _step_size(w: Any, j: int) -> float:
    """Finite-difference step for coordinate ``j`` of argument ``w``."""
    if isinstance(w, Tn):
        scale = abs(float(w.rn()[j]))
    elif not _is_structured(w):
        scale = abs(float(np.ravel(np.asarray(w, dtype=float))[j]))
    else:
        return _EPS
    step = _EPS * scale
    return step if step != 0.0 else _EPS


def _dr_numerical(f: Callable[..., Any], x: tuple[Any, ...]) -> tuple[Any, NDArray[np.float64]]:
    args = tuple(x)
    val = f(*args)
    sizes = [_dof(w) for w in args]
    jac = np.zeros((_dof(val), sum(sizes)))

    col = 0
    for i, (w, n) in enumerate(zip(args, sizes)):
        for j in range(n):
            step = _step_size(w, j)
            delta = np.zeros(n)
            delta[j] = step
            perturbed = args[:i] + (_plus(w, delta),) + args[i + 1 :]
            jac[:, col + j] = _minus(f(*perturbed), val) / step
        col += n

    return val, jac


def dr(
    f: Callable[..., Any], x: tuple[Any, ...], method: DiffType = DiffType.DEFAULT
) -> tuple[Any, NDArray[np.float64]]:
    """Value and right derivative ``(f(x), d^r f_x)`` of ``f`` at the arguments ``x``.

    Arguments and the value of ``f`` must be manifold elements (Lie group
    elements, manifold vectors) or plain numeric vectors. The jacobian has
    one row per degree of freedom of the value and one column per degree of
    freedom of the arguments, in order.
    """
    if not isinstance(method, DiffType):
        raise TypeError(f"method must be a DiffType, got {type(method).__name__}")
    if method is DiffType.DEFAULT:
        method = DEFAULT_TYPE
    if method is DiffType.NUMERICAL:
        return _dr_numerical(f, tuple(x))
    result = f(*x)
    try:
        value, jac = result
    except (TypeError, ValueError):
        raise ValueError("analytic differentiation requires f to return (value, jacobian)") from None
    return value, np.asarray(jac, dtype=float)