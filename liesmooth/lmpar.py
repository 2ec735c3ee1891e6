"""Levenberg-Marquardt parameter selection for trust-region least squares."""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

_EPS = float(np.finfo(float).eps)

Solver = Callable[[NDArray[np.float64]], NDArray[np.float64]]


def _make_solver(lhs: NDArray[np.float64]) -> Solver:
    """Factor a symmetric positive (semi-)definite matrix and return a solver.

    If the factorisation fails, a small diagonal is added to restore
    positive definiteness.
    """
    n = lhs.shape[0]
    for shift in (0.0, _EPS):
        try:
            chol = np.linalg.cholesky(lhs + shift * np.eye(n))
        except np.linalg.LinAlgError:
            continue
        return lambda b, L=chol: np.linalg.solve(L.T, np.linalg.solve(L, b))
    shifted = lhs + _EPS * np.eye(n)
    return lambda b: np.linalg.lstsq(shifted, b, rcond=None)[0]


def _validate(
    J: ArrayLike, d: ArrayLike, r: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    Jm = np.asarray(J, dtype=float)
    if Jm.ndim != 2:
        raise ValueError(f"J must be a matrix, got shape {Jm.shape}")
    m, n = Jm.shape
    dv = np.asarray(d, dtype=float)
    rv = np.asarray(r, dtype=float)
    if dv.shape != (n,):
        raise ValueError(f"d must have shape ({n},), got {dv.shape}")
    if rv.shape != (m,):
        raise ValueError(f"r must have shape ({m},), got {rv.shape}")
    return Jm, dv, rv


def calc_phi(
    J: ArrayLike, d: ArrayLike, r: ArrayLike, delta: float, alpha: float
) -> tuple[NDArray[np.float64], float, float]:
    """Value and derivative of ``phi(alpha) = |D (J'J + alpha D'D)^-1 J' r| - delta``.

    Returns ``(x, phi, dphi)`` where ``x`` solves ``(J'J + alpha D'D) x = -J' r``
    and ``D = diag(d)``.
    """
    Jm, dv, rv = _validate(J, d, r)

    lhs = Jm.T @ Jm
    if alpha > 0:
        lhs = lhs + np.diag(alpha * dv * dv)

    solve = _make_solver(lhs)

    x = solve(-(Jm.T @ rv))
    q = -dv * x

    q_norm = float(np.linalg.norm(q))
    phi = q_norm - float(delta)

    y = solve(dv * q)
    q_unit = q / q_norm if q_norm > 0.0 else q
    dphi = float(-(dv * q_unit) @ y)

    return x, phi, dphi


def lmpar(
    J: ArrayLike, d: ArrayLike, r: ArrayLike, delta: float
) -> tuple[float, NDArray[np.float64]]:
    """Approximate the Levenberg-Marquardt parameter ``lambda``.

    With ``x`` the minimiser of ``|[J; sqrt(lambda) diag(d)] x + [r; 0]|^2``,
    the result satisfies either ``lambda == 0`` and ``|diag(d) x| <= 1.1 delta``,
    or ``lambda > 0`` and ``0.9 delta <= |diag(d) x| <= 1.1 delta``.

    Returns ``(lambda, x)``.
    """
    Jm, dv, rv = _validate(J, d, r)
    delta = float(delta)

    alpha = 0.0
    x, phi, dphi = calc_phi(Jm, dv, rv, delta, alpha)

    if phi <= 0.1 * delta:
        return 0.0, x

    lower = max(0.0, -phi / dphi)
    upper = float(np.linalg.norm((Jm.T @ rv) / dv)) / delta

    for _ in range(20):
        if not lower < alpha < upper:
            alpha = max(0.001 * upper, float(np.sqrt(lower * upper)))

        x, phi, dphi = calc_phi(Jm, dv, rv, delta, alpha)

        if abs(phi) <= 0.1 * delta:
            break

        lower = max(lower, alpha - phi / dphi)
        if phi < 0:
            upper = alpha

        alpha = alpha - ((phi + delta) / delta) * (phi / dphi)

    return alpha, x