"""Bezier curves and piecewise Bezier splines on Lie groups."""

from __future__ import annotations

import bisect
import functools
import math
from typing import Sequence

import numpy as np
from numpy.polynomial import Polynomial
from numpy.typing import ArrayLike, NDArray

from .lie_group import LieGroup


@functools.lru_cache(maxsize=None)
def _cumulative_basis(degree: int) -> tuple[tuple[Polynomial, Polynomial, Polynomial], ...]:
    """Cumulative Bernstein polynomials ``B~_1..B~_N`` with first and second derivatives."""
    t = Polynomial([0.0, 1.0])
    one_minus_t = Polynomial([1.0, -1.0])
    bernstein = [
        math.comb(degree, j) * t**j * one_minus_t ** (degree - j) for j in range(degree + 1)
    ]
    result = []
    for i in range(1, degree + 1):
        p = sum(bernstein[i:], Polynomial([0.0]))
        result.append((p, p.deriv(1), p.deriv(2)))
    return tuple(result)


class Bezier:
    """Bezier curve on [0, 1].

    ``g(t) = g0 * exp(B~_1(t) v_1) * ... * exp(B~_N(t) v_N)`` where ``B~_i`` are
    the cumulative Bernstein basis functions and ``v_i`` the differences
    between consecutive control points.
    """

    __slots__ = ("_g0", "_vs")

    def __init__(self, g0: LieGroup, vs: Sequence[ArrayLike]) -> None:
        if not isinstance(g0, LieGroup):
            raise TypeError(f"expected a Lie group element, got {type(g0).__name__}")
        group = type(g0)
        tangents = []
        for v in vs:
            arr = np.array(v, dtype=float)
            if arr.shape != (group.DOF,):
                raise ValueError(
                    f"control point differences must have shape ({group.DOF},), got {arr.shape}"
                )
            arr.flags.writeable = False
            tangents.append(arr)
        self._g0 = g0
        self._vs = tuple(tangents)

    @property
    def g0(self) -> LieGroup:
        """Starting value."""
        return self._g0

    @property
    def vs(self) -> tuple[NDArray[np.float64], ...]:
        """Differences between consecutive control points."""
        return self._vs

    def degree(self) -> int:
        """Polynomial degree of the curve."""
        return len(self._vs)

    def eval(self, t: float) -> LieGroup:
        """Curve value at ``t`` (clamped to [0, 1])."""
        return self.eval_derivatives(t)[0]

    def eval_derivatives(
        self, t: float
    ) -> tuple[LieGroup, NDArray[np.float64], NDArray[np.float64]]:
        """Value, body velocity and body acceleration at ``t`` (clamped to [0, 1])."""
        tc = min(max(float(t), 0.0), 1.0)
        group = type(self._g0)
        g = self._g0
        vel = np.zeros(group.DOF)
        acc = np.zeros(group.DOF)
        for v, (b, db, ddb) in zip(self._vs, _cumulative_basis(self.degree())):
            beta, dbeta, ddbeta = float(b(tc)), float(db(tc)), float(ddb(tc))
            step = group.exp(beta * v)
            ad_inv = step.inverse().Ad()
            moved_vel = ad_inv @ vel
            acc = ad_inv @ acc - dbeta * (group.ad(v) @ moved_vel) + ddbeta * v
            vel = moved_vel + dbeta * v
            g = g * step
        return g, vel, acc

    def __repr__(self) -> str:
        return f"Bezier({self._g0!r}, {[v.tolist() for v in self._vs]!r})"


class PiecewiseBezier:
    """Curve made of Bezier segments: ``x(t) = p_i((t - t_i) / (t_{i+1} - t_i))``."""

    __slots__ = ("_knots", "_segments")

    def __init__(self, knots: Sequence[float], segments: Sequence[Bezier]) -> None:
        self._knots = tuple(float(k) for k in knots)
        self._segments = tuple(segments)
        if not self._segments:
            raise ValueError("at least one segment is required")
        if len(self._knots) != len(self._segments) + 1:
            raise ValueError(
                f"{len(self._segments)} segments need {len(self._segments) + 1} knots, "
                f"got {len(self._knots)}"
            )

    @property
    def knots(self) -> tuple[float, ...]:
        """Knot times."""
        return self._knots

    @property
    def segments(self) -> tuple[Bezier, ...]:
        """Bezier segments."""
        return self._segments

    def t_min(self) -> float:
        """Minimal time where the curve is defined."""
        return self._knots[0]

    def t_max(self) -> float:
        """Maximal time where the curve is defined."""
        return self._knots[-1]

    def eval(self, t: float) -> LieGroup:
        """Curve value at ``t``."""
        return self.eval_derivatives(t)[0]

    def eval_derivatives(
        self, t: float
    ) -> tuple[LieGroup, NDArray[np.float64], NDArray[np.float64]]:
        """Value, body velocity and body acceleration at ``t``."""
        idx = bisect.bisect_right(self._knots, t) - 1
        idx = min(max(idx, 0), len(self._knots) - 2)
        span = self._knots[idx + 1] - self._knots[idx]
        u = (t - self._knots[idx]) / span
        g, vel, acc = self._segments[idx].eval_derivatives(u)
        return g, vel / span, acc / (span * span)


def _prepare(tt: Sequence[float], gg: Sequence[LieGroup]) -> tuple[list[float], list[LieGroup], int]:
    times = [float(t) for t in tt]
    values = list(gg)
    if len(times) < 2 or len(values) < 2:
        raise ValueError("not enough points")
    return times, values, min(len(times), len(values)) - 1


def fit_linear_bezier(tt: Sequence[float], gg: Sequence[LieGroup]) -> PiecewiseBezier:
    """Piecewise linear curve through the data, with piecewise constant velocity."""
    times, values, n = _prepare(tt, gg)
    segments = [Bezier(values[i], [values[i + 1] - values[i]]) for i in range(n)]
    return PiecewiseBezier(times[: n + 1], segments)


def fit_quadratic_bezier(tt: Sequence[float], gg: Sequence[LieGroup]) -> PiecewiseBezier:
    """Piecewise quadratic curve through the data with continuous velocity."""
    times, values, n = _prepare(tt, gg)
    group = type(values[0])

    v0 = (values[1] - values[0]) / (times[1] - times[0])
    segments = []
    for i in range(n):
        dt = times[i + 1] - times[i]
        va = v0 * dt
        v1 = va / 2.0
        v2 = values[i + 1] - (values[i] * group.exp(va / 2.0))
        segments.append(Bezier(values[i], [v1, v2]))
        v0 = v2 * 2.0 / dt

    return PiecewiseBezier(times[: n + 1], segments)


def fit_cubic_bezier(tt: Sequence[float], gg: Sequence[LieGroup]) -> PiecewiseBezier:
    """Piecewise cubic curve through the data.

    Velocity is continuous and acceleration approximately continuous; the
    second derivative is zero at both ends.
    """
    times, values, n = _prepare(tt, gg)
    group = type(values[0])
    dof = group.DOF
    num_vars = 3 * dof * n

    lhs = np.zeros((num_vars, num_vars))
    rhs = np.zeros(num_vars)
    eye = np.eye(dof)

    def idx(j: int, i: int) -> slice:
        start = 3 * dof * i + dof * (j - 1)
        return slice(start, start + dof)

    row = 0

    def rows() -> slice:
        return slice(row, row + dof)

    # zero second derivative at start: v_{1,0} = v_{2,0}
    lhs[rows(), idx(1, 0)] = eye
    lhs[rows(), idx(2, 0)] = -eye
    row += dof

    for i in range(n - 1):
        ti = times[i + 1] - times[i]
        tip = times[i + 2] - times[i + 1]

        # pass through control points
        lhs[rows(), idx(1, i)] = eye
        lhs[rows(), idx(2, i)] = eye
        lhs[rows(), idx(3, i)] = eye
        rhs[rows()] = values[i + 1] - values[i]
        row += dof

        # velocity continuity
        lhs[rows(), idx(3, i)] = tip * eye
        lhs[rows(), idx(1, i + 1)] = -ti * eye
        row += dof

        # acceleration continuity (approximate on Lie groups)
        lhs[rows(), idx(2, i)] = (tip * tip) * eye
        lhs[rows(), idx(3, i)] = -(tip * tip) * eye
        lhs[rows(), idx(1, i + 1)] = -(ti * ti) * eye
        lhs[rows(), idx(2, i + 1)] = (ti * ti) * eye
        row += dof

    # end at last control point
    lhs[rows(), idx(1, n - 1)] = eye
    lhs[rows(), idx(2, n - 1)] = eye
    lhs[rows(), idx(3, n - 1)] = eye
    rhs[rows()] = values[n] - values[n - 1]
    row += dof

    # zero second derivative at end: v_{2,n-1} = v_{3,n-1}
    lhs[rows(), idx(2, n - 1)] = eye
    lhs[rows(), idx(3, n - 1)] = -eye

    result = np.linalg.solve(lhs, rhs)

    segments = []
    for i in range(n):
        v1 = result[idx(1, i)]
        v3 = result[idx(3, i)]
        # recompute v2 so that the data points are interpolated exactly
        v2 = (values[i + 1] * group.exp(-v3)) - (values[i] * group.exp(v1))
        segments.append(Bezier(values[i], [v1, v2, v3]))

    return PiecewiseBezier(times[: n + 1], segments)