"""Explicit Runge-Kutta integration of ODEs on manifolds."""

from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np


class ScaleSum:
    """Weighted sum ``x + sum_i alpha_i d_i`` with a leading weight of one.

    The first weight multiplies the state and must equal 1; the remaining
    weights scale tangent derivatives, so the sum generalises to Lie groups as
    ``x * exp(sum_i alpha_i d_i)``.
    """

    def __init__(self, *args: float) -> None:
        if not args:
            raise ValueError("at least one weight is required")
        if args[0] != 1:
            raise ValueError("scale sum is only valid for a first weight of 1")
        self.alphas = tuple(float(a) for a in args)

    def __call__(self, x: Any, *args: Any) -> Any:
        """Return ``x`` plus the weighted sum of the derivatives ``args``."""
        if len(args) != len(self.alphas) - 1:
            raise ValueError(
                f"expected {len(self.alphas) - 1} derivatives, got {len(args)}"
            )
        if not args:
            return x
        total = sum(alpha * np.asarray(d, dtype=float) for alpha, d in zip(self.alphas[1:], args))
        return x + total


class RungeKuttaStepper:
    """Explicit Runge-Kutta method given by a Butcher tableau.

    ``a`` holds the strictly lower-triangular rows (row ``i`` has ``i``
    entries), ``b`` the output weights and ``c`` the nodes. A system is a
    callable ``system(state, t)`` returning the derivative in tangent space.
    """

    def __init__(
        self, a: Sequence[Sequence[float]], b: Sequence[float], c: Sequence[float]
    ) -> None:
        self.a = tuple(tuple(float(v) for v in row) for row in a)
        self.b = tuple(float(v) for v in b)
        self.c = tuple(float(v) for v in c)
        if not self.b:
            raise ValueError("tableau needs at least one stage")
        if not len(self.a) == len(self.b) == len(self.c):
            raise ValueError("tableau rows, weights and nodes must have the same length")
        for i, row in enumerate(self.a):
            if len(row) != i:
                raise ValueError(f"tableau row {i} must have {i} entries, got {len(row)}")

    @property
    def stages(self) -> int:
        """Number of stages."""
        return len(self.b)

    def do_step(self, system: Callable[[Any, float], Any], state: Any, t: float, dt: float) -> Any:
        """Advance ``state`` from ``t`` by ``dt`` and return the new state."""
        ks: list[np.ndarray] = []
        for row, ci in zip(self.a, self.c):
            stage = ScaleSum(1.0, *(dt * aij for aij in row))(state, *ks)
            ks.append(np.asarray(system(stage, t + ci * dt), dtype=float))
        return ScaleSum(1.0, *(dt * bi for bi in self.b))(state, *ks)


def euler() -> RungeKuttaStepper:
    """The explicit Euler method."""
    return RungeKuttaStepper([[]], [1.0], [0.0])


def runge_kutta4() -> RungeKuttaStepper:
    """The classical fourth-order Runge-Kutta method."""
    return RungeKuttaStepper(
        [[], [0.5], [0.0, 0.5], [0.0, 0.0, 1.0]],
        [1.0 / 6.0, 1.0 / 3.0, 1.0 / 3.0, 1.0 / 6.0],
        [0.0, 0.5, 0.5, 1.0],
    )


def cash_karp54() -> RungeKuttaStepper:
    """The Cash-Karp method, stepping with its fifth-order solution."""
    return RungeKuttaStepper(
        [
            [],
            [1.0 / 5.0],
            [3.0 / 40.0, 9.0 / 40.0],
            [3.0 / 10.0, -9.0 / 10.0, 6.0 / 5.0],
            [-11.0 / 54.0, 5.0 / 2.0, -70.0 / 27.0, 35.0 / 27.0],
            [
                1631.0 / 55296.0,
                175.0 / 512.0,
                575.0 / 13824.0,
                44275.0 / 110592.0,
                253.0 / 4096.0,
            ],
        ],
        [37.0 / 378.0, 0.0, 250.0 / 621.0, 125.0 / 594.0, 0.0, 512.0 / 1771.0],
        [0.0, 1.0 / 5.0, 3.0 / 10.0, 3.0 / 5.0, 1.0, 7.0 / 8.0],
    )


def _less_eq_with_sign(t1: float, t2: float, dt: float) -> bool:
    tol = 1e-10 * abs(dt)
    if dt > 0:
        return t1 - t2 <= tol
    return t2 - t1 <= tol


def integrate_const(
    stepper: RungeKuttaStepper,
    system: Callable[[Any, float], Any],
    state: Any,
    t0: float,
    t1: float,
    dt: float,
    observer: Callable[[Any, float], None] | None = None,
) -> Any:
    """Integrate with constant steps ``dt`` from ``t0`` towards ``t1``.

    ``observer(state, t)`` is called at ``t0`` and after every step. Steps
    are taken while ``t0 + k * dt`` does not pass ``t1``. Returns the final
    state.
    """
    if dt == 0:
        raise ValueError("step size must be non-zero")
    step = 0
    t = t0
    while True:
        if observer is not None:
            observer(state, t)
        t_next = t0 + (step + 1) * dt
        if not _less_eq_with_sign(t_next, t1, dt):
            return state
        state = stepper.do_step(system, state, t, dt)
        step += 1
        t = t_next