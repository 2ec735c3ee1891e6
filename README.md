# liesmooth

Lie groups for robotics and estimation, built on numpy arrays.

## What is in the package

| Module | Contents |
| --- | --- |
| `liesmooth.lie_group` | `LieGroup`, the base class shared by every group |
| `liesmooth.tn` | `Tn`, the translations in R^n (`Tn.of(n)` gives the class for dimension `n`) |
| `liesmooth.so2` | `SO2`, planar rotations stored as unit complex numbers |
| `liesmooth.so3` | `SO3`, 3D rotations stored as unit quaternions `[qx, qy, qz, qw]` |
| `liesmooth.se2` | `SE2`, planar rigid motions `[x, y, qz, qw]` |
| `liesmooth.bundle` | `Bundle`, the direct product of several groups and/or plain vectors |
| `liesmooth.manifold_vector` | `ManifoldVector`, a list of manifold elements treated as one element |
| `liesmooth.diff` | `wrt`, `dr` and `DiffType`, for differentiation in tangent space |
| `liesmooth.integrate` | `ScaleSum`, `RungeKuttaStepper`, `euler`, `runge_kutta4`, `cash_karp54`, `integrate_const` |
| `liesmooth.lmpar` | `calc_phi` and `lmpar`, which choose a Levenberg–Marquardt parameter |
| `liesmooth.bezier` | `Bezier`, `PiecewiseBezier`, `fit_linear_bezier`, `fit_quadratic_bezier`, `fit_cubic_bezier` |

Every group has the class methods `identity`, `random(rng)`, `from_coeffs`, `exp`, `hat`,
`vee`, `ad`, `lie_bracket`, `dr_exp`, `dr_expinv`, `dl_exp` and `dl_expinv`. Every element has
the methods `coeffs`, `size`, `matrix`, `inverse`, `log`, `Ad` and `is_approx`. Elements are
immutable.

The operators on elements are:

- `g * h` is group composition.
- `g + a` is the right-plus `g * exp(a)`.
- `g - h` is the right-minus `log(h^-1 * g)`.

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Group basics

```python
import numpy as np
from liesmooth.so3 import SO3

rng = np.random.default_rng(0)
g = SO3.random(rng)
a = np.array([0.1, -0.2, 0.3])

h = g + a
assert np.allclose(h - g, a)
assert (g * g.inverse()).is_approx(SO3.identity(), 1e-9)
```

Each group also acts on vectors through `act`. For example, `SO3.act` rotates a 3D vector and
`SE2.act` transforms a 2D point.

## Products of groups

A bundle part is either a group class or an integer `n`. An integer stands for a plain vector
in R^n.

```python
from liesmooth.bundle import Bundle
from liesmooth.so3 import SO3

State = Bundle.of(SO3, 3)
x = State(SO3.identity(), np.zeros(3))
y = x + np.arange(6.0)
rotation, velocity = y.part(0), y.part(1)
```

## Differentiation

`dr(f, wrt(...))` returns the pair `(f(x), J)`. `J` is the right derivative, computed with
forward differences in tangent space. It has one column for each degree of freedom of the
arguments, taken in order. Pass `method=DiffType.ANALYTIC` when `f` itself returns
`(value, jacobian)`.

```python
from liesmooth.diff import dr, wrt

value, jac = dr(lambda x, y: (x * y).log(), wrt(g, h))
# jac has shape (3, 6): the derivative with respect to g, then with respect to h
```

## Integration on a group

A system is a callable `system(state, t)` that returns the derivative as a tangent vector. The
steppers build each stage as `state + sum(alpha_i * k_i)`, which means `state * exp(...)` on a
group.

```python
from liesmooth.integrate import integrate_const, runge_kutta4

stepper = runge_kutta4()
state = stepper.do_step(lambda s, t: np.ones(3), SO3.identity(), 0.0, 1.0)
assert state.is_approx(SO3.exp(np.ones(3)), 1e-9)

samples = []
final = integrate_const(stepper, lambda s, t: -0.1 * s.log(), g, 0.0, 1.0, 0.1,
                        lambda s, t: samples.append((t, s)))
```

## Spline fitting

```python
from liesmooth.bezier import fit_cubic_bezier

times = [0.0, 1.0, 3.0]
points = [SO3.identity(), SO3.exp(np.array([0.2, 0, 0])), SO3.exp(np.array([0.2, 0.3, 0]))]
curve = fit_cubic_bezier(times, points)
assert curve.eval(1.0).is_approx(points[1], 1e-6)
value, velocity, acceleration = curve.eval_derivatives(2.0)
```

Each fit's curve passes through all the data points:

- `fit_linear_bezier` gives piecewise constant velocity.
- `fit_quadratic_bezier` gives continuous velocity.
- `fit_cubic_bezier` gives continuous velocity, approximately continuous acceleration, and zero
  second derivative at both ends.

## What the package does not do

- The groups are `Tn`, `SO2`, `SO3`, `SE2` and their bundles. There is no SE(3).
- There is no nonlinear least-squares minimiser. `lmpar` only computes the damping parameter and
  step for one trust-region iteration.
- There are no B-splines.
- There is no plotting and no command-line tool.
- Differentiation is numerical or supplied by the caller. There is no automatic differentiation.