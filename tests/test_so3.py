import math

import numpy as np
import pytest

from liesmooth.so3 import SO3


@pytest.fixture
def rng():
    return np.random.default_rng(7)


def test_composition_matches_matrix_product(rng):
    for _ in range(5):
        g1 = SO3.random(rng)
        g2 = SO3.random(rng)
        np.testing.assert_allclose((g1 * g2).matrix(), g1.matrix() @ g2.matrix(), atol=1e-12)


def test_composition_from_constructed_quaternions(rng):
    for _ in range(5):
        q1 = rng.normal(size=4)
        q2 = rng.normal(size=4)
        g1 = SO3(q1)
        g2 = SO3(q2)
        prod = g1 * g2
        np.testing.assert_allclose(prod.matrix(), g1.matrix() @ g2.matrix(), atol=1e-12)
        assert math.isclose(float(np.linalg.norm(prod.coeffs())), 1.0, rel_tol=1e-12)


@pytest.mark.parametrize("axis", [0, 1, 2])
def test_single_axis_rotation_log(axis):
    ang = 0.345
    q = np.zeros(4)
    q[axis] = math.sin(ang / 2)
    q[3] = math.cos(ang / 2)
    g = SO3(q)
    expected = np.zeros(3)
    expected[axis] = ang
    np.testing.assert_allclose(g.log(), expected, atol=1e-12)


def test_action_matches_matrix(rng):
    for _ in range(5):
        g = SO3(rng.normal(size=4))
        v = rng.uniform(-1, 1, 3)
        np.testing.assert_allclose(g.act(v), g.matrix() @ v, atol=1e-12)
        np.testing.assert_allclose(g.inverse().act(g.act(v)), v, atol=1e-12)


def test_quarter_turn_about_z():
    g = SO3.exp([0.0, 0.0, math.pi / 2])
    np.testing.assert_allclose(g.act([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0], atol=1e-12)


def test_constructor_normalises():
    g = SO3([0.0, 0.0, 0.0, 2.0])
    assert g.is_approx(SO3.identity())


def test_constructor_rejects_zero():
    with pytest.raises(ValueError):
        SO3([0.0, 0.0, 0.0, 0.0])


def test_constructor_rejects_wrong_shape():
    with pytest.raises(ValueError):
        SO3([1.0, 0.0, 0.0])


def test_exp_log_round_trip(rng):
    for _ in range(5):
        a = rng.uniform(-1, 1, 3)
        np.testing.assert_allclose(SO3.exp(a).log(), a, atol=1e-12)


def test_small_angle_exp_log():
    a = np.array([1e-6, -2e-6, 3e-6])
    np.testing.assert_allclose(SO3.exp(a).log(), a, atol=1e-15)


def test_hat_vee_round_trip(rng):
    a = rng.uniform(-1, 1, 3)
    A = SO3.hat(a)
    np.testing.assert_allclose(A, -A.T)
    np.testing.assert_allclose(SO3.vee(A), a)


def test_random_is_unit_with_nonnegative_w(rng):
    for _ in range(10):
        c = SO3.random(rng).coeffs()
        assert math.isclose(float(np.linalg.norm(c)), 1.0, rel_tol=1e-12)
        assert c[3] >= 0


def test_matrix_is_rotation(rng):
    R = SO3.random(rng).matrix()
    np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-12)
    assert math.isclose(float(np.linalg.det(R)), 1.0, rel_tol=1e-12)


def test_inverse_composition_is_identity(rng):
    g = SO3.random(rng)
    assert (g * g.inverse()).is_approx(SO3.identity(), 1e-10)


def test_dr_expinv_inverts_dr_exp(rng):
    for a in (rng.uniform(-1, 1, 3), np.array([1e-6, 0.0, 0.0])):
        np.testing.assert_allclose(SO3.dr_expinv(a) @ SO3.dr_exp(a), np.eye(3), atol=1e-10)


def test_dr_exp_numerically(rng):
    a = rng.uniform(-1, 1, 3)
    eps = 1e-6
    base = SO3.exp(a)
    jac = np.column_stack(
        [(SO3.exp(a + eps * e) - base) / eps for e in np.eye(3)]
    )
    np.testing.assert_allclose(jac, SO3.dr_exp(a), atol=1e-5)


def test_plus_minus_round_trip(rng):
    g1 = SO3.random(rng)
    g2 = SO3.random(rng)
    d = g1 - g2
    assert (g2 + d).is_approx(g1, 1e-10)


def test_ad_is_rotation_matrix(rng):
    g = SO3.random(rng)
    np.testing.assert_allclose(g.Ad(), g.matrix())