import math
import pickle

import numpy as np
import pytest

from liesmooth.so2 import SO2
from liesmooth.so3 import SO3


@pytest.fixture
def rng():
    return np.random.default_rng(3)


def test_from_angle_round_trip():
    for ang in np.linspace(-3.0, 3.0, 7):
        assert math.isclose(SO2.from_angle(ang).angle(), ang, rel_tol=1e-12, abs_tol=1e-12)


def test_constructor_normalises():
    g = SO2(3.0, 4.0)
    c = g.coeffs()
    assert math.isclose(float(np.linalg.norm(c)), 1.0, rel_tol=1e-12)
    assert g.is_approx(SO2(0.6, 0.8))


def test_constructor_rejects_zero():
    with pytest.raises(ValueError):
        SO2(0.0, 0.0)


def test_from_complex_and_u1(rng):
    ang = 0.7
    c = complex(math.cos(ang), math.sin(ang)) * 2.5
    g = SO2.from_complex(c)
    assert math.isclose(g.angle(), ang, rel_tol=1e-12)
    u = g.u1()
    assert math.isclose(abs(u), 1.0, rel_tol=1e-12)
    assert SO2.from_complex(u).is_approx(g)


def test_composition_adds_angles():
    a, b = 0.4, 1.1
    prod = SO2.from_angle(a) * SO2.from_angle(b)
    assert math.isclose(prod.angle(), a + b, rel_tol=1e-12)


def test_inverse_negates_angle():
    g = SO2.from_angle(0.9)
    assert math.isclose(g.inverse().angle(), -0.9, rel_tol=1e-12)
    assert (g * g.inverse()).is_approx(SO2.identity())


def test_identity_coeffs():
    np.testing.assert_array_equal(SO2.identity().coeffs(), [0.0, 1.0])


def test_action_round_trip(rng):
    g = SO2.random(rng)
    v = rng.uniform(-1, 1, 2)
    w = g.act(v)
    np.testing.assert_allclose(g.inverse().act(w), v, atol=1e-12)
    assert math.isclose(float(np.linalg.norm(w)), float(np.linalg.norm(v)), rel_tol=1e-12)


def test_action_quarter_turn():
    g = SO2.from_angle(math.pi / 2)
    np.testing.assert_allclose(g.act([1.0, 0.0]), [0.0, 1.0], atol=1e-12)


def test_action_rejects_wrong_shape():
    with pytest.raises(ValueError):
        SO2.identity().act([1.0, 2.0, 3.0])


def test_lift_so3_is_yaw(rng):
    for _ in range(5):
        g = SO2.random(rng)
        lifted = g.lift_so3()
        assert isinstance(lifted, SO3)
        np.testing.assert_allclose(lifted.log(), [0.0, 0.0, g.angle()], atol=1e-12)
        np.testing.assert_allclose(lifted.matrix()[:2, :2], g.matrix(), atol=1e-12)


def test_hat_vee_round_trip():
    A = SO2.hat([0.3])
    np.testing.assert_allclose(A, -A.T)
    np.testing.assert_allclose(SO2.vee(A), [0.3])


def test_exp_log_round_trip(rng):
    a = rng.uniform(-3, 3, 1)
    np.testing.assert_allclose(SO2.exp(a).log(), a, atol=1e-12)


def test_jacobians_are_identity(rng):
    a = rng.uniform(-1, 1, 1)
    np.testing.assert_allclose(SO2.dr_exp(a), np.eye(1))
    np.testing.assert_allclose(SO2.dr_expinv(a), np.eye(1))
    np.testing.assert_allclose(SO2.dl_exp(a), np.eye(1))
    np.testing.assert_allclose(SO2.ad(a), np.zeros((1, 1)))


def test_minus_matches_angle_difference():
    g1 = SO2.from_angle(1.0)
    g2 = SO2.from_angle(0.25)
    np.testing.assert_allclose(g1 - g2, [0.75], atol=1e-12)
    assert (g2 + (g1 - g2)).is_approx(g1)


def test_matrix_is_rotation(rng):
    R = SO2.random(rng).matrix()
    np.testing.assert_allclose(R @ R.T, np.eye(2), atol=1e-12)
    assert math.isclose(float(np.linalg.det(R)), 1.0, rel_tol=1e-12)


def test_pickle_round_trip(rng):
    g = SO2.random(rng)
    assert pickle.loads(pickle.dumps(g)) == g