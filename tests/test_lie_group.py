import numpy as np
import pytest

from liesmooth.lie_group import DUMMY_PRECISION, LieGroup
from liesmooth.tn import Tn


@pytest.fixture
def rng():
    return np.random.default_rng(7)


T3 = Tn.of(3)
T2 = Tn.of(2)


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        LieGroup.from_coeffs([])


def test_from_coeffs_rejects_wrong_shape():
    with pytest.raises(ValueError):
        T3.from_coeffs([1.0, 2.0])
    with pytest.raises(ValueError):
        T3.from_coeffs([[1.0, 2.0, 3.0]])


def test_from_coeffs_round_trip(rng):
    c = rng.uniform(-1, 1, 3)
    g = T3.from_coeffs(c)
    assert np.array_equal(g.coeffs(), c)


def test_coeffs_is_a_copy(rng):
    g = T3.random(rng)
    c = g.coeffs()
    c[0] += 10.0
    assert not np.array_equal(g.coeffs(), c)


def test_random_is_reproducible():
    g1 = T3.random(np.random.default_rng(3))
    g2 = T3.random(np.random.default_rng(3))
    assert g1 == g2
    assert hash(g1) == hash(g2)


def test_identity_is_neutral(rng):
    g = T3.random(rng)
    e = T3.identity()
    assert (g * e).is_approx(g)
    assert (e * g).is_approx(g)


def test_inverse_composition_gives_identity(rng):
    g = T3.random(rng)
    assert np.allclose((g * g.inverse()).coeffs(), T3.identity().coeffs())
    assert np.allclose((g.inverse() * g).coeffs(), T3.identity().coeffs())


def test_exp_log_round_trip(rng):
    a = rng.uniform(-1, 1, 3)
    assert np.allclose(T3.exp(a).log(), a)
    g = T3.random(rng)
    assert T3.exp(g.log()).is_approx(g)


def test_plus_minus_round_trip(rng):
    g = T3.random(rng)
    a = rng.uniform(-1, 1, 3)
    assert np.allclose((g + a) - g, a)
    h = T3.random(rng)
    assert (h + (g - h)).is_approx(g)


def test_hat_vee_round_trip(rng):
    a = rng.uniform(-1, 1, 3)
    A = T3.hat(a)
    assert A.shape == (T3.DIM, T3.DIM)
    assert np.allclose(T3.vee(A), a)


def test_matrix_is_homomorphism(rng):
    g, h = T3.random(rng), T3.random(rng)
    assert np.allclose((g * h).matrix(), g.matrix() @ h.matrix())
    assert np.allclose(g.inverse().matrix(), np.linalg.inv(g.matrix()))


def test_lie_bracket_matches_commutator(rng):
    a, b = rng.uniform(-1, 1, 3), rng.uniform(-1, 1, 3)
    A, B = T3.hat(a), T3.hat(b)
    assert np.allclose(T3.lie_bracket(a, b), T3.vee(A @ B - B @ A))


def test_left_and_right_jacobians_are_inverse(rng):
    a = rng.uniform(-1, 1, 3)
    assert np.allclose(T3.dr_exp(a) @ T3.dr_expinv(a), np.eye(3))
    assert np.allclose(T3.dl_exp(a) @ T3.dl_expinv(a), np.eye(3))


def test_adjoint_conjugation(rng):
    g = T3.random(rng)
    a = rng.uniform(-1, 1, 3)
    X = g.matrix()
    expected = T3.vee(X @ T3.hat(a) @ np.linalg.inv(X))
    assert np.allclose(g.Ad() @ a, expected)


def test_size_is_dof(rng):
    assert T3.random(rng).size() == T3.DOF
    assert T2.identity().size() == T2.DOF


def test_is_approx_tolerance():
    g = T3.from_coeffs([1.0, 1.0, 1.0])
    close = T3.from_coeffs([1.0, 1.0, 1.0 + 1e-14])
    far = T3.from_coeffs([1.0, 1.0, 1.0 + 1e-3])
    assert g.is_approx(close)
    assert not g.is_approx(far)
    assert g.is_approx(far, 1e-2)
    assert DUMMY_PRECISION < 1e-6


def test_is_approx_rejects_other_group(rng):
    with pytest.raises(TypeError):
        T3.random(rng).is_approx(T2.random(rng))


def test_composition_of_different_groups_fails(rng):
    with pytest.raises(TypeError):
        T3.random(rng) * T2.random(rng)
    with pytest.raises(TypeError):
        T3.random(rng) - T2.random(rng)


def test_tangent_shape_validation():
    with pytest.raises(ValueError):
        T3.exp([1.0, 2.0])
    with pytest.raises(ValueError):
        T3.vee(np.zeros((3, 3)))
    with pytest.raises(ValueError):
        T3.identity() + np.zeros(4)


def test_repr_round_trips_coeffs(rng):
    g = T3.random(rng)
    assert repr(g).startswith("T3.from_coeffs(")
    assert str(g).split() == [f"{x:g}" for x in g.coeffs()]