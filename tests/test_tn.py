import pickle

import numpy as np
import pytest

from liesmooth.tn import Tn


@pytest.fixture
def rng():
    return np.random.default_rng(11)


def test_constructor(rng):
    v = rng.uniform(-1, 1, 3)
    t3 = Tn.of(3)(v)
    assert np.allclose(t3.rn(), v)
    inferred = Tn(v)
    assert type(inferred) is Tn.of(3)
    assert np.allclose(inferred.rn(), v)


def test_action(rng):
    v = rng.uniform(-1, 1, 3)
    t3 = Tn.of(3)(v)
    assert np.allclose(t3.act(v), 2 * v)


def test_of_is_cached_and_sized():
    T4 = Tn.of(4)
    assert T4 is Tn.of(4)
    assert (T4.REP_SIZE, T4.DOF, T4.DIM) == (4, 4, 5)
    assert issubclass(T4, Tn)


@pytest.mark.parametrize("dim", [0, -2])
def test_of_rejects_non_positive(dim):
    with pytest.raises(ValueError):
        Tn.of(dim)


def test_constructor_rejects_wrong_length():
    with pytest.raises(ValueError):
        Tn.of(3)([1.0, 2.0])


def test_base_class_needs_dimension():
    with pytest.raises(TypeError):
        Tn.identity()


def test_composition_adds_and_inverse_negates(rng):
    a, b = rng.uniform(-1, 1, 5), rng.uniform(-1, 1, 5)
    T5 = Tn.of(5)
    assert np.allclose((T5(a) * T5(b)).rn(), a + b)
    assert np.allclose(T5(a).inverse().rn(), -a)


def test_matrix_form():
    m = Tn.of(2)([1.0, 2.0]).matrix()
    assert np.array_equal(m, np.array([[1.0, 0.0, 1.0], [0.0, 1.0, 2.0], [0.0, 0.0, 1.0]]))


def test_hat_form():
    A = Tn.of(2).hat([3.0, 4.0])
    assert np.array_equal(A, np.array([[0.0, 0.0, 3.0], [0.0, 0.0, 4.0], [0.0, 0.0, 0.0]]))


def test_identity_is_zero():
    assert np.array_equal(Tn.of(3).identity().rn(), np.zeros(3))


def test_random_in_unit_box(rng):
    g = Tn.of(10).random(rng)
    values = g.rn()
    assert values.shape == (10,)
    assert float(np.max(np.abs(values))) <= 1.0
    assert float(np.max(np.abs(values))) > 0.0


def test_from_coeffs_on_base_infers_dimension(rng):
    c = rng.uniform(-1, 1, 6)
    g = Tn.from_coeffs(c)
    assert type(g) is Tn.of(6)
    assert np.array_equal(g.rn(), c)


def test_pickle_round_trip(rng):
    g = Tn.of(3).random(rng)
    h = pickle.loads(pickle.dumps(g))
    assert h == g
    assert type(h) is Tn.of(3)


def test_rn_is_a_copy(rng):
    g = Tn.of(3).random(rng)
    r = g.rn()
    r[:] = 0.0
    assert not np.array_equal(g.rn(), r)