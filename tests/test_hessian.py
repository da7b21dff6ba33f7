import numpy as np
import pytest

from tetrageno.hessian import (
    ModelSize,
    compute_generic_hessian,
    compute_generic_hessian_corner,
    compute_hessian,
    compute_non_generic_hessian,
    format_matrix,
)


def _data(size, seed=0):
    rng = np.random.default_rng(seed)
    x = rng.normal(size=(size.n, size.p))
    y = rng.normal(size=(size.k, size.n, size.f))
    z = rng.normal(size=(size.n, size.k - 1, size.d))
    theta = rng.normal(scale=0.5, size=size.nparams())
    return x, y, z, theta


def _utilities(theta, size, x, y, z):
    u = np.zeros((size.n, size.k))
    idx = 0
    for k in range(1, size.k):
        u[:, k] += x @ theta[idx:idx + size.p]
        idx += size.p
    for k in range(size.k):
        u[:, k] += y[k] @ theta[idx:idx + size.f]
        idx += size.f
    u[:, 1:] += z @ theta[idx:idx + size.d]
    return u


def _probabilities(theta, size, x, y, z):
    u = _utilities(theta, size, x, y, z)
    e = np.exp(u - u.max(axis=1, keepdims=True))
    probs = e / e.sum(axis=1, keepdims=True)
    return probs[:, 1:], probs[:, 0]


def _objective(theta, size, x, y, z, wt):
    u = _utilities(theta, size, x, y, z)
    top = u.max(axis=1)
    lse = top + np.log(np.exp(u - top[:, None]).sum(axis=1))
    return float(np.sum(wt * lse))


def _numeric_hessian(theta, size, x, y, z, wt, h=1e-3):
    n = len(theta)
    out = np.zeros((n, n))
    eye = np.eye(n) * h
    for a in range(n):
        for b in range(n):
            f = lambda t: _objective(t, size, x, y, z, wt)
            out[a, b] = (f(theta + eye[a] + eye[b]) - f(theta + eye[a] - eye[b])
                         - f(theta - eye[a] + eye[b])
                         + f(theta - eye[a] - eye[b])) / (4 * h * h)
    return out


SIZES = [
    ModelSize(6, 3, 2, 0, 0),
    ModelSize(6, 3, 0, 2, 0),
    ModelSize(6, 3, 0, 0, 2),
    ModelSize(6, 3, 2, 1, 0),
    ModelSize(6, 3, 1, 1, 2),
    ModelSize(5, 4, 2, 2, 1),
]


@pytest.mark.parametrize("size", SIZES)
@pytest.mark.parametrize("weighted", [False, True])
def test_matches_numeric_hessian(size, weighted):
    x, y, z, theta = _data(size, seed=size.p + 3 * size.f + 7 * size.d)
    wt = np.arange(1, size.n + 1, dtype=float) if weighted else np.ones(size.n)
    prob, base = _probabilities(theta, size, x, y, z)
    result = compute_hessian(size, x, y, z, wt if weighted else None, prob, base)
    expected = _numeric_hessian(theta, size, x, y, z, wt)
    np.testing.assert_allclose(result, expected, atol=1e-4, rtol=1e-4)


@pytest.mark.parametrize("size", SIZES)
def test_symmetric_and_positive_semidefinite(size):
    x, y, z, theta = _data(size, seed=11)
    prob, base = _probabilities(theta, size, x, y, z)
    result = compute_hessian(size, x, y, z, None, prob, base)
    np.testing.assert_allclose(result, result.T, atol=1e-12)
    assert np.linalg.eigvalsh(result).min() > -1e-10


def test_nparams_formula():
    assert ModelSize(5, 3, 2, 1, 2).nparams() == 9
    assert ModelSize(5, 1, 0, 3, 0).nparams() == 3


def test_doubling_weights_doubles_hessian():
    size = ModelSize(6, 3, 1, 1, 2)
    x, y, z, theta = _data(size, seed=5)
    prob, base = _probabilities(theta, size, x, y, z)
    plain = compute_hessian(size, x, y, z, None, prob, base)
    doubled = compute_hessian(size, x, y, z, np.full(size.n, 2.0), prob, base)
    np.testing.assert_allclose(doubled, 2 * plain, atol=1e-12)


def test_integer_weights_equal_duplicated_rows():
    size = ModelSize(4, 3, 1, 1, 1)
    x, y, z, theta = _data(size, seed=9)
    prob, base = _probabilities(theta, size, x, y, z)
    wt = np.array([1.0, 2.0, 1.0, 3.0])
    weighted = compute_hessian(size, x, y, z, wt, prob, base)
    rows = np.repeat(np.arange(size.n), wt.astype(int))
    big = ModelSize(len(rows), size.k, size.p, size.f, size.d)
    expanded = compute_hessian(big, x[rows], y[:, rows], z[rows], None,
                               prob[rows], base[rows])
    np.testing.assert_allclose(weighted, expanded, atol=1e-12)


def test_parts_fill_their_blocks():
    size = ModelSize(6, 3, 1, 1, 2)
    x, y, z, theta = _data(size, seed=2)
    prob, base = _probabilities(theta, size, x, y, z)
    full = compute_hessian(size, x, y, z, None, prob, base)
    n = size.nparams()
    start = n - size.d

    non_generic = np.zeros((n, n))
    returned = compute_non_generic_hessian(size, x, y, None, prob, base,
                                           non_generic)
    assert returned is non_generic
    np.testing.assert_allclose(non_generic[:start, :start], full[:start, :start])
    assert np.all(non_generic[start:, :] == 0)

    corner = np.zeros((n, n))
    compute_generic_hessian_corner(size, z, None, prob, corner)
    np.testing.assert_allclose(corner[start:, start:], full[start:, start:])
    assert np.all(corner[:start, :] == 0)

    generic = np.zeros((n, n))
    compute_generic_hessian(size, x, y, z, None, prob, base, generic)
    np.testing.assert_allclose(generic[:, start:], full[:, start:])
    np.testing.assert_allclose(generic[start:, :], full[start:, :])
    assert np.all(generic[:start, :start] == 0)


def test_missing_design_matrix_raises():
    size = ModelSize(4, 3, 2, 0, 0)
    prob = np.full((4, 2), 0.3)
    with pytest.raises(ValueError):
        compute_hessian(size, None, None, None, None, prob, np.full(4, 0.4))


def test_wrong_probability_shape_raises():
    size = ModelSize(4, 3, 1, 0, 0)
    x = np.ones((4, 1))
    with pytest.raises(ValueError):
        compute_hessian(size, x, None, None, None, np.full((4, 3), 0.2),
                        np.full(4, 0.4))


def test_wrong_hessian_shape_raises():
    size = ModelSize(4, 3, 1, 0, 0)
    x = np.ones((4, 1))
    with pytest.raises(ValueError):
        compute_non_generic_hessian(size, x, None, None, np.full((4, 2), 0.3),
                                    np.full(4, 0.4), np.zeros((3, 3)))


def test_negative_dimension_raises():
    with pytest.raises(ValueError):
        ModelSize(4, 3, -1, 0, 0)


def test_format_matrix():
    text = format_matrix("H", np.array([[1.0, 2.0], [3.0, 4.5]]))
    assert text == "\nH:\n\t1.000000\t2.000000\n\t3.000000\t4.500000\n"