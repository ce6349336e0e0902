import copy
import pickle

import numpy as np
import pytest

from nnloss import (
    HingeEmbeddingLoss,
    InvalidTargetError,
    NegativeLogLikelihood,
    ShapeMismatchError,
    SquaredHingeLoss,
    TargetClassOutOfRange,
    check_gradient,
)
from nnloss.losses import get, hinge_embedding, negative_log_likelihood, squared_hinge
from nnloss.losses.utils import logsumexp, stable_log_softmax


yhat = np.array([0.1, 0.4, 0.6])
y = np.array([1.0, -1.0, 1.0])

log_probs = np.array([[-0.1, -2.0, -3.0],
                      [-1.5, -0.5, -2.5]])
labels = np.array([0, 1])


# ── Hinge embedding ──────────────────────────────────────────────
def test_hinge_embedding_sum():
    loss = HingeEmbeddingLoss(reduction=True)
    assert loss(yhat, y) == pytest.approx(0.1 + 0.6 + 0.6)
    np.testing.assert_allclose(loss.backward(yhat, y), y)


def test_hinge_embedding_mean():
    loss = HingeEmbeddingLoss(reduction=False)
    assert loss(yhat, y) == pytest.approx(1.3 / 3)
    np.testing.assert_allclose(loss.backward(yhat, y), y / 3)


def test_hinge_embedding_functional_matches_class():
    out = hinge_embedding(yhat, y, reduction=False, return_grad=True)
    loss = HingeEmbeddingLoss(reduction=False)
    assert out.value == pytest.approx(loss.forward(yhat, y))
    np.testing.assert_allclose(out.grad, loss.backward(yhat, y))
    assert hinge_embedding(yhat, y).grad is None


def test_hinge_embedding_shape_mismatch():
    with pytest.raises(ShapeMismatchError):
        HingeEmbeddingLoss()(yhat, y[:2])


# ── Squared hinge ────────────────────────────────────────────────
def test_squared_hinge_values():
    pred = np.array([0.5, -2.0, 0.3, 1.5])
    target = np.array([1.0, -1.0, 0.0, 1.0])  # 0 is read as -1
    loss = SquaredHingeLoss(reduction=True)
    assert loss(pred, target) == pytest.approx(0.25 + 1.69)
    np.testing.assert_allclose(loss.backward(pred, target), [-1.0, 0.0, 2.6, 0.0])

    mean = SquaredHingeLoss(reduction=False)
    assert mean(pred, target) == pytest.approx(1.94 / 4)
    np.testing.assert_allclose(mean.backward(pred, target), [-0.25, 0.0, 0.65, 0.0])


def test_squared_hinge_zero_when_confidently_correct():
    target = np.array([[1.0, -1.0], [-1.0, 1.0]])
    pred = np.array([[1.0, -3.0], [-1.0, 2.5]])
    loss = SquaredHingeLoss()
    assert loss(pred, target) == 0.0
    np.testing.assert_array_equal(loss.backward(pred, target), np.zeros_like(pred))


def test_squared_hinge_does_not_modify_inputs():
    pred = np.array([0.5, -0.5])
    target = np.array([0.0, 1.0])
    squared_hinge(pred, target, return_grad=True)
    np.testing.assert_array_equal(target, [0.0, 1.0])
    np.testing.assert_array_equal(pred, [0.5, -0.5])


# ── Negative log likelihood ──────────────────────────────────────
def test_nll_sum_and_mean():
    assert NegativeLogLikelihood(reduction=True)(log_probs, labels) == pytest.approx(0.6)
    assert NegativeLogLikelihood(reduction=False)(log_probs, labels) == pytest.approx(0.3)


def test_nll_backward():
    expected = np.array([[-1.0, 0.0, 0.0],
                         [0.0, -1.0, 0.0]])
    np.testing.assert_array_equal(NegativeLogLikelihood().backward(log_probs, labels), expected)
    np.testing.assert_allclose(
        NegativeLogLikelihood(reduction=False).backward(log_probs, labels), expected / 2
    )


@pytest.mark.parametrize("target", [
    [0, 1],
    [[0, 1]],          # one row, a column per sample
    [[0], [1]],
    [0.0, 1.0],
])
def test_nll_target_layouts(target):
    assert negative_log_likelihood(log_probs, target).value == pytest.approx(0.6)


@pytest.mark.parametrize("bad, position", [([0, 3], 1), ([-1, 0], 0), ([7, 9], 0)])
def test_nll_target_class_out_of_range(bad, position):
    loss = NegativeLogLikelihood()
    with pytest.raises(TargetClassOutOfRange) as exc:
        loss(log_probs, bad)
    assert exc.value.num_classes == 3
    assert exc.value.position == position
    with pytest.raises(IndexError):
        loss.backward(log_probs, bad)


def test_nll_rejects_fractional_targets():
    with pytest.raises(InvalidTargetError):
        NegativeLogLikelihood()(log_probs, [0.5, 1])


def test_nll_rejects_boolean_targets():
    with pytest.raises(InvalidTargetError):
        NegativeLogLikelihood()(log_probs, np.array([True, False]))


def test_out_of_range_error_survives_pickle_and_copy():
    with pytest.raises(TargetClassOutOfRange) as exc:
        NegativeLogLikelihood()(log_probs, [0, 5])
    for clone in (pickle.loads(pickle.dumps(exc.value)), copy.copy(exc.value)):
        assert isinstance(clone, TargetClassOutOfRange)
        assert (clone.index, clone.num_classes, clone.position) == (5, 3, 1)
        assert str(clone) == str(exc.value)


def test_logsumexp_all_neg_inf_row():
    x = np.array([[-np.inf, -np.inf], [0.0, 0.0]])
    with np.errstate(divide="ignore"):
        out = logsumexp(x, axis=1)
    assert out[0] == -np.inf
    assert out[1] == pytest.approx(np.log(2.0))


def test_nll_shape_checks():
    loss = NegativeLogLikelihood()
    with pytest.raises(ShapeMismatchError):
        loss(log_probs, [0, 1, 2])
    with pytest.raises(ShapeMismatchError):
        loss(log_probs[0], [0])
    with pytest.raises(ShapeMismatchError):
        loss(log_probs, [[0, 1], [1, 0]])


def test_nll_from_logits():
    logits = np.array([[2.0, 0.5, -1.0], [0.1, 0.2, 3.0]])
    lp = stable_log_softmax(logits)
    np.testing.assert_allclose(np.exp(lp).sum(axis=1), 1.0)
    expected = -(lp[0, 0] + lp[1, 2]) / 2
    assert NegativeLogLikelihood(reduction=False)(lp, [0, 2]) == pytest.approx(expected)


# ── Properties shared by every loss ──────────────────────────────
def _case(name, rng):
    if name == "nll":
        pred = stable_log_softmax(rng.normal(size=(5, 4)))
        return pred, rng.integers(0, 4, size=5), 5
    pred = rng.normal(size=(3, 4))
    target = rng.choice([-1.0, 1.0], size=(3, 4))
    return pred, target, pred.size


@pytest.mark.parametrize("name", ["hinge_embedding", "squared_hinge", "nll"])
def test_mean_is_sum_over_count(name, rng):
    pred, target, count = _case(name, rng)
    total = get(name, reduction=True)(pred, target)
    mean = get(name, reduction=False)(pred, target)
    assert mean == pytest.approx(total / count)

    g_sum = get(name, reduction=True).backward(pred, target)
    g_mean = get(name, reduction=False).backward(pred, target)
    np.testing.assert_allclose(g_mean, g_sum / count)


@pytest.mark.parametrize("name", ["hinge_embedding", "squared_hinge", "nll"])
@pytest.mark.parametrize("reduction", [True, False])
def test_backward_shape_and_gradient(name, reduction, rng):
    pred, target, _ = _case(name, rng)
    loss = get(name, reduction=reduction)
    assert loss.backward(pred, target).shape == pred.shape
    assert check_gradient(loss, pred, target)


def test_backward_writes_into_out():
    loss = SquaredHingeLoss()
    out = np.full(3, 99.0)
    res = loss.backward([0.2, 2.0, -1.5], [1.0, 1.0, -1.0], out=out)
    assert res is out
    np.testing.assert_allclose(out, [-1.6, 0.0, 0.0])


def test_backward_out_must_match_prediction():
    loss = HingeEmbeddingLoss()
    with pytest.raises(ShapeMismatchError):
        loss.backward(yhat, y, out=np.zeros(4))
    with pytest.raises(TypeError):
        loss.backward(yhat, y, out=[0.0, 0.0, 0.0])


def test_backward_out_refuses_unsafe_cast():
    loss = HingeEmbeddingLoss(reduction=False)
    out = np.zeros(3, dtype=np.int64)
    with pytest.raises(TypeError):
        loss.backward(yhat, y, out=out)
    np.testing.assert_array_equal(out, [0, 0, 0])

    narrow = np.zeros(3, dtype=np.float32)
    loss.backward(yhat, y, out=narrow)
    np.testing.assert_allclose(narrow, y / 3, rtol=1e-6)


def test_inputs_are_not_modified():
    pred = log_probs.copy()
    NegativeLogLikelihood(reduction=False).backward(pred, labels)
    np.testing.assert_array_equal(pred, log_probs)
