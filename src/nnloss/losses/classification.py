# src/nnloss/losses/classification.py
import logging

import numpy as np

from ..errors import InvalidTargetError, ShapeMismatchError, TargetClassOutOfRange
from .base import Loss, LossOut
from .reductions import apply_reduction, reduce_grad
from .utils import as_array

logger = logging.getLogger(__name__)


def class_indices(target, num_samples, num_classes):
    """
    Flatten a target of class indices and validate it.

    Accepts shapes (N,), (1, N) and (N, 1). Every entry has to be an integer
    value in [0, num_classes).
    """
    t = np.asarray(target)
    if t.ndim > 2 or (t.ndim == 2 and 1 not in t.shape):
        raise ShapeMismatchError(f"target of class indices must be a vector, got shape {t.shape}")
    t = t.reshape(-1)
    if t.size != num_samples:
        raise ShapeMismatchError(
            f"prediction has {num_samples} rows but target has {t.size} class indices"
        )
    if t.dtype.kind not in "iu":
        if t.dtype.kind != "f":
            raise InvalidTargetError(f"class indices must be numeric, got dtype {t.dtype}")
        if not np.all(np.isfinite(t)) or np.any(t != np.floor(t)):
            raise InvalidTargetError("class indices must be integer valued")
    bad = np.flatnonzero((t < 0) | (t >= num_classes))
    if bad.size:
        pos = int(bad[0])
        logger.debug("%d target(s) out of range for %d classes", bad.size, num_classes)
        raise TargetClassOutOfRange(t[pos].item(), num_classes, position=pos)
    return t.astype(np.intp)


def negative_log_likelihood(log_probs, target, reduction=True, return_grad=False):
    """
    Negative log likelihood over a batch of log-probabilities.

    log_probs is (N, C), one row of class log-probabilities per sample, target
    holds N class indices. Mean reduction divides by N.
    """
    log_probs = as_array(log_probs)
    if log_probs.ndim != 2:
        raise ShapeMismatchError(
            f"prediction must be a (samples, classes) matrix, got shape {log_probs.shape}"
        )
    n, c = log_probs.shape
    idx = class_indices(target, n, c)
    rows = np.arange(n)

    loss = -log_probs[rows, idx]
    value = apply_reduction(loss, reduction, count=idx.size)
    if return_grad:
        grad = np.zeros_like(log_probs)
        grad[rows, idx] = -1.0
        return LossOut(value=value, grad=reduce_grad(grad, reduction, count=idx.size))
    return LossOut(value=value)


class NegativeLogLikelihood(Loss):
    """
    Negative log likelihood loss.

    Expects the prediction to hold log-probabilities for each class (e.g. the
    output of a log-softmax layer), and the target to hold one class index in
    [0, num_classes) per sample. An index outside that range raises
    TargetClassOutOfRange.

    Args:
        reduction (bool, optional): True sums over samples, False averages
            over the number of samples.
    """

    def _compute(self, prediction, target, return_grad):
        out = negative_log_likelihood(prediction, target, self.reduction, return_grad)
        logger.debug("%r: loss=%s", self, out.value)
        return out
