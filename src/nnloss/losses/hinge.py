# src/nnloss/losses/hinge.py
import logging

import numpy as np

from .base import Loss, LossOut
from .reductions import apply_reduction, reduce_grad
from .utils import as_array, check_same_shape

logger = logging.getLogger(__name__)


def hinge_embedding(yhat, y, reduction=True, return_grad=False):
    """
    Hinge embedding loss, elementwise (1 - y) / 2 + yhat * y.

    The loss is linear in yhat, so the gradient is just y.
    """
    yhat, y = as_array(yhat), as_array(y)
    check_same_shape(yhat, y)
    loss = (1.0 - y) / 2.0 + yhat * y
    value = apply_reduction(loss, reduction)
    if return_grad:
        return LossOut(value=value, grad=reduce_grad(y, reduction))
    return LossOut(value=value)


def squared_hinge(yhat, y, reduction=True, return_grad=False):
    """
    Squared hinge loss, elementwise max(0, 1 - yhat * y) ** 2.

    Labels are expected in {-1, +1}; a label of 0 is read as -1 so {0, 1}
    targets work unchanged.
    """
    yhat, y = as_array(yhat), as_array(y)
    check_same_shape(yhat, y)
    y = np.where(y == 0, -1.0, y).astype(yhat.dtype, copy=False)
    margin = np.maximum(1.0 - yhat * y, 0.0)
    value = apply_reduction(np.square(margin), reduction)
    if return_grad:
        # zero wherever the margin is already met
        grad = -2.0 * y * margin
        return LossOut(value=value, grad=reduce_grad(grad, reduction))
    return LossOut(value=value)


class HingeEmbeddingLoss(Loss):
    """
    Hinge embedding loss.

    Args:
        reduction (bool, optional): True sums the elementwise losses, False
            averages them over the number of elements. Defaults to the
            configured reduction (True unless changed).
    """

    def _compute(self, prediction, target, return_grad):
        out = hinge_embedding(prediction, target, self.reduction, return_grad)
        logger.debug("%r: loss=%s", self, out.value)
        return out


class SquaredHingeLoss(Loss):
    """
    Squared hinge loss for {-1, +1} (or {0, 1}) labelled targets.

    Args:
        reduction (bool, optional): True for sum, False for mean.
    """

    def _compute(self, prediction, target, return_grad):
        out = squared_hinge(prediction, target, self.reduction, return_grad)
        logger.debug("%r: loss=%s", self, out.value)
        return out
