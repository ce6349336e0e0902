# src/nnloss/gradcheck.py
import logging

import numpy as np

logger = logging.getLogger(__name__)


def numerical_gradient(fn, x, eps=1e-6):
    """
    Central finite differences of a scalar function.

    Args:
        fn: callable taking an array shaped like x and returning a float
        x: point to differentiate at (not modified)
        eps: step size

    Returns:
        array shaped like x
    """
    x = np.array(x, dtype=np.float64, copy=True)
    grad = np.zeros_like(x)
    it = np.nditer(x, flags=["multi_index"])
    for _ in it:
        idx = it.multi_index
        old_val = x[idx]

        x[idx] = old_val + eps
        f_plus = fn(x)
        x[idx] = old_val - eps
        f_minus = fn(x)

        x[idx] = old_val  # restore
        grad[idx] = (f_plus - f_minus) / (2 * eps)
    return grad


def check_gradient(loss, prediction, target, eps=1e-6, rtol=1e-4, atol=1e-7):
    """
    Compare loss.backward against finite differences of loss.forward.

    Hinge-type losses have kinks; keep predictions away from the margin
    (prediction * target == 1) when using this.
    """
    analytic = np.asarray(loss.backward(prediction, target), dtype=np.float64)
    numeric = numerical_gradient(lambda p: loss.forward(p, target), prediction, eps=eps)

    err = np.abs(analytic - numeric)
    worst = np.unravel_index(np.argmax(err), err.shape) if err.size else ()
    ok = bool(np.allclose(analytic, numeric, rtol=rtol, atol=atol))
    if err.size:
        logger.debug(
            "%r worst element %s: analytic=%.6e numeric=%.6e err=%.2e",
            loss, worst, analytic[worst], numeric[worst], err[worst],
        )
    if not ok:
        logger.warning("Gradient check failed for %r", loss)
    return ok
