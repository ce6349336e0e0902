"""
Array helpers shared by the loss functions
"""

from __future__ import annotations
from typing import Optional, Tuple
import numpy as np

from ..config import get_dtype
from ..errors import ShapeMismatchError

Array = np.ndarray


def as_array(x, dtype=None) -> Array:
    # never returns a view the caller could see us write through
    return np.array(x, dtype=dtype or get_dtype(), copy=True)


def check_same_shape(prediction: Array, target: Array, what: str = "target") -> Tuple[int, ...]:
    if prediction.shape != target.shape:
        raise ShapeMismatchError(
            f"prediction has shape {prediction.shape} but {what} has shape {target.shape}"
        )
    return prediction.shape


def prepare_out(out: Optional[Array], shape: Tuple[int, ...]) -> Optional[Array]:
    # caller-supplied gradient buffer has to match the prediction exactly
    if out is None:
        return None
    if not isinstance(out, np.ndarray):
        raise TypeError(f"out must be a numpy array, got {type(out).__name__}")
    if out.shape != shape:
        raise ShapeMismatchError(f"out has shape {out.shape}, expected {shape}")
    return out


# Numerically stable ops

def logsumexp(x: Array, axis: int = -1, keepdims: bool = False) -> Array:
    # log(sum(exp(x))) with max(x) factored out
    x = np.asarray(x)
    m = np.max(x, axis=axis, keepdims=True)
    # rows that are all -inf would give nan from (-inf) - (-inf)
    m = np.where(np.isfinite(m), m, 0.0)
    y = np.log(np.sum(np.exp(x - m), axis=axis, keepdims=True)) + m
    return y if keepdims else np.squeeze(y, axis=axis)


def stable_log_softmax(logits: Array, axis: int = -1) -> Array:
    """
    log_softmax(x) = x - logsumexp(x)

    Produces the log-probabilities NegativeLogLikelihood expects from raw
    network outputs, one row per sample when axis=-1.
    """
    logits = np.asarray(logits)
    return logits - logsumexp(logits, axis=axis, keepdims=True)
