# src/nnloss/losses/reductions.py
import numpy as np
from typing import Literal, Union

from ..errors import ConfigurationError

# True -> "sum", False -> "mean"
Reduction = Union[bool, Literal["mean", "sum"]]

def check_reduction(reduction: Reduction) -> bool:
    if isinstance(reduction, (bool, np.bool_)):
        return bool(reduction)
    if reduction == "sum":
        return True
    if reduction == "mean":
        return False
    raise ConfigurationError(f"reduction must be a bool, 'sum' or 'mean', got {reduction!r}")

def apply_reduction(x, reduction: Reduction = True, count=None):
    total = np.sum(x, dtype=np.float64)
    if check_reduction(reduction):
        return float(total)
    if count is None:
        count = np.size(x)
    return float(total / max(1, count))

def reduce_grad(grad, reduction: Reduction = True, count=None):
    if check_reduction(reduction):
        return grad
    if count is None:
        count = grad.size
    return grad / max(1, count)
