# src/nnloss/losses/base.py
import importlib
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import default_reduction
from ..errors import SerializationError
from .reductions import Reduction, check_reduction
from .utils import prepare_out

logger = logging.getLogger(__name__)

# bump when the layout of get_config() changes
CONFIG_VERSION = 1


@dataclass
class LossOut:
    value: float                       # reduced loss
    grad: Optional[np.ndarray] = None  # gradient w.r.t. predictions


class Loss:
    """
    Common interface for loss classes.

    A loss holds a single setting, ``reduction``: True sums the per-element
    losses, False averages them. Subclasses implement ``_compute`` which
    returns a LossOut for a prediction/target pair.
    """

    def __init__(self, reduction: Optional[Reduction] = None):
        self.reduction = default_reduction() if reduction is None else reduction

    @property
    def reduction(self) -> bool:
        return self._reduction

    @reduction.setter
    def reduction(self, value: Reduction):
        self._reduction = check_reduction(value)

    def _compute(self, prediction, target, return_grad):
        raise NotImplementedError

    def __call__(self, prediction, target):
        return self.forward(prediction, target)

    def forward(self, prediction, target) -> float:
        return self._compute(prediction, target, return_grad=False).value

    def backward(self, prediction, target, out=None) -> np.ndarray:
        """
        Gradient of forward() w.r.t. prediction.

        If ``out`` is given the gradient is written into it (it must have the
        prediction's shape) and ``out`` is returned.
        """
        grad = self._compute(prediction, target, return_grad=True).grad
        out = prepare_out(out, grad.shape)
        if out is None:
            return grad
        # float64 -> float32 is fine, float -> int raises
        np.copyto(out, grad, casting="same_kind")
        return out

    def get_config(self) -> dict:
        return {
            "module": self.__class__.__module__,
            "class": self.__class__.__name__,
            "version": CONFIG_VERSION,
            "params": {"reduction": self.reduction},
        }

    @classmethod
    def from_config(cls, config: dict) -> "Loss":
        try:
            module = importlib.import_module(config["module"])
            klass = getattr(module, config["class"])
        except (KeyError, ImportError, AttributeError) as e:
            raise SerializationError(f"cannot resolve loss class from config {config!r}") from e

        if not (isinstance(klass, type) and issubclass(klass, Loss)):
            raise SerializationError(f"{config['module']}.{config['class']} is not a Loss")
        if not issubclass(klass, cls):
            raise SerializationError(f"{klass.__name__} is not a {cls.__name__}")
        version = config.get("version", CONFIG_VERSION)
        if not isinstance(version, int) or version > CONFIG_VERSION:
            raise SerializationError(
                f"unsupported config version {version!r}, this library reads up to version {CONFIG_VERSION}"
            )

        try:
            obj = klass(**config.get("params", {}))
        except TypeError as e:
            raise SerializationError(f"bad params for {klass.__name__}: {e}") from e
        logger.debug("Restored %r from config", obj)
        return obj

    def __eq__(self, other):
        return type(self) is type(other) and self.reduction == other.reduction

    def __hash__(self):
        return hash((type(self).__name__, self.reduction))

    def __repr__(self):
        return f"{self.__class__.__name__}(reduction={self.reduction})"