# src/nnloss/losses/__init__.py
from .base import CONFIG_VERSION, Loss, LossOut
from .classification import NegativeLogLikelihood, negative_log_likelihood
from .hinge import HingeEmbeddingLoss, SquaredHingeLoss, hinge_embedding, squared_hinge
from .reductions import Reduction, apply_reduction, check_reduction, reduce_grad
from ..errors import ConfigurationError

# name -> class, used by get() and config-driven construction
LOSSES = {
    "hinge_embedding": HingeEmbeddingLoss,
    "negative_log_likelihood": NegativeLogLikelihood,
    "nll": NegativeLogLikelihood,
    "squared_hinge": SquaredHingeLoss,
}


def get(identifier, **kwargs):
    if isinstance(identifier, Loss):
        if kwargs:
            raise ConfigurationError("keyword arguments given together with a Loss instance")
        return identifier
    if isinstance(identifier, type) and issubclass(identifier, Loss):
        return identifier(**kwargs)
    if isinstance(identifier, str):
        key = identifier.strip().lower().replace("-", "_").replace(" ", "_")
        if key in LOSSES:
            return LOSSES[key](**kwargs)
    raise ConfigurationError(f"unknown loss {identifier!r}, expected one of {sorted(LOSSES)}")


__all__ = [
    "CONFIG_VERSION",
    "Loss",
    "LossOut",
    "Reduction",
    "HingeEmbeddingLoss",
    "NegativeLogLikelihood",
    "SquaredHingeLoss",
    "hinge_embedding",
    "negative_log_likelihood",
    "squared_hinge",
    "apply_reduction",
    "check_reduction",
    "reduce_grad",
    "LOSSES",
    "get",
]
