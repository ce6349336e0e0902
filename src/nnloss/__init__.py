# src/nnloss/__init__.py
import logging

from . import config
from .errors import (
    ConfigurationError,
    InvalidTargetError,
    LossError,
    SerializationError,
    ShapeMismatchError,
    TargetClassOutOfRange,
)
from .losses import (
    HingeEmbeddingLoss,
    Loss,
    LossOut,
    NegativeLogLikelihood,
    SquaredHingeLoss,
    get,
    hinge_embedding,
    negative_log_likelihood,
    squared_hinge,
)
from .gradcheck import check_gradient, numerical_gradient
from .logger import setup_logging
from .serialization import dumps, load, loads, save

logging.getLogger(__name__).addHandler(logging.NullHandler())

config.load_config()

__version__ = "0.1.0"
