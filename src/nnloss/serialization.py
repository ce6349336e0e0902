# src/nnloss/serialization.py
"""
Saving and restoring losses

A loss only carries its reduction flag, so the stored form is the small
dict returned by Loss.get_config(), written as YAML.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import yaml

from .errors import SerializationError
from .losses.base import Loss

logger = logging.getLogger(__name__)


def dumps(loss: Loss) -> str:
    if not isinstance(loss, Loss):
        raise SerializationError(f"expected a Loss, got {type(loss).__name__}")
    return yaml.safe_dump(loss.get_config(), sort_keys=False)


def loads(text: str) -> Loss:
    try:
        config = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SerializationError(f"invalid YAML: {e}") from e
    if not isinstance(config, dict):
        raise SerializationError(f"expected a mapping, got {type(config).__name__}")
    return Loss.from_config(config)


def save(loss: Loss, path: Union[str, Path]) -> Path:
    path = Path(path)
    text = dumps(loss)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(text)
    logger.info("Saved %r to %s", loss, path)
    return path


def load(path: Union[str, Path]) -> Loss:
    path = Path(path)
    with open(path, "r") as f:
        loss = loads(f.read())
    logger.info("Loaded %r from %s", loss, path)
    return loss
