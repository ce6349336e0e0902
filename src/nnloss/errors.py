# src/nnloss/errors.py
"""
Exceptions raised by nnloss

Everything derives from LossError so callers can catch the whole family,
and from the matching builtin (ValueError, IndexError) so plain numpy-style
handling keeps working.
"""


class LossError(Exception):
    pass


class ShapeMismatchError(LossError, ValueError):
    pass


class InvalidTargetError(LossError, ValueError):
    pass


class TargetClassOutOfRange(InvalidTargetError, IndexError):
    # class index outside [0, num_classes)
    def __init__(self, index, num_classes, position=None):
        self.index = index
        self.num_classes = num_classes
        self.position = position
        where = "" if position is None else f" at position {position}"
        super().__init__(
            f"Target class out of range: got {index}{where}, expected 0 <= index < {num_classes}"
        )

    def __reduce__(self):
        # args only holds the message, rebuild from the fields instead
        return (self.__class__, (self.index, self.num_classes, self.position))


class ConfigurationError(LossError, ValueError):
    pass


class SerializationError(LossError):
    pass
