# File: errors.py
# File Created: Saturday, 17th October 2026 10:40:51 am

"""
Structured errors raised by the GP engine.

Every error carries an ``ErrorKind`` so callers (e.g. a hyperparameter search
that wants to skip a bad configuration) can branch on ``err.kind`` or on the
exception class instead of on the message text.
"""

import enum
import warnings

from .settings import get_settings


class ErrorKind(enum.Enum):
    UNINITIALIZED = "uninitialized"
    DEGENERATE_MATRIX = "degenerate_matrix"
    DIMENSION_MISMATCH = "dimension_mismatch"
    NUMERICAL_INSTABILITY = "numerical_instability"


class GPError(Exception):
    """
    Base class for all errors of the engine
    """

    kind = None

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return "[{}] {}".format(self.kind.value, self.message)


class UninitializedError(GPError):
    """
    A query was made before initialize() (or after the samples changed).
    """

    kind = ErrorKind.UNINITIALIZED


class DegenerateMatrixError(GPError):
    """
    det(K + sigma * I) <= 0, i.e. the model configuration is singular.
    """

    kind = ErrorKind.DEGENERATE_MATRIX


class DimensionMismatchError(GPError, ValueError):
    kind = ErrorKind.DIMENSION_MISMATCH


class NumericalInstabilityError(GPError, ArithmeticError):
    """
    The core matrix (or a covariance derived from it) lost positive
    semi-definiteness beyond tolerance.
    """

    kind = ErrorKind.NUMERICAL_INSTABILITY


def numerical_instability(message):
    """
    Raise if settings are strict, otherwise downgrade to a RuntimeWarning.
    """
    if get_settings().strict:
        raise NumericalInstabilityError(message)
    warnings.warn(message, RuntimeWarning, stacklevel=3)


def check_dimension(name, actual, expected):
    if actual != expected:
        raise DimensionMismatchError(
            "{} has dimension {}, expected {}".format(name, actual, expected)
        )
