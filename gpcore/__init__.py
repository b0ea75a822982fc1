# File: __init__.py

from . import settings
from . import errors
from . import util
from . import functions
from . import model
from . import param
from . import kernels
from . import samples
from . import likelihoods
from . import sampling
from . import optimize

from . import models

from .errors import (
    ErrorKind,
    GPError,
    UninitializedError,
    DegenerateMatrixError,
    DimensionMismatchError,
    NumericalInstabilityError,
)
from .likelihoods import GaussianLogLikelihood
from .models import GaussianProcess
from .sampling import PosteriorSampler
from .settings import get_settings

__version__ = "0.1.0"
