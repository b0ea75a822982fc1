"""
Likelihood classes (extend `gpcore.model.Model`).

A likelihood scores an initialized GP engine: it maps the engine to one
log-likelihood value per output dimension.  Hyperparameter searches maximize
it and must be ready to catch `gpcore.errors.DegenerateMatrixError` for
configurations where K + sigma * I is singular.

Likelihoods only read the engine through its narrow interface,
`gp.label_matrix()` and `gp.core_matrix_and_determinant()`.
"""

import abc
import math

import torch

from .errors import DegenerateMatrixError
from .functions import gaussian_normalizer
from .model import Model


class Likelihood(Model):
    """
    Scores a GP engine; likelihood(gp) returns a [dy] tensor.
    """

    def forward(self, gp):
        return self.evaluate(gp)

    @abc.abstractmethod
    def evaluate(self, gp) -> torch.Tensor:
        """
        :param gp: an initialized GP engine
        :return: one log-likelihood value per output dimension
        """

        raise NotImplementedError()

    def __str__(self):
        return self.__class__.__name__


class GaussianLogLikelihood(Likelihood):
    """
    Log marginal likelihood of a GP with Gaussian noise, per output column j:

        -0.5 y_j^T C y_j - 0.5 log det(K + sigma * I) - (n / 2) log(2 pi)

    i.e. data fit, complexity penalty and normalization.  See Rasmussen &
    Williams, GPML (2006), eq. 2.30.
    """

    def evaluate(self, gp):
        y = gp.label_matrix()
        core = gp.core_matrix_and_determinant()

        log_det = core.log_determinant.item()
        if core.sign.item() <= 0.0 or not math.isfinite(log_det):
            raise DegenerateMatrixError(
                "{}: determinant of K + sigma * I is {:g} (must be > 0)".format(
                    self, core.determinant.item())
            )
        # A positive determinant from the LU fallback is rounding noise on a
        # matrix that failed Cholesky
        if not core.cholesky:
            raise DegenerateMatrixError(
                "{}: K + sigma * I is not positive definite (log|det| {:g} "
                "from the pseudo-inverse fallback)".format(self, log_det)
            )

        data_fit = -0.5 * (y * (core.matrix @ y)).sum(0)
        complexity = -0.5 * core.log_determinant
        return data_fit + complexity + gaussian_normalizer(y.shape[0])
