#
# Gaussian process regression engine

"""
Exact Gaussian process regression.

With training inputs X, labels Y, kernel k and noise sigma, the core matrix is
C = inv(K + sigma * I) with K[i, j] = k(x_i, x_j).  For query points x, x':

    mean(x)       = Y^T C k(x)
    cov(x, x')    = k(x, x') - k(x)^T C k(x')
    interval(x)   = factor * sqrt(cov(x, x))

where k(x) is the vector of k(x, x_i) over the training inputs.
"""

import numpy as np
import torch

from ..functions import compute_core_matrix, mirror_upper
from ..errors import numerical_instability
from ..sampling import PosteriorSampler
from ..settings import get_settings
from ..util import as_tensor
from .base import GPModel, input_as_tensor


class GaussianProcess(GPModel):
    """
    Gaussian Process Regression
    """

    def __init__(self, kernel, x=None, y=None, sigma=0.0, name="gpr"):
        """
        Args:
            kernel (Kernel): The kernel function for computing the covariance
                matrices
            x (np.ndarray or TensorType, optional): the observed inputs, one
                datum per row (# columns = input dimensionality)
            y (np.ndarray or TensorType, optional): the observed outputs, one
                datum per row (# columns = output dimensionality)
            sigma (float): observation noise variance, >= 0
        """

        super().__init__(kernel, x=x, y=y, sigma=sigma, name=name)

    def _compute_core_matrix(self):
        return compute_core_matrix(self.X, self.kernel, self.sigma)

    def forward(self, x1, x2):
        """
        gp(x1, x2) is the posterior covariance between two points.
        """
        return self.covariance(x1, x2)

    def _cross_covariance(self, x1, x2=None):
        """
        k(x1, x2) - k(x1)^T C k(x2) for matrices of points; exactly symmetric
        when x2 is None.
        """
        c = self._core.matrix
        k1 = self.kernel.K(self.X, x1)
        if x2 is None:
            return mirror_upper(self.kernel.K(x1) - k1.t() @ (c @ k1))
        k2 = self.kernel.K(self.X, x2)
        return self.kernel.K(x1, x2) - k1.t() @ (c @ k2)

    def _self_covariance(self, x):
        """
        Diagonal of the posterior covariance at the rows of x
        """
        k = self.kernel.K(self.X, x)
        var = self.kernel.Kdiag(x) - (k * (self._core.matrix @ k)).sum(0)
        return self._check_variance(var)

    @staticmethod
    def _check_variance(var):
        tolerance = get_settings().variance_tolerance
        worst = var.min().item() if var.numel() > 0 else 0.0
        if worst < -tolerance:
            numerical_instability(
                "Negative posterior variance {:g} (tolerance {:g}); the core "
                "matrix has lost positive definiteness".format(worst, tolerance)
            )
        return torch.clamp(var, min=0.0)

    @input_as_tensor()
    def predict(self, x):
        """
        Posterior mean Y^T C k(x).

        :param x: a point [dx] or points [m x dx]
        :return: [dy] for a point, [m x dy] for points
        """
        self._require_initialized()
        x, single = self._check_inputs(x)
        k = self.kernel.K(self.X, x)
        mean = (self._core.matrix @ k).t() @ self.Y
        return mean[0] if single else mean

    @input_as_tensor(2)
    def covariance(self, x1, x2):
        """
        Posterior covariance between two points (a scalar), or between two sets
        of points (a [m1 x m2] matrix).

        The self-covariance of a point, covariance(x, x), is a variance: it is
        checked and floored at 0 like variance(x).
        """
        self._require_initialized()
        x1, single1 = self._check_inputs(x1)
        x2, single2 = self._check_inputs(x2)
        cov = self._cross_covariance(x1, x2)
        if not (single1 and single2):
            return cov
        if torch.equal(x1, x2):
            return self._check_variance(cov[0, 0])
        return cov[0, 0]

    @input_as_tensor()
    def covariance_matrix(self, x):
        """
        Full posterior covariance [m x m] over the points x [m x dx].
        """
        self._require_initialized()
        x, _ = self._check_inputs(x)
        return self._cross_covariance(x)

    @input_as_tensor()
    def variance(self, x):
        """
        Posterior variance (self-covariance) at each point.
        """
        self._require_initialized()
        x, single = self._check_inputs(x)
        var = self._self_covariance(x)
        return var[0] if single else var

    def credible_interval(self, x, factor=None):
        """
        factor * sqrt(cov(x, x)); factor defaults to
        settings.credible_interval_factor.

        For a single point the root is taken of the value covariance(x, x)
        returns, with the square root matching its type (numpy for numpy
        input, torch for tensors), so 2 * sqrt(covariance(x, x)) ==
        credible_interval(x) holds exactly with the default factor.

        :param x: a point [dx] or points [m x dx]
        :return: a scalar for a point, [m] for points
        """
        factor = get_settings().credible_interval_factor if factor is None \
            else factor
        if as_tensor(x).ndimension() <= 1:
            cov = self.covariance(x, x)
            sqrt = torch.sqrt if isinstance(cov, torch.Tensor) else np.sqrt
            return factor * sqrt(cov)
        return factor * self._standard_deviation(x)

    @input_as_tensor()
    def _standard_deviation(self, x):
        self._require_initialized()
        x, _ = self._check_inputs(x)
        return torch.sqrt(self._self_covariance(x))

    @input_as_tensor()
    def sample_posterior(self, x, n_samples=1, generator=None, threshold=None):
        """
        Correlated draws of the latent function at the points x [m x dx].

        :return: [n_samples x m x dy]
        """
        self._require_initialized()
        x, _ = self._check_inputs(x)
        sampler = PosteriorSampler.from_model(
            self, x, generator=generator, threshold=threshold
        )
        return sampler.draw(n_samples)
