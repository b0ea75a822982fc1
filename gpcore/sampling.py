# File: sampling.py

"""
sampling.py: Correlated draws from a Gaussian posterior over a finite set of
points.

The posterior covariance K over m points is factored with a symmetric
eigendecomposition.  Components whose eigenvalue does not exceed a small
threshold are the numerical null space of K and are dropped, which leaves

    Q = V diag(sqrt(lambda)),    Q Q^T ~= K

and a draw is Q z + mean with z standard normal of length rank(Q).  Points
where the posterior is certain (training inputs of a noiseless GP) get no
weight from the kept components, so every draw equals the mean there.
"""

from collections import namedtuple

import torch

from .errors import check_dimension, numerical_instability
from .settings import get_settings
from .util import as_tensor, torch_dtype


EigenDecomposition = namedtuple(
    "EigenDecomposition", ("eigenvalues", "eigenvectors", "factor")
)


def truncated_eigh(covariance, threshold=None):
    """
    Eigenpairs of a symmetric matrix with eigenvalue > threshold, in descending
    order of eigenvalue.

    :param covariance: [m x m] symmetric matrix
    :param threshold: defaults to settings.eigenvalue_threshold
    :return: (EigenDecomposition) eigenvalues [r], eigenvectors [m x r] and the
        square-root factor Q [m x r]
    """
    threshold = get_settings().eigenvalue_threshold if threshold is None \
        else threshold
    evals, evecs = torch.linalg.eigh(covariance)
    evals, evecs = evals.flip(-1), evecs.flip(-1)
    keep = evals > threshold
    evals, evecs = evals[keep], evecs[:, keep]
    return EigenDecomposition(evals, evecs, evecs * evals.sqrt())


def _as_generator(generator):
    if isinstance(generator, torch.Generator):
        return generator
    g = torch.Generator()
    if generator is None:
        g.seed()
    else:
        g.manual_seed(int(generator))
    return g


class PosteriorSampler(object):
    """
    Draws from N(mean, covariance) through a truncated eigendecomposition.

    Args:
        mean: [m] or [m x dy] posterior mean
        covariance: [m x m] posterior covariance (shared by the dy outputs)
        threshold (float): eigenvalue cut-off, defaults to
            settings.eigenvalue_threshold
        generator (torch.Generator or int): source of the standard normal
            deviates.  An int seeds a new generator; None makes a randomly
            seeded one.  The global torch RNG is never used.
        check (bool): verify the factor reproduces the covariance (see check())
    """

    def __init__(self, mean, covariance, threshold=None, generator=None,
            check=True):
        self.mean = as_tensor(mean)
        self.covariance = as_tensor(covariance)
        if self.covariance.ndimension() != 2 or \
                self.covariance.shape[0] != self.covariance.shape[1]:
            raise ValueError("Covariance must be a square matrix")
        check_dimension("Posterior mean", self.mean.shape[0],
            self.covariance.shape[0])

        self.generator = _as_generator(generator)
        self.decomposition = truncated_eigh(self.covariance, threshold=threshold)
        if check:
            self.check()

    @classmethod
    def from_model(cls, gp, x, **kwargs):
        """
        Sampler for the posterior of an initialized GP at the points x.
        """
        x = as_tensor(x)
        return cls(gp.predict(x), gp.covariance_matrix(x), **kwargs)

    @property
    def rank(self):
        return self.decomposition.eigenvalues.shape[0]

    @property
    def factor(self):
        return self.decomposition.factor

    def residual(self):
        """
        Frobenius norm of Q Q^T - K
        """
        q = self.factor
        return torch.linalg.norm(q @ q.t() - self.covariance).item()

    def check(self, tolerance=None):
        """
        Report (raise, or warn when settings are not strict) if the factor does
        not reproduce the covariance to within tolerance.

        :return: the residual
        """
        tolerance = get_settings().decomposition_tolerance if tolerance is None \
            else tolerance
        err = self.residual()
        if not err <= tolerance:
            numerical_instability(
                "Eigendecomposition not accurate enough (error {:g}, "
                "tolerance {:g})".format(err, tolerance)
            )
        return err

    def sample(self, z):
        """
        Q z + mean for externally supplied standard normal deviates.

        :param z: [rank] (or [rank x dy] when the mean is a matrix)
        """
        z = as_tensor(z)
        check_dimension("Noise vector", z.shape[0], self.rank)
        return self.factor @ z + self.mean

    def draw(self, n_samples=1):
        """
        :return: [n_samples x m] (or [n_samples x m x dy]) correlated draws
        """
        z = torch.randn(
            n_samples, self.rank, *self.mean.shape[1:],
            generator=self.generator, dtype=torch_dtype
        )
        return torch.stack([self.sample(zi) for zi in z])
