"""
``gpcore.functions`` contains the linear algebra behind the GP engine: the
Gram matrix, and the "core matrix" inv(K + sigma * I) together with the
determinant of K + sigma * I.
"""

from collections import namedtuple
import math

import torch

from .settings import get_logger
from .util import torch_dtype

logger = get_logger()


CoreMatrix = namedtuple(
    "CoreMatrix", ("matrix", "determinant", "log_determinant", "sign", "cholesky")
)
CoreMatrix.__doc__ = """
Inverse of K + sigma * I and its determinant.

matrix: the (regularized) inverse C
determinant: det(K + sigma * I); may underflow to 0 for large well-posed
    systems, so prefer sign and log_determinant
log_determinant: log|det(K + sigma * I)|
sign: sign of the determinant (1.0, 0.0 or -1.0)
cholesky: True if K + sigma * I was positive definite and C came from its
    Cholesky factor
"""


def lt_log_determinant(L):
    """
    Log-determinant of a triangular matrix

    Args:
        L (TensorType): Lower-triangular matrix to take log-determinant of.
    """
    return L.diagonal(dim1=-2, dim2=-1).log().sum(-1)


def mirror_upper(a: torch.Tensor) -> torch.Tensor:
    """
    Make a square matrix exactly symmetric by copying its upper triangle
    (diagonal included) onto the lower one.
    """
    return torch.triu(a) + torch.triu(a, diagonal=1).transpose(-2, -1)


def gram_matrix(kernel, x: torch.Tensor) -> torch.Tensor:
    """
    K[i, j] = kernel(x[i], x[j]) over all rows of x, symmetric by
    construction.
    """
    return mirror_upper(kernel.K(x))


def compute_core_matrix(x: torch.Tensor, kernel, sigma=0.0) -> CoreMatrix:
    """
    Factor K + sigma * I over the inputs x [n x d].

    Cholesky is used when the matrix is positive definite.  Otherwise the
    determinant comes from an LU factorization (slogdet) and the inverse is the
    SVD-based pseudo-inverse; a non-positive determinant is returned as-is and
    left for the caller to reject.
    """

    n = x.shape[0]
    if n == 0:
        raise ValueError("Cannot compute a core matrix without samples")
    if sigma < 0.0:
        raise ValueError("Noise sigma must be nonnegative, got {}".format(sigma))

    a = gram_matrix(kernel, x)
    a = a + sigma * torch.eye(n, dtype=torch_dtype, device=a.device)

    L, info = torch.linalg.cholesky_ex(a)
    if info.item() == 0:
        c = mirror_upper(torch.cholesky_inverse(L))
        log_det = 2.0 * lt_log_determinant(L)
        sign = torch.ones((), dtype=torch_dtype, device=a.device)
        used_cholesky = True
    else:
        logger.debug(
            "K + sigma * I is not positive definite (n=%d, sigma=%g); "
            "falling back to LU / pseudo-inverse", n, sigma
        )
        sign, log_det = torch.linalg.slogdet(a)
        c = mirror_upper(torch.linalg.pinv(a, hermitian=True))
        used_cholesky = False

    det = sign * torch.exp(log_det)
    return CoreMatrix(c, det, log_det, sign, used_cholesky)


def gaussian_normalizer(n: int) -> float:
    """
    log of (2 pi)^(-n/2)
    """
    return -0.5 * n * math.log(2.0 * math.pi)
