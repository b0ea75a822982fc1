# File: kernels.py

"""
Implementation of kernels for GP

Every kernel maps a pair of input vectors to a scalar covariance.  The engine
uses the batched form ``K(X, X2)`` (rows of X are points); ``evaluate(x1, x2)``
is the single-pair form.  A kernel that only knows how to evaluate one pair
may override ``evaluate`` alone and inherits a pairwise ``K``.
"""

import math

import torch
import numpy as np

from .util import as_tensor, squared_distance, torch_dtype
from .model import Model
from .param import Param
from .settings import DefaultPositiveTransform


def _k_shape(X, X2):
    """
    Shape of a kernel with these inputs
    """
    return (X.size(0),) * 2 if X2 is None else (X.size(0), X2.size(0))


def _positive_param(value):
    return Param(
        torch.tensor(np.atleast_1d(value), dtype=torch_dtype),
        transform=DefaultPositiveTransform(),
    )


def _fmt(p):
    v = p.transform().detach().cpu().numpy()
    return "{:g}".format(v[0]) if v.size == 1 else np.array2string(v, precision=4)


class Kernel(Model):
    """
    Base class for kernels
    """

    def __init__(self, input_dim):
        self.input_dim = int(input_dim)
        super(Kernel, self).__init__()

    def __add__(self, other):
        return Sum(self, other)

    def __mul__(self, other):
        return Product(self, other)

    def __str__(self):
        return self.__class__.__name__

    def evaluate(self, x1, x2):
        """
        Covariance between two single points (1D vectors).

        :return: 0-dimensional tensor
        """
        x1, x2 = as_tensor(x1).reshape(1, -1), as_tensor(x2).reshape(1, -1)
        return self.K(x1, x2)[0, 0]

    def K(self, X, X2=None):
        """
        Kernel matrix by pairwise evaluation.  When X2 is None only the upper
        triangle is evaluated and mirrored.
        """
        out = torch.zeros(*_k_shape(X, X2), dtype=torch_dtype, device=X.device)
        if X2 is None:
            for i in range(X.size(0)):
                for j in range(i, X.size(0)):
                    out[i, j] = self.evaluate(X[i], X[j])
                    out[j, i] = out[i, j]
        else:
            for i in range(X.size(0)):
                for j in range(X2.size(0)):
                    out[i, j] = self.evaluate(X[i], X2[j])
        return out

    def Kdiag(self, X):
        return torch.stack([self.evaluate(x, x) for x in X])

    def _validate_ard_shape(self, x, ARD=None):
        """
        Validates the shape of a potentially ARD hyperparameter

        :param x: A scalar or an array.
        :param ARD: None, False, or True. If None, infers ARD from value.
        :return: Tuple (value, ARD),
            val is a 1D np.ndarray
            ARD is a bool
        """
        if ARD is None:
            ARD = np.asarray(x).squeeze().shape != ()

        x = x * np.ones(self.input_dim)
        correct_shape = (self.input_dim,)

        if x.shape != correct_shape:
            raise ValueError("shape of possibly-ARD param does not match input_dim")

        return x, ARD


class Static(Kernel):
    """
    Kernels that don't depend on the value of the inputs are 'Static'.  The only
    parameter is a variance.
    """

    def __init__(self, input_dim, variance=1.0):
        super().__init__(input_dim)
        self.variance = _positive_param(variance)

    def __str__(self):
        return "{}(variance={})".format(self.__class__.__name__, _fmt(self.variance))

    def Kdiag(self, X):
        return self.variance.transform().expand(X.size(0))


class White(Static):
    """
    The White kernel: variance on coincident points of the same set, zero
    elsewhere.
    """

    def K(self, X, X2=None):
        if X2 is None:
            return torch.diag(self.variance.transform().expand(X.size(0)))
        else:
            return torch.zeros(*_k_shape(X, X2), dtype=torch_dtype, device=X.device)


class Constant(Static):
    """
    The Constant (aka Bias) kernel
    """

    def K(self, X, X2=None):
        return self.variance.transform().expand(*_k_shape(X, X2))


class Stationary(Kernel):
    """
    Base class for stationary kernels, which only depend on r = || x - x'||
    This class handles 'ARD' behaviour, which stands for 'Automatic Relevance
    Determination'. This means that the kernel has one lengthscale per
    dimension, otherwise the kernel is isotropic (has a single lengthscale).
    """

    def __init__(self, input_dim, variance=1.0, length_scales=None, ARD=False):
        """
        Args:
            input_dim (int): the dimension of the input
            variance (float): initial value for the signal variance
            length_scales (float or np.ndarray): initial value for length scale
                defaults to 1.0 (ARD=False) or np.ones(input_dim) (ARD=True)
            ARD (bool): ARD specifies whether the kernel has one length scale
                per dimension (ARD=True) or a single length scale (ARD=False).
        """
        super(Stationary, self).__init__(input_dim)
        self.variance = _positive_param(variance)
        self.ARD = ARD
        if ARD:
            if length_scales is None:
                length_scales = np.ones(input_dim)
            length_scales, _ = self._validate_ard_shape(length_scales, ARD=True)
        elif length_scales is None:
            length_scales = 1.0
        self.length_scales = _positive_param(length_scales)

    def __str__(self):
        return "{}(variance={}, length_scales={})".format(
            self.__class__.__name__, _fmt(self.variance), _fmt(self.length_scales)
        )

    def squared_dist(self, X, X2):
        """
        Returns the SCALED squared distance between X and X2.
        """
        ell = self.length_scales.transform()
        return squared_distance(X / ell) if X2 is None else \
            squared_distance(X / ell, X2 / ell)

    def dist(self, X, X2):
        """
        Matrix of (scaled) Euclidean distances between points.

        Args:
            X: Matrix of vectors
            X2: (Optional) matrix of vectors.  If None, X2 = X.
        Returns:
            entry (i, j) is the distance between X[i, :] and X2[j, :]
        """
        # Clamp to slightly positive so that the gradient of sqrt(x) is finite
        return torch.sqrt(torch.clamp(self.squared_dist(X, X2), min=1e-40))

    def Kdiag(self, X):
        return self.variance.transform().expand(X.size(0))


class Exp(Stationary):
    """
    Exponential Kernel

    k(x, y; variance, length_scale) = variance * exp(-|x-y| / length_scale)
    """

    def K(self, X, X2=None):
        return self.variance.transform() * torch.exp(-self.dist(X, X2))


class Matern12(Exp):
    pass


class Matern32(Stationary):
    def K(self, X, X2=None):
        r3 = math.sqrt(3.0) * self.dist(X, X2)
        return self.variance.transform() * (1.0 + r3) * torch.exp(-r3)


class Matern52(Stationary):
    def K(self, X, X2=None):
        r = self.dist(X, X2)
        s5 = math.sqrt(5.0)
        return (
            self.variance.transform()
            * (1.0 + s5 * r + 5.0 / 3.0 * r * r)
            * torch.exp(-s5 * r)
        )


class Gaussian(Stationary):
    """
    The Gaussian kernel, also known as Radial Basis Function (RBF) or Squared
    Exponential

    k(x, y) = variance * exp(-|x-y|^2 / (2 * length_scale^2))
    """

    def K(self, X, X2=None):
        r2 = self.squared_dist(X, X2)
        return self.variance.transform() * torch.exp(-r2 / 2.0)


Rbf = Gaussian
SquaredExponential = Gaussian


class Periodic(Stationary):
    """
    Periodic kernel,

    k(x, y) = variance * exp(-2 sin^2(pi |x-y| / period) / length_scale^2)
    """

    def __init__(self, input_dim, variance=1.0, length_scales=None, period=1.0):
        super().__init__(input_dim, variance=variance, length_scales=length_scales)
        self.period = _positive_param(period)

    def __str__(self):
        return "{}(variance={}, length_scales={}, period={})".format(
            self.__class__.__name__,
            _fmt(self.variance),
            _fmt(self.length_scales),
            _fmt(self.period),
        )

    def K(self, X, X2=None):
        r = torch.sqrt(torch.clamp(squared_distance(X, X2), min=1e-40))
        s = torch.sin(math.pi * r / self.period.transform())
        return self.variance.transform() * torch.exp(
            -2.0 * s * s / self.length_scales.transform().pow(2)
        )


class Linear(Kernel):
    """
    The linear kernel
    """

    def __init__(self, input_dim, variance=1.0, ARD=None):
        """
        - input_dim is the dimension of the input to the kernel
        - variance is the (initial) value for the variance parameter(s)
          if ARD=True, there is one variance per input
        """
        super().__init__(input_dim)

        variance, self.ARD = self._validate_ard_shape(variance, ARD)
        if not self.ARD:
            variance = variance[:1]
        self.variance = _positive_param(variance)

    def __str__(self):
        return "Linear(variance={})".format(_fmt(self.variance))

    def K(self, X, X2=None):
        X2 = X if X2 is None else X2
        return (X * self.variance.transform()) @ X2.t()

    def Kdiag(self, X):
        return torch.sum(X * X * self.variance.transform(), 1)


class Combination(Kernel):
    """
    A combination of two kernels (e.g. Sum or Product)

    Use Combinations of Combinations to build more expressive kernels.
    """

    _symbol = None

    def __init__(self, kern1, kern2):
        if not kern1.input_dim == kern2.input_dim:
            raise ValueError("Kernels need the same input_dim")
        super().__init__(input_dim=kern1.input_dim)

        self.kern1 = kern1
        self.kern2 = kern2

    def __str__(self):
        return "({} {} {})".format(self.kern1, self._symbol, self.kern2)


class Product(Combination):
    """
    Product kernel
    """

    _symbol = "*"

    def K(self, X, X2=None):
        return self.kern1.K(X, X2) * self.kern2.K(X, X2)

    def Kdiag(self, X):
        return self.kern1.Kdiag(X) * self.kern2.Kdiag(X)


class Sum(Combination):
    _symbol = "+"

    def K(self, X, X2=None):
        return self.kern1.K(X, X2) + self.kern2.K(X, X2)

    def Kdiag(self, X):
        return self.kern1.Kdiag(X) + self.kern2.Kdiag(X)
