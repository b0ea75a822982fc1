# File: base.py

"""
base.py: State handling shared by GP engines (samples, noise, cached core
matrix)
"""

import functools

import torch

from ..errors import UninitializedError, check_dimension
from ..model import Model
from ..samples import SampleStore
from ..settings import get_logger
from ..util import as_matrix, as_tensor

logger = get_logger()


def _to_numpy(out):
    if isinstance(out, torch.Tensor):
        out = out.detach().cpu().numpy()
        return out.item() if out.ndim == 0 else out
    elif isinstance(out, tuple):
        return tuple([_to_numpy(o) for o in out])
    else:
        raise NotImplementedError("Unhandled output type {}".format(type(out)))


def input_as_tensor(n_inputs=1):
    """
    Decorator for prediction funtions to ensure that the first n_inputs
    positional arguments are tensors before they reach the GP math.

    If any of them was not a tensor (numpy array, list, float), the outputs are
    returned as numpy arrays (python floats for scalars).  Predictions never
    build an autograd graph.

    :param n_inputs: how many leading positional arguments are query points
    """

    def decorator(predict_func):
        @functools.wraps(predict_func)
        def predict(obj, *args, **kwargs):
            inputs, rest = args[:n_inputs], args[n_inputs:]
            from_numpy = any(not isinstance(x, torch.Tensor) for x in inputs)
            inputs = tuple([as_tensor(x) for x in inputs])
            with torch.no_grad():
                out = predict_func(obj, *(inputs + rest), **kwargs)
            return _to_numpy(out) if from_numpy else out

        return predict

    return decorator


class GPModel(Model):
    """
    The base class for GP engines.

    Owns the sample store, the observation noise sigma and the cached core
    matrix.  The cache is built by initialize() and dropped whenever the
    samples or sigma change; queries against a dropped cache raise
    UninitializedError.
    """

    def __init__(self, kernel, x=None, y=None, sigma=0.0, name="gp"):
        """
        Args:
            kernel (gpcore.kernels.Kernel):
            x (ndarray, optional): initial inputs, N x dx
            y (ndarray, optional): initial outputs, N x dy
            sigma (float): observation noise added to the kernel diagonal
            name (string): name of this model
        """

        super().__init__()
        self.kernel = kernel
        self._samples = SampleStore(input_dim=kernel.input_dim)
        self._sigma = 0.0
        self._core = None
        self._core_parameters = None
        self.name = name

        self.set_sigma(sigma)
        if x is not None or y is not None:
            if x is None or y is None:
                raise ValueError("Provide both x and y, or neither")
            self.add_samples(x, y)

    @property
    def num_data(self):
        return len(self._samples)

    @property
    def input_dimension(self):
        return self._samples.input_dimension

    @property
    def output_dimension(self):
        return self._samples.output_dimension

    @property
    def X(self):
        return self._samples.inputs

    @property
    def Y(self):
        return self._samples.labels

    @property
    def sigma(self):
        return self._sigma

    @sigma.setter
    def sigma(self, value):
        self.set_sigma(value)

    @property
    def initialized(self):
        return self._core is not None and not self._parameters_changed()

    def set_sigma(self, value):
        value = float(value)
        if value < 0.0:
            raise ValueError("Noise sigma must be nonnegative, got {}".format(value))
        if value != self._sigma:
            self.invalidate()
        self._sigma = value

    def add_sample(self, x, y):
        """
        Append one (input, output) pair.  Invalidates the core matrix.
        """
        self._samples.append(x, y)
        self.invalidate()

    def add_samples(self, x, y):
        """
        Append each row of x, y.  Invalidates the core matrix.
        """
        self._samples.extend(x, y)
        self.invalidate()

    def clear_samples(self):
        self._samples.clear()
        self.invalidate()

    def invalidate(self):
        self._core = None

    def initialize(self):
        """
        Freeze the current samples and build the derived state.

        Call again after changing samples, sigma or kernel parameters.
        """
        if self.num_data == 0:
            raise UninitializedError("{}: cannot initialize without samples".format(
                self.name))
        with torch.no_grad():
            self._core = self._compute_core_matrix()
        self._core_parameters = [p.detach().clone() for p in self.parameters()]
        logger.debug(
            "%s: initialized with %d samples (sigma=%g, cholesky=%s)",
            self.name, self.num_data, self._sigma, self._core.cholesky
        )
        return self

    def label_matrix(self):
        """
        Label matrix Y [n x dy] of the frozen samples
        """
        self._require_initialized()
        return self.Y

    def core_matrix_and_determinant(self):
        """
        :return: (gpcore.functions.CoreMatrix) inv(K + sigma * I) with the
            determinant of K + sigma * I
        """
        self._require_initialized()
        return self._core

    def _compute_core_matrix(self):
        raise NotImplementedError()

    def _parameters_changed(self):
        """
        True if a kernel parameter was changed after initialize()
        """
        if self._core_parameters is None:
            return False
        return any(
            not torch.equal(old, p.detach())
            for old, p in zip(self._core_parameters, self.parameters())
        )

    def _require_initialized(self):
        if self._core is None:
            raise UninitializedError(
                "{}: call initialize() before querying the model "
                "(samples or sigma changed since the last call)".format(self.name)
            )
        if self._parameters_changed():
            raise UninitializedError(
                "{}: kernel parameters changed since initialize()".format(
                    self.name)
            )

    def _check_inputs(self, x, name="Query point"):
        """
        :return: ([m x dx] tensor, whether x was a single point)
        """
        x, single = as_matrix(x)
        check_dimension(name, x.shape[1], self.input_dimension)
        return x, single

    def __str__(self):
        return "{}(kernel={}, sigma={:g}, num_data={})".format(
            self.name, self.kernel, self._sigma, self.num_data)
