# File: samples.py

"""
samples.py: the ordered store of training (input, output) pairs
"""

import torch

from .errors import check_dimension
from .util import as_tensor, torch_dtype


class SampleStore(object):
    """
    Append-only sequence of samples.  Insertion order is the row order of the
    input matrix, the label matrix and every matrix the engine derives from
    them.

    The first sample fixes the input and output dimensions unless they are
    given up front.
    """

    def __init__(self, input_dim=None, output_dim=None):
        self._input_dim = input_dim
        self._output_dim = output_dim
        self._x, self._y = [], []
        self._matrices = None

    def __len__(self):
        return len(self._x)

    @property
    def input_dimension(self):
        return self._input_dim

    @property
    def output_dimension(self):
        return self._output_dim

    def append(self, x, y):
        x, y = as_tensor(x).flatten(), as_tensor(y).flatten()
        if self._input_dim is not None:
            check_dimension("Sample input", x.numel(), self._input_dim)
        if self._output_dim is not None:
            check_dimension("Sample output", y.numel(), self._output_dim)
        self._input_dim, self._output_dim = x.numel(), y.numel()

        self._x.append(x.detach().clone())
        self._y.append(y.detach().clone())
        self._matrices = None

    def extend(self, x, y):
        """
        Append every row of x [n x dx] / y [n x dy].
        """
        x, y = as_tensor(x), as_tensor(y)
        if x.ndimension() == 1:
            x = x[:, None]
        if y.ndimension() == 1:
            y = y[:, None]
        if not x.shape[0] == y.shape[0]:
            raise ValueError("X and Y must have same # data.")
        for xi, yi in zip(x, y):
            self.append(xi, yi)

    def clear(self):
        self._x, self._y = [], []
        self._matrices = None

    @property
    def inputs(self):
        """
        Input matrix [n x dx]
        """
        return self._build()[0]

    @property
    def labels(self):
        """
        Label matrix Y [n x dy]
        """
        return self._build()[1]

    def _build(self):
        if self._matrices is None:
            if len(self) == 0:
                self._matrices = (
                    torch.zeros(0, self._input_dim or 0, dtype=torch_dtype),
                    torch.zeros(0, self._output_dim or 0, dtype=torch_dtype),
                )
            else:
                self._matrices = (torch.stack(self._x), torch.stack(self._y))
        return self._matrices
