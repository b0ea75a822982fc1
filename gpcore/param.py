# File: param.py

"""
param.py: Parameters
"""

import torch
from torch.distributions.transforms import ComposeTransform


class Param(torch.nn.Parameter):
    """
    Hyperparameter of a kernel, extending the PyTorch Parameter class with:
    1) The .transform() member function, which maps the stored (unconstrained)
        data to the constrained value the kernel uses.  Use
        torch.distributions.transforms classes for this.
    2) the .prior member, for incorporation into joint log-probabilities (e.g.
        when scoring hyperparameters)
    """

    def __new__(cls, data=None, requires_grad=True, transform=None, prior=None):
        transform = Param._validate_transform(transform)
        data = transform.inv(data)
        return super().__new__(cls, data, requires_grad=requires_grad)

    def __init__(self, data, requires_grad=True, transform=None, prior=None):
        super().__init__()
        self._transform = Param._validate_transform(transform)
        self.prior = prior

    def transform(self):
        return self._transform(self)

    def set_value(self, value):
        """
        Assign a constrained value; the unconstrained data is updated in place.
        """
        value = torch.as_tensor(value, dtype=self.dtype, device=self.device)
        with torch.no_grad():
            self.data = self._transform.inv(value.expand_as(self.data)).clone()

    def __repr__(self):
        return "Parameter containing:" + self.data.__repr__()

    @staticmethod
    def _validate_transform(t):
        """
        Ensure that the provided transform can be evaluated.

        :param t: The transform to be validated

        :return: (torch.distributions.Transform) a valid transform.
        """

        return ComposeTransform([]) if t is None else t
