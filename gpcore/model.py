"""
Basic model class for the GP objects (kernels, likelihoods, GP engines),
inheriting from :class:`torch.nn.Module`.
"""

import torch
import numpy as np

from .param import Param


def _addindent(s_, numSpaces):
    s = s_.split("\n")
    # dont do anything for single-line stuff
    if len(s) == 1:
        return s_
    first = s.pop(0)
    s = [(numSpaces * " ") + line for line in s]
    s = "\n".join(s)
    s = first + "\n" + s
    return s


class Model(torch.nn.Module):
    """
    Customized Model class for all GP objects
    """

    def forward(self):
        return None

    def __repr__(self):
        tmpstr = self.__class__.__name__ + " (\n"
        for name, param in self._parameters.items():
            value = param.transform() if isinstance(param, Param) else param
            tmpstr = tmpstr + name + "\n" + str(value.data) + "\n"
        for key, module in self._modules.items():
            modstr = module.__repr__()
            modstr = _addindent(modstr, 2)
            tmpstr = tmpstr + "  (" + key + "): " + modstr + "\n"
        tmpstr = tmpstr + ")" + "\n"
        return tmpstr

    # Flattening to and from a 1D array, for scipy.optimize.minimize
    def _get_param_array(self):
        """Returns a 1D array by flattening and concatenating all the trainable
        parameters in the model (in their unconstrained form).
        """
        param_array = [
            param.detach().cpu().numpy().flatten()
            for param in self.parameters()
            if param.requires_grad
        ]
        if len(param_array) == 0:
            return np.zeros(0)
        return np.concatenate(param_array)

    def _set_parameters(self, param_array):
        """Set the parameters from a parameter array in the format of
        the return of _get_param_array().
        """
        idx_current = 0
        for param in self.parameters():
            if param.requires_grad:
                idx_next = idx_current + param.numel()
                param_in = torch.as_tensor(
                    np.reshape(param_array[idx_current:idx_next], param.shape),
                    dtype=param.dtype,
                    device=param.device,
                )
                param.data = param_in
                idx_current = idx_next
        if idx_current != len(param_array):
            raise ValueError(
                "Parameter array has {} entries, model has {}".format(
                    len(param_array), idx_current
                )
            )

    def log_prior(self):
        """
        Compute the log prior of the model

        Searches through all of the model's parameters and evaluates the
        log-probability on everything that has a prior.

        :return: (TensorType) The log-prior
        """

        log_prior = torch.zeros((), dtype=torch.double)
        for param in self.parameters():
            if getattr(param, "prior", None) is not None:
                val = param.transform() if isinstance(param, Param) else param.data
                log_prior = log_prior + param.prior.log_prob(val).sum()

        return log_prior
