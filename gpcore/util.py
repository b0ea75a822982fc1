#
# Utilities: tensor conversion and distances
import torch
import numpy as np


TensorType = torch.DoubleTensor
torch_dtype = torch.double


def as_tensor(x):
    """
    Convert a numpy array (or a python number / sequence) into a Tensor of
    the package dtype.

    Args:
        x (np.ndarray, torch.Tensor, float, list)
    Returns:
        (TensorType)
    """
    if isinstance(x, torch.Tensor):
        return x.to(torch_dtype)
    if isinstance(x, np.ndarray):
        return torch.from_numpy(np.asarray(x, dtype=np.float64))
    elif isinstance(x, (float, int)):
        return torch.tensor([float(x)], dtype=torch_dtype)
    elif isinstance(x, (list, tuple)):
        return torch.tensor(x, dtype=torch_dtype)
    else:
        raise TypeError("Unsupported type {}".format(type(x)))


def as_matrix(x):
    """
    Rows are points.  A 1D input is a single point and becomes a [1 x d]
    matrix; a scalar becomes [1 x 1].

    :return: (matrix, was_single_point)
    """
    x = as_tensor(x)
    if x.ndimension() == 0:
        return x.reshape(1, 1), True
    if x.ndimension() == 1:
        return x[None, :], True
    if x.ndimension() == 2:
        return x, False
    raise ValueError("Expected a point or a matrix of points, got shape {}".format(
        tuple(x.shape)))


def squared_distance(x1: TensorType, x2: TensorType = None) -> TensorType:
    """
    Given points x1 [n1 x d] and x2 [n2 x d], return a [n1 x n2] matrix with
    the pairwise squared distances between the points.

    Entry (i, j) is sum_{k=1}^d (x_1[i, k] - x_2[j, k]) ^ 2

    The differences are formed explicitly so that coincident points give an
    exact zero and squared_distance(x) is exactly symmetric.
    """
    if x2 is None:
        x2 = x1
    return (x1[:, None, :] - x2[None, :, :]).pow(2).sum(-1)
