# File: __init__.py

"""
GP engines.

GaussianProcess implements exact Gaussian process regression on top of the
shared sample / noise / core-matrix handling in GPModel.
"""

from .base import GPModel
from .gpr import GaussianProcess
