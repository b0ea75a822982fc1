# File: optimize.py

"""
optimize.py: Hyperparameter selection by likelihood.

Both drivers call the likelihood repeatedly, re-initializing the GP for every
configuration.  Configurations for which K + sigma * I is singular raise
DegenerateMatrixError inside the likelihood; they are rejected and the search
carries on.
"""

import itertools
from time import time

import numpy as np
import torch
from scipy.optimize import minimize

from .errors import DegenerateMatrixError
from .settings import get_logger

logger = get_logger()


def _apply(gp, config):
    params = dict(gp.named_parameters())
    for name, value in config.items():
        if name == "sigma":
            gp.set_sigma(value)
        elif name in params:
            params[name].set_value(value)
        else:
            raise KeyError(
                "Unknown hyperparameter {}; expected 'sigma' or one of {}".format(
                    name, sorted(params))
            )
    gp.invalidate()


def _score(gp, likelihood):
    gp.initialize()
    return likelihood(gp).sum().item()


def expand_grid(grid):
    """
    {"kernel.length_scales": [0.5, 1.0], "sigma": [0.0, 0.1]} -> list of the 4
    configurations (dicts) in the cartesian product.
    """
    names = list(grid.keys())
    return [dict(zip(names, values))
            for values in itertools.product(*[grid[n] for n in names])]


def grid_search(gp, likelihood, candidates):
    """
    Evaluate the summed likelihood over a set of configurations and keep the
    best one.

    :param gp: GP engine with samples
    :param likelihood: e.g. gpcore.likelihoods.GaussianLogLikelihood()
    :param candidates: dict of name -> list of values (expanded with
        expand_grid), or an iterable of dicts.  Names are 'sigma' or names from
        gp.named_parameters() (e.g. 'kernel.length_scales'); values are
        constrained (transformed) values.
    :return: (best configuration, best summed log-likelihood)
    """
    if isinstance(candidates, dict):
        candidates = expand_grid(candidates)

    best_config, best_score, rejected = None, -np.inf, 0
    with torch.no_grad():
        for config in candidates:
            _apply(gp, config)
            try:
                score = _score(gp, likelihood)
            except DegenerateMatrixError as e:
                rejected += 1
                logger.debug("Rejecting %s: %s", config, e)
                continue
            if score > best_score:
                best_config, best_score = config, score

        if best_config is None:
            raise DegenerateMatrixError(
                "No candidate configuration gave a nondegenerate model")
        _apply(gp, best_config)
        gp.initialize()

    logger.info("Grid search: best %s (log-likelihood %g, %d rejected)",
        best_config, best_score, rejected)
    return best_config, best_score


def maximize_likelihood(gp, likelihood, method="Nelder-Mead", max_iter=1000,
        tol=None, use_prior=True):
    """
    Maximize the summed likelihood (plus the log-prior of the kernel
    parameters if use_prior) with scipy.optimize.minimize over the
    unconstrained parameter array.  Gradients are not used.

    Degenerate configurations score +inf in the minimized objective, so prefer
    a direct-search method such as Nelder-Mead or Powell.

    :return: (scipy.optimize.OptimizeResult, time taken in seconds)
    """

    def objective(param_array):
        gp._set_parameters(param_array)
        gp.invalidate()
        try:
            score = _score(gp, likelihood)
        except DegenerateMatrixError:
            return np.inf
        if use_prior:
            score += gp.log_prior().item()
        return -score

    tic = time()
    with torch.no_grad():
        result = minimize(
            fun=objective,
            x0=gp._get_param_array(),
            method=method,
            tol=tol,
            options=dict(maxiter=max_iter),
        )
        gp._set_parameters(result.x)
        gp.invalidate()
        gp.initialize()
    t = time() - tic

    logger.info("%s: likelihood optimization (%s) finished in %.3f s: %s",
        gp.name, method, t, result.message)
    return result, t
