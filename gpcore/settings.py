# File: settings.py
# File Created: Saturday, 17th October 2026 10:12:03 am

"""
settings.py: Package-wide numerical defaults and the package logger.

The defaults live on a single ``Settings`` instance so that tests and
exploratory code can loosen them temporarily::

    with get_settings().override(strict=False):
        ...
"""

import logging
from contextlib import contextmanager

from torch.distributions.transforms import ExpTransform


DefaultPositiveTransform = ExpTransform


class Settings(object):
    """
    Numerical defaults for the GP engine.

    credible_interval_factor: multiplier on the posterior standard deviation
        used by credible intervals (2.0 ~ a 95% band).
    eigenvalue_threshold: eigenvalues of a posterior covariance at or below
        this are treated as its numerical null space by the sampler.
    decomposition_tolerance: largest acceptable Frobenius residual of the
        sampler's square-root factor.
    variance_tolerance: how far below zero a self-covariance may fall before
        it is reported as numerical instability.
    strict: if True, numerical instability raises; otherwise it only warns.
    """

    _fields = (
        "credible_interval_factor",
        "eigenvalue_threshold",
        "decomposition_tolerance",
        "variance_tolerance",
        "strict",
    )

    def __init__(self):
        self.credible_interval_factor = 2.0
        self.eigenvalue_threshold = 1.0e-10
        self.decomposition_tolerance = 1.0e-8
        self.variance_tolerance = 1.0e-8
        self.strict = True

        self.logger = logging.getLogger("gpcore")
        if not self.logger.handlers:
            h = logging.StreamHandler()
            h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
            self.logger.addHandler(h)
        self.logger.setLevel(logging.INFO)

    def __repr__(self):
        return "Settings({})".format(
            ", ".join("{}={!r}".format(f, getattr(self, f)) for f in self._fields)
        )

    def update(self, **kwargs):
        for k, v in kwargs.items():
            if k not in self._fields:
                raise KeyError("Unknown setting {}".format(k))
            setattr(self, k, v)
        return self

    @contextmanager
    def override(self, **kwargs):
        """
        Temporarily change some settings; the old values are restored on exit.
        """
        old = {k: getattr(self, k) for k in kwargs if k in self._fields}
        self.update(**kwargs)
        try:
            yield self
        finally:
            self.update(**old)


_settings = Settings()


def get_settings():
    return _settings


def get_logger():
    return _settings.logger


def set_log_level(level):
    _settings.logger.setLevel(level)
