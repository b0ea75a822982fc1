# File: test_settings.py

import logging

import pytest

from gpcore import settings


def test_defaults():
    s = settings.Settings()
    assert s.credible_interval_factor == 2.0
    assert s.eigenvalue_threshold == 1.0e-10
    assert s.decomposition_tolerance == 1.0e-8
    assert s.strict
    assert "strict=True" in repr(s)


def test_update():
    s = settings.Settings()
    s.update(credible_interval_factor=3.0)
    assert s.credible_interval_factor == 3.0
    with pytest.raises(KeyError):
        s.update(nonexistent=1)


def test_override():
    s = settings.get_settings()
    with s.override(strict=False, eigenvalue_threshold=1.0e-6):
        assert not s.strict
        assert s.eigenvalue_threshold == 1.0e-6
    assert s.strict
    assert s.eigenvalue_threshold == 1.0e-10

    with pytest.raises(KeyError):
        with s.override(nonexistent=1):
            pass


def test_override_restores_on_error():
    s = settings.get_settings()
    with pytest.raises(RuntimeError):
        with s.override(strict=False):
            raise RuntimeError()
    assert s.strict


def test_logger():
    logger = settings.get_logger()
    assert logger.name == "gpcore"
    old = logger.level
    try:
        settings.set_log_level(logging.DEBUG)
        assert logger.level == logging.DEBUG
    finally:
        settings.set_log_level(old)
