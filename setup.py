#!/usr/bin/env python
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages
import sys

valid_python = sys.version_info[0] >= 3 and sys.version_info[1] >= 8
if not valid_python:
    raise RuntimeError("gpcore requires python 3.8+")

requirements = [
    "numpy>=1.17",
    "scipy>=1.4",
    "matplotlib>=3.1",  # examples
    "torch>=1.10",  # torch.linalg.cholesky_ex
]

setup(name="gpcore",
    version="0.1.0",
    description="gpcore - an incremental Gaussian process regression engine "
        "built on PyTorch",
    install_requires=requirements,
    extras_require={"test": ["pytest>=3.5.0"]},
    packages=find_packages(exclude=["test", "test.*"])
)
