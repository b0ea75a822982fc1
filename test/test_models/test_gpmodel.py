"""
Tests for the state handling of GP engines: samples, sigma, invalidation,
input conversion
"""

import numpy as np
import pytest
import torch

from gpcore.errors import (
    DimensionMismatchError,
    ErrorKind,
    UninitializedError,
)
from gpcore.kernels import Gaussian
from gpcore.models import GaussianProcess, GPModel


class TestGPModel(object):
    """
    Tests for the GPModel class (through GaussianProcess)
    """

    def test_init(self):
        n, dx, dy = 5, 3, 2
        x, y = np.random.randn(n, dx), np.random.randn(n, dy)
        kern = Gaussian(dx, ARD=True)

        # empty
        gp = GaussianProcess(kern)
        assert isinstance(gp, GPModel)
        assert gp.num_data == 0
        assert not gp.initialized
        # w/ numpy
        gp = GaussianProcess(kern, x, y)
        assert gp.num_data == n
        assert gp.input_dimension == dx
        assert gp.output_dimension == dy
        # w/ PyTorch tensors:
        GaussianProcess(kern, torch.tensor(x), torch.tensor(y))

        with pytest.raises(ValueError):
            GaussianProcess(kern, x)
        with pytest.raises(ValueError):
            GaussianProcess(kern, x[:3], y)

    def test_add_sample_order(self):
        gp = GaussianProcess(Gaussian(1))
        for i in range(4):
            gp.add_sample([float(i)], [10.0 * i, -1.0 * i])

        assert gp.X[:, 0].tolist() == [0.0, 1.0, 2.0, 3.0]
        assert gp.Y[:, 0].tolist() == [0.0, 10.0, 20.0, 30.0]
        assert gp.output_dimension == 2

    def test_dimension_mismatch(self):
        gp = GaussianProcess(Gaussian(2))
        with pytest.raises(DimensionMismatchError):
            gp.add_sample([0.0], [1.0])

        gp.add_sample([0.0, 1.0], [1.0])
        with pytest.raises(DimensionMismatchError) as exc_info:
            gp.add_sample([0.0, 1.0], [1.0, 2.0])
        assert exc_info.value.kind == ErrorKind.DIMENSION_MISMATCH
        # Also a ValueError for callers that don't know our types
        assert isinstance(exc_info.value, ValueError)

        gp.initialize()
        with pytest.raises(DimensionMismatchError):
            gp.predict(np.array([0.0, 1.0, 2.0]))
        with pytest.raises(DimensionMismatchError):
            gp.predict(np.zeros((4, 3)))
        with pytest.raises(DimensionMismatchError):
            gp.covariance(np.zeros(2), np.zeros(1))

    def test_uninitialized(self):
        gp = GaussianProcess(Gaussian(1))
        with pytest.raises(UninitializedError):
            gp.initialize()  # no samples

        gp.add_sample([0.0], [1.0])
        for f, args in self._queries():
            with pytest.raises(UninitializedError) as exc_info:
                getattr(gp, f)(*args)
            assert exc_info.value.kind == ErrorKind.UNINITIALIZED

    def test_stale_after_add_sample(self):
        """
        add -> initialize -> add without initialize: queries must fail.
        """
        gp = GaussianProcess(Gaussian(1))
        gp.add_sample([0.0], [1.0])
        gp.initialize()
        assert gp.initialized
        gp.predict(np.array([0.5]))

        gp.add_sample([1.0], [0.0])
        assert not gp.initialized
        for f, args in self._queries():
            with pytest.raises(UninitializedError):
                getattr(gp, f)(*args)

        # Re-initializing picks up the new sample
        gp.initialize()
        assert gp.predict(np.array([1.0]))[0] == pytest.approx(0.0, abs=1e-6)

    def test_stale_after_parameter_change(self):
        """
        A kernel parameter changed after initialize() invalidates the model
        until the next initialize().
        """
        x = np.linspace(0.0, 3.0, 7)[:, None]
        gp = GaussianProcess(Gaussian(1, length_scales=1.0), x, np.sin(x))
        gp.initialize()
        assert gp.initialized

        gp.kernel.length_scales.set_value(0.3)
        assert not gp.initialized
        for f, args in self._queries():
            with pytest.raises(UninitializedError):
                getattr(gp, f)(*args)

        gp.initialize()
        fresh = GaussianProcess(Gaussian(1, length_scales=0.3), x, np.sin(x))
        fresh.initialize()
        xq = np.array([1.7])
        assert gp.predict(xq) == pytest.approx(fresh.predict(xq))

    def test_sigma(self):
        gp = GaussianProcess(Gaussian(1), [[0.0]], [[1.0]])
        assert gp.sigma == 0.0

        gp.initialize()
        gp.set_sigma(0.0)  # unchanged: still initialized
        assert gp.initialized

        gp.sigma = 0.5
        assert gp.sigma == 0.5
        assert not gp.initialized

        with pytest.raises(ValueError):
            gp.set_sigma(-1.0)
        with pytest.raises(ValueError):
            GaussianProcess(Gaussian(1), sigma=-0.1)

    def test_clear_samples(self):
        gp = GaussianProcess(Gaussian(1), [[0.0]], [[1.0]]).initialize()
        gp.clear_samples()
        assert gp.num_data == 0
        assert not gp.initialized

    def test_narrow_interface(self):
        gp = GaussianProcess(Gaussian(1), [[0.0], [1.0]], [[1.0], [2.0]])
        with pytest.raises(UninitializedError):
            gp.label_matrix()
        with pytest.raises(UninitializedError):
            gp.core_matrix_and_determinant()

        gp.initialize()
        assert torch.equal(gp.label_matrix(), gp.Y)
        core = gp.core_matrix_and_determinant()
        assert core.matrix.shape == (2, 2)
        assert core.determinant.item() > 0.0

    def test_numpy_in_numpy_out(self):
        gp = self._get_model()
        dx = gp.input_dimension

        mu = gp.predict(np.random.randn(4, dx))
        assert isinstance(mu, np.ndarray)
        assert mu.shape == (4, gp.output_dimension)

        c = gp.covariance(np.zeros(dx), np.ones(dx))
        assert isinstance(c, float)

        ci = gp.credible_interval(np.random.randn(4, dx))
        assert isinstance(ci, np.ndarray)
        assert ci.shape == (4,)

    def test_torch_in_torch_out(self):
        gp = self._get_model()
        dx = gp.input_dimension

        mu = gp.predict(torch.randn(4, dx, dtype=torch.double))
        assert isinstance(mu, torch.Tensor)
        assert not mu.requires_grad

        c = gp.covariance(torch.zeros(dx), torch.ones(dx))
        assert isinstance(c, torch.Tensor)
        assert c.ndimension() == 0

    def test_str(self):
        gp = self._get_model()
        assert "Gaussian" in str(gp)
        assert "num_data=5" in str(gp)

    @staticmethod
    def _queries():
        x = np.array([0.5])
        return (
            ("predict", (x,)),
            ("covariance", (x, x)),
            ("credible_interval", (x,)),
            ("variance", (x,)),
            ("covariance_matrix", (x[None, :],)),
            ("label_matrix", ()),
            ("core_matrix_and_determinant", ()),
        )

    @staticmethod
    def _get_model():
        n, dx, dy = 5, 3, 2
        x, y = np.random.randn(n, dx), np.random.randn(n, dy)
        return GaussianProcess(Gaussian(dx, ARD=True), x, y, sigma=1e-2).initialize()
