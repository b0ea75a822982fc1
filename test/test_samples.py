# File: test_samples.py

import numpy as np
import pytest
import torch

from gpcore.errors import DimensionMismatchError
from gpcore.samples import SampleStore


class TestSampleStore(object):
    def test_empty(self):
        store = SampleStore(input_dim=2)
        assert len(store) == 0
        assert store.inputs.shape == (0, 2)
        assert store.labels.shape == (0, 0)
        assert store.output_dimension is None

    def test_append(self):
        store = SampleStore()
        store.append(np.array([1.0, 2.0]), 3.0)
        store.append([4.0, 5.0], [6.0])
        assert len(store) == 2
        assert store.input_dimension == 2
        assert store.output_dimension == 1
        assert store.inputs.dtype == torch.double
        assert store.inputs.numpy() == pytest.approx(np.array([[1.0, 2.0], [4.0, 5.0]]))
        assert store.labels.numpy() == pytest.approx(np.array([[3.0], [6.0]]))

    def test_order(self):
        store = SampleStore()
        for i in (3, 1, 2):
            store.append([float(i)], [10.0 * i])
        assert store.inputs.flatten().tolist() == [3.0, 1.0, 2.0]
        assert store.labels.flatten().tolist() == [30.0, 10.0, 20.0]

    def test_copies(self):
        x = torch.tensor([1.0], dtype=torch.double)
        store = SampleStore()
        store.append(x, [0.0])
        x[0] = 5.0
        assert store.inputs.item() == 1.0

    def test_mismatch(self):
        store = SampleStore(input_dim=1)
        with pytest.raises(DimensionMismatchError):
            store.append([1.0, 2.0], [0.0])
        # The rejected sample fixed nothing
        assert store.output_dimension is None
        assert len(store) == 0

        store.append([1.0], [0.0, 1.0])
        with pytest.raises(DimensionMismatchError):
            store.append([2.0], [0.0])
        with pytest.raises(ValueError):
            store.append([2.0], [0.0, 1.0, 2.0])

    def test_extend(self):
        store = SampleStore()
        store.extend(np.linspace(0.0, 1.0, 5), np.zeros((5, 2)))
        assert store.inputs.shape == (5, 1)
        assert store.labels.shape == (5, 2)

        with pytest.raises(ValueError):
            store.extend(np.zeros((2, 1)), np.zeros((3, 2)))

    def test_cache(self):
        store = SampleStore()
        store.append([0.0], [0.0])
        inputs = store.inputs
        assert store.inputs is inputs
        store.append([1.0], [1.0])
        assert store.inputs.shape == (2, 1)

    def test_clear(self):
        store = SampleStore()
        store.extend(np.zeros((3, 1)), np.zeros((3, 1)))
        store.clear()
        assert len(store) == 0
        assert store.inputs.shape == (0, 1)
        # Dimensions stay fixed
        with pytest.raises(DimensionMismatchError):
            store.append([0.0, 0.0], [0.0])
