"""
Demonstration of GPs for regression: noisy sinusoid, credible band and
posterior draws
"""

import os
import sys
from argparse import ArgumentParser

import matplotlib.pyplot as plt
import numpy as np

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from gpcore.models import GaussianProcess
from gpcore.likelihoods import GaussianLogLikelihood
from gpcore import kernels
from gpcore import optimize

np.random.seed(42)


# Data
def f(x):
    return np.sin(x)


def main(args):
    # Create data:
    n = 20
    x = np.linspace(0.0, 2.0 * np.pi, n, endpoint=False).reshape((-1, 1))
    y = f(x) + 0.05 * np.random.randn(n, 1)

    # Try different kernels...see kernels.py for more!
    kern = kernels.Gaussian(1, length_scales=0.5)
    model = GaussianProcess(kern, x, y, sigma=args.sigma)

    likelihood = GaussianLogLikelihood()
    if args.optimize:
        optimize.grid_search(
            model,
            likelihood,
            {
                "kernel.length_scales": [0.25, 0.5, 1.0, 2.0],
                "sigma": [1.0e-3, 1.0e-2, 1.0e-1],
            },
        )
    else:
        model.initialize()
    print("Model:", model)
    print("Log-likelihood:", likelihood(model).tolist())

    # Predict
    n_test = 200
    x_test = np.linspace(-1.0, 1.3 * 2.0 * np.pi, n_test).reshape((-1, 1))
    mu = model.predict(x_test)
    unc = model.credible_interval(x_test)
    y_samp = model.sample_posterior(x_test, n_samples=args.n_samples, generator=42)

    # Show prediction
    x_test = x_test.flatten()
    plt.figure()
    plt.fill_between(
        x_test, mu.flatten() - unc, mu.flatten() + unc, color=(0.9,) * 3
    )
    plt.plot(x_test, mu)
    plt.plot(x_test, f(x_test))
    for y_samp_i in y_samp:
        plt.plot(x_test, y_samp_i, color=(0.4, 0.7, 1.0), alpha=0.5)
    plt.plot(x, y, "o")
    if args.no_plot:
        plt.close()
    else:
        plt.show()


if __name__ == "__main__":
    parser = ArgumentParser()
    parser.add_argument("--sigma", type=float, default=1.0e-3)
    parser.add_argument("--n-samples", type=int, default=5)
    parser.add_argument("--optimize", action="store_true")
    parser.add_argument("--no-plot", action="store_true")

    main(parser.parse_args())
