"""
rbf_network: Radial Basis Function networks for scattered data interpolation.

A JAX-based implementation providing:
- Exact interpolation via an SVD (pseudo-inverse) weight solve
- Normalized and unnormalized networks
- Analytic Jacobians, consistent with autodiff

Usage
-----
>>> import rbf_network
>>> import jax.numpy as jnp
>>>
>>> # Train model
>>> samples = [(jnp.array([0.0]), 0.0), (jnp.array([1.0]), 1.0), (jnp.array([2.0]), 4.0)]
>>> result = rbf_network.train(samples)
>>>
>>> # Evaluate
>>> y = rbf_network.value(result.state, jnp.array([1.5]))
>>> dy = rbf_network.jacobian(result.state, jnp.array([1.5]))
"""

import logging

import jax

# Enable float64 for numerical stability (SVD, condition numbers)
jax.config.update("jax_enable_x64", True)

from .core import basis, jacobian, train, value, value_batch
from .errors import DimensionMismatchError, FileAccessError, RBFNetworkError
from .io import deserialize_model, load_model, save_model, serialize_model
from .kernels import KernelType, make_kernel
from .network import RBFNetwork
from .precondition import zero_preconditioner
from .rbf import distance
from .types import ModelState, Sample, SolveDiagnostics, TrainConfig, TrainResult

logging.getLogger(__name__).addHandler(logging.NullHandler())

try:
    from importlib.metadata import version

    __version__ = version("rbf_network")
except Exception:
    __version__ = "unknown"

__all__ = [
    # Core functions
    "train",
    "value",
    "value_batch",
    "basis",
    "jacobian",
    "distance",
    # Network object
    "RBFNetwork",
    # Kernels
    "KernelType",
    "make_kernel",
    # Preconditioning
    "zero_preconditioner",
    # Types
    "Sample",
    "ModelState",
    "SolveDiagnostics",
    "TrainConfig",
    "TrainResult",
    # Errors
    "RBFNetworkError",
    "DimensionMismatchError",
    "FileAccessError",
    # I/O
    "serialize_model",
    "deserialize_model",
    "save_model",
    "load_model",
]
