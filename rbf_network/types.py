"""
Data structures for rbf_network.

All types are NamedTuples, immutable once built.
"""

from typing import NamedTuple

from jax import Array

from .kernels import KernelType


class Sample(NamedTuple):
    """A single scattered sample: coordinates x and scalar value y."""

    x: Array
    y: float


class TrainConfig(NamedTuple):
    """Immutable training configuration."""

    kernel_type: KernelType = KernelType.THIN_PLATE_SPLINE
    normalized: bool = False
    precondition: bool = False
    rcond_warning: float | None = 1e-12  # Warn (never fail) below this reciprocal condition number


class ModelState(NamedTuple):
    """Immutable trained model state."""

    sample_x: Array  # Sample coordinates (num_samples, num_variables)
    sample_y: Array  # Sample values (num_samples,)
    kernel_type: KernelType
    normalized: bool
    precondition: bool
    coefficients: Array  # RBF weights (num_samples,)
    num_samples: int
    num_variables: int


class SolveDiagnostics(NamedTuple):
    """Conditioning diagnostics from the weight solve. Informational only."""

    rcond: float  # sval_min / sval_max, 0 when either is non-positive
    sval_max: float
    sval_min: float
    residual: float  # ||A w - b|| / ||b|| (absolute when ||b|| == 0)


class TrainResult(NamedTuple):
    """Result from training, includes diagnostics."""

    state: ModelState
    diagnostics: SolveDiagnostics
