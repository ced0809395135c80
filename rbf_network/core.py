"""
Core RBF network training and evaluation functions.

Pure functional interface: ``train`` produces an immutable ModelState and
the evaluation functions read it.
"""

import logging
from typing import Callable, Iterable

import jax
import jax.numpy as jnp
from jax import Array

from .errors import DimensionMismatchError
from .kernels import make_kernel, to_kernel_type
from .precondition import Preconditioner, zero_preconditioner
from .rbf import (
    build_kernel_matrix,
    build_rhs,
    pairwise_distances,
    reciprocal_condition_number,
    relative_residual,
    solve_svd,
)
from .types import ModelState, SolveDiagnostics, TrainConfig, TrainResult

logger = logging.getLogger(__name__)


def _collect_samples(samples: Iterable) -> tuple[Array, Array]:
    """Stack (x, y) pairs into arrays of shape (n_samples, n_variables) and (n_samples,)."""
    xs = []
    ys = []
    for x, y in samples:
        xs.append(jnp.atleast_1d(jnp.asarray(x, dtype=jnp.float64)))
        ys.append(float(y))

    if not xs:
        raise ValueError("Cannot train an RBF network without samples")

    num_variables = xs[0].shape[0]
    for i, x in enumerate(xs):
        if x.ndim != 1 or x.shape[0] != num_variables:
            raise DimensionMismatchError(
                f"Sample {i} has x of shape {x.shape}, expected ({num_variables},)"
            )

    return jnp.stack(xs), jnp.asarray(ys, dtype=jnp.float64)


def train(
    samples: Iterable,
    config: TrainConfig = TrainConfig(),
    preconditioner: Preconditioner | None = None,
    on_solve: Callable[[SolveDiagnostics], None] | None = None,
) -> TrainResult:
    """
    Train an RBF network.

    Parameters
    ----------
    samples : Iterable
        Sequence of (x, y) pairs; x is a coordinate vector (or scalar for
        one variable), y a scalar. All x must share the same dimension.
    config : TrainConfig
        Training configuration.
    preconditioner : Preconditioner, optional
        Used only when ``config.precondition`` is set. Defaults to
        ``zero_preconditioner``.
    on_solve : callable, optional
        Called with the SolveDiagnostics after the weights are solved.

    Returns
    -------
    TrainResult
        Training result containing model state and diagnostics.

    Raises
    ------
    ValueError
        If samples is empty.
    DimensionMismatchError
        If the samples do not share one dimension.
    """
    sample_x, sample_y = _collect_samples(samples)
    num_samples, num_variables = sample_x.shape
    kernel_type = to_kernel_type(config.kernel_type)
    kernel = make_kernel(kernel_type)

    A = build_kernel_matrix(sample_x, kernel)
    b = build_rhs(A, sample_y, config.normalized)

    if config.precondition:
        P = (preconditioner or zero_preconditioner)(A)
        A = P @ A
        b = P @ b

    logger.debug("Computing RBF weights using dense SVD solver (%d samples)", num_samples)
    coefficients, svals = solve_svd(A, b)

    diagnostics = SolveDiagnostics(
        rcond=reciprocal_condition_number(svals),
        sval_max=float(svals[0]),
        sval_min=float(svals[-1]),
        residual=relative_residual(A, coefficients, b),
    )
    logger.debug(
        "Reciprocal condition number %g, largest/smallest singular value %g / %g, residual %.10g",
        diagnostics.rcond,
        diagnostics.sval_max,
        diagnostics.sval_min,
        diagnostics.residual,
    )
    if config.rcond_warning is not None and diagnostics.rcond < config.rcond_warning:
        logger.warning(
            "RBF kernel matrix is ill-conditioned (reciprocal condition number %g)",
            diagnostics.rcond,
        )
    if on_solve is not None:
        on_solve(diagnostics)

    state = ModelState(
        sample_x=sample_x,
        sample_y=sample_y,
        kernel_type=kernel_type,
        normalized=bool(config.normalized),
        precondition=bool(config.precondition),
        coefficients=coefficients,
        num_samples=int(num_samples),
        num_variables=int(num_variables),
    )

    return TrainResult(state=state, diagnostics=diagnostics)


def _check_point(state: ModelState, x: Array) -> Array:
    """Ensure x is a vector of length num_variables. Scalars are promoted."""
    x = jnp.atleast_1d(jnp.asarray(x, dtype=jnp.float64))
    if x.ndim != 1 or x.shape[0] != state.num_variables:
        raise DimensionMismatchError(
            f"Wrong dimension on evaluation point: got shape {x.shape}, "
            f"expected ({state.num_variables},)"
        )
    return x


def _kernel_values(state: ModelState, x: Array) -> Array:
    """phi(||x - x_i||) for every sample i, shape (num_samples,)."""
    kernel = make_kernel(state.kernel_type)
    return kernel(pairwise_distances(x[None, :], state.sample_x)[0])


def _value_impl(state: ModelState, x: Array) -> Array:
    f = _kernel_values(state, x)
    sumw = jnp.dot(state.coefficients, f)
    if state.normalized:
        return sumw / jnp.sum(f)
    return sumw


def value(state: ModelState, x: Array) -> Array:
    """
    Evaluate the network at a single point.

    Parameters
    ----------
    state : ModelState
        Trained model state from train().
    x : Array
        Query point, shape (num_variables,). A scalar is accepted for
        one-variable models.

    Returns
    -------
    Array
        Scalar interpolated value. In normalized mode a zero basis sum
        gives inf or nan.
    """
    return _value_impl(state, _check_point(state, x))


def value_batch(state: ModelState, points: Array) -> Array:
    """
    Evaluate the network at multiple points.

    Parameters
    ----------
    state : ModelState
        Trained model state from train().
    points : Array
        Query points, shape (n_points, num_variables), or (n_points,) for
        one-variable models.

    Returns
    -------
    Array
        Values, shape (n_points,).
    """
    points = jnp.asarray(points, dtype=jnp.float64)
    if points.ndim == 1 and state.num_variables == 1:
        points = points[:, None]
    if points.ndim != 2 or points.shape[1] != state.num_variables:
        raise DimensionMismatchError(
            f"Wrong dimension on evaluation points: got shape {points.shape}, "
            f"expected (n_points, {state.num_variables})"
        )
    return jax.vmap(lambda x: _value_impl(state, x))(points)


def basis(state: ModelState, x: Array) -> Array:
    """
    Evaluate the kernel basis vector at a point.

    Returns
    -------
    Array
        [phi(||x - x_0||), ..., phi(||x - x_{N-1}||)], divided by its sum
        in normalized mode. Shape (num_samples,).
    """
    f = _kernel_values(state, _check_point(state, x))
    if state.normalized:
        return f / jnp.sum(f)
    return f


def jacobian(state: ModelState, x: Array) -> Array:
    """
    Analytic Jacobian of the network output at a point.

    Parameters
    ----------
    state : ModelState
        Trained model state from train().
    x : Array
        Query point, shape (num_variables,).

    Returns
    -------
    Array
        Row vector of partial derivatives, shape (1, num_variables).

    Notes
    -----
    Samples at zero distance from x contribute nothing to the derivative
    sums (their direction ri / r is undefined). This matches the limit for
    kernels with phi'(0) = 0 but is only an approximation in general.
    """
    x = _check_point(state, x)
    kernel = make_kernel(state.kernel_type)

    diff = x[None, :] - state.sample_x  # ri for every sample, (num_samples, num_variables)
    r = pairwise_distances(x[None, :], state.sample_x)[0]
    f = kernel.value(r)
    dfdr = kernel.derivative(r)

    nonzero = r != 0
    safe_r = jnp.where(nonzero, r, 1.0)
    dfdx = jnp.where(nonzero, dfdr / safe_r, 0.0)[:, None] * diff

    sum_f = jnp.sum(f)
    sumw = jnp.dot(state.coefficients, f)
    sum_d = jnp.sum(dfdx, axis=0)
    sumw_d = state.coefficients @ dfdx

    if state.normalized:
        jac = (sum_f * sumw_d - sum_d * sumw) / (sum_f * sum_f)
    else:
        jac = sumw_d

    return jac[None, :]
