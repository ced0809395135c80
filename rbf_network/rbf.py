"""
Distances, kernel matrix construction and the SVD weight solve.
"""

import jax.numpy as jnp
from jax import Array

from .errors import DimensionMismatchError
from .kernels import RadialBasisFunction


def _safe_sqrt(r2: Array) -> Array:
    """sqrt with a zero (not NaN) gradient at r2=0."""
    positive = r2 > 0
    return jnp.where(positive, jnp.sqrt(jnp.where(positive, r2, 1.0)), 0.0)


def distance(x: Array, y: Array) -> Array:
    """
    Euclidean distance ||x - y|| between two points.

    Parameters
    ----------
    x, y : Array
        Coordinate vectors of equal length.

    Returns
    -------
    Array
        Scalar distance.

    Raises
    ------
    DimensionMismatchError
        If x and y differ in length.
    """
    x = jnp.asarray(x)
    y = jnp.asarray(y)
    if x.shape != y.shape:
        raise DimensionMismatchError(
            "Cannot measure distance between two points of different dimension: "
            f"{x.shape} vs {y.shape}"
        )
    return _safe_sqrt(jnp.sum((x - y) ** 2))


def pairwise_distances(points: Array, centers: Array) -> Array:
    """
    Euclidean distances between every point and every center.

    Parameters
    ----------
    points : Array
        Points, shape (n_points, n_variables).
    centers : Array
        Centers, shape (n_centers, n_variables).

    Returns
    -------
    Array
        Distance matrix, shape (n_points, n_centers).
    """
    if points.shape[1] != centers.shape[1]:
        raise DimensionMismatchError(
            "Cannot measure distance between two points of different dimension: "
            f"{points.shape[1]} vs {centers.shape[1]}"
        )
    diff = points[:, None, :] - centers[None, :, :]  # (n_points, n_centers, n_variables)
    return _safe_sqrt(jnp.sum(diff**2, axis=-1))


def build_kernel_matrix(sample_x: Array, kernel: RadialBasisFunction) -> Array:
    """
    Build the dense RBF kernel (Gram) matrix for training.

    Parameters
    ----------
    sample_x : Array
        Sample coordinates, shape (n_samples, n_variables).
    kernel : RadialBasisFunction
        Kernel applied to each pairwise distance.

    Returns
    -------
    Array
        Kernel matrix A[i, j] = phi(||x_i - x_j||), shape (n_samples, n_samples).
    """
    return kernel(pairwise_distances(sample_x, sample_x))


def build_rhs(A: Array, sample_y: Array, normalized: bool) -> Array:
    """
    Build the right-hand side of the weight system.

    For a normalized network each value is scaled by its row sum of A, so
    that sum_j(w_j phi_ij) / sum_j(phi_ij) reproduces y_i.
    """
    if normalized:
        return sample_y * jnp.sum(A, axis=1)
    return sample_y


def solve_svd(A: Array, b: Array) -> tuple[Array, Array]:
    """
    Solve A @ w = b in the least-squares sense via SVD.

    Singular values below ``eps * n * sval_max`` are treated as zero, which
    gives the minimum-norm solution for singular or rank-deficient A. Never
    raises on singular input.

    Parameters
    ----------
    A : Array
        System matrix, shape (n, n).
    b : Array
        Right-hand side, shape (n,).

    Returns
    -------
    tuple[Array, Array]
        w : solution, shape (n,)
        svals : singular values of A in descending order
    """
    U, S, Vt = jnp.linalg.svd(A, full_matrices=False)

    tol = S[0] * jnp.finfo(S.dtype).eps * max(A.shape)
    keep = S > tol
    S_inv = jnp.where(keep, 1.0 / jnp.where(keep, S, 1.0), 0.0)

    w = Vt.T @ (S_inv * (U.T @ b))
    return w, S


def reciprocal_condition_number(svals: Array) -> float:
    """Smallest over largest singular value, 0 when either is non-positive."""
    sval_max = float(svals[0])
    sval_min = float(svals[-1])
    if sval_max <= 0.0 or sval_min <= 0.0:
        return 0.0
    return sval_min / sval_max


def relative_residual(A: Array, w: Array, b: Array) -> float:
    """||A w - b|| / ||b||, or the absolute residual when b is zero."""
    err = float(jnp.linalg.norm(A @ w - b))
    b_norm = float(jnp.linalg.norm(b))
    if b_norm == 0.0:
        return err
    return err / b_norm
