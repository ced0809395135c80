"""
Preconditioning hook for the RBF weight solve.

A preconditioner is any callable taking the kernel matrix A, shape (n, n),
and returning a matrix P, shape (n, n). When preconditioning is enabled the
trainer solves (P @ A) w = P @ b instead of A w = b.
"""

from typing import Callable

import jax.numpy as jnp
from jax import Array

Preconditioner = Callable[[Array], Array]


def zero_preconditioner(A: Array) -> Array:
    """
    Placeholder preconditioner returning the zero matrix.

    Notes
    -----
    No real preconditioner is implemented yet. With this default, enabling
    preconditioning zeroes the system and the solve yields all-zero weights.
    Pass a real ``Preconditioner`` to ``train`` to change that.
    """
    return jnp.zeros_like(A)
