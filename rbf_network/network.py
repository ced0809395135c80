"""
Object interface to a trained RBF network.

Wraps the functional core around a single ModelState reference. Loading
builds a complete new state before publishing it, so concurrent
evaluations see either the old state or the new one, never a mix.
"""

import threading
from typing import Callable, Iterable

from jax import Array

from .core import basis, jacobian, train, value
from .io import load_model, save_model
from .kernels import KernelType
from .precondition import Preconditioner
from .types import ModelState, SolveDiagnostics, TrainConfig


class RBFNetwork:
    """
    Radial basis function network for scattered data interpolation.

    Parameters
    ----------
    samples : Iterable
        Sequence of (x, y) pairs to interpolate.
    kernel_type : KernelType
        Kernel family. Unknown tags fall back to a thin plate spline.
    normalized : bool
        Divide the weighted kernel sum by the plain kernel sum.
    precondition : bool
        Apply ``preconditioner`` to the system before solving.
    preconditioner : Preconditioner, optional
        Preconditioning hook, see ``rbf_network.precondition``.
    on_solve : callable, optional
        Receives the SolveDiagnostics after training.

    Examples
    --------
    >>> net = RBFNetwork([(0.0, 0.0), (1.0, 1.0), (2.0, 4.0)])
    >>> float(net.eval([1.0]))  # doctest: +SKIP
    1.0
    """

    def __init__(
        self,
        samples: Iterable,
        kernel_type: KernelType = KernelType.THIN_PLATE_SPLINE,
        normalized: bool = False,
        precondition: bool = False,
        *,
        preconditioner: Preconditioner | None = None,
        on_solve: Callable[[SolveDiagnostics], None] | None = None,
    ):
        config = TrainConfig(
            kernel_type=kernel_type,
            normalized=normalized,
            precondition=precondition,
        )
        result = train(samples, config, preconditioner=preconditioner, on_solve=on_solve)
        self._state = result.state
        self._diagnostics: SolveDiagnostics | None = result.diagnostics
        self._load_lock = threading.Lock()

    @classmethod
    def from_state(cls, state: ModelState) -> "RBFNetwork":
        """Wrap an existing model state without retraining."""
        net = cls.__new__(cls)
        net._state = state
        net._diagnostics = None
        net._load_lock = threading.Lock()
        return net

    @classmethod
    def from_file(cls, filename: str) -> "RBFNetwork":
        """Create a network from a file written by ``save``."""
        return cls.from_state(load_model(filename))

    @property
    def state(self) -> ModelState:
        return self._state

    @property
    def diagnostics(self) -> SolveDiagnostics | None:
        """Solve diagnostics from training; None for loaded networks."""
        return self._diagnostics

    @property
    def num_variables(self) -> int:
        return self._state.num_variables

    @property
    def num_coefficients(self) -> int:
        return self._state.num_samples

    @property
    def coefficients(self) -> Array:
        return self._state.coefficients

    @property
    def description(self) -> str:
        return f"RadialBasisFunction of type {self._state.kernel_type.description}"

    def eval(self, x: Array) -> Array:
        return value(self._state, x)

    def eval_basis(self, x: Array) -> Array:
        return basis(self._state, x)

    def eval_jacobian(self, x: Array) -> Array:
        return jacobian(self._state, x)

    def save(self, filename: str) -> None:
        save_model(filename, self._state)

    def load(self, filename: str) -> None:
        """
        Replace this network's state with one read from file.

        On any error the current state is left untouched.
        """
        with self._load_lock:
            state = load_model(filename)
            self._state = state
            self._diagnostics = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kernel_type={self._state.kernel_type.name}, "
            f"normalized={self._state.normalized}, num_samples={self._state.num_samples}, "
            f"num_variables={self._state.num_variables})"
        )
