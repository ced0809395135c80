"""
File I/O utilities for rbf_network.

Models are stored as a positional byte stream (see ``serializer``), written
in this field order:

1. sample set: num_variables, then a sequence of samples (x vector, y scalar)
2. kernel type tag
3. normalized flag
4. precondition flag
5. coefficients (length-prefixed)
6. num_samples
7. num_variables
"""

import jax.numpy as jnp
import numpy as np

from .errors import FileAccessError
from .kernels import to_kernel_type
from .serializer import Deserializer, Serializer
from .types import ModelState


def _write_samples(s: Serializer, sample_x: np.ndarray, sample_y: np.ndarray) -> None:
    s.write_size(sample_x.shape[1])
    s.write_size(sample_x.shape[0])
    for x, y in zip(sample_x, sample_y):
        s.write_vector(x)
        s.write_scalar(y)


def _read_samples(d: Deserializer) -> tuple[np.ndarray, np.ndarray]:
    num_variables = d.read_size()
    n = d.read_size()
    sample_x = np.zeros((n, num_variables))
    sample_y = np.zeros(n)
    for i in range(n):
        sample_x[i, :] = d.read_vector()
        sample_y[i] = d.read_scalar()
    return sample_x, sample_y


def serialize_model(state: ModelState) -> bytes:
    """
    Encode model state as a byte stream.

    Parameters
    ----------
    state : ModelState
        Trained model state.

    Returns
    -------
    bytes
        Positional encoding of the state.
    """
    s = Serializer()
    _write_samples(s, np.asarray(state.sample_x), np.asarray(state.sample_y))
    s.write_tag(int(state.kernel_type))
    s.write_bool(state.normalized)
    s.write_bool(state.precondition)
    s.write_vector(np.asarray(state.coefficients))
    s.write_size(state.num_samples)
    s.write_size(state.num_variables)
    return s.to_bytes()


def deserialize_model(data: bytes) -> ModelState:
    """
    Decode model state from a byte stream written by ``serialize_model``.

    The stream is not validated. Truncated input raises the ValueError
    NumPy gives for a short buffer; otherwise malformed input yields a
    meaningless state.
    """
    d = Deserializer(data)
    sample_x, sample_y = _read_samples(d)
    kernel_type = to_kernel_type(d.read_tag())
    normalized = d.read_bool()
    precondition = d.read_bool()
    coefficients = d.read_vector()
    num_samples = d.read_size()
    num_variables = d.read_size()

    return ModelState(
        sample_x=jnp.array(sample_x),
        sample_y=jnp.array(sample_y),
        kernel_type=kernel_type,
        normalized=normalized,
        precondition=precondition,
        coefficients=jnp.array(coefficients),
        num_samples=num_samples,
        num_variables=num_variables,
    )


def save_model(filename: str, state: ModelState) -> None:
    """
    Save model state to file.

    Parameters
    ----------
    filename : str
        Output filename.
    state : ModelState
        Trained model state.
    """
    with open(filename, "wb") as f:
        f.write(serialize_model(state))


def load_model(filename: str) -> ModelState:
    """
    Load model state from file.

    Parameters
    ----------
    filename : str
        Input filename.

    Returns
    -------
    ModelState
        Loaded model state with JAX arrays.

    Raises
    ------
    FileAccessError
        If the file cannot be opened for reading.
    """
    try:
        with open(filename, "rb") as f:
            data = f.read()
    except OSError as e:
        raise FileAccessError(filename, e.strerror) from e

    return deserialize_model(data)
