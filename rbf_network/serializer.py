"""
Positional binary encoding.

Values are written back to back, little-endian, with no schema, version
tag or checksum. A reader must consume fields in exactly the order they
were written. Reading a truncated or mismatched stream is not detected
beyond what NumPy raises when a read runs past the end of the buffer.

Encodings
---------
- size (counts, dimensions): unsigned 64-bit integer
- enum tag: signed 32-bit integer
- bool: one byte
- scalar: float64
- sequence: size followed by the elements
"""

import numpy as np

_SIZE = np.dtype("<u8")
_TAG = np.dtype("<i4")
_BOOL = np.dtype("<u1")
_SCALAR = np.dtype("<f8")


class Serializer:
    """Accumulates encoded fields into a byte stream."""

    def __init__(self):
        self._chunks: list[bytes] = []

    def _write(self, dtype: np.dtype, data) -> None:
        self._chunks.append(np.asarray(data, dtype=dtype).tobytes())

    def write_size(self, n: int) -> None:
        self._write(_SIZE, int(n))

    def write_tag(self, tag: int) -> None:
        self._write(_TAG, int(tag))

    def write_bool(self, flag: bool) -> None:
        self._write(_BOOL, 1 if flag else 0)

    def write_scalar(self, value: float) -> None:
        self._write(_SCALAR, float(value))

    def write_vector(self, values) -> None:
        """Length-prefixed sequence of float64."""
        values = np.asarray(values, dtype=_SCALAR).ravel()
        self.write_size(values.shape[0])
        self._write(_SCALAR, values)

    def to_bytes(self) -> bytes:
        return b"".join(self._chunks)


class Deserializer:
    """Reads fields from a byte stream through a forward-only cursor."""

    def __init__(self, data: bytes):
        self._data = data
        self._cursor = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._cursor

    def _read(self, dtype: np.dtype, count: int = 1) -> np.ndarray:
        if count == 0:
            return np.empty(0, dtype=dtype)
        values = np.frombuffer(self._data, dtype=dtype, count=count, offset=self._cursor)
        self._cursor += dtype.itemsize * count
        return values

    def read_size(self) -> int:
        return int(self._read(_SIZE)[0])

    def read_tag(self) -> int:
        return int(self._read(_TAG)[0])

    def read_bool(self) -> bool:
        return bool(self._read(_BOOL)[0])

    def read_scalar(self) -> float:
        return float(self._read(_SCALAR)[0])

    def read_vector(self) -> np.ndarray:
        n = self.read_size()
        return self._read(_SCALAR, n).copy()
