"""Tests for model serialization and file I/O."""

import os
import tempfile

import jax.numpy as jnp
import numpy as np
import pytest

from rbf_network.core import train, value
from rbf_network.errors import FileAccessError
from rbf_network.io import deserialize_model, load_model, save_model, serialize_model
from rbf_network.kernels import KernelType
from rbf_network.serializer import Deserializer, Serializer
from rbf_network.types import ModelState, TrainConfig


@pytest.fixture
def sample_state():
    """Create a trained 2D model state."""
    samples = [
        ([0.1, 0.2], 1.0),
        ([0.9, 0.3], -2.0),
        ([0.4, 0.8], 0.5),
        ([0.7, 0.7], 3.0),
    ]
    config = TrainConfig(kernel_type=KernelType.INVERSE_MULTIQUADRIC, normalized=True)
    return train(samples, config).state


class TestSerializer:
    """Test the positional byte codec."""

    def test_field_widths(self):
        s = Serializer()
        s.write_size(3)
        s.write_tag(4)
        s.write_bool(True)
        s.write_scalar(1.5)
        data = s.to_bytes()

        assert len(data) == 8 + 4 + 1 + 8
        assert data[:8] == (3).to_bytes(8, "little")
        assert data[8:12] == (4).to_bytes(4, "little")
        assert data[12] == 1

    def test_reads_in_write_order(self):
        s = Serializer()
        s.write_size(7)
        s.write_vector([1.0, -2.5, 3.25])
        s.write_bool(False)
        s.write_tag(-1)
        s.write_scalar(np.pi)

        d = Deserializer(s.to_bytes())
        assert d.read_size() == 7
        assert np.array_equal(d.read_vector(), [1.0, -2.5, 3.25])
        assert d.read_bool() is False
        assert d.read_tag() == -1
        assert d.read_scalar() == np.pi
        assert d.remaining == 0

    def test_empty_vector(self):
        s = Serializer()
        s.write_vector([])
        d = Deserializer(s.to_bytes())

        assert d.read_vector().shape == (0,)
        assert d.remaining == 0

    def test_read_past_end_raises(self):
        """Truncated streams are not validated beyond NumPy's buffer check."""
        d = Deserializer(b"\x01\x02\x03")
        with pytest.raises(ValueError):
            d.read_size()


class TestSerializeModel:
    """Test model state encoding."""

    def test_layout(self, sample_state):
        """Byte layout follows the documented field order."""
        data = serialize_model(sample_state)
        n, d = 4, 2

        samples_size = 8 + 8 + n * ((8 + 8 * d) + 8)
        expected = samples_size + 4 + 1 + 1 + (8 + 8 * n) + 8 + 8
        assert len(data) == expected

        # Sample set starts with num_variables, then the sample count
        assert int.from_bytes(data[0:8], "little") == d
        assert int.from_bytes(data[8:16], "little") == n
        # Kernel tag, normalized and precondition flags follow the sample set
        assert int.from_bytes(data[samples_size : samples_size + 4], "little") == 3
        assert data[samples_size + 4] == 1
        assert data[samples_size + 5] == 0
        # Trailing num_samples, num_variables
        assert int.from_bytes(data[-16:-8], "little") == n
        assert int.from_bytes(data[-8:], "little") == d

    def test_roundtrip_fields(self, sample_state):
        loaded = deserialize_model(serialize_model(sample_state))

        assert isinstance(loaded, ModelState)
        assert jnp.array_equal(loaded.sample_x, sample_state.sample_x)
        assert jnp.array_equal(loaded.sample_y, sample_state.sample_y)
        assert loaded.kernel_type == KernelType.INVERSE_MULTIQUADRIC
        assert loaded.normalized is True
        assert loaded.precondition is False
        assert jnp.array_equal(loaded.coefficients, sample_state.coefficients)
        assert loaded.num_samples == sample_state.num_samples
        assert loaded.num_variables == sample_state.num_variables

    def test_truncated_stream_raises(self, sample_state):
        data = serialize_model(sample_state)
        with pytest.raises(ValueError):
            deserialize_model(data[:-4])


class TestSaveLoadModel:
    """Test model files."""

    def test_save_load_roundtrip(self, sample_state):
        """Saved and loaded model should evaluate identically."""
        with tempfile.NamedTemporaryFile(delete=False, suffix=".rbf") as f:
            filename = f.name

        try:
            save_model(filename, sample_state)
            loaded = load_model(filename)

            for x in [jnp.array([0.1, 0.2]), jnp.array([0.5, 0.5]), jnp.array([2.0, -1.0])]:
                assert value(loaded, x) == value(sample_state, x)
        finally:
            os.unlink(filename)

    def test_loaded_state_is_model_state(self, sample_state):
        """Loaded state should be ModelState instance."""
        with tempfile.NamedTemporaryFile(delete=False, suffix=".rbf") as f:
            filename = f.name

        try:
            save_model(filename, sample_state)
            loaded = load_model(filename)

            assert isinstance(loaded, ModelState)
        finally:
            os.unlink(filename)

    def test_missing_file_raises(self):
        """Should raise FileAccessError naming the path."""
        with tempfile.TemporaryDirectory() as tmpdir:
            filename = os.path.join(tmpdir, "missing.rbf")
            with pytest.raises(FileAccessError, match="missing.rbf") as excinfo:
                load_model(filename)

        assert excinfo.value.path == filename
        assert isinstance(excinfo.value, OSError)
