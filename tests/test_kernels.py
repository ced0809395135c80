"""
Tests for RBF kernel functions.
"""

import logging

import jax
import jax.numpy as jnp
import pytest

from rbf_network.kernels import (
    Gaussian,
    InverseMultiquadric,
    InverseQuadric,
    KernelType,
    Multiquadric,
    RadialBasisFunction,
    ThinPlateSpline,
    make_kernel,
    to_kernel_type,
)

ALL_KERNELS = [ThinPlateSpline, Multiquadric, InverseQuadric, InverseMultiquadric, Gaussian]


class TestThinPlateSpline:
    """Test thin plate spline kernel."""

    def test_tps_values(self):
        """TPS: phi(r) = r²*log(r)."""
        r = jnp.array([0.5, 1.0, 2.0, 3.0])
        result = ThinPlateSpline().value(r)
        expected = r**2 * jnp.log(r)
        assert jnp.allclose(result, expected)

    def test_tps_at_zero(self):
        """TPS should be 0 at r=0, with a finite gradient."""
        k = ThinPlateSpline()
        assert k.value(jnp.array(0.0)) == 0.0
        assert k.derivative(jnp.array(0.0)) == 0.0
        grad = jax.grad(k.value)(jnp.array(0.0))
        assert jnp.isfinite(grad)

    def test_tps_zero_at_unit_radius(self):
        """log(1) = 0, so TPS vanishes at r=1."""
        assert jnp.allclose(ThinPlateSpline().value(jnp.array(1.0)), 0.0)


class TestRadialKernels:
    """Test the bounded kernels against their closed forms."""

    def test_multiquadric(self):
        r = jnp.array([0.0, 1.0, 2.0])
        assert jnp.allclose(Multiquadric().value(r), jnp.sqrt(1.0 + r**2))

    def test_inverse_quadric(self):
        r = jnp.array([0.0, 1.0, 2.0])
        assert jnp.allclose(InverseQuadric().value(r), jnp.array([1.0, 0.5, 0.2]))

    def test_inverse_multiquadric(self):
        r = jnp.array([0.0, 1.0, 2.0])
        assert jnp.allclose(InverseMultiquadric().value(r), 1.0 / jnp.sqrt(1.0 + r**2))

    def test_gaussian(self):
        r = jnp.array([0.0, 1.0])
        result = Gaussian().value(r)
        # At r=1, should be exp(-1)
        assert jnp.allclose(result, jnp.array([1.0, jnp.exp(-1.0)]))

    @pytest.mark.parametrize("kernel_cls", [InverseQuadric, InverseMultiquadric, Gaussian])
    def test_decay(self, kernel_cls):
        """Decaying kernels should be 1 at r=0 and decrease monotonically."""
        r = jnp.array([0.0, 0.5, 1.0, 2.0, 4.0])
        result = kernel_cls().value(r)
        assert jnp.allclose(result[0], 1.0)
        assert jnp.all(result[:-1] > result[1:])
        assert jnp.all(result > 0)


class TestDerivatives:
    """Analytic derivatives should match autodiff of the values."""

    @pytest.mark.parametrize("kernel_cls", ALL_KERNELS)
    def test_derivative_matches_grad(self, kernel_cls):
        k = kernel_cls()
        r = jnp.array([0.1, 0.5, 0.9, 1.5, 3.0])
        expected = jax.vmap(jax.grad(k.value))(r)
        assert jnp.allclose(k.derivative(r), expected, rtol=1e-10)

    @pytest.mark.parametrize("kernel_cls", ALL_KERNELS)
    def test_derivative_zero_at_origin(self, kernel_cls):
        assert kernel_cls().derivative(jnp.array(0.0)) == 0.0


class TestRadialBasisFunction:
    """Test the kernel base class."""

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            RadialBasisFunction()

    def test_missing_derivative_fails_on_instantiation(self):
        class ValueOnly(RadialBasisFunction):
            def value(self, r):
                return jnp.asarray(r)

        with pytest.raises(TypeError, match="derivative"):
            ValueOnly()


class TestMakeKernel:
    """Test kernel factory."""

    @pytest.mark.parametrize(
        "tag,kernel_cls",
        [
            (KernelType.THIN_PLATE_SPLINE, ThinPlateSpline),
            (KernelType.MULTIQUADRIC, Multiquadric),
            (KernelType.INVERSE_QUADRIC, InverseQuadric),
            (KernelType.INVERSE_MULTIQUADRIC, InverseMultiquadric),
            (KernelType.GAUSSIAN, Gaussian),
        ],
    )
    def test_make_kernel(self, tag, kernel_cls):
        k = make_kernel(tag)
        assert isinstance(k, kernel_cls)
        assert k.kernel_type == tag

    def test_integer_tag(self):
        """Integer tags resolve like enum members."""
        assert isinstance(make_kernel(4), Gaussian)

    def test_unknown_tag_falls_back_to_tps(self, caplog):
        """Unknown tags give a thin plate spline and log a warning."""
        with caplog.at_level(logging.WARNING, logger="rbf_network.kernels"):
            k = make_kernel(99)
        assert isinstance(k, ThinPlateSpline)
        assert "falling back" in caplog.text
        assert to_kernel_type(-1) == KernelType.THIN_PLATE_SPLINE

    def test_callable(self):
        """Kernels are callable as their value function."""
        k = make_kernel(KernelType.GAUSSIAN)
        r = jnp.array([0.3, 1.2])
        assert jnp.allclose(k(r), k.value(r))


class TestKernelType:
    """Test KernelType enum."""

    def test_enum_values(self):
        """Integer tags are part of the saved format."""
        assert KernelType.THIN_PLATE_SPLINE == 0
        assert KernelType.MULTIQUADRIC == 1
        assert KernelType.INVERSE_QUADRIC == 2
        assert KernelType.INVERSE_MULTIQUADRIC == 3
        assert KernelType.GAUSSIAN == 4

    def test_description(self):
        assert KernelType.THIN_PLATE_SPLINE.description == "Thin plate spline"
        assert KernelType.INVERSE_MULTIQUADRIC.description == "Inverse multiquadric"
