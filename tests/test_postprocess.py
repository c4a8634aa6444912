"""Tests for the postprocessor contract."""

import numpy as np
import pytest

from fepost.postprocess.base import (
    ComponentInterpretation,
    DataPostprocessor,
    UnsupportedVariantError,
    UpdateFlags,
)
from fepost.postprocess.named import ScalarQuantity, VectorQuantity
from fepost.quantities import (
    Divergence,
    ElasticStressInvariants,
    GradientNorm,
    HessianNorm,
    Laplacian,
    Magnitude,
    NormalComponent,
    NormalFlux,
    StrainRateNorm,
    Vorticity,
)


class Poisoned:
    """Stand-in for an array the postprocessor must never touch."""

    def __array__(self, *args, **kwargs):
        raise AssertionError("undeclared input was read")

    def __len__(self):
        raise AssertionError("undeclared input was read")

    def __getitem__(self, key):
        raise AssertionError("undeclared input was read")

    def __iter__(self):
        raise AssertionError("undeclared input was read")


class VectorMagnitude(DataPostprocessor):
    """Euclidean norm of the value; declares gradients only."""

    def get_needed_update_flags(self):
        return UpdateFlags.GRADIENTS

    def get_names(self):
        return ["magnitude"]

    def n_output_variables(self):
        return 1

    def compute_derived_quantities_vector(
        self, computed, values, gradients, hessians, normals
    ):
        computed[:, 0] = np.linalg.norm(values, axis=1)


class Doubled(ScalarQuantity):
    """Twice the value of a scalar field; values only."""

    def __init__(self):
        super().__init__("doubled", UpdateFlags.VALUES)

    def compute_derived_quantities_scalar(
        self, computed, values, gradients, hessians, normals
    ):
        computed[:, 0] = 2.0 * values


class Mismatched(DataPostprocessor):
    def get_needed_update_flags(self):
        return UpdateFlags.VALUES

    def get_names(self):
        return ["a", "b"]

    def n_output_variables(self):
        return 3


ALL_QUANTITIES = [
    (Magnitude(), True),
    (Divergence(), True),
    (Vorticity(dim=3), True),
    (StrainRateNorm(), True),
    (GradientNorm(), False),
    (HessianNorm(), False),
    (Laplacian(), False),
    (Laplacian(n_components=3), True),
    (ElasticStressInvariants(youngs_modulus=1.0, poissons_ratio=0.3), True),
    (NormalFlux(conductivity=2.0), False),
    (NormalComponent(), True),
    (VectorMagnitude(), True),
    (Doubled(), False),
]


def _inputs(postprocessor, vector, rng, n=4, c=3, dim=3):
    """Valid inputs for declared data, poisoned placeholders otherwise."""
    flags = postprocessor.get_needed_update_flags()
    values = rng.normal(size=(n, c) if vector else (n,))
    gradients = (
        rng.normal(size=(n, c, dim) if vector else (n, dim))
        if UpdateFlags.GRADIENTS in flags else Poisoned()
    )
    hessians = (
        rng.normal(size=(n, c, dim, dim) if vector else (n, dim, dim))
        if UpdateFlags.HESSIANS in flags else Poisoned()
    )
    normals = (
        rng.normal(size=(n, dim)) if UpdateFlags.NORMALS in flags else Poisoned()
    )
    return values, gradients, hessians, normals


def _transform(postprocessor, vector):
    if vector:
        return postprocessor.compute_derived_quantities_vector
    return postprocessor.compute_derived_quantities_scalar


class TestDeclarations:
    @pytest.mark.parametrize("pp, vector", ALL_QUANTITIES)
    def test_count_matches_names(self, pp, vector):
        for _ in range(3):
            assert pp.n_output_variables() == len(pp.get_names())
        assert pp.get_names() == pp.get_names()
        assert pp.get_needed_update_flags() == pp.get_needed_update_flags()

    @pytest.mark.parametrize("pp, vector", ALL_QUANTITIES)
    def test_validate_clean(self, pp, vector):
        assert pp.validate() == []

    @pytest.mark.parametrize("pp, vector", ALL_QUANTITIES)
    def test_interpretation_length(self, pp, vector):
        interp = pp.get_data_component_interpretation()
        assert len(interp) == pp.n_output_variables()
        assert all(isinstance(k, ComponentInterpretation) for k in interp)

    def test_validate_reports_mismatch(self):
        issues = Mismatched().validate()
        assert any("n_output_variables" in msg for msg in issues)

    def test_validate_reports_duplicate_scalar_names(self):
        class Duplicated(Mismatched):
            def get_names(self):
                return ["a", "a"]

            def n_output_variables(self):
                return 2

        issues = Duplicated().validate()
        assert any("Duplicate" in msg for msg in issues)

    def test_vector_quantity_shares_name(self):
        pp = VectorQuantity("velocity", UpdateFlags.VALUES, 3)
        assert pp.get_names() == ["velocity"] * 3
        assert pp.validate() == []

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            ScalarQuantity("", UpdateFlags.VALUES)

    def test_flags_combine(self):
        flags = NormalFlux().get_needed_update_flags()
        assert UpdateFlags.GRADIENTS in flags
        assert UpdateFlags.NORMALS in flags
        assert UpdateFlags.HESSIANS not in flags

    def test_repr(self):
        assert "doubled" in repr(Doubled())


class TestTransformContract:
    @pytest.mark.parametrize("pp, vector", ALL_QUANTITIES)
    def test_fills_every_slot_without_resizing(self, pp, vector):
        rng = np.random.default_rng(0)
        values, gradients, hessians, normals = _inputs(pp, vector, rng)
        computed = np.full((len(values), pp.n_output_variables()), np.inf)
        _transform(pp, vector)(computed, values, gradients, hessians, normals)
        assert computed.shape == (len(values), pp.n_output_variables())
        assert not np.isinf(computed).any()

    def test_undeclared_derivatives_do_not_affect_output(self):
        pp = Doubled()
        values = np.array([1.0, -2.0, 3.5])
        good = np.empty((3, 1))
        bad = np.empty((3, 1))
        pp.compute_derived_quantities_scalar(
            good, values, np.ones((3, 2)), np.ones((3, 2, 2)), np.empty((0, 2))
        )
        pp.compute_derived_quantities_scalar(
            bad, values, np.full((7,), np.nan), np.empty((0,)), np.empty((0, 2))
        )
        np.testing.assert_array_equal(good, bad)
        np.testing.assert_allclose(good[:, 0], [2.0, -4.0, 7.0])

    def test_vector_magnitude_scenario(self):
        pp = VectorMagnitude()
        values = np.array([[3.0, 4.0], [0.0, 5.0]])
        gradients = np.array([
            [[1.0, 0.0], [0.0, 1.0]],
            [[0.0, 0.0], [0.0, 1.0]],
        ])
        computed = np.empty((2, pp.n_output_variables()))
        pp.compute_derived_quantities_vector(
            computed, values, gradients, np.empty((0,)), np.empty((0, 2))
        )
        np.testing.assert_allclose(computed[:, 0], [5.0, 5.0])

    def test_scalar_variant_unimplemented(self):
        pp = VectorMagnitude()
        computed = np.zeros((2, 1))
        with pytest.raises(UnsupportedVariantError):
            pp.compute_derived_quantities_scalar(
                computed, np.ones(2), np.ones((2, 2)), np.empty((0,)), np.empty((0, 2))
            )

    def test_vector_variant_unimplemented(self):
        pp = Doubled()
        computed = np.zeros((2, 1))
        with pytest.raises(UnsupportedVariantError):
            pp.compute_derived_quantities_vector(
                computed, np.ones((2, 2)), Poisoned(), Poisoned(), np.empty((0, 2))
            )

    def test_unsupported_variant_is_not_implemented_error(self):
        assert issubclass(UnsupportedVariantError, NotImplementedError)
