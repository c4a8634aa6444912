"""Derivative-based quantities of scalar and vector fields."""

from __future__ import annotations

import numpy as np

from fepost.postprocess.base import ComponentInterpretation, UpdateFlags
from fepost.postprocess.named import ScalarQuantity, VectorQuantity


class GradientNorm(ScalarQuantity):
    """Euclidean norm of the gradient of a scalar field."""

    def __init__(self, name: str = "gradient_norm") -> None:
        super().__init__(name, UpdateFlags.GRADIENTS)

    def compute_derived_quantities_scalar(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        computed[:, 0] = np.linalg.norm(gradients, axis=1)


class HessianNorm(ScalarQuantity):
    """Frobenius norm of the Hessian of a scalar field.

    Useful as a curvature indicator when inspecting where a solution
    varies rapidly.
    """

    def __init__(self, name: str = "hessian_norm") -> None:
        super().__init__(name, UpdateFlags.HESSIANS)

    def compute_derived_quantities_scalar(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        computed[:, 0] = np.sqrt(np.einsum("nij,nij->n", hessians, hessians))


class Laplacian(VectorQuantity):
    """Laplacian (trace of the Hessian) of each field component.

    Supports both scalar fields (``n_components=1``) and vector fields,
    in which case one column per component is written.

    Args:
        n_components: Number of field components.
        name: Output name.
    """

    def __init__(self, n_components: int = 1, name: str = "laplacian") -> None:
        super().__init__(name, UpdateFlags.HESSIANS, n_components)

    def get_data_component_interpretation(self) -> list[ComponentInterpretation]:
        if self.n_output_variables() == 1:
            return [ComponentInterpretation.SCALAR]
        return super().get_data_component_interpretation()

    def compute_derived_quantities_scalar(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        if self.n_output_variables() != 1:
            raise ValueError(
                "Scalar field given to a Laplacian configured for "
                f"{self.n_output_variables()} components."
            )
        computed[:, 0] = np.trace(hessians, axis1=1, axis2=2)

    def compute_derived_quantities_vector(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        if hessians.shape[1] != self.n_output_variables():
            raise ValueError(
                f"Field has {hessians.shape[1]} components, expected "
                f"{self.n_output_variables()}."
            )
        computed[:, :] = np.trace(hessians, axis1=2, axis2=3)
