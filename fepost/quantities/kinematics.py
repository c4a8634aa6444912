"""Kinematic quantities of a vector field (typically a velocity).

Classes
-------
Magnitude
    Euclidean norm of the field value.
Divergence
    Trace of the velocity gradient.
Vorticity
    Curl of a 2-D or 3-D velocity field.
StrainRateNorm
    Norm of the symmetric part of the velocity gradient.
"""

from __future__ import annotations

import numpy as np

from fepost.postprocess.base import (
    ComponentInterpretation,
    DataPostprocessor,
    UpdateFlags,
)
from fepost.postprocess.named import ScalarQuantity


def _velocity_gradient(gradients: np.ndarray, offset: int) -> np.ndarray:
    """Slice the ``(n, dim, dim)`` velocity block out of field gradients.

    The velocity occupies components ``offset .. offset + dim - 1`` so that
    mixed fields (e.g. velocity followed by pressure) are supported.
    """
    dim = gradients.shape[-1]
    block = gradients[:, offset:offset + dim, :]
    if block.shape[1] != dim:
        raise ValueError(
            f"Field has {gradients.shape[1]} components; cannot take a "
            f"{dim}-D velocity starting at component {offset}."
        )
    return block


class Magnitude(ScalarQuantity):
    """Euclidean norm ``|u|`` of a vector-valued field.

    Args:
        name: Output name.
        components: Optional indices of the components to include.
            Defaults to all components.
    """

    def __init__(
        self,
        name: str = "magnitude",
        components: tuple[int, ...] | None = None,
    ) -> None:
        super().__init__(name, UpdateFlags.VALUES)
        self.components = None if components is None else tuple(components)

    def compute_derived_quantities_vector(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        u = values if self.components is None else values[:, list(self.components)]
        computed[:, 0] = np.linalg.norm(u, axis=1)


class Divergence(ScalarQuantity):
    """Divergence ``div u`` of a velocity field.

    Args:
        name: Output name.
        offset: Index of the first velocity component in the field.
    """

    def __init__(self, name: str = "divergence", offset: int = 0) -> None:
        super().__init__(name, UpdateFlags.GRADIENTS)
        self.offset = offset

    def compute_derived_quantities_vector(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        grad_u = _velocity_gradient(gradients, self.offset)
        computed[:, 0] = np.trace(grad_u, axis1=1, axis2=2)


class Vorticity(DataPostprocessor):
    """Vorticity ``curl u`` of a velocity field.

    In 2-D the vorticity is the scalar ``du_y/dx - du_x/dy``; in 3-D it is
    a vector with three columns, all named *name*.

    Args:
        dim: Spatial dimension, 2 or 3.
        name: Output name.
        offset: Index of the first velocity component in the field.
    """

    def __init__(self, dim: int, name: str = "vorticity", offset: int = 0) -> None:
        if dim not in (2, 3):
            raise ValueError(f"Vorticity is defined for dim 2 or 3, got {dim}.")
        self.dim = dim
        self.name = name
        self.offset = offset

    def get_needed_update_flags(self) -> UpdateFlags:
        return UpdateFlags.GRADIENTS

    def get_names(self) -> list[str]:
        return [self.name] if self.dim == 2 else [self.name] * 3

    def get_data_component_interpretation(self) -> list[ComponentInterpretation]:
        if self.dim == 2:
            return [ComponentInterpretation.SCALAR]
        return [ComponentInterpretation.PART_OF_VECTOR] * 3

    def compute_derived_quantities_vector(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        if gradients.shape[-1] != self.dim:
            raise ValueError(
                f"Vorticity configured for dim {self.dim} got "
                f"{gradients.shape[-1]}-D gradients."
            )
        G = _velocity_gradient(gradients, self.offset)
        # G[i, a, b] = d u_a / d x_b
        if self.dim == 2:
            computed[:, 0] = G[:, 1, 0] - G[:, 0, 1]
        else:
            computed[:, 0] = G[:, 2, 1] - G[:, 1, 2]
            computed[:, 1] = G[:, 0, 2] - G[:, 2, 0]
            computed[:, 2] = G[:, 1, 0] - G[:, 0, 1]


class StrainRateNorm(ScalarQuantity):
    """Strain-rate magnitude ``sqrt(2 D:D)`` with ``D = sym(grad u)``.

    Args:
        name: Output name.
        offset: Index of the first velocity component in the field.
    """

    def __init__(self, name: str = "strain_rate", offset: int = 0) -> None:
        super().__init__(name, UpdateFlags.GRADIENTS)
        self.offset = offset

    def compute_derived_quantities_vector(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        G = _velocity_gradient(gradients, self.offset)
        D = 0.5 * (G + np.swapaxes(G, 1, 2))
        computed[:, 0] = np.sqrt(2.0 * np.einsum("nij,nij->n", D, D))
