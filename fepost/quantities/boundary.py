"""Quantities defined on faces, using the outward unit normal.

Normals are only supplied for face batches.  On cell batches the normal
array is empty and these quantities write NaN so the column stays
well-defined for the writer.
"""

from __future__ import annotations

import numpy as np

from fepost.postprocess.base import UpdateFlags
from fepost.postprocess.named import ScalarQuantity


class NormalFlux(ScalarQuantity):
    """Diffusive flux ``q·n = -k ∇u·n`` of a scalar field through a face.

    Args:
        conductivity: Scalar conductivity k (e.g. hydraulic or thermal).
        name: Output name.
    """

    def __init__(self, conductivity: float = 1.0, name: str = "normal_flux") -> None:
        super().__init__(name, UpdateFlags.GRADIENTS | UpdateFlags.NORMALS)
        self.conductivity = float(conductivity)

    def compute_derived_quantities_scalar(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        if len(normals) == 0:
            computed[:, 0] = np.nan
            return
        computed[:, 0] = -self.conductivity * np.einsum("nd,nd->n", gradients, normals)


class NormalComponent(ScalarQuantity):
    """Normal component ``u·n`` of a vector field on a face.

    Args:
        name: Output name.
        offset: Index of the first vector component in the field.
    """

    def __init__(self, name: str = "normal_component", offset: int = 0) -> None:
        super().__init__(name, UpdateFlags.VALUES | UpdateFlags.NORMALS)
        self.offset = offset

    def compute_derived_quantities_vector(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        if len(normals) == 0:
            computed[:, 0] = np.nan
            return
        dim = normals.shape[1]
        u = values[:, self.offset:self.offset + dim]
        if u.shape[1] != dim:
            raise ValueError(
                f"Field has {values.shape[1]} components; cannot take a "
                f"{dim}-D vector starting at component {self.offset}."
            )
        computed[:, 0] = np.einsum("nd,nd->n", u, normals)
