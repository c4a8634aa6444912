"""Stress invariants of a linear-elastic displacement field.

Small-strain isotropic elasticity::

    ε = sym(∇u)
    σ = λ tr(ε) I + 2 μ ε

In 2-D the out-of-plane stress follows from the plane-strain
(``σ_zz = λ tr(ε)``) or plane-stress (``σ_zz = 0``) assumption.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from fepost.postprocess.base import DataPostprocessor, UpdateFlags


@dataclass(frozen=True)
class ElasticStressInvariants(DataPostprocessor):
    """Mean stress and von Mises stress from displacement gradients.

    Tension is positive.  Material parameters are fixed at construction.

    Args:
        youngs_modulus: Young's modulus E (Pa).
        poissons_ratio: Poisson's ratio ν (–).
        plane_strain: 2-D assumption; ignored in 3-D.
        offset: Index of the first displacement component in the field.
    """

    youngs_modulus: float
    poissons_ratio: float
    plane_strain: bool = True
    offset: int = 0

    def __post_init__(self) -> None:
        if self.youngs_modulus <= 0:
            raise ValueError(
                f"youngs_modulus must be positive, got {self.youngs_modulus}."
            )
        if not -1.0 < self.poissons_ratio < 0.5:
            raise ValueError(
                f"poissons_ratio must lie in (-1, 0.5), got {self.poissons_ratio}."
            )

    @property
    def lame_lambda(self) -> float:
        """First Lamé parameter λ."""
        E, nu = self.youngs_modulus, self.poissons_ratio
        return E * nu / ((1 + nu) * (1 - 2 * nu))

    @property
    def shear_modulus(self) -> float:
        """Shear modulus μ."""
        return self.youngs_modulus / (2 * (1 + self.poissons_ratio))

    def get_needed_update_flags(self) -> UpdateFlags:
        return UpdateFlags.GRADIENTS

    def get_names(self) -> list[str]:
        return ["mean_stress", "von_mises"]

    def compute_derived_quantities_vector(
        self, computed, values, gradients, hessians, normals
    ) -> None:
        dim = gradients.shape[-1]
        G = gradients[:, self.offset:self.offset + dim, :]
        if G.shape[1] != dim:
            raise ValueError(
                f"Field has {gradients.shape[1]} components; cannot take a "
                f"{dim}-D displacement starting at component {self.offset}."
            )
        eps = 0.5 * (G + np.swapaxes(G, 1, 2))
        tr_eps = np.trace(eps, axis1=1, axis2=2)

        lam, mu = self.lame_lambda, self.shear_modulus
        if dim == 2 and not self.plane_strain:
            lam = 2 * lam * mu / (lam + 2 * mu)

        sigma = lam * tr_eps[:, None, None] * np.eye(dim) + 2 * mu * eps
        if dim == 2:
            sigma_zz = lam * tr_eps if self.plane_strain else np.zeros_like(tr_eps)
        else:
            sigma_zz = None

        trace = np.trace(sigma, axis1=1, axis2=2)
        if sigma_zz is not None:
            trace = trace + sigma_zz
        mean = trace / 3.0

        dev = sigma - mean[:, None, None] * np.eye(dim)
        ss = np.einsum("nij,nij->n", dev, dev)
        if sigma_zz is not None:
            ss = ss + (sigma_zz - mean) ** 2

        computed[:, 0] = mean
        computed[:, 1] = np.sqrt(1.5 * ss)
