"""Ready-made derived quantities for common fields."""

from fepost.quantities.kinematics import (
    Magnitude,
    Divergence,
    Vorticity,
    StrainRateNorm,
)
from fepost.quantities.derivatives import GradientNorm, HessianNorm, Laplacian
from fepost.quantities.mechanics import ElasticStressInvariants
from fepost.quantities.boundary import NormalFlux, NormalComponent

__all__ = [
    "Magnitude",
    "Divergence",
    "Vorticity",
    "StrainRateNorm",
    "GradientNorm",
    "HessianNorm",
    "Laplacian",
    "ElasticStressInvariants",
    "NormalFlux",
    "NormalComponent",
]
