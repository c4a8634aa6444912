"""
fepost: derived output quantities from finite-element field samples.

Subpackages
-----------
postprocess
    The postprocessor contract: required data flags, output names and
    the scalar/vector transforms.
quantities
    Ready-made postprocessors (magnitude, vorticity, stress invariants,
    face fluxes, ...).
evaluation
    Sample batches and a reference export driver.
"""

from fepost import (
    postprocess,
    quantities,
    evaluation,
)

__version__ = "0.1.0"

__all__ = [
    "postprocess",
    "quantities",
    "evaluation",
]
