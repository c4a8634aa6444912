"""Postprocessor contract: required data, output names, transforms."""

from fepost.postprocess.base import (
    ComponentInterpretation,
    DataPostprocessor,
    UnsupportedVariantError,
    UpdateFlags,
)
from fepost.postprocess.named import ScalarQuantity, VectorQuantity

__all__ = [
    "ComponentInterpretation",
    "DataPostprocessor",
    "UnsupportedVariantError",
    "UpdateFlags",
    "ScalarQuantity",
    "VectorQuantity",
]
