"""Convenience bases for postprocessors with a single named output.

Classes
-------
ScalarQuantity
    One output column with one name.
VectorQuantity
    ``n_components`` output columns that together form one vector.
"""

from __future__ import annotations

from fepost.postprocess.base import (
    ComponentInterpretation,
    DataPostprocessor,
    UpdateFlags,
)


class ScalarQuantity(DataPostprocessor):
    """Postprocessor producing one scalar per point.

    Subclasses only implement the transform variant(s) they support.

    Args:
        name: Output name handed to the writer.
        update_flags: Input data required by the transform.
    """

    def __init__(self, name: str, update_flags: UpdateFlags) -> None:
        if not name:
            raise ValueError("Output name must be a non-empty string.")
        self._name = name
        self._update_flags = update_flags

    def get_needed_update_flags(self) -> UpdateFlags:
        return self._update_flags

    def get_names(self) -> list[str]:
        return [self._name]

    def n_output_variables(self) -> int:
        return 1


class VectorQuantity(DataPostprocessor):
    """Postprocessor producing one vector of fixed length per point.

    All columns share *name* and are marked
    :attr:`~fepost.postprocess.base.ComponentInterpretation.PART_OF_VECTOR`
    so that writers group them into a single vector field.

    Args:
        name: Output name handed to the writer.
        update_flags: Input data required by the transform.
        n_components: Length of the output vector (usually ``dim``).
    """

    def __init__(
        self,
        name: str,
        update_flags: UpdateFlags,
        n_components: int,
    ) -> None:
        if not name:
            raise ValueError("Output name must be a non-empty string.")
        if n_components < 1:
            raise ValueError(f"n_components must be >= 1, got {n_components}.")
        self._name = name
        self._update_flags = update_flags
        self._n_components = int(n_components)

    def get_needed_update_flags(self) -> UpdateFlags:
        return self._update_flags

    def get_names(self) -> list[str]:
        return [self._name] * self._n_components

    def n_output_variables(self) -> int:
        return self._n_components

    def get_data_component_interpretation(self) -> list[ComponentInterpretation]:
        return [ComponentInterpretation.PART_OF_VECTOR] * self._n_components
