"""Abstract base class for derived-quantity postprocessors.

A postprocessor turns raw finite-element samples (values, gradients,
Hessians and, on faces, normals) at a batch of evaluation points into a
fixed-width vector of named output quantities per point.  The export
driver asks it up front which derivative orders it needs, allocates the
output array, and calls one of the two transform variants per batch.

Classes
-------
UpdateFlags
    Declarative set of input data a postprocessor requires.
ComponentInterpretation
    Hint to writers on how an output column should be grouped.
DataPostprocessor
    The postprocessor contract.
UnsupportedVariantError
    Raised when the wrong transform variant is invoked.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod

import numpy as np


class UpdateFlags(enum.Flag):
    """Input data a postprocessor needs the evaluator to compute."""

    NOTHING = 0
    VALUES = enum.auto()
    GRADIENTS = enum.auto()
    HESSIANS = enum.auto()
    NORMALS = enum.auto()


class ComponentInterpretation(enum.Enum):
    """How a writer should treat one output column."""

    SCALAR = "scalar"
    PART_OF_VECTOR = "part_of_vector"


class UnsupportedVariantError(NotImplementedError):
    """The scalar/vector transform variant called is not implemented.

    Signals that the driver misjudged the component structure of the
    field.  It is fatal to the current export pass.
    """


class DataPostprocessor(ABC):
    """Abstract derived-quantity postprocessor.

    Concrete subclasses declare their required input data, the names of
    their outputs, and override whichever transform variant matches the
    field they are meant for: :meth:`compute_derived_quantities_scalar`
    for single-component fields, :meth:`compute_derived_quantities_vector`
    for multi-component ones.  The other variant keeps its default, which
    raises :class:`UnsupportedVariantError`.

    Array shapes for a batch of ``n`` points in ``dim`` dimensions with
    ``c`` field components:

    =========  ==================  =======================
    argument   scalar variant      vector variant
    =========  ==================  =======================
    values     ``(n,)``            ``(n, c)``
    gradients  ``(n, dim)``        ``(n, c, dim)``
    hessians   ``(n, dim, dim)``   ``(n, c, dim, dim)``
    normals    ``(n, dim)`` on faces, ``(0, dim)`` on cells
    computed   ``(n, n_output_variables())``
    =========  ==================  =======================

    Arrays not covered by :meth:`get_needed_update_flags` are in an
    unspecified state and must not be read.  ``computed`` is owned by the
    caller; every slot must be written and the array must not be
    resized.

    Instances are built once per export pass and reused for every batch.
    Flags, names and count never change after construction, and a
    transform keeps no state between calls, so disjoint batches may be
    processed from several threads at once.
    """

    @abstractmethod
    def get_needed_update_flags(self) -> UpdateFlags:
        """Return the input data the evaluator must provide."""

    @abstractmethod
    def get_names(self) -> list[str]:
        """Return the output quantity names, one per output column."""

    def n_output_variables(self) -> int:
        """Number of scalar outputs per evaluation point."""
        return len(self.get_names())

    def get_data_component_interpretation(self) -> list[ComponentInterpretation]:
        """Return how each output column should be interpreted by writers.

        Defaults to treating every column as an independent scalar.
        Subclasses producing vector quantities mark the columns that make
        up one vector as :attr:`ComponentInterpretation.PART_OF_VECTOR`.
        """
        return [ComponentInterpretation.SCALAR] * self.n_output_variables()

    def compute_derived_quantities_scalar(
        self,
        computed: np.ndarray,
        values: np.ndarray,
        gradients: np.ndarray,
        hessians: np.ndarray,
        normals: np.ndarray,
    ) -> None:
        """Fill *computed* from samples of a single-component field.

        Args:
            computed: Output array, shape ``(n, n_output_variables())``.
            values: Field values, shape ``(n,)``.
            gradients: Field gradients, shape ``(n, dim)``.
            hessians: Field Hessians, shape ``(n, dim, dim)``.
            normals: Face normals, shape ``(n, dim)`` or ``(0, dim)``.

        Raises:
            UnsupportedVariantError: If the subclass does not support
                scalar fields.
        """
        raise UnsupportedVariantError(
            f"{type(self).__name__} does not support scalar-valued fields."
        )

    def compute_derived_quantities_vector(
        self,
        computed: np.ndarray,
        values: np.ndarray,
        gradients: np.ndarray,
        hessians: np.ndarray,
        normals: np.ndarray,
    ) -> None:
        """Fill *computed* from samples of a multi-component field.

        Args:
            computed: Output array, shape ``(n, n_output_variables())``.
            values: Field values, shape ``(n, c)``.
            gradients: Field gradients, shape ``(n, c, dim)``.
            hessians: Field Hessians, shape ``(n, c, dim, dim)``.
            normals: Face normals, shape ``(n, dim)`` or ``(0, dim)``.

        Raises:
            UnsupportedVariantError: If the subclass does not support
                vector-valued fields.
        """
        raise UnsupportedVariantError(
            f"{type(self).__name__} does not support vector-valued fields."
        )

    def validate(self) -> list[str]:
        """Run basic consistency checks on the declared outputs.

        Returns:
            List of warning/error strings (empty if all OK).
        """
        issues: list[str] = []
        names = self.get_names()
        n_out = self.n_output_variables()
        if n_out != len(names):
            issues.append(
                f"n_output_variables() is {n_out} but get_names() "
                f"returned {len(names)} names."
            )
        if any(not name for name in names):
            issues.append("Empty output name.")
        interpretation = self.get_data_component_interpretation()
        if len(interpretation) != n_out:
            issues.append(
                f"Component interpretation has {len(interpretation)} "
                f"entries, expected {n_out}."
            )
        # Repeated names are only legal for columns forming one vector.
        seen: set[str] = set()
        for name, kind in zip(names, interpretation):
            if name in seen and kind is not ComponentInterpretation.PART_OF_VECTOR:
                issues.append(f"Duplicate output name {name!r}.")
            seen.add(name)
        if not isinstance(self.get_needed_update_flags(), UpdateFlags):
            issues.append("get_needed_update_flags() must return UpdateFlags.")
        return issues

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(names={self.get_names()!r}, "
            f"flags={self.get_needed_update_flags()!r})"
        )
