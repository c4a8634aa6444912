"""Container for the raw samples of one cell or face batch.

Classes
-------
PointSampleBatch
    Values, gradients, Hessians and normals at the evaluation points of
    one cell or face.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike


def _placeholder() -> np.ndarray:
    return np.empty((0,), dtype=float)


@dataclass
class PointSampleBatch:
    """Raw field samples at the evaluation points of one cell or face.

    Arrays the evaluator was not asked for may be left as ``None``; they
    are replaced by empty placeholders that postprocessors must not read.

    Args:
        values: Shape ``(n,)`` for a scalar field, ``(n, c)`` for a
            field with ``c`` components.
        gradients: ``(n, dim)`` or ``(n, c, dim)``.
        hessians: ``(n, dim, dim)`` or ``(n, c, dim, dim)``.
        normals: ``(n, dim)`` on faces.  Always empty on cells.
        on_face: Whether the points lie on a face rather than in a cell.
    """

    values: ArrayLike
    gradients: ArrayLike | None = None
    hessians: ArrayLike | None = None
    normals: ArrayLike | None = None
    on_face: bool = False

    def __post_init__(self) -> None:
        self.values = np.asarray(self.values, dtype=float)
        if self.values.ndim not in (1, 2):
            raise ValueError(
                f"values must have shape (n,) or (n, c), got {self.values.shape}."
            )
        n = self.n_points

        self.gradients = self._optional(self.gradients, "gradients", n)
        self.hessians = self._optional(self.hessians, "hessians", n)

        if self.normals is None:
            self.normals = np.empty((0, self._dim_hint()), dtype=float)
        else:
            self.normals = np.asarray(self.normals, dtype=float)
        if not self.on_face and len(self.normals) != 0:
            raise ValueError("Normals are only defined for face batches.")
        if len(self.normals) not in (0, n):
            raise ValueError(
                f"Expected 0 or {n} normals, got {len(self.normals)}."
            )

    @staticmethod
    def _optional(data: ArrayLike | None, label: str, n: int) -> np.ndarray:
        if data is None:
            return _placeholder()
        arr = np.asarray(data, dtype=float)
        if arr.size and arr.shape[0] != n:
            raise ValueError(f"Expected {label} for {n} points, got {arr.shape[0]}.")
        return arr

    def _dim_hint(self) -> int:
        for arr in (self.gradients, self.hessians):
            if arr.size:
                return arr.shape[-1]
        return 0

    @property
    def n_points(self) -> int:
        """Number of evaluation points in the batch."""
        return self.values.shape[0]

    @property
    def is_vector(self) -> bool:
        """True for a multi-component field."""
        return self.values.ndim == 2

    @property
    def n_components(self) -> int:
        """Number of field components (1 for a scalar field)."""
        return self.values.shape[1] if self.is_vector else 1

    def __repr__(self) -> str:
        kind = "face" if self.on_face else "cell"
        return (
            f"PointSampleBatch({kind}, n_points={self.n_points}, "
            f"n_components={self.n_components})"
        )
