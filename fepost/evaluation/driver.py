"""Reference export driver.

The driver walks a sequence of batches (one per cell or face), asks each
batch's evaluator for exactly the data the postprocessor declared,
allocates the output array and dispatches to the matching transform
variant.  A single postprocessor instance is reused for the whole pass.

Classes
-------
FieldEvaluator
    Protocol for the object producing raw samples of one batch.
ExportResult
    Names, interpretation and per-batch data of a finished pass.

Functions
---------
required_flags
    Flags actually forwarded to evaluators.
transform_batch
    Run a postprocessor on an already evaluated batch.
evaluate_batch
    Evaluate and transform one batch.
run_export_pass
    Evaluate and transform many batches.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Protocol, Sequence

import numpy as np

from fepost.evaluation.batch import PointSampleBatch
from fepost.postprocess.base import (
    ComponentInterpretation,
    DataPostprocessor,
    UpdateFlags,
)

logger = logging.getLogger(__name__)


class FieldEvaluator(Protocol):
    """Producer of raw field samples for one cell or face.

    Implementations may skip any array whose flag is absent from *flags*.
    Normals are only produced when *on_face* is true.
    """

    def evaluate(self, flags: UpdateFlags, on_face: bool) -> PointSampleBatch:
        ...


def required_flags(postprocessor: DataPostprocessor) -> UpdateFlags:
    """Return the flags forwarded to evaluators.

    Values are always evaluated; derivatives and normals only on request.
    """
    return postprocessor.get_needed_update_flags() | UpdateFlags.VALUES


def transform_batch(
    postprocessor: DataPostprocessor,
    batch: PointSampleBatch,
) -> np.ndarray:
    """Run *postprocessor* on the samples of one batch.

    Args:
        postprocessor: The postprocessor of the current export pass.
        batch: Samples evaluated with :func:`required_flags`.

    Returns:
        Array of shape ``(batch.n_points, n_output_variables())``.

    Raises:
        UnsupportedVariantError: If the postprocessor does not implement
            the variant matching the field's component structure.
        ValueError: If a requested gradient, Hessian or face normal array
            does not have one row per point.
        RuntimeError: If the transform changed the output shape.
    """
    flags = postprocessor.get_needed_update_flags()
    n = batch.n_points
    for flag, label, arr in (
        (UpdateFlags.GRADIENTS, "gradients", batch.gradients),
        (UpdateFlags.HESSIANS, "hessians", batch.hessians),
    ):
        if flag in flags and len(arr) != n:
            raise ValueError(
                f"{type(postprocessor).__name__} requires {label} but the "
                f"batch with {n} points carries {len(arr)}."
            )
    if (
        batch.on_face
        and UpdateFlags.NORMALS in flags
        and len(batch.normals) != batch.n_points
    ):
        raise ValueError(
            f"Face batch with {batch.n_points} points carries "
            f"{len(batch.normals)} normals."
        )

    computed = np.empty((batch.n_points, postprocessor.n_output_variables()))
    shape = computed.shape
    if batch.is_vector:
        transform = postprocessor.compute_derived_quantities_vector
    else:
        transform = postprocessor.compute_derived_quantities_scalar
    transform(computed, batch.values, batch.gradients, batch.hessians, batch.normals)

    if computed.shape != shape:
        raise RuntimeError(
            f"{type(postprocessor).__name__} resized its output from "
            f"{shape} to {computed.shape}."
        )
    return computed


def evaluate_batch(
    postprocessor: DataPostprocessor,
    evaluator: FieldEvaluator,
    on_face: bool = False,
) -> np.ndarray:
    """Evaluate one cell or face batch and run *postprocessor* on it.

    Raises:
        ValueError: If the evaluator returns a batch whose origin does not
            match *on_face*.
    """
    batch = evaluator.evaluate(required_flags(postprocessor), on_face)
    if batch.on_face != on_face:
        kind = "face" if on_face else "cell"
        raise ValueError(f"Evaluator returned {batch!r} for a {kind} batch.")
    return transform_batch(postprocessor, batch)


@dataclass
class ExportResult:
    """Output of one export pass, ready to be handed to a writer.

    Attributes:
        names: Output names, one per column.
        interpretation: Component interpretation, one per column.
        data: One ``(n_points, n_columns)`` array per batch, in the order
            the batches were given.
    """

    names: list[str]
    interpretation: list[ComponentInterpretation]
    data: list[np.ndarray] = field(default_factory=list)

    @property
    def n_points(self) -> int:
        """Total number of points over all batches."""
        return sum(len(d) for d in self.data)

    def stacked(self) -> np.ndarray:
        """All batches concatenated, shape ``(n_points, n_columns)``."""
        if not self.data:
            return np.empty((0, len(self.names)))
        return np.vstack(self.data)

    def fields(self) -> dict[str, np.ndarray]:
        """Group columns by name.

        Scalar outputs yield arrays of shape ``(n_points,)``; columns
        sharing a name and marked ``PART_OF_VECTOR`` yield
        ``(n_points, k)``.
        """
        table = self.stacked()
        columns: dict[str, list[int]] = {}
        for i, name in enumerate(self.names):
            columns.setdefault(name, []).append(i)

        out: dict[str, np.ndarray] = {}
        for name, idx in columns.items():
            is_vector = any(
                self.interpretation[i] is ComponentInterpretation.PART_OF_VECTOR
                for i in idx
            )
            out[name] = table[:, idx] if is_vector else table[:, idx[0]]
        return out


def run_export_pass(
    postprocessor: DataPostprocessor,
    evaluators: Sequence[FieldEvaluator],
    on_face: bool = False,
    max_workers: int | None = None,
) -> ExportResult:
    """Evaluate and transform every batch with one postprocessor.

    The first failure aborts the pass and propagates; no partial result
    is returned.

    Args:
        postprocessor: Postprocessor reused for every batch.
        evaluators: One evaluator per cell or face.
        on_face: Whether the batches are faces rather than cells.
        max_workers: Number of worker threads.  ``None`` or 1 processes
            batches serially.

    Returns:
        An :class:`ExportResult`.
    """
    names = postprocessor.get_names()
    interpretation = postprocessor.get_data_component_interpretation()
    logger.debug(
        "Export pass: %r over %d %s batches (flags=%s, workers=%s)",
        postprocessor, len(evaluators), "face" if on_face else "cell",
        required_flags(postprocessor), max_workers,
    )

    run = partial(evaluate_batch, postprocessor, on_face=on_face)
    if max_workers is None or max_workers <= 1:
        data = [run(ev) for ev in evaluators]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            data = list(pool.map(run, evaluators))

    logger.debug("Export pass finished: %d points", sum(len(d) for d in data))
    return ExportResult(names=names, interpretation=interpretation, data=data)
