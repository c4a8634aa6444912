"""Evaluation: sample batches and the reference export driver."""

from fepost.evaluation.batch import PointSampleBatch
from fepost.evaluation.driver import (
    ExportResult,
    FieldEvaluator,
    evaluate_batch,
    required_flags,
    run_export_pass,
    transform_batch,
)

__all__ = [
    "PointSampleBatch",
    "ExportResult",
    "FieldEvaluator",
    "evaluate_batch",
    "required_flags",
    "run_export_pass",
    "transform_batch",
]
