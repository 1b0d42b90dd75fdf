"""Experimentation layer: batch diagnosis, what-if sweeps."""

from bizdiag.experiment.analysis import (
    SweepResult,
    answer_sweep,
    evaluate_batch,
)

__all__ = [
    "SweepResult",
    "answer_sweep",
    "evaluate_batch",
]
