"""Batch evaluation and what-if analysis tools.

- evaluate_batch(): Diagnose many answer sets, one DataFrame row each
- answer_sweep(): Vary one answer, observe statuses and recommendations
- SweepResult: Structured sweep result
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from bizdiag.core.answers import SCHEMA_BY_KEY, AnswerSet, ValidationError
from bizdiag.core.entities import Theme
from bizdiag.engine.composer import DiagnosisEngine
from bizdiag.engine.config import EngineConfig
from bizdiag.engine.interface import DiagnosisResult

logger = logging.getLogger(__name__)

RawAnswers = Union[Mapping[str, Any], AnswerSet]

RESULT_COLUMNS: List[str] = [f"status_{theme.value}" for theme in Theme] + [
    "n_critical_points",
    "n_opportunities",
    "recommendations",
    "priority_solution",
]
_COUNT_COLUMNS = {"n_critical_points": int, "n_opportunities": int}


def _to_frame(
    rows: List[Dict[str, Any]],
    columns: List[str],
    index: Optional[pd.Index] = None,
) -> pd.DataFrame:
    """Build a frame whose missing values stay None.

    Text columns are kept as object dtype so a None in one row never
    turns into NaN because other rows hold strings.
    """
    df = pd.DataFrame(rows, columns=columns, index=index, dtype=object)
    return df.astype(_COUNT_COLUMNS)


def _result_row(result: Optional[DiagnosisResult]) -> Dict[str, Any]:
    """Flatten a result into DataFrame columns (None-filled when absent)."""
    row: Dict[str, Any] = {}
    for theme in Theme:
        row[f"status_{theme.value}"] = (
            result.get_theme(theme).status.value if result else None
        )
    row["n_critical_points"] = len(result.critical_points) if result else 0
    row["n_opportunities"] = len(result.opportunities) if result else 0
    row["recommendations"] = result.recommendation_ids if result else []
    row["priority_solution"] = (
        result.priority_solution.value
        if result and result.priority_solution
        else None
    )
    return row


def _evaluate_row(
    raw: RawAnswers,
    config: Optional[EngineConfig],
    fail_open: bool,
) -> Dict[str, Any]:
    """Evaluate one answer set (helper for parallel execution)."""
    engine = DiagnosisEngine(config=config)
    try:
        result = engine.evaluate(raw)
    except ValidationError as e:
        if not fail_open:
            raise
        row = _result_row(None)
        row["error"] = str(e)
        return row

    row = _result_row(result)
    row["error"] = None
    return row


def evaluate_batch(
    answer_sets: Iterable[RawAnswers],
    config: Optional[EngineConfig] = None,
    fail_open: bool = False,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> pd.DataFrame:
    """Diagnose many answer sets.

    Args:
        answer_sets: Raw answer records or AnswerSets.
        config: Presentation config applied to every evaluation.
        fail_open: Record validation failures in the 'error' column
            instead of raising (default False).
        parallel: Evaluate in a process pool (default False).
        max_workers: Pool size when parallel is True.

    Returns:
        DataFrame with one row per input, in input order: status per
        theme, counts of critical points and opportunities,
        recommendation ids, priority solution and error message.

    Raises:
        ValidationError: If fail_open is False and any input is invalid.
    """
    items = list(answer_sets)
    configs = [config] * len(items)
    flags = [fail_open] * len(items)

    if parallel and len(items) > 1:
        with ProcessPoolExecutor(max_workers=max_workers) as pool:
            rows = list(pool.map(_evaluate_row, items, configs, flags))
    else:
        rows = [_evaluate_row(*args) for args in zip(items, configs, flags)]

    n_failed = sum(1 for row in rows if row["error"])
    if n_failed:
        logger.warning(f"{n_failed} of {len(rows)} answer sets failed validation")

    return _to_frame(
        rows,
        RESULT_COLUMNS + ["error"],
        index=pd.RangeIndex(len(rows), name="index"),
    )


@dataclass
class SweepResult:
    """Result of an answer sweep.

    Attributes:
        key: Question key that was varied.
        values: Values tested, in order.
        results: DataFrame with columns: value, status per theme,
            n_critical_points, n_opportunities, recommendations,
            priority_solution.
    """
    key: str
    values: List[Any]
    results: pd.DataFrame

    def to_dataframe(self) -> pd.DataFrame:
        """Return results as DataFrame."""
        return self.results

    def statuses(self, theme: Theme) -> List[str]:
        """Status of one theme for each tested value."""
        return list(self.results[f"status_{theme.value}"])


def answer_sweep(
    base_answers: RawAnswers,
    key: str,
    values: List[Any],
    config: Optional[EngineConfig] = None,
) -> SweepResult:
    """Vary one answer across values, holding all others fixed.

    Args:
        base_answers: Starting answers. May omit the swept key.
        key: Question key to vary (e.g., 'organization_level').
        values: Values to test.
        config: Presentation config for the engine.

    Returns:
        SweepResult with one row per value.

    Raises:
        ValueError: If key is not a questionnaire key.
        ValidationError: If a tested combination is invalid.

    Example:
        >>> result = answer_sweep(answers, 'organization_level', [1, 2, 3, 4, 5])
        >>> print(result.to_dataframe())

    Plain Language:
        This answers "what if" questions one answer at a time, e.g. "if
        the client reaches organization level 4, does Operations stop
        being critical?"
    """
    if key not in SCHEMA_BY_KEY:
        raise ValueError(f"Unknown questionnaire key: {key}")

    if isinstance(base_answers, AnswerSet):
        base = base_answers.to_dict()
    else:
        base = dict(base_answers)

    engine = DiagnosisEngine(config=config)
    results_data = []

    for value in values:
        answers = dict(base)
        answers[key] = value
        row = {"value": value}
        row.update(_result_row(engine.evaluate(answers)))
        results_data.append(row)

    return SweepResult(
        key=key,
        values=list(values),
        results=_to_frame(results_data, ["value"] + RESULT_COLUMNS),
    )
