"""Diagnosis engine entry point and result composition.

The engine validates the raw answers once, runs the independent
components over the same immutable AnswerSet and hands their outputs to
compose_result(), which only assembles and orders:

    raw answers -> validate_answers()
                -> evaluate_themes()          (4 theme tables)
                -> aggregate_signals()        (critical points, opportunities)
                -> select_recommendations()   (all matches, priority order)
                -> classify_priority_solution()
                -> compose_result()

No component reads another's output and none keeps state between calls,
so a single engine instance can serve concurrent callers.

Example usage:
    from bizdiag import evaluate

    result = evaluate(raw_answers)
    for analysis in result.theme_analyses:
        print(f"[{analysis.status.value}] {analysis.title}")
    print(result.priority_solution)
"""

import logging
import time
from pathlib import Path
from typing import Any, Mapping

from bizdiag.core.answers import AnswerSet, validate_answers
from bizdiag.core.entities import PrioritySolution, Theme
from .config import EngineConfig, find_workspace_config
from .interface import DiagnosisResult, Recommendation, ThemeAnalysis
from .recommendations import (
    RECOMMENDATION_RULES,
    classify_priority_solution,
    select_recommendations,
)
from .signals import aggregate_signals
from .themes import evaluate_themes

logger = logging.getLogger(__name__)


NEXT_STEPS: tuple[str, ...] = (
    "Present this diagnosis to the client as a professional analysis",
    "Prioritize the solutions flagged as critical",
    "Draft a commercial proposal based on the recommendations",
    "Define a phased implementation timeline",
)

_THEME_ORDER = {theme: i for i, theme in enumerate(Theme)}


def compose_result(
    theme_analyses: tuple[ThemeAnalysis, ...],
    critical_points: tuple[str, ...],
    opportunities: tuple[str, ...],
    recommendations: tuple[Recommendation, ...],
    next_steps: tuple[str, ...] = NEXT_STEPS,
    priority_solution: PrioritySolution | None = None,
) -> DiagnosisResult:
    """Assemble component outputs into a DiagnosisResult.

    Performs ordering only: theme analyses are put in Theme order,
    everything else keeps the order its component produced.
    """
    ordered = tuple(sorted(theme_analyses, key=lambda a: _THEME_ORDER[a.theme]))

    return DiagnosisResult(
        theme_analyses=ordered,
        critical_points=tuple(critical_points),
        opportunities=tuple(opportunities),
        recommendations=tuple(recommendations),
        next_steps=tuple(next_steps),
        priority_solution=priority_solution,
    )


class DiagnosisEngine:
    """Rule-based business diagnosis engine.

    Stateless apart from its configuration, which only affects
    presentation (recommendation texts, target actions, next steps).

    Attributes:
        config: Optional EngineConfig applied to every evaluation
        name: Engine identifier ("rule_based_diagnosis")
        description: Human-readable description

    Example:
        engine = DiagnosisEngine()
        result = engine.evaluate(raw_answers)

        # With workspace presentation settings
        engine = DiagnosisEngine(config=load_engine_config(path))
    """

    def __init__(self, config: EngineConfig | None = None):
        """Initialize with optional presentation config.

        Args:
            config: Workspace presentation settings. Defaults apply if None.
        """
        self.config = config
        if config is not None:
            self._rules = config.build_rules()
            self._next_steps = tuple(config.next_steps) or NEXT_STEPS
        else:
            self._rules = RECOMMENDATION_RULES
            self._next_steps = NEXT_STEPS

    @classmethod
    def for_workspace(
        cls, workspace_id: str, config_dir: Path | None = None
    ) -> "DiagnosisEngine":
        """Engine using the workspace's config file from the config directory.

        Raises:
            FileNotFoundError: If the workspace has no config file
        """
        return cls(config=find_workspace_config(workspace_id, config_dir))

    @property
    def name(self) -> str:
        return "rule_based_diagnosis"

    @property
    def description(self) -> str:
        return "Rule-based digital maturity diagnosis for small businesses"

    def evaluate(self, raw_answers: Mapping[str, Any] | AnswerSet) -> DiagnosisResult:
        """Validate answers and produce the full diagnosis.

        Args:
            raw_answers: Questionnaire answers (mapping or AnswerSet)

        Returns:
            DiagnosisResult

        Raises:
            ValidationError: If any theme's required answers are missing
                or out of domain. No partial result is produced.
        """
        start_time = time.time()

        answers = validate_answers(raw_answers)

        theme_analyses = evaluate_themes(answers)
        critical_points, opportunities = aggregate_signals(answers)
        recommendations = select_recommendations(answers, self._rules)
        priority_solution = classify_priority_solution(answers, self._rules)

        result = compose_result(
            theme_analyses=theme_analyses,
            critical_points=critical_points,
            opportunities=opportunities,
            recommendations=recommendations,
            next_steps=self._next_steps,
            priority_solution=priority_solution,
        )

        execution_time = (time.time() - start_time) * 1000
        statuses = {t.value: s.value for t, s in result.statuses.items()}
        logger.debug(
            f"Diagnosis completed in {execution_time:.2f}ms: "
            f"statuses={statuses} recommendations={result.recommendation_ids}"
        )

        return result


_default_engine = DiagnosisEngine()


def evaluate(raw_answers: Mapping[str, Any] | AnswerSet) -> DiagnosisResult:
    """Evaluate answers with the default engine.

    Raises:
        ValidationError: If any theme cannot be evaluated
    """
    return _default_engine.evaluate(raw_answers)
