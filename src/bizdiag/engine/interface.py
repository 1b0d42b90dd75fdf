"""Data models shared by the diagnosis engine components.

Outputs (ThemeAnalysis, Recommendation, DiagnosisResult) are frozen value
objects created fresh for each evaluation. Rule records (StatusCondition,
TriggerRule, RecommendationRule) are the building blocks of the engine's
rule tables: a predicate over an AnswerSet paired with the payload it
contributes when the predicate holds.
"""

from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd

from bizdiag.core.answers import AnswerSet
from bizdiag.core.entities import PrioritySolution, Status, Theme

Predicate = Callable[[AnswerSet], bool]


# ============ RULE RECORDS ============


@dataclass(frozen=True)
class StatusCondition:
    """One row of a theme decision table.

    Attributes:
        status: Status assigned when the predicate holds
        predicate: Condition over the answers
        label: Short description of the condition, logged when the row decides
    """

    status: Status
    predicate: Predicate
    label: str


@dataclass(frozen=True)
class TriggerRule:
    """Cross-theme signal: emits message when predicate holds."""

    name: str
    predicate: Predicate
    message: str


@dataclass(frozen=True)
class RecommendationRule:
    """Guarded recommendation.

    Attributes:
        id: Stable recommendation identifier
        solution: Headline label used by the priority classifier
        title: Short headline
        description: What the intervention consists of
        target_action: Opaque action reference handed back to the caller
        predicate: Condition under which the recommendation applies
        justify: Builds the justification sentence from the answers that
            triggered the rule
    """

    id: str
    solution: PrioritySolution
    title: str
    description: str
    target_action: str
    predicate: Predicate
    justify: Callable[[AnswerSet], str]


# ============ OUTPUTS ============


@dataclass(frozen=True)
class ThemeAnalysis:
    """Health classification and explanatory points for one theme."""

    theme: Theme
    title: str
    status: Status
    summary: str
    points: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "theme": self.theme.value,
            "title": self.title,
            "status": self.status.value,
            "summary": self.summary,
            "points": list(self.points),
        }


@dataclass(frozen=True)
class Recommendation:
    """Justified intervention suggested by the engine."""

    id: str
    title: str
    description: str
    justification: str
    target_action: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "justification": self.justification,
            "targetAction": self.target_action,
        }


@dataclass(frozen=True)
class DiagnosisResult:
    """Complete diagnosis for one answer set.

    Attributes:
        theme_analyses: One analysis per theme, in Theme order
        critical_points: Deduplicated risk points, in trigger order
        opportunities: Deduplicated opportunities, in trigger order
        recommendations: Matching recommendations, in rule priority order
        next_steps: Fixed follow-up script
        priority_solution: Headline label, equal to the first
            recommendation's solution; None when nothing was recommended
    """

    theme_analyses: tuple[ThemeAnalysis, ...]
    critical_points: tuple[str, ...]
    opportunities: tuple[str, ...]
    recommendations: tuple[Recommendation, ...]
    next_steps: tuple[str, ...]
    priority_solution: PrioritySolution | None = None

    def get_theme(self, theme: Theme) -> ThemeAnalysis:
        """Look up the analysis for a theme.

        Raises:
            KeyError: If the theme is not part of this result
        """
        for analysis in self.theme_analyses:
            if analysis.theme == theme:
                return analysis
        raise KeyError(theme)

    @property
    def statuses(self) -> dict[Theme, Status]:
        """Theme -> status mapping."""
        return {a.theme: a.status for a in self.theme_analyses}

    @property
    def recommendation_ids(self) -> list[str]:
        return [r.id for r in self.recommendations]

    def to_dict(self) -> dict[str, Any]:
        """Convert result to serializable dictionary.

        Useful for storing results or sending to a frontend.
        """
        return {
            "themeAnalyses": [a.to_dict() for a in self.theme_analyses],
            "criticalPoints": list(self.critical_points),
            "opportunities": list(self.opportunities),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "nextSteps": list(self.next_steps),
            "prioritySolution": (
                self.priority_solution.value if self.priority_solution else None
            ),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Return theme analyses as a DataFrame, one row per theme."""
        return pd.DataFrame(
            [
                {
                    "theme": a.theme.value,
                    "title": a.title,
                    "status": a.status.value,
                    "summary": a.summary,
                    "n_points": len(a.points),
                }
                for a in self.theme_analyses
            ]
        )
