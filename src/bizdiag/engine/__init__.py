"""Diagnosis engine layer: rule tables, composition and configuration.

This module turns a validated questionnaire into an explainable
diagnosis: per-theme health status, critical points, opportunities,
ranked recommendations and a next-steps script.

Example usage:
    from bizdiag.engine import DiagnosisEngine, load_engine_config

    engine = DiagnosisEngine()
    result = engine.evaluate(raw_answers)

    for rec in result.recommendations:
        print(f"{rec.id}: {rec.justification}")

    # Use workspace-specific presentation settings
    config = load_engine_config(Path("config/diagnosis/agency.yaml"))
    engine = DiagnosisEngine(config=config)
"""

from .interface import (
    StatusCondition,
    TriggerRule,
    RecommendationRule,
    ThemeAnalysis,
    Recommendation,
    DiagnosisResult,
)
from .themes import ThemeTable, THEME_TABLES, evaluate_theme, evaluate_themes
from .signals import CRITICAL_TRIGGERS, OPPORTUNITY_TRIGGERS, aggregate_signals
from .recommendations import (
    RECOMMENDATION_RULES,
    select_recommendations,
    classify_priority_solution,
)
from .composer import NEXT_STEPS, DiagnosisEngine, compose_result, evaluate
from .quick import QuickRecommendation, evaluate_quick
from .config import (
    EngineConfig,
    load_engine_config,
    save_engine_config,
    get_default_config_dir,
    list_available_configs,
    find_workspace_config,
)

__all__ = [
    # Rule records
    "StatusCondition",
    "TriggerRule",
    "RecommendationRule",
    # Outputs
    "ThemeAnalysis",
    "Recommendation",
    "DiagnosisResult",
    # Components
    "ThemeTable",
    "THEME_TABLES",
    "evaluate_theme",
    "evaluate_themes",
    "CRITICAL_TRIGGERS",
    "OPPORTUNITY_TRIGGERS",
    "aggregate_signals",
    "RECOMMENDATION_RULES",
    "select_recommendations",
    "classify_priority_solution",
    # Composition
    "NEXT_STEPS",
    "DiagnosisEngine",
    "compose_result",
    "evaluate",
    # Quick diagnosis
    "QuickRecommendation",
    "evaluate_quick",
    # Configuration
    "EngineConfig",
    "load_engine_config",
    "save_engine_config",
    "get_default_config_dir",
    "list_available_configs",
    "find_workspace_config",
]
