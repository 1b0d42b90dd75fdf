"""Core foundation layer: answer domains, questionnaire schema, validation."""

from bizdiag.core.entities import Theme, Status, PrioritySolution
from bizdiag.core.answers import (
    AnswerSet,
    DEFAULTS,
    QUESTION_SCHEMA,
    ValidationError,
    required_keys,
    validate_answers,
)

__all__ = [
    "Theme",
    "Status",
    "PrioritySolution",
    "AnswerSet",
    "DEFAULTS",
    "QUESTION_SCHEMA",
    "ValidationError",
    "required_keys",
    "validate_answers",
]
