"""bizdiag - Business diagnosis engine.

A rule-based engine that turns a small-business digital maturity
questionnaire into an explainable diagnosis.
"""

__version__ = "0.1.0"

from bizdiag.core.answers import AnswerSet, ValidationError, validate_answers
from bizdiag.engine.composer import DiagnosisEngine, evaluate
from bizdiag.engine.interface import DiagnosisResult

__all__ = [
    "AnswerSet",
    "DiagnosisEngine",
    "DiagnosisResult",
    "ValidationError",
    "evaluate",
    "validate_answers",
    "__version__",
]
