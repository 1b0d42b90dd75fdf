"""Questionnaire schema, defaults and answer validation.

Every question key the engine reads is declared once in QUESTION_SCHEMA,
together with its theme, value domain and whether it is required.
Optional keys take their value from the DEFAULTS table, which is the
only place implicit values live. validate_answers() turns a raw record
into an immutable AnswerSet or raises ValidationError for the first
theme whose answers are incomplete or out of domain.

Example usage:
    from bizdiag.core.answers import validate_answers, ValidationError

    try:
        answers = validate_answers(raw_record)
    except ValidationError as e:
        print(f"{e.theme.value}: missing {e.missing}")
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any

from bizdiag.core.entities import (
    AcquisitionChannel,
    AppSystem,
    DigitalPresence,
    DigitalTools,
    Level,
    MaturityLevel,
    PostSaleRelationship,
    ServiceCapacity,
    Theme,
    WebsiteConversion,
    WebsitePresence,
)

logger = logging.getLogger(__name__)


# Question kinds
CHOICE = "choice"      # One value from an Enum domain
ORDINAL = "ordinal"    # Integer in ORDINAL_RANGE
MULTI = "multi"        # Set of values from an Enum domain
TEXT = "text"          # Free text

ORDINAL_RANGE = (1, 5)


@dataclass(frozen=True)
class QuestionSpec:
    """Declaration of a single questionnaire key.

    Attributes:
        key: Answer record key
        theme: Theme that requires (or optionally reads) this key
        kind: One of CHOICE, ORDINAL, MULTI, TEXT
        domain: Enum of allowed values for CHOICE and MULTI questions
        required: Whether absence makes the theme unevaluable
    """

    key: str
    theme: Theme
    kind: str
    domain: type[Enum] | None = None
    required: bool = True


QUESTION_SCHEMA: tuple[QuestionSpec, ...] = (
    # Digital infrastructure
    QuestionSpec("has_website", Theme.INFRASTRUCTURE, CHOICE, WebsitePresence),
    QuestionSpec("website_converts", Theme.INFRASTRUCTURE, CHOICE, WebsiteConversion),
    QuestionSpec("has_app_system", Theme.INFRASTRUCTURE, CHOICE, AppSystem),
    QuestionSpec("uses_digital_tools", Theme.INFRASTRUCTURE, CHOICE, DigitalTools),
    # Operations
    QuestionSpec("organization_level", Theme.OPERATIONS, ORDINAL, required=False),
    QuestionSpec("manual_dependency", Theme.OPERATIONS, CHOICE, Level),
    QuestionSpec("operational_bottlenecks", Theme.OPERATIONS, TEXT, required=False),
    QuestionSpec("service_capacity", Theme.OPERATIONS, CHOICE, ServiceCapacity),
    # Acquisition & relationship
    QuestionSpec(
        "main_channels", Theme.ACQUISITION, MULTI, AcquisitionChannel, required=False
    ),
    QuestionSpec("referral_dependency", Theme.ACQUISITION, CHOICE, Level),
    QuestionSpec("digital_presence", Theme.ACQUISITION, CHOICE, DigitalPresence),
    QuestionSpec(
        "post_sale_relationship", Theme.ACQUISITION, CHOICE, PostSaleRelationship
    ),
    # Maturity
    QuestionSpec("maturity_level", Theme.MATURITY, CHOICE, MaturityLevel),
    QuestionSpec("automation_potential", Theme.MATURITY, CHOICE, Level),
    QuestionSpec("scalability_potential", Theme.MATURITY, CHOICE, Level),
)

SCHEMA_BY_KEY: dict[str, QuestionSpec] = {q.key: q for q in QUESTION_SCHEMA}

# Values applied when an optional key is absent. operational_bottlenecks
# has no default: absence stays None and evaluators render a placeholder.
DEFAULTS: dict[str, Any] = {
    "organization_level": 3,
    "main_channels": (),
    "operational_bottlenecks": None,
}

# Values written by earlier questionnaire versions, mapped onto the
# current domains. Lookup happens after lower-casing.
LEGACY_ALIASES: dict[str, dict[str, str]] = {
    "has_website": {"old": "outdated", "yes": "functional"},
    "digital_presence": {"no": "none"},
    "post_sale_relationship": {"no": "none"},
}


def questions_for(theme: Theme) -> tuple[QuestionSpec, ...]:
    """Questions belonging to a theme, in schema order."""
    return tuple(q for q in QUESTION_SCHEMA if q.theme == theme)


def required_keys(theme: Theme) -> tuple[str, ...]:
    """Keys a theme cannot be evaluated without."""
    return tuple(q.key for q in questions_for(theme) if q.required)


class ValidationError(ValueError):
    """Raised when a theme's answers are incomplete or out of domain.

    Attributes:
        theme: Theme that could not be evaluated, or a questionnaire name
            for answer sets outside the four themes
        missing: Required keys that were absent, in schema order
        invalid: Keys whose value is outside the declared domain
    """

    def __init__(
        self,
        theme: Theme | str,
        missing: Iterable[str] = (),
        invalid: Mapping[str, Any] | None = None,
    ):
        self.theme = theme
        self.missing = tuple(missing)
        self.invalid = dict(invalid or {})
        super().__init__(self._build_message())

    @property
    def theme_name(self) -> str:
        return self.theme.value if isinstance(self.theme, Theme) else self.theme

    def _build_message(self) -> str:
        parts = []
        if self.missing:
            parts.append(f"missing required answers: {', '.join(self.missing)}")
        if self.invalid:
            described = ", ".join(f"{k}={v!r}" for k, v in self.invalid.items())
            parts.append(f"invalid answers: {described}")
        return f"Theme '{self.theme_name}' cannot be evaluated ({'; '.join(parts)})"

    def __reduce__(self):
        # Rebuilt from fields when crossing a process pool boundary
        return (self.__class__, (self.theme, self.missing, self.invalid))


@dataclass(frozen=True)
class AnswerSet:
    """Normalized questionnaire answers consumed by the engine.

    Instances are only built by validate_answers(), so every field holds
    a value from its declared domain and optional fields carry their
    DEFAULTS entry when the raw record omitted them.
    """

    # Digital infrastructure
    has_website: WebsitePresence
    website_converts: WebsiteConversion
    has_app_system: AppSystem
    uses_digital_tools: DigitalTools
    # Operations
    manual_dependency: Level
    service_capacity: ServiceCapacity
    # Acquisition & relationship
    referral_dependency: Level
    digital_presence: DigitalPresence
    post_sale_relationship: PostSaleRelationship
    # Maturity
    maturity_level: MaturityLevel
    automation_potential: Level
    scalability_potential: Level
    # Optional
    organization_level: int = DEFAULTS["organization_level"]
    operational_bottlenecks: str | None = DEFAULTS["operational_bottlenecks"]
    main_channels: tuple[AcquisitionChannel, ...] = DEFAULTS["main_channels"]

    @property
    def channel_count(self) -> int:
        """Number of distinct acquisition channels selected."""
        return len(self.main_channels)

    def to_dict(self) -> dict[str, Any]:
        """Plain-value representation, accepted back by validate_answers()."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, tuple):
                value = [v.value for v in value]
            data[f.name] = value
        return data


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _normalize_choice(spec: QuestionSpec, value: Any) -> Enum:
    if isinstance(value, spec.domain):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{spec.key} expects a string")
    text = value.strip().lower()
    text = LEGACY_ALIASES.get(spec.key, {}).get(text, text)
    return spec.domain(text)


def _normalize_ordinal(spec: QuestionSpec, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{spec.key} expects an integer")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise ValueError(f"{spec.key} expects an integer")
    low, high = ORDINAL_RANGE
    if not low <= value <= high:
        raise ValueError(f"{spec.key} must be between {low} and {high}")
    return value


def _normalize_multi(spec: QuestionSpec, value: Any) -> tuple[Enum, ...]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ValueError(f"{spec.key} expects a collection")
    selected = {_normalize_choice(spec, item) for item in value}
    # Canonical order keeps output identical for reordered selections
    return tuple(member for member in spec.domain if member in selected)


def _normalize(spec: QuestionSpec, value: Any) -> Any:
    if spec.kind == CHOICE:
        return _normalize_choice(spec, value)
    if spec.kind == ORDINAL:
        return _normalize_ordinal(spec, value)
    if spec.kind == MULTI:
        return _normalize_multi(spec, value)
    if not isinstance(value, str):
        raise ValueError(f"{spec.key} expects text")
    return value.strip()


def validate_answers(raw: Mapping[str, Any] | AnswerSet) -> AnswerSet:
    """Validate a raw answer record and apply documented defaults.

    Themes are checked in Theme order. Evaluation is all-or-nothing: the
    first theme with missing required keys or out-of-domain values
    raises, and no AnswerSet is produced.

    Args:
        raw: Mapping of question key to answer. Keys outside the schema
            are ignored. An AnswerSet is returned unchanged.

    Returns:
        Normalized AnswerSet

    Raises:
        ValidationError: If any theme is incomplete or holds invalid values
        TypeError: If raw is not a mapping
    """
    if isinstance(raw, AnswerSet):
        return raw
    if not isinstance(raw, Mapping):
        raise TypeError(f"Answers must be a mapping, got {type(raw).__name__}")

    unknown = sorted(str(k) for k in raw if k not in SCHEMA_BY_KEY)
    if unknown:
        logger.debug(f"Ignoring keys outside the questionnaire: {unknown}")

    values: dict[str, Any] = {}
    for theme in Theme:
        missing: list[str] = []
        invalid: dict[str, Any] = {}

        for spec in questions_for(theme):
            value = raw.get(spec.key)
            if _is_blank(value):
                if spec.required:
                    missing.append(spec.key)
                else:
                    values[spec.key] = DEFAULTS[spec.key]
                continue
            try:
                values[spec.key] = _normalize(spec, value)
            except ValueError:
                invalid[spec.key] = value

        if missing or invalid:
            error = ValidationError(theme, missing, invalid)
            logger.warning(str(error))
            raise error

    return AnswerSet(**values)
