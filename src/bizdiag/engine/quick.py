"""Quick diagnosis.

A seven-question triage used before the full questionnaire. Each rule
maps the answers to at most one recommendation with an urgency level;
output is stably sorted by urgency (HIGH, MEDIUM, LOW) so rules of equal
urgency keep table order. When two or more solutions are recommended,
a LOW-urgency suggestion to run the full diagnosis is appended.

Example usage:
    from bizdiag.engine.quick import evaluate_quick

    for rec in evaluate_quick(raw_answers):
        print(f"[{rec.priority.value}] {rec.title}")
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from bizdiag.core.answers import LEGACY_ALIASES, ValidationError
from bizdiag.core.entities import QuickPriority, WebsitePresence

logger = logging.getLogger(__name__)

# Reported as ValidationError.theme for quick questionnaires
QUICK_THEME = "quick"


class OnlineContacts(Enum):
    NO = "no"
    FEW = "few"
    YES = "yes"


class YesNo(Enum):
    NO = "no"
    YES = "yes"


class ClientLossFromDelay(Enum):
    UNKNOWN = "unknown"
    SOMETIMES = "sometimes"
    YES = "yes"


class SystemApp(Enum):
    NO = "no"
    SIMPLE = "simple"
    YES = "yes"


class OrganizationDifficulty(Enum):
    YES = "yes"
    SOME = "some"
    NO = "no"


class SocialPresence(Enum):
    NO = "no"
    LITTLE = "little"
    YES = "yes"


QUICK_QUESTIONS: dict[str, type[Enum]] = {
    "has_website": WebsitePresence,
    "receives_online_contacts": OnlineContacts,
    "depends_whatsapp": YesNo,
    "loses_clients_delay": ClientLossFromDelay,
    "has_system_app": SystemApp,
    "organization_difficulty": OrganizationDifficulty,
    "social_presence": SocialPresence,
}

_PRIORITY_ORDER = {
    QuickPriority.HIGH: 0,
    QuickPriority.MEDIUM: 1,
    QuickPriority.LOW: 2,
}


@dataclass(frozen=True)
class QuickRecommendation:
    """Recommendation produced by the quick diagnosis."""

    id: str
    title: str
    description: str
    target_action: str
    priority: QuickPriority

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "targetAction": self.target_action,
            "priority": self.priority.value,
        }


@dataclass(frozen=True)
class QuickRule:
    """Quick-diagnosis rule.

    Attributes:
        id: Stable recommendation identifier
        title: Short headline
        target_action: Opaque action reference for the caller
        predicate: Condition over the normalized answers
        priority: Urgency derived from the answers
        describe: Description text derived from the answers
    """

    id: str
    title: str
    target_action: str
    predicate: Callable[[dict[str, Enum]], bool]
    priority: Callable[[dict[str, Enum]], QuickPriority]
    describe: Callable[[dict[str, Enum]], str]


def _describe_site(a: dict[str, Enum]) -> str:
    if a["has_website"] == WebsitePresence.NO:
        return (
            "The client has no online presence. A website is essential to be "
            "found and to convey credibility."
        )
    return (
        "The current website is outdated. A modern website will improve the "
        "brand image and attract more clients."
    )


QUICK_RULES: tuple[QuickRule, ...] = (
    QuickRule(
        id="site",
        title="Build a professional website",
        target_action="/solutions/create/site",
        predicate=lambda a: a["has_website"] != WebsitePresence.FUNCTIONAL,
        priority=lambda a: QuickPriority.HIGH,
        describe=_describe_site,
    ),
    QuickRule(
        id="app",
        title="Build a simple app",
        target_action="/solutions/create/app",
        predicate=lambda a: (
            a["depends_whatsapp"] == YesNo.YES
            or (
                a["has_system_app"] == SystemApp.NO
                and a["receives_online_contacts"] != OnlineContacts.YES
            )
        ),
        priority=lambda a: (
            QuickPriority.HIGH
            if a["loses_clients_delay"] == ClientLossFromDelay.YES
            else QuickPriority.MEDIUM
        ),
        describe=lambda a: (
            "An app can automate customer service, take orders and reduce "
            "reliance on manual messaging."
        ),
    ),
    QuickRule(
        id="process_organization",
        title="Process organization",
        target_action="/solutions/organization",
        predicate=lambda a: a["organization_difficulty"] != OrganizationDifficulty.NO,
        priority=lambda a: (
            QuickPriority.HIGH
            if a["organization_difficulty"] == OrganizationDifficulty.YES
            else QuickPriority.MEDIUM
        ),
        describe=lambda a: (
            "The client needs structured routines and flows to gain "
            "productivity and avoid rework."
        ),
    ),
    QuickRule(
        id="positioning",
        title="Digital positioning",
        target_action="/solutions/positioning",
        predicate=lambda a: a["social_presence"] != SocialPresence.YES,
        priority=lambda a: (
            QuickPriority.HIGH
            if a["social_presence"] == SocialPresence.NO
            else QuickPriority.MEDIUM
        ),
        describe=lambda a: (
            "The client needs clear, professional communication to stand "
            "out online."
        ),
    ),
)

FULL_DIAGNOSIS_THRESHOLD = 2

FULL_DIAGNOSIS = QuickRecommendation(
    id="full_diagnosis",
    title="Complete strategic diagnosis",
    description=(
        "For a deeper analysis and a detailed action plan, run the "
        "complete diagnosis."
    ),
    target_action="/planning/new",
    priority=QuickPriority.LOW,
)


def validate_quick_answers(raw: Mapping[str, Any]) -> dict[str, Enum]:
    """Normalize quick-diagnosis answers.

    Raises:
        ValidationError: Naming every missing or out-of-domain question
    """
    values: dict[str, Enum] = {}
    missing: list[str] = []
    invalid: dict[str, Any] = {}

    for key, domain in QUICK_QUESTIONS.items():
        value = raw.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(key)
            continue
        if isinstance(value, domain):
            values[key] = value
            continue
        if not isinstance(value, str):
            invalid[key] = value
            continue
        text = value.strip().lower()
        text = LEGACY_ALIASES.get(key, {}).get(text, text)
        try:
            values[key] = domain(text)
        except ValueError:
            invalid[key] = value

    if missing or invalid:
        error = ValidationError(QUICK_THEME, missing, invalid)
        logger.warning(f"Quick diagnosis rejected: {error}")
        raise error

    return values


def evaluate_quick(raw: Mapping[str, Any]) -> list[QuickRecommendation]:
    """Run the quick diagnosis.

    Args:
        raw: Mapping of quick question key to answer

    Returns:
        List of QuickRecommendation sorted by urgency (HIGH first)

    Raises:
        ValidationError: If any question is unanswered or invalid
    """
    answers = validate_quick_answers(raw)

    recommendations = [
        QuickRecommendation(
            id=rule.id,
            title=rule.title,
            description=rule.describe(answers),
            target_action=rule.target_action,
            priority=rule.priority(answers),
        )
        for rule in QUICK_RULES
        if rule.predicate(answers)
    ]

    if len(recommendations) >= FULL_DIAGNOSIS_THRESHOLD:
        recommendations.append(FULL_DIAGNOSIS)

    # Stable sort keeps table order within an urgency level
    recommendations.sort(key=lambda r: _PRIORITY_ORDER[r.priority])

    logger.debug(f"Quick diagnosis produced {[r.id for r in recommendations]}")
    return recommendations
