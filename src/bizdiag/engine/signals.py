"""Cross-theme signal aggregation.

Critical points and opportunities are produced by two fixed, ordered
lists of TriggerRule. Every rule is evaluated exactly once against the
whole AnswerSet; matching messages are collected in rule order and
deduplicated, keeping the first occurrence.

Wording here is independent of the theme evaluators. A risk may appear
both as a theme point and as a critical point with different phrasing.
"""

from bizdiag.core.answers import AnswerSet
from bizdiag.core.entities import (
    DigitalPresence,
    Level,
    PostSaleRelationship,
    WebsitePresence,
)
from .interface import TriggerRule


CRITICAL_TRIGGERS: tuple[TriggerRule, ...] = (
    TriggerRule(
        name="no_website",
        predicate=lambda a: a.has_website == WebsitePresence.NO,
        message="No website: the business is invisible to online searches",
    ),
    TriggerRule(
        name="high_manual_dependency",
        predicate=lambda a: a.manual_dependency == Level.HIGH,
        message="High manual dependency limits growth",
    ),
    TriggerRule(
        name="channel_concentration",
        predicate=lambda a: (
            a.referral_dependency == Level.HIGH and a.channel_count <= 1
        ),
        message="Client acquisition is concentrated in too few sources",
    ),
    TriggerRule(
        name="internal_disorganization",
        predicate=lambda a: a.organization_level <= 2,
        message="Internal disorganization is hurting productivity",
    ),
)

OPPORTUNITY_TRIGGERS: tuple[TriggerRule, ...] = (
    TriggerRule(
        name="high_automation_potential",
        predicate=lambda a: a.automation_potential == Level.HIGH,
        message="Automation can reduce costs and increase efficiency",
    ),
    TriggerRule(
        name="high_scalability_potential",
        predicate=lambda a: a.scalability_potential == Level.HIGH,
        message="The business model can scale with little investment",
    ),
    TriggerRule(
        name="limited_digital_presence",
        predicate=lambda a: a.digital_presence == DigitalPresence.LIMITED,
        message="Expanding the digital presence can generate new leads",
    ),
    TriggerRule(
        name="unstructured_post_sale",
        predicate=lambda a: (
            a.post_sale_relationship != PostSaleRelationship.STRUCTURED
        ),
        message="Better post-sale follow-up increases repeat sales and referrals",
    ),
)


def collect_messages(
    rules: tuple[TriggerRule, ...], answers: AnswerSet
) -> tuple[str, ...]:
    """Evaluate rules in order and return deduplicated matching messages."""
    seen: set[str] = set()
    messages = []
    for rule in rules:
        if rule.predicate(answers) and rule.message not in seen:
            seen.add(rule.message)
            messages.append(rule.message)
    return tuple(messages)


def aggregate_signals(
    answers: AnswerSet,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Scan answers for cross-theme signals.

    Args:
        answers: Validated answers

    Returns:
        (critical_points, opportunities), each ordered and deduplicated
    """
    return (
        collect_messages(CRITICAL_TRIGGERS, answers),
        collect_messages(OPPORTUNITY_TRIGGERS, answers),
    )
