"""Recommendation selection and priority-solution classification.

RECOMMENDATION_RULES is an ordered rule table. Order is priority:
infrastructure/site first, then systems/automation, process
organization, positioning and finally marketing automation. Selection
returns every matching rule in that order (not first match), each with a
justification built from the answers that made the rule fire.

The priority classifier walks the same table and returns the solution of
the first matching rule, so the headline label always equals the first
item of the full recommendation list.

Example usage:
    from bizdiag.engine.recommendations import (
        select_recommendations,
        classify_priority_solution,
    )

    recs = select_recommendations(answers)
    headline = classify_priority_solution(answers)
    assert headline is None or headline.value == recs[0].id
"""

from bizdiag.core.answers import AnswerSet
from bizdiag.core.entities import (
    AppSystem,
    DigitalPresence,
    Level,
    PrioritySolution,
    WebsiteConversion,
    WebsitePresence,
)
from .interface import Recommendation, RecommendationRule


def _join(reasons: list[str]) -> str:
    """Join clauses as 'a', 'a and b' or 'a, b and c'."""
    if len(reasons) <= 1:
        return "".join(reasons)
    return f"{', '.join(reasons[:-1])} and {reasons[-1]}"


def _because(reasons: list[str], consequence: str) -> str:
    text = _join(reasons)
    return f"{text[0].upper()}{text[1:]}; {consequence}"


# ============ JUSTIFICATIONS ============


def _justify_site(a: AnswerSet) -> str:
    reasons = []
    if a.has_website == WebsitePresence.NO:
        reasons.append("the business has no website of its own")
    else:
        if a.has_website == WebsitePresence.OUTDATED:
            reasons.append("the current website is outdated")
        if a.website_converts == WebsiteConversion.NO:
            reasons.append("the website generates no conversions")
        elif a.website_converts == WebsiteConversion.PARTIAL:
            reasons.append("the website converts below expectations")
    return _because(
        reasons,
        "a professional website is the base of the digital presence "
        "and the main conversion channel.",
    )


def _justify_app(a: AnswerSet) -> str:
    reasons = []
    if a.has_app_system == AppSystem.NO:
        reasons.append("there is no proprietary system or app")
    if a.manual_dependency == Level.HIGH:
        reasons.append("customer service depends heavily on manual work")
    return _because(
        reasons,
        "a system reduces manual dependency and increases service capacity.",
    )


def _justify_process_organization(a: AnswerSet) -> str:
    reasons = []
    if a.organization_level <= 3:
        reasons.append(f"the organization level is {a.organization_level}/5")
    if a.operational_bottlenecks:
        reasons.append(f'the reported bottleneck is "{a.operational_bottlenecks}"')
    return _because(
        reasons,
        "clear processes increase productivity and reduce errors.",
    )


def _justify_positioning(a: AnswerSet) -> str:
    if a.digital_presence == DigitalPresence.NONE:
        reasons = ["there is no active digital presence"]
    else:
        reasons = ["the digital presence is limited"]
    return _because(
        reasons,
        "clear positioning differentiates the business and attracts "
        "the right audience.",
    )


def _justify_marketing_automation(a: AnswerSet) -> str:
    return _because(
        ["automation potential is high"],
        "automated acquisition funnels generate leads continuously "
        "with less effort.",
    )


# ============ RULE TABLE ============

RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        id="site",
        solution=PrioritySolution.SITE,
        title="Professional Website",
        description="Build or rebuild the website with a focus on conversion",
        target_action="/solutions/create/site",
        predicate=lambda a: (
            a.has_website != WebsitePresence.FUNCTIONAL
            or a.website_converts != WebsiteConversion.YES
        ),
        justify=_justify_site,
    ),
    RecommendationRule(
        id="app",
        solution=PrioritySolution.APP,
        title="App or System",
        description="Develop a system to automate operations",
        target_action="/solutions/create/app",
        predicate=lambda a: (
            a.has_app_system == AppSystem.NO or a.manual_dependency == Level.HIGH
        ),
        justify=_justify_app,
    ),
    RecommendationRule(
        id="process_organization",
        solution=PrioritySolution.PROCESS_ORGANIZATION,
        title="Process Organization",
        description="Structure operational flows and routines",
        target_action="/solutions/organization",
        predicate=lambda a: (
            a.organization_level <= 3 or bool(a.operational_bottlenecks)
        ),
        justify=_justify_process_organization,
    ),
    RecommendationRule(
        id="positioning",
        solution=PrioritySolution.POSITIONING,
        title="Digital Positioning",
        description="Define digital communication and identity",
        target_action="/solutions/positioning",
        predicate=lambda a: a.digital_presence != DigitalPresence.STRONG,
        justify=_justify_positioning,
    ),
    RecommendationRule(
        id="marketing_automation",
        solution=PrioritySolution.MARKETING_AUTOMATION,
        title="Marketing Automation",
        description="Implement automated lead acquisition flows",
        target_action="/planning/new",
        predicate=lambda a: a.automation_potential == Level.HIGH,
        justify=_justify_marketing_automation,
    ),
)

RECOMMENDATION_IDS: tuple[str, ...] = tuple(r.id for r in RECOMMENDATION_RULES)

if len(set(RECOMMENDATION_IDS)) != len(RECOMMENDATION_IDS):
    raise ValueError(f"Duplicate recommendation ids: {RECOMMENDATION_IDS}")


def select_recommendations(
    answers: AnswerSet,
    rules: tuple[RecommendationRule, ...] = RECOMMENDATION_RULES,
) -> tuple[Recommendation, ...]:
    """Return every matching recommendation, in rule priority order.

    Args:
        answers: Validated answers
        rules: Rule table to evaluate. Defaults to RECOMMENDATION_RULES.

    Returns:
        Tuple of Recommendation, at most one per rule
    """
    return tuple(
        Recommendation(
            id=rule.id,
            title=rule.title,
            description=rule.description,
            justification=rule.justify(answers),
            target_action=rule.target_action,
        )
        for rule in rules
        if rule.predicate(answers)
    )


def classify_priority_solution(
    answers: AnswerSet,
    rules: tuple[RecommendationRule, ...] = RECOMMENDATION_RULES,
) -> PrioritySolution | None:
    """Pick the single headline solution.

    Returns:
        Solution of the highest-priority matching rule, or None when no
        rule matches
    """
    for rule in rules:
        if rule.predicate(answers):
            return rule.solution
    return None
