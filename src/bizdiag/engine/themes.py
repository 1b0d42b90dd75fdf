"""Theme evaluators.

Each theme is described by a ThemeTable: an ordered list of
StatusCondition rows plus the wording used to explain the outcome.
Rows are checked top to bottom and the first satisfied row decides the
status; when no row matches the theme is GOOD. Tables must list every
CRITICAL row before any WARNING row, which ThemeTable enforces at
construction, so an answer set satisfying both a critical and a warning
condition always resolves to CRITICAL.

Evaluators read only the AnswerSet. They never see each other's output
and can run in any order.

Example usage:
    from bizdiag.engine.themes import evaluate_theme, THEME_TABLES

    analysis = evaluate_theme(THEME_TABLES[Theme.OPERATIONS], answers)
    print(f"[{analysis.status.value}] {analysis.title}")
"""

import logging
from dataclasses import dataclass
from typing import Callable

from bizdiag.core.answers import AnswerSet
from bizdiag.core.entities import (
    AppSystem,
    DigitalPresence,
    DigitalTools,
    Level,
    MaturityLevel,
    PostSaleRelationship,
    ServiceCapacity,
    Status,
    Theme,
    WebsiteConversion,
    WebsitePresence,
)
from .interface import StatusCondition, ThemeAnalysis

logger = logging.getLogger(__name__)

# Lower rank = checked first
_STATUS_RANK = {Status.CRITICAL: 0, Status.WARNING: 1, Status.GOOD: 2}

BOTTLENECK_PLACEHOLDER = "Bottlenecks not specified"


@dataclass(frozen=True)
class ThemeTable:
    """Decision table and wording for one theme.

    Attributes:
        theme: Theme this table evaluates
        title: Display title of the theme
        conditions: Ordered status rows, CRITICAL rows before WARNING rows
        summaries: One summary sentence per Status
        describe: Builds the explanatory points from the answers
    """

    theme: Theme
    title: str
    conditions: tuple[StatusCondition, ...]
    summaries: dict[Status, str]
    describe: Callable[[AnswerSet], list[str]]

    def __post_init__(self):
        ranks = [_STATUS_RANK[c.status] for c in self.conditions]
        if ranks != sorted(ranks):
            raise ValueError(
                f"Theme table '{self.theme.value}' must list critical "
                "conditions before warning conditions"
            )
        if any(c.status == Status.GOOD for c in self.conditions):
            raise ValueError("GOOD is the fallback status, not a table row")
        missing = set(Status) - set(self.summaries)
        if missing:
            raise ValueError(
                f"Theme table '{self.theme.value}' lacks summaries for "
                f"{sorted(s.value for s in missing)}"
            )

    def match(self, answers: AnswerSet) -> StatusCondition | None:
        """Return the first satisfied row, or None when the theme is GOOD."""
        for condition in self.conditions:
            if condition.predicate(answers):
                return condition
        return None

    def classify(self, answers: AnswerSet) -> Status:
        """Return the status of the first satisfied row, else GOOD."""
        condition = self.match(answers)
        return condition.status if condition else Status.GOOD


# ============ DIGITAL INFRASTRUCTURE ============

WEBSITE_POINTS = {
    WebsitePresence.NO: "No website of its own",
    WebsitePresence.OUTDATED: "Website is outdated",
    WebsitePresence.FUNCTIONAL: "Functional website",
}

CONVERSION_POINTS = {
    WebsiteConversion.NO: "Website does not generate conversions",
    WebsiteConversion.PARTIAL: "Conversion is below expectations",
    WebsiteConversion.YES: "Website converts well",
}

APP_SYSTEM_POINTS = {
    AppSystem.NO: "No proprietary system or app",
    AppSystem.SIMPLE: "Relies on basic off-the-shelf tools",
    AppSystem.YES: "Robust proprietary system in place",
}

DIGITAL_TOOLS_POINTS = {
    DigitalTools.NO: "Does not use digital tools",
    DigitalTools.FEW: "Uses few digital tools",
    DigitalTools.YES: "Makes good use of digital tools",
}


def _describe_infrastructure(answers: AnswerSet) -> list[str]:
    return [
        WEBSITE_POINTS[answers.has_website],
        CONVERSION_POINTS[answers.website_converts],
        APP_SYSTEM_POINTS[answers.has_app_system],
        DIGITAL_TOOLS_POINTS[answers.uses_digital_tools],
    ]


INFRASTRUCTURE_TABLE = ThemeTable(
    theme=Theme.INFRASTRUCTURE,
    title="Digital Infrastructure",
    conditions=(
        StatusCondition(
            Status.CRITICAL,
            lambda a: a.has_website == WebsitePresence.NO,
            "no website",
        ),
        StatusCondition(
            Status.CRITICAL,
            lambda a: a.website_converts == WebsiteConversion.NO,
            "website does not convert",
        ),
        StatusCondition(
            Status.WARNING,
            lambda a: a.has_website == WebsitePresence.OUTDATED,
            "website outdated",
        ),
        StatusCondition(
            Status.WARNING,
            lambda a: a.website_converts == WebsiteConversion.PARTIAL,
            "partial conversion",
        ),
    ),
    summaries={
        Status.CRITICAL: "Digital infrastructure needs urgent attention",
        Status.WARNING: "Digital infrastructure works but has room for improvement",
        Status.GOOD: "Digital infrastructure is well established",
    },
    describe=_describe_infrastructure,
)


# ============ OPERATIONS ============

MANUAL_DEPENDENCY_POINTS = {
    Level.HIGH: "High dependency on manual customer service",
    Level.MEDIUM: "Moderate dependency on manual customer service",
    Level.LOW: "Low manual dependency",
}

SERVICE_CAPACITY_POINTS = {
    ServiceCapacity.LIMITED: "Limited service capacity",
    ServiceCapacity.OK: "Adequate service capacity",
    ServiceCapacity.SCALABLE: "Service capacity ready to scale",
}


def _describe_operations(answers: AnswerSet) -> list[str]:
    return [
        f"Organization level: {answers.organization_level}/5",
        MANUAL_DEPENDENCY_POINTS[answers.manual_dependency],
        answers.operational_bottlenecks or BOTTLENECK_PLACEHOLDER,
        SERVICE_CAPACITY_POINTS[answers.service_capacity],
    ]


OPERATIONS_TABLE = ThemeTable(
    theme=Theme.OPERATIONS,
    title="Operations & Processes",
    conditions=(
        StatusCondition(
            Status.CRITICAL,
            lambda a: a.organization_level <= 2,
            "organization level at most 2",
        ),
        StatusCondition(
            Status.CRITICAL,
            lambda a: a.manual_dependency == Level.HIGH,
            "high manual dependency",
        ),
        StatusCondition(
            Status.WARNING,
            lambda a: a.organization_level == 3,
            "organization level 3",
        ),
        StatusCondition(
            Status.WARNING,
            lambda a: a.manual_dependency == Level.MEDIUM,
            "medium manual dependency",
        ),
    ),
    summaries={
        Status.CRITICAL: "Disorganized operational processes are hurting results",
        Status.WARNING: "Operations work, but there are bottlenecks to resolve",
        Status.GOOD: "Processes are well structured and efficient",
    },
    describe=_describe_operations,
)


# ============ ACQUISITION & RELATIONSHIP ============

REFERRAL_POINTS = {
    Level.HIGH: "High dependency on referrals",
    Level.MEDIUM: "Moderate dependency on referrals",
    Level.LOW: "Diversified client sources",
}

DIGITAL_PRESENCE_POINTS = {
    DigitalPresence.NONE: "No active digital presence",
    DigitalPresence.LIMITED: "Limited digital presence",
    DigitalPresence.STRONG: "Established digital presence",
}

POST_SALE_POINTS = {
    PostSaleRelationship.NONE: "No post-sale strategy",
    PostSaleRelationship.BASIC: "Basic post-sale follow-up",
    PostSaleRelationship.STRUCTURED: "Structured post-sale relationship",
}


def _describe_acquisition(answers: AnswerSet) -> list[str]:
    count = answers.channel_count
    noun = "channel" if count == 1 else "channels"
    return [
        f"{count} active acquisition {noun}",
        REFERRAL_POINTS[answers.referral_dependency],
        DIGITAL_PRESENCE_POINTS[answers.digital_presence],
        POST_SALE_POINTS[answers.post_sale_relationship],
    ]


# The critical row is a two-part conjunction while other themes use
# single conditions. Kept as is pending product confirmation.
ACQUISITION_TABLE = ThemeTable(
    theme=Theme.ACQUISITION,
    title="Acquisition & Relationship",
    conditions=(
        StatusCondition(
            Status.CRITICAL,
            lambda a: a.referral_dependency == Level.HIGH and a.channel_count <= 1,
            "high referral dependency with at most one channel",
        ),
        StatusCondition(
            Status.WARNING,
            lambda a: a.digital_presence == DigitalPresence.NONE,
            "no digital presence",
        ),
        StatusCondition(
            Status.WARNING,
            lambda a: a.post_sale_relationship == PostSaleRelationship.NONE,
            "no post-sale relationship",
        ),
    ),
    summaries={
        Status.CRITICAL: "Excessive dependency on few acquisition channels",
        Status.WARNING: "Channels work, but there is room to expand",
        Status.GOOD: "Diversified and efficient acquisition strategy",
    },
    describe=_describe_acquisition,
)


# ============ MATURITY ============

MATURITY_LABELS = {
    MaturityLevel.BEGINNER: "Beginner",
    MaturityLevel.INTERMEDIATE: "Intermediate",
    MaturityLevel.ADVANCED: "Advanced",
}

AUTOMATION_POINTS = {
    Level.HIGH: "High automation potential identified",
    Level.MEDIUM: "Moderate automation potential",
    Level.LOW: "Already largely automated",
}

SCALABILITY_POINTS = {
    Level.HIGH: "Strong potential to scale",
    Level.MEDIUM: "Moderate potential to scale",
    Level.LOW: "Limited additional scaling potential",
}


def _describe_maturity(answers: AnswerSet) -> list[str]:
    return [
        f"Maturity level: {MATURITY_LABELS[answers.maturity_level]}",
        AUTOMATION_POINTS[answers.automation_potential],
        SCALABILITY_POINTS[answers.scalability_potential],
    ]


MATURITY_TABLE = ThemeTable(
    theme=Theme.MATURITY,
    title="Digital Maturity",
    conditions=(
        StatusCondition(
            Status.CRITICAL,
            lambda a: a.maturity_level == MaturityLevel.BEGINNER,
            "beginner maturity",
        ),
        StatusCondition(
            Status.WARNING,
            lambda a: a.maturity_level == MaturityLevel.INTERMEDIATE,
            "intermediate maturity",
        ),
    ),
    summaries={
        Status.CRITICAL: "Early stage of digital maturity",
        Status.WARNING: "Digital maturity in progress",
        Status.GOOD: "Advanced digital maturity",
    },
    describe=_describe_maturity,
)


THEME_TABLES: dict[Theme, ThemeTable] = {
    Theme.INFRASTRUCTURE: INFRASTRUCTURE_TABLE,
    Theme.OPERATIONS: OPERATIONS_TABLE,
    Theme.ACQUISITION: ACQUISITION_TABLE,
    Theme.MATURITY: MATURITY_TABLE,
}


def evaluate_theme(table: ThemeTable, answers: AnswerSet) -> ThemeAnalysis:
    """Classify one theme and build its explanation.

    Args:
        table: Decision table for the theme
        answers: Validated answers

    Returns:
        ThemeAnalysis with exactly one status
    """
    condition = table.match(answers)
    status = condition.status if condition else Status.GOOD
    logger.debug(
        f"{table.theme.value}: {status.value} "
        f"({condition.label if condition else 'no condition matched'})"
    )
    return ThemeAnalysis(
        theme=table.theme,
        title=table.title,
        status=status,
        summary=table.summaries[status],
        points=tuple(table.describe(answers)),
    )


def evaluate_themes(answers: AnswerSet) -> tuple[ThemeAnalysis, ...]:
    """Evaluate all four themes, returned in Theme order."""
    return tuple(evaluate_theme(THEME_TABLES[theme], answers) for theme in Theme)
