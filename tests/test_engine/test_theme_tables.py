"""Tests for the theme decision tables.

These tests verify that each theme evaluator:
1. Resolves to exactly one status
2. Checks critical conditions before warning conditions
3. Restates the answers as explanatory points
"""

import itertools
import logging

import pytest

from bizdiag.core.answers import validate_answers
from bizdiag.core.entities import Level, Status, Theme
from bizdiag.engine.interface import StatusCondition
from bizdiag.engine.themes import (
    BOTTLENECK_PLACEHOLDER,
    THEME_TABLES,
    ThemeTable,
    evaluate_theme,
    evaluate_themes,
)


def _status(raw: dict, theme: Theme) -> Status:
    return evaluate_theme(THEME_TABLES[theme], validate_answers(raw)).status


def _expected_operations(level: int, dependency: str) -> Status:
    if level <= 2 or dependency == "high":
        return Status.CRITICAL
    if level == 3 or dependency == "medium":
        return Status.WARNING
    return Status.GOOD


def _expected_infrastructure(website: str, converts: str) -> Status:
    if website == "no" or converts == "no":
        return Status.CRITICAL
    if website == "outdated" or converts == "partial":
        return Status.WARNING
    return Status.GOOD


class TestInfrastructure:
    """Digital infrastructure decision table."""

    @pytest.mark.parametrize(
        "website, converts, expected",
        [
            ("no", "yes", Status.CRITICAL),
            ("functional", "no", Status.CRITICAL),
            ("outdated", "no", Status.CRITICAL),
            ("outdated", "yes", Status.WARNING),
            ("functional", "partial", Status.WARNING),
            ("functional", "yes", Status.GOOD),
        ],
    )
    def test_status_table(self, healthy_answers, website, converts, expected):
        """Website presence and conversion decide the status."""
        raw = dict(healthy_answers, has_website=website, website_converts=converts)
        assert _status(raw, Theme.INFRASTRUCTURE) == expected

    def test_points_restate_four_answers(self, all_critical_answers):
        """One point per infrastructure answer, in question order."""
        analysis = evaluate_theme(
            THEME_TABLES[Theme.INFRASTRUCTURE], validate_answers(all_critical_answers)
        )

        assert analysis.title == "Digital Infrastructure"
        assert analysis.points == (
            "No website of its own",
            "Website does not generate conversions",
            "No proprietary system or app",
            "Does not use digital tools",
        )

    def test_monotonic_website_improvement(self, healthy_answers):
        """Improving website answers never moves status to critical."""
        for app, tools in itertools.product(["no", "simple", "yes"], ["no", "few", "yes"]):
            raw = dict(
                healthy_answers,
                has_website="functional",
                website_converts="yes",
                has_app_system=app,
                uses_digital_tools=tools,
            )
            assert _status(raw, Theme.INFRASTRUCTURE) != Status.CRITICAL


class TestOperations:
    """Operations decision table."""

    @pytest.mark.parametrize(
        "level, dependency, expected",
        [
            (1, "low", Status.CRITICAL),
            (2, "low", Status.CRITICAL),
            (5, "high", Status.CRITICAL),
            (3, "low", Status.WARNING),
            (4, "medium", Status.WARNING),
            (4, "low", Status.GOOD),
            (5, "low", Status.GOOD),
        ],
    )
    def test_status_table(self, healthy_answers, level, dependency, expected):
        """Organization level and manual dependency decide the status."""
        raw = dict(healthy_answers, organization_level=level, manual_dependency=dependency)
        assert _status(raw, Theme.OPERATIONS) == expected

    def test_critical_precedes_warning(self, healthy_answers):
        """Level 3 (warning) with high dependency (critical) is critical."""
        raw = dict(healthy_answers, organization_level=3, manual_dependency="high")
        assert _status(raw, Theme.OPERATIONS) == Status.CRITICAL

    def test_default_level_is_warning(self, healthy_answers):
        """Absent organization level defaults to 3."""
        raw = dict(healthy_answers)
        del raw["organization_level"]
        assert _status(raw, Theme.OPERATIONS) == Status.WARNING

    def test_scenario_c_good(self, all_critical_answers):
        """Level 5, low dependency and scalable capacity is good."""
        raw = dict(
            all_critical_answers,
            organization_level=5,
            manual_dependency="low",
            service_capacity="scalable",
        )
        assert _status(raw, Theme.OPERATIONS) == Status.GOOD

    def test_points_include_level_and_bottleneck(self, healthy_answers):
        """Points show the level and the reported bottleneck text."""
        raw = dict(healthy_answers, operational_bottlenecks="Quotes take days")

        analysis = evaluate_theme(THEME_TABLES[Theme.OPERATIONS], validate_answers(raw))

        assert analysis.points[0] == "Organization level: 5/5"
        assert analysis.points[2] == "Quotes take days"

    def test_placeholder_when_bottleneck_absent(self, healthy_answers):
        """A placeholder stands in for an unanswered bottleneck."""
        analysis = evaluate_theme(
            THEME_TABLES[Theme.OPERATIONS], validate_answers(healthy_answers)
        )
        assert analysis.points[2] == BOTTLENECK_PLACEHOLDER


class TestAcquisition:
    """Acquisition & relationship decision table."""

    def test_critical_requires_both_conditions(self, healthy_answers):
        """High referral dependency alone is not critical."""
        raw = dict(
            healthy_answers,
            referral_dependency="high",
            main_channels=["referral", "social"],
        )
        assert _status(raw, Theme.ACQUISITION) == Status.GOOD

    @pytest.mark.parametrize("channels", [[], ["referral"]])
    def test_critical_with_few_channels(self, healthy_answers, channels):
        """High referral dependency with at most one channel is critical."""
        raw = dict(healthy_answers, referral_dependency="high", main_channels=channels)
        assert _status(raw, Theme.ACQUISITION) == Status.CRITICAL

    def test_warning_without_digital_presence(self, healthy_answers):
        """No digital presence gives a warning."""
        raw = dict(healthy_answers, digital_presence="none")
        assert _status(raw, Theme.ACQUISITION) == Status.WARNING

    def test_warning_without_post_sale(self, healthy_answers):
        """No post-sale relationship gives a warning."""
        raw = dict(healthy_answers, post_sale_relationship="none")
        assert _status(raw, Theme.ACQUISITION) == Status.WARNING

    def test_critical_precedes_warning(self, all_critical_answers):
        """Scenario A satisfies critical and both warning rows."""
        assert _status(all_critical_answers, Theme.ACQUISITION) == Status.CRITICAL

    def test_channel_count_point(self, healthy_answers):
        """First point counts the channels in plural."""
        analysis = evaluate_theme(
            THEME_TABLES[Theme.ACQUISITION], validate_answers(healthy_answers)
        )
        assert analysis.points[0] == "3 active acquisition channels"

    def test_single_channel_point(self, all_critical_answers):
        """A single channel is worded in the singular."""
        analysis = evaluate_theme(
            THEME_TABLES[Theme.ACQUISITION], validate_answers(all_critical_answers)
        )
        assert analysis.points[0] == "1 active acquisition channel"


class TestMaturity:
    """Maturity decision table."""

    @pytest.mark.parametrize(
        "level, expected",
        [
            ("beginner", Status.CRITICAL),
            ("intermediate", Status.WARNING),
            ("advanced", Status.GOOD),
        ],
    )
    def test_status_from_level(self, healthy_answers, level, expected):
        """Maturity level maps directly onto the status."""
        raw = dict(healthy_answers, maturity_level=level)
        assert _status(raw, Theme.MATURITY) == expected

    def test_points(self, all_critical_answers):
        """Points restate level, automation and scalability."""
        analysis = evaluate_theme(
            THEME_TABLES[Theme.MATURITY], validate_answers(all_critical_answers)
        )
        assert analysis.points == (
            "Maturity level: Beginner",
            "High automation potential identified",
            "Limited additional scaling potential",
        )


class TestEvaluateThemes:
    """All four evaluators together."""

    def test_fixed_theme_order(self, healthy_answers):
        """Analyses come back in Theme order."""
        analyses = evaluate_themes(validate_answers(healthy_answers))
        assert [a.theme for a in analyses] == list(Theme)

    def test_operations_status_for_all_combinations(self, healthy_answers):
        """Every level, dependency and capacity combination gets its expected status."""
        for level, dependency, capacity in itertools.product(
            range(1, 6), ["high", "medium", "low"], ["limited", "ok", "scalable"]
        ):
            raw = dict(
                healthy_answers,
                organization_level=level,
                manual_dependency=dependency,
                service_capacity=capacity,
            )
            assert _status(raw, Theme.OPERATIONS) == _expected_operations(
                level, dependency
            ), (level, dependency, capacity)

    def test_infrastructure_status_for_all_combinations(self, healthy_answers):
        """Every infrastructure combination gets its expected status."""
        for website, converts, app, tools in itertools.product(
            ["no", "outdated", "functional"],
            ["no", "partial", "yes"],
            ["no", "simple", "yes"],
            ["no", "few", "yes"],
        ):
            raw = dict(
                healthy_answers,
                has_website=website,
                website_converts=converts,
                has_app_system=app,
                uses_digital_tools=tools,
            )
            assert _status(raw, Theme.INFRASTRUCTURE) == _expected_infrastructure(
                website, converts
            ), (website, converts, app, tools)

    def test_summary_matches_status(self, all_critical_answers):
        """Each analysis carries the summary for its status."""
        for analysis in evaluate_themes(validate_answers(all_critical_answers)):
            table = THEME_TABLES[analysis.theme]
            assert analysis.summary == table.summaries[Status.CRITICAL]

    def test_deciding_row_logged(self, healthy_answers, caplog):
        """The label of the row that decided each status is logged."""
        raw = dict(healthy_answers, organization_level=2)

        with caplog.at_level(logging.DEBUG, logger="bizdiag.engine.themes"):
            evaluate_themes(validate_answers(raw))

        assert "operations: critical (organization level at most 2)" in caplog.text
        assert "maturity: good (no condition matched)" in caplog.text


class TestThemeTableConstruction:
    """ThemeTable guards its own ordering."""

    def test_warning_before_critical_rejected(self):
        """A warning row ahead of a critical row is refused."""
        with pytest.raises(ValueError, match="critical conditions before warning"):
            ThemeTable(
                theme=Theme.MATURITY,
                title="Broken",
                conditions=(
                    StatusCondition(Status.WARNING, lambda a: True, "w"),
                    StatusCondition(Status.CRITICAL, lambda a: True, "c"),
                ),
                summaries={s: s.value for s in Status},
                describe=lambda a: [],
            )

    def test_good_row_rejected(self):
        """GOOD cannot appear as a table row."""
        with pytest.raises(ValueError):
            ThemeTable(
                theme=Theme.MATURITY,
                title="Broken",
                conditions=(StatusCondition(Status.GOOD, lambda a: True, "g"),),
                summaries={s: s.value for s in Status},
                describe=lambda a: [],
            )

    def test_missing_summary_rejected(self):
        """Every status needs a summary sentence."""
        with pytest.raises(ValueError, match="lacks summaries"):
            ThemeTable(
                theme=Theme.MATURITY,
                title="Broken",
                conditions=(),
                summaries={Status.GOOD: "ok"},
                describe=lambda a: [],
            )

    def test_first_match_wins(self, healthy_answers):
        """The first satisfied row decides, even if later rows also match."""
        critical = StatusCondition(
            Status.CRITICAL, lambda a: a.manual_dependency == Level.LOW, "c"
        )
        table = ThemeTable(
            theme=Theme.OPERATIONS,
            title="Test",
            conditions=(critical, StatusCondition(Status.WARNING, lambda a: True, "w")),
            summaries={s: s.value for s in Status},
            describe=lambda a: [],
        )
        answers = validate_answers(healthy_answers)

        assert table.match(answers) is critical
        assert table.classify(answers) == Status.CRITICAL
