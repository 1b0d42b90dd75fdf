"""Tests for the quick diagnosis."""

import pytest

from bizdiag.core.answers import ValidationError
from bizdiag.core.entities import QuickPriority
from bizdiag.engine.quick import (
    FULL_DIAGNOSIS,
    QUICK_QUESTIONS,
    QUICK_THEME,
    evaluate_quick,
    validate_quick_answers,
)


@pytest.fixture
def quiet_answers() -> dict:
    """Quick answers that trigger nothing."""
    return {
        "has_website": "functional",
        "receives_online_contacts": "yes",
        "depends_whatsapp": "no",
        "loses_clients_delay": "unknown",
        "has_system_app": "yes",
        "organization_difficulty": "no",
        "social_presence": "yes",
    }


class TestEvaluateQuick:
    """Test quick recommendations and their urgency."""

    def test_every_rule_fires(self, quick_answers):
        """All four rules fire, sorted by urgency, with the full diagnosis last."""
        recs = evaluate_quick(quick_answers)

        assert [r.id for r in recs] == [
            "site",
            "app",
            "process_organization",
            "positioning",
            "full_diagnosis",
        ]
        assert [r.priority for r in recs] == [
            QuickPriority.HIGH,
            QuickPriority.HIGH,
            QuickPriority.MEDIUM,
            QuickPriority.MEDIUM,
            QuickPriority.LOW,
        ]

    def test_nothing_fires(self, quiet_answers):
        """Healthy quick answers give no recommendations."""
        assert evaluate_quick(quiet_answers) == []

    def test_single_match_has_no_full_diagnosis(self, quiet_answers):
        """One match does not add the full diagnosis suggestion."""
        raw = dict(quiet_answers, has_website="outdated")

        recs = evaluate_quick(raw)

        assert [r.id for r in recs] == ["site"]
        assert "outdated" in recs[0].description

    def test_two_matches_add_full_diagnosis(self, quiet_answers):
        """Two matches append the full diagnosis suggestion."""
        raw = dict(quiet_answers, has_website="no", social_presence="little")

        recs = evaluate_quick(raw)

        assert recs[-1] == FULL_DIAGNOSIS
        assert len(recs) == 3

    def test_high_urgency_sorted_first(self, quiet_answers):
        """A later HIGH rule moves ahead of an earlier MEDIUM one."""
        raw = dict(
            quiet_answers,
            depends_whatsapp="yes",
            organization_difficulty="yes",
        )

        recs = evaluate_quick(raw)

        assert [r.id for r in recs] == ["process_organization", "app", "full_diagnosis"]
        assert recs[1].priority == QuickPriority.MEDIUM

    @pytest.mark.parametrize(
        "whatsapp, system, contacts, fires",
        [
            ("yes", "yes", "yes", True),
            ("no", "no", "few", True),
            ("no", "no", "yes", False),
            ("no", "simple", "no", False),
        ],
    )
    def test_app_rule(self, quiet_answers, whatsapp, system, contacts, fires):
        """App fires on WhatsApp dependency or no system without online contacts."""
        raw = dict(
            quiet_answers,
            depends_whatsapp=whatsapp,
            has_system_app=system,
            receives_online_contacts=contacts,
        )

        ids = [r.id for r in evaluate_quick(raw)]

        assert ("app" in ids) == fires

    def test_legacy_website_alias(self, quiet_answers):
        """The legacy "old" website answer reads as outdated."""
        raw = dict(quiet_answers, has_website="old")
        assert [r.id for r in evaluate_quick(raw)] == ["site"]

    def test_to_dict(self, quick_answers):
        """Serialized recommendations use camelCase and enum values."""
        data = evaluate_quick(quick_answers)[0].to_dict()

        assert data["id"] == "site"
        assert data["priority"] == "high"
        assert data["targetAction"] == "/solutions/create/site"


class TestValidateQuickAnswers:
    """Test quick questionnaire validation."""

    def test_all_questions_required(self, quick_answers):
        """Missing and blank answers are all reported."""
        raw = dict(quick_answers)
        del raw["depends_whatsapp"]
        raw["social_presence"] = ""

        with pytest.raises(ValidationError) as exc_info:
            validate_quick_answers(raw)

        assert exc_info.value.theme == QUICK_THEME
        assert exc_info.value.missing == ("depends_whatsapp", "social_presence")

    def test_out_of_domain_value(self, quick_answers):
        """An unknown choice is reported as invalid."""
        raw = dict(quick_answers, loses_clients_delay="often")

        with pytest.raises(ValidationError) as exc_info:
            evaluate_quick(raw)

        assert exc_info.value.invalid == {"loses_clients_delay": "often"}

    def test_normalized_keys(self, quick_answers):
        """Validation returns one value per quick question."""
        assert set(validate_quick_answers(quick_answers)) == set(QUICK_QUESTIONS)
