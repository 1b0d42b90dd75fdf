"""Pytest fixtures for bizdiag tests."""

import pytest


@pytest.fixture
def all_critical_answers() -> dict:
    """Answers where every theme is critical."""
    return {
        "has_website": "no",
        "website_converts": "no",
        "has_app_system": "no",
        "uses_digital_tools": "no",
        "organization_level": 1,
        "manual_dependency": "high",
        "service_capacity": "limited",
        "main_channels": ["referral"],
        "referral_dependency": "high",
        "digital_presence": "none",
        "post_sale_relationship": "none",
        "maturity_level": "beginner",
        "automation_potential": "high",
        "scalability_potential": "low",
    }


@pytest.fixture
def healthy_answers() -> dict:
    """Answers where every theme is good and nothing is recommended."""
    return {
        "has_website": "functional",
        "website_converts": "yes",
        "has_app_system": "yes",
        "uses_digital_tools": "yes",
        "organization_level": 5,
        "manual_dependency": "low",
        "service_capacity": "scalable",
        "main_channels": ["organic", "paid", "social"],
        "referral_dependency": "low",
        "digital_presence": "strong",
        "post_sale_relationship": "structured",
        "maturity_level": "advanced",
        "automation_potential": "low",
        "scalability_potential": "medium",
    }


@pytest.fixture
def quick_answers() -> dict:
    """Quick-diagnosis answers that trigger every rule."""
    return {
        "has_website": "no",
        "receives_online_contacts": "no",
        "depends_whatsapp": "yes",
        "loses_clients_delay": "yes",
        "has_system_app": "no",
        "organization_difficulty": "some",
        "social_presence": "little",
    }
