"""Core entity definitions for the diagnosis engine.

This module contains the enums that describe questionnaire answer
domains and engine outputs, placed here to avoid circular imports.
"""

from enum import Enum


class Theme(Enum):
    """Questionnaire themes, in the fixed order results are reported."""
    INFRASTRUCTURE = "infrastructure"
    OPERATIONS = "operations"
    ACQUISITION = "acquisition"
    MATURITY = "maturity"


class Status(Enum):
    """Health classification assigned to a theme."""
    CRITICAL = "critical"
    WARNING = "warning"
    GOOD = "good"


# ============== Infrastructure answers ==============

class WebsitePresence(Enum):
    NO = "no"
    OUTDATED = "outdated"
    FUNCTIONAL = "functional"


class WebsiteConversion(Enum):
    NO = "no"
    PARTIAL = "partial"
    YES = "yes"


class AppSystem(Enum):
    NO = "no"
    SIMPLE = "simple"  # Off-the-shelf tools only
    YES = "yes"


class DigitalTools(Enum):
    NO = "no"
    FEW = "few"
    YES = "yes"


# ============== Operations answers ==============

class Level(Enum):
    """Three-step high/medium/low scale shared by several questions."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ServiceCapacity(Enum):
    LIMITED = "limited"
    OK = "ok"
    SCALABLE = "scalable"


# ============== Acquisition answers ==============

class AcquisitionChannel(Enum):
    """Multi-select acquisition channels. Declaration order is canonical."""
    ORGANIC = "organic"            # Search engines
    PAID = "paid"                  # Paid ads
    SOCIAL = "social"
    REFERRAL = "referral"
    PARTNERSHIPS = "partnerships"
    EVENTS = "events"              # Events / networking
    COLD = "cold"                  # Active outbound prospecting


class DigitalPresence(Enum):
    NONE = "none"
    LIMITED = "limited"
    STRONG = "strong"


class PostSaleRelationship(Enum):
    NONE = "none"
    BASIC = "basic"
    STRUCTURED = "structured"


# ============== Maturity answers ==============

class MaturityLevel(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# ============== Outputs ==============

class PrioritySolution(Enum):
    """Headline solution label. Values match recommendation ids."""
    SITE = "site"
    APP = "app"
    PROCESS_ORGANIZATION = "process_organization"
    POSITIONING = "positioning"
    MARKETING_AUTOMATION = "marketing_automation"


class QuickPriority(Enum):
    """Urgency attached to a quick-diagnosis recommendation."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
