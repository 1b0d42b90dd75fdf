"""Workspace-configurable presentation settings.

Allows a workspace to customize how diagnosis output is presented:
- Where each recommendation points the caller (target actions)
- Recommendation titles and descriptions
- The next-steps script handed to the consultant

Configuration never changes predicates, rule order or status logic.
Two workspaces given identical answers get the same statuses, points
and recommendation ids.

Configuration can be loaded from YAML/JSON files in a config directory.

Example usage:
    from bizdiag.engine.config import load_engine_config

    config = load_engine_config(Path("config/diagnosis/agency.yaml"))
    engine = DiagnosisEngine(config=config)
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .recommendations import RECOMMENDATION_IDS, RECOMMENDATION_RULES
from .interface import RecommendationRule

logger = logging.getLogger(__name__)

OVERRIDABLE_TEXT_FIELDS = ("title", "description")
CONFIG_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass
class EngineConfig:
    """Workspace-specific presentation configuration.

    Attributes:
        workspace_id: Unique identifier (e.g., "agency_abc")
        workspace_name: Human-readable workspace name
        description: Optional description of this configuration
        target_actions: Recommendation id -> caller action reference
        recommendation_text: Recommendation id -> {"title", "description"}
            overrides
        next_steps: Replacement next-steps script. Empty keeps the default.
    """

    workspace_id: str
    workspace_name: str
    description: str = ""
    target_actions: dict[str, str] = field(default_factory=dict)
    recommendation_text: dict[str, dict[str, str]] = field(default_factory=dict)
    next_steps: list[str] = field(default_factory=list)

    def __post_init__(self):
        # An empty YAML key loads as None
        self.description = self.description or ""
        self.target_actions = self.target_actions or {}
        self.recommendation_text = self.recommendation_text or {}
        self.next_steps = self.next_steps or []

        if not isinstance(self.target_actions, dict) or not all(
            isinstance(v, str) for v in self.target_actions.values()
        ):
            raise ValueError("target_actions must map recommendation ids to strings")
        if not isinstance(self.recommendation_text, dict) or not all(
            isinstance(v, dict) for v in self.recommendation_text.values()
        ):
            raise ValueError(
                "recommendation_text must map recommendation ids to mappings"
            )
        if not isinstance(self.next_steps, (list, tuple)) or not all(
            isinstance(step, str) for step in self.next_steps
        ):
            raise ValueError("next_steps must be a list of strings")

        unknown = (
            set(self.target_actions) | set(self.recommendation_text)
        ) - set(RECOMMENDATION_IDS)
        if unknown:
            raise ValueError(
                f"Unknown recommendation ids in config '{self.workspace_id}': "
                f"{sorted(unknown)}"
            )
        for rec_id, texts in self.recommendation_text.items():
            bad_fields = set(texts) - set(OVERRIDABLE_TEXT_FIELDS)
            if bad_fields:
                raise ValueError(
                    f"Recommendation '{rec_id}' overrides unsupported fields "
                    f"{sorted(bad_fields)}; allowed: {OVERRIDABLE_TEXT_FIELDS}"
                )
        if any(not step.strip() for step in self.next_steps):
            raise ValueError("Next steps must not contain blank entries")

    def build_rules(self) -> tuple[RecommendationRule, ...]:
        """Build the recommendation table with presentation overrides.

        Predicates, justifications and order come from
        RECOMMENDATION_RULES unchanged.

        Returns:
            Tuple of RecommendationRule ready for selection
        """
        rules = []
        for rule in RECOMMENDATION_RULES:
            changes: dict[str, Any] = dict(self.recommendation_text.get(rule.id, {}))
            if rule.id in self.target_actions:
                changes["target_action"] = self.target_actions[rule.id]
            rules.append(replace(rule, **changes) if changes else rule)
        return tuple(rules)

    def to_dict(self) -> dict[str, Any]:
        return {
            "workspace_id": self.workspace_id,
            "workspace_name": self.workspace_name,
            "description": self.description,
            "target_actions": dict(self.target_actions),
            "recommendation_text": {
                k: dict(v) for k, v in self.recommendation_text.items()
            },
            "next_steps": list(self.next_steps),
        }


def load_engine_config(config_path: Path) -> EngineConfig:
    """Load engine configuration from YAML or JSON file.

    Args:
        config_path: Path to configuration file (.yaml, .yml, or .json)

    Returns:
        EngineConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported or content is invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        if config_path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif config_path.suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_path.suffix}. "
                "Use .yaml, .yml, or .json"
            )

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    known = {f.name for f in fields(EngineConfig)}
    unexpected = set(data) - known
    missing = {"workspace_id", "workspace_name"} - set(data)
    if unexpected or missing:
        raise ValueError(
            f"Config file {config_path} has unexpected keys {sorted(unexpected)} "
            f"or lacks required keys {sorted(missing)}"
        )

    return EngineConfig(**data)


def save_engine_config(config: EngineConfig, config_path: Path) -> None:
    """Save engine configuration to YAML or JSON file.

    Args:
        config: Configuration to save
        config_path: Path to save to (.yaml, .yml, or .json)

    Raises:
        ValueError: If file format is not supported
    """
    if config_path.suffix not in CONFIG_SUFFIXES:
        raise ValueError(
            f"Unsupported config format: {config_path.suffix}. "
            "Use .yaml, .yml, or .json"
        )

    data = config.to_dict()

    # Ensure parent directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        if config_path.suffix == ".json":
            json.dump(data, f, indent=2)
        else:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def get_default_config_dir() -> Path:
    """Directory searched for workspace configs.

    BIZDIAG_CONFIG_DIR wins when set; otherwise ./config/diagnosis if it
    exists, else the examples bundled with the package.
    """
    if env_dir := os.environ.get("BIZDIAG_CONFIG_DIR"):
        return Path(env_dir)

    cwd_config = Path.cwd() / "config" / "diagnosis"
    if cwd_config.exists():
        return cwd_config

    return Path(__file__).parent / "default_config"


def list_available_configs(config_dir: Path | None = None) -> list[Path]:
    """Workspace config files in config_dir (default directory if None), sorted."""
    config_dir = config_dir or get_default_config_dir()
    if not config_dir.exists():
        return []
    return sorted(p for p in config_dir.iterdir() if p.suffix in CONFIG_SUFFIXES)


def find_workspace_config(
    workspace_id: str, config_dir: Path | None = None
) -> EngineConfig:
    """Load the config file named after a workspace.

    A workspace "agency_abc" is read from agency_abc.yaml, .yml or .json
    in the config directory. The loaded workspace_id must match.

    Raises:
        FileNotFoundError: If no file carries that name
        ValueError: If the file belongs to a different workspace
    """
    available = list_available_configs(config_dir)
    for path in available:
        if path.stem != workspace_id:
            continue
        config = load_engine_config(path)
        if config.workspace_id != workspace_id:
            raise ValueError(
                f"{path} declares workspace '{config.workspace_id}', "
                f"expected '{workspace_id}'"
            )
        logger.debug(f"Loaded workspace config {path}")
        return config

    raise FileNotFoundError(
        f"No config for workspace '{workspace_id}'; available: "
        f"{[p.stem for p in available]}"
    )
