"""YAML rules loader for transaction type keywords."""
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

logger = logging.getLogger(__name__)

# Cache for loaded rules
_rules_cache: Dict[str, Any] = {}


def get_rules_path() -> Path:
    """Get the path to the rules directory."""
    return Path(__file__).parent


def load_type_rules(force_reload: bool = False) -> Dict[str, Any]:
    """
    Load keyword and mode-default rules from YAML.

    Args:
        force_reload: Force reload from disk even if cached

    Returns:
        Dictionary with ``keywords`` and ``mode_defaults`` entries
    """
    global _rules_cache

    if _rules_cache and not force_reload:
        return _rules_cache

    rules_path = get_rules_path() / "type_keywords.yaml"

    with open(rules_path, "r", encoding="utf-8") as f:
        _rules_cache = yaml.safe_load(f) or {}

    logger.info(f"Loaded transaction type rules from {rules_path}")
    return _rules_cache


def get_type_keywords() -> List[Tuple[str, str]]:
    """Return the ordered (keyword, type name) table."""
    rules = load_type_rules()
    return [
        (str(entry["keyword"]).lower(), entry["type"])
        for entry in rules.get("keywords", [])
    ]


def get_mode_defaults(mode: str) -> List[str]:
    """Return default type names for an import mode, most preferred first."""
    rules = load_type_rules()
    return list(rules.get("mode_defaults", {}).get(mode, []))


def reload_rules() -> None:
    """Force reload of the rules (useful after editing the YAML file)."""
    global _rules_cache

    _rules_cache = {}
    load_type_rules(force_reload=True)
    logger.info("Rules reloaded")
