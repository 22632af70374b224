"""
Configuration management for Synapse
Handles loading and saving pipeline settings, tier entitlements and preferences
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, List, Optional

from .models import DEFAULT_TIER_FRAMEWORKS


class Config:
    """Configuration manager for the brain-dump pipeline"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to configuration directory (defaults to
                $SYNAPSE_CONFIG_DIR, then ./config)
        """
        if config_dir is None:
            env_dir = os.environ.get("SYNAPSE_CONFIG_DIR")
            config_dir = Path(env_dir) if env_dir else Path(__file__).parent.parent.parent / "config"

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.tiers_file = self.config_dir / "tiers.json"
        self.preferences_file = self.config_dir / "preferences.json"

        # Load configurations
        self.settings = self._load_json(self.settings_file, self._default_settings())
        self.tiers = self._load_json(self.tiers_file, self._default_tiers())
        self.preferences = self._load_json(self.preferences_file, self._default_preferences())

    def _load_json(self, file_path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        """Load JSON file or return default if file doesn't exist"""
        if file_path.exists():
            with open(file_path, 'r') as f:
                loaded = json.load(f)
            # Keys added in newer releases fall back to their defaults
            return {**default, **loaded}
        else:
            # Create file with defaults
            self._save_json(file_path, default)
            return default

    def _save_json(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Save data to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2)

    def _default_settings(self) -> Dict[str, Any]:
        """Default pipeline settings"""
        return {
            "embedding_backend": "disabled",  # 'openai', 'local', 'disabled'
            "embedding_model": "text-embedding-3-small",
            "vector_store_path": "data/chroma",
            "similarity_limit": 5,
            "semantic_timeout_seconds": 5.0,
            "agent_timeout_seconds": 10.0,
            "ripple_mode": "first_relation",  # 'first_relation', 'all_relations'
            "pinned_frameworks": []
        }

    def _default_tiers(self) -> Dict[str, Any]:
        """Default framework entitlements per billing tier"""
        return {tier: list(frameworks) for tier, frameworks in DEFAULT_TIER_FRAMEWORKS.items()}

    def _default_preferences(self) -> Dict[str, Any]:
        """Default user preferences"""
        return {
            "default_cognitive_type": "unknown",
            "default_tier": "free",
            "default_user_id": "demo-user",
            "user_tiers": {}  # user_id -> tier, the entitlement source
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'tiers', 'preferences')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        section_map = {
            "settings": self.settings,
            "tiers": self.tiers,
            "preferences": self.preferences
        }

        return section_map.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save to disk

        Args:
            key: Configuration key
            value: Value to set
            section: Configuration section ('settings', 'tiers', 'preferences')
        """
        section_map = {
            "settings": (self.settings, self.settings_file),
            "tiers": (self.tiers, self.tiers_file),
            "preferences": (self.preferences, self.preferences_file)
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            self._save_json(file_path, config_dict)

    def get_tier_frameworks(self, tier: str) -> List[str]:
        """Frameworks the given tier may run; unknown tiers get nothing."""
        return list(self.tiers.get(getattr(tier, "value", tier), []))

    def resolve_user_tier(self, user_id: str) -> str:
        """Tier entitled to user_id, falling back to the default tier."""
        user_tiers = self.preferences.get("user_tiers") or {}
        return user_tiers.get(user_id) or self.preferences.get("default_tier", "free")

    def get_vector_store_path(self) -> Path:
        """Get full path to the vector store directory"""
        path = Path(self.settings["vector_store_path"])
        if path.is_absolute():
            return path
        base_path = Path(__file__).parent.parent.parent
        return base_path / path
