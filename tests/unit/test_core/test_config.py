"""
Unit tests for the Config manager.
"""

import json
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from synapse.core.config import Config
from synapse.core.models import UserTier


class TestConfigFiles:
    """Tests for default file creation and persistence."""

    def test_creates_default_files(self, tmp_path):
        Config(tmp_path)

        for name in ("settings.json", "tiers.json", "preferences.json"):
            assert (tmp_path / name).exists()
        settings = json.loads((tmp_path / "settings.json").read_text())
        assert settings["embedding_backend"] == "disabled"
        assert settings["ripple_mode"] == "first_relation"

    def test_set_persists(self, tmp_path):
        Config(tmp_path).set("similarity_limit", 3)
        assert Config(tmp_path).get("similarity_limit") == 3

    def test_new_keys_fall_back_to_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({"similarity_limit": 2}))
        config = Config(tmp_path)

        assert config.get("similarity_limit") == 2
        assert config.get("agent_timeout_seconds") == 10.0

    def test_env_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SYNAPSE_CONFIG_DIR", str(tmp_path / "cfg"))
        config = Config()
        assert config.config_dir == tmp_path / "cfg"
        assert (tmp_path / "cfg" / "tiers.json").exists()

    def test_get_default(self, tmp_path):
        assert Config(tmp_path).get("missing", default="x") == "x"
        assert Config(tmp_path).get("default_tier", section="preferences") == "free"


class TestTierFrameworks:
    """Tests for tier entitlements."""

    def test_free_tier(self, tmp_path):
        assert Config(tmp_path).get_tier_frameworks("free") == ["Semantic", "Custom"]

    def test_enum_tier(self, tmp_path):
        frameworks = Config(tmp_path).get_tier_frameworks(UserTier.PRO)
        assert frameworks == ["Semantic", "Agile", "Kanban", "GTD", "PARA", "Custom"]

    def test_unknown_tier(self, tmp_path):
        assert Config(tmp_path).get_tier_frameworks("platinum") == []

    def test_returns_copy(self, tmp_path):
        config = Config(tmp_path)
        config.get_tier_frameworks("free").append("Agile")
        assert "Agile" not in config.get_tier_frameworks("free")

    def test_resolve_user_tier(self, tmp_path):
        config = Config(tmp_path)
        config.set("user_tiers", {"u-1": "pro"}, section="preferences")

        assert config.resolve_user_tier("u-1") == "pro"
        assert config.resolve_user_tier("someone-else") == "free"

    def test_resolve_user_tier_uses_default_tier(self, tmp_path):
        config = Config(tmp_path)
        config.set("default_tier", "enterprise", section="preferences")
        assert config.resolve_user_tier("u-1") == "enterprise"

    def test_vector_store_path(self, tmp_path):
        config = Config(tmp_path)
        config.set("vector_store_path", str(tmp_path / "chroma"))
        assert config.get_vector_store_path() == tmp_path / "chroma"
