"""
Unit tests for the data models.
Tests enum parsing, UserContext coercion and camelCase serialization.
"""

import pytest
from datetime import datetime, timezone
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from synapse.core.errors import ValidationError
from synapse.core.models import (
    CognitiveType, EnergyState, FrameworkResponses, ParsedInput, ParsedUnit,
    SimilarTask, UserContext, UserHistory, UserTier, to_jsonable,
)


# =============================================================================
# Enum parsing
# =============================================================================

class TestEnumParsing:
    """Tests for the lenient parse() classmethods."""

    @pytest.mark.parametrize("raw", ["medium", "MEDIUM", " Medium "])
    def test_energy_case_insensitive(self, raw):
        assert EnergyState.parse(raw) is EnergyState.MEDIUM

    @pytest.mark.parametrize("raw", ["tired", "", None, 3])
    def test_energy_invalid(self, raw):
        with pytest.raises(ValidationError) as exc:
            EnergyState.parse(raw)
        assert exc.value.field == "energyState"

    def test_energy_error_lists_values(self):
        with pytest.raises(ValidationError) as exc:
            EnergyState.parse("tired")
        assert "Hyperfocus" in exc.value.message

    @pytest.mark.parametrize("raw,expected", [
        ("autism", CognitiveType.ASD),
        ("combined", CognitiveType.MIXED),
        ("adhd", CognitiveType.ADHD),
        (None, CognitiveType.UNKNOWN),
    ])
    def test_cognitive_aliases(self, raw, expected):
        assert CognitiveType.parse(raw) is expected

    def test_tier(self):
        assert UserTier.parse("Pro") is UserTier.PRO
        with pytest.raises(ValidationError):
            UserTier.parse("platinum")


# =============================================================================
# UserContext
# =============================================================================

class TestUserContext:
    """Tests for construction and coercion."""

    def test_coerces_strings(self):
        context = UserContext(energy_state="low", cognitive_type="adhd", user_tier="enterprise")

        assert context.energy_state is EnergyState.LOW
        assert context.cognitive_type is CognitiveType.ADHD
        assert context.user_tier is UserTier.ENTERPRISE

    def test_defaults(self):
        context = UserContext(energy_state="Medium")

        assert context.user_id == "demo-user"
        assert context.user_tier is UserTier.FREE
        assert context.historical_context == ()
        assert context.current_time.tzinfo is not None

    def test_frozen(self):
        context = UserContext(energy_state="Medium")
        with pytest.raises(Exception):
            context.energy_state = EnergyState.LOW

    def test_from_dict_camel_case(self):
        context = UserContext.from_dict({
            "energyState": "Hyperfocus",
            "cognitiveType": "ASD",
            "userId": "u-7",
            "userTier": "pro",
            "history": {"completedStoryPoints": 40, "sprintsCompleted": 4},
            "productivityPatterns": {"hyperfocusTriggers": ["music"]},
        })

        assert context.energy_state is EnergyState.HYPERFOCUS
        assert context.user_id == "u-7"
        assert context.history == UserHistory(40, 4)
        assert context.productivity_patterns.hyperfocus_triggers == ("music",)

    def test_from_dict_snake_case(self):
        context = UserContext.from_dict({"energy_state": "Low", "user_tier": "pro"})
        assert context.energy_state is EnergyState.LOW
        assert context.user_tier is UserTier.PRO

    def test_from_dict_missing_energy(self):
        with pytest.raises(ValidationError):
            UserContext.from_dict({"userTier": "pro"})


# =============================================================================
# Serialization
# =============================================================================

class TestSerialization:
    """Tests for to_jsonable and to_dict."""

    def test_camel_case_keys(self):
        data = SimilarTask(
            content="plan", similarity_score=0.5,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ).to_dict()

        assert data == {
            "content": "plan",
            "similarityScore": 0.5,
            "createdAt": "2024-01-01T00:00:00+00:00",
            "id": None,
        }

    def test_nested_tuples_become_lists(self):
        data = ParsedInput(tasks=(ParsedUnit("a"),)).to_dict()
        assert data["tasks"] == [{"content": "a"}]
        assert data["urgencyLevel"] == "low"

    def test_enums_become_values(self):
        assert to_jsonable({"e": EnergyState.LOW}) == {"e": "Low"}

    def test_total_units(self):
        parsed = ParsedInput(tasks=(ParsedUnit("a"),), projects=(ParsedUnit("b"),))
        assert parsed.total_units == 2

    def test_present_frameworks(self):
        assert FrameworkResponses(gtd=object()).present() == ["gtd"]
