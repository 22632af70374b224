"""
Unit tests for the ProgressOrchestrator.
Tests shared-skill grouping, scoring bounds, ripple simulation in both modes,
recommendations and motivation amplifiers.
"""

import pytest
from pathlib import Path
from types import SimpleNamespace

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from synapse.orchestration.progress_orchestrator import (
    ProgressOrchestrator, TaskRef,
    calculate_momentum_potential, calculate_momentum_score, calculate_progress_gain,
    calculate_relation_strength, collect_tasks, group_by_shared_skills,
)
from synapse.core.models import FrameworkResponses, UserContext


# =============================================================================
# Fixtures
# =============================================================================

def agile(*titles):
    return SimpleNamespace(user_stories=[
        SimpleNamespace(id=f"US-{i}", title=t) for i, t in enumerate(titles, start=1)
    ])


def kanban(*contents):
    return SimpleNamespace(board=SimpleNamespace(cards=[
        SimpleNamespace(id=f"CARD-{i}", content=c) for i, c in enumerate(contents)
    ]))


def gtd(*titles):
    return SimpleNamespace(next_actions=[
        SimpleNamespace(id=f"NA-CAP-{i}", title=t) for i, t in enumerate(titles)
    ])


@pytest.fixture
def medium():
    return UserContext(energy_state="Medium")


@pytest.fixture
def cross_framework():
    """One api group of four across three frameworks, plus a docs pair."""
    return FrameworkResponses(
        agile=agile("Feature: api docs"),
        kanban=kanban("api client docs"),
        gtd=gtd("api tests", "api review"),
    )


# =============================================================================
# Scoring helpers
# =============================================================================

class TestScoring:
    """Tests for strength, potential, gain and momentum score."""

    @pytest.mark.parametrize("size,expected", [(1, "low"), (2, "medium"), (3, "medium"), (4, "high")])
    def test_strength(self, size, expected):
        assert calculate_relation_strength(size) == expected

    def test_potential_caps_at_one(self):
        assert calculate_momentum_potential(2) == 0.4
        assert calculate_momentum_potential(9) == 1.0

    @pytest.mark.parametrize("size", range(1, 20))
    def test_progress_gain_bounds(self, size):
        gain = calculate_progress_gain(size, calculate_relation_strength(size))
        assert 0 <= gain <= 100

    def test_progress_gain_values(self):
        assert calculate_progress_gain(2, "medium") == 15.0
        assert calculate_progress_gain(4, "high") == 67.5
        assert calculate_progress_gain(8, "high") == 100.0

    def test_momentum_score_empty(self):
        assert calculate_momentum_score([]) == 0


# =============================================================================
# Relation detection
# =============================================================================

class TestRelations:
    """Tests for task collection and shared-skill grouping."""

    def test_collects_only_present_frameworks(self):
        tasks = collect_tasks(FrameworkResponses(kanban=kanban("a"), gtd=gtd("b")))
        assert [(t.framework, t.id) for t in tasks] == [("Kanban", "CARD-0"), ("GTD", "NA-CAP-0")]

    def test_substring_matching(self):
        """'build' contains 'ui', so it joins the ui group."""
        groups = group_by_shared_skills([TaskRef("Agile", "US-1", "Build the UI")])
        assert list(groups) == ["ui"]

    def test_scenario_c(self, medium):
        responses = FrameworkResponses(
            kanban=kanban("migrate the database", "index the database", "document the api")
        )
        result = ProgressOrchestrator().analyze(responses, medium)

        assert len(result.cross_project_impacts) == 1
        relation = result.cross_project_impacts[0]
        assert relation.skill == "database"
        assert relation.type == "shared_skill"
        assert relation.strength == "medium"
        assert relation.progress_gain == 15.0
        assert relation.momentum_potential == 0.4
        assert result.momentum_score == 40

    def test_no_relations(self, medium):
        result = ProgressOrchestrator().analyze(FrameworkResponses(gtd=gtd("call mom", "buy milk")), medium)

        assert result.cross_project_impacts == []
        assert result.momentum_score == 0
        assert result.ripple_effects == []
        assert result.recommendations == [
            "No specific momentum opportunities found, just focus on your next single task."
        ]

    def test_empty_responses(self, medium):
        result = ProgressOrchestrator().analyze(FrameworkResponses(), medium)
        assert result.momentum_score == 0

    def test_relations_in_first_seen_order(self, cross_framework, medium):
        result = ProgressOrchestrator().analyze(cross_framework, medium)

        assert [r.skill for r in result.cross_project_impacts] == ["api", "docs"]
        assert [len(r.tasks) for r in result.cross_project_impacts] == [4, 2]
        # mean(0.8, 0.4)
        assert result.momentum_score == 60


# =============================================================================
# Ripples
# =============================================================================

class TestRipples:
    """Tests for the single-ripple and all-relations modes."""

    def test_first_relation_single_ripple(self, cross_framework, medium):
        result = ProgressOrchestrator().analyze(cross_framework, medium)

        assert len(result.ripple_effects) == 1
        ripple = result.ripple_effects[0]
        assert ripple.source_task == "US-1"
        assert ripple.target_project == "Kanban Board"
        assert ripple.tasks_unblocked == 1
        assert ripple.progress_gain == 67.5
        assert ripple.relation_skill == "api"

    def test_all_relations_deduplicates_targets(self, cross_framework, medium):
        result = ProgressOrchestrator(ripple_mode="all_relations").analyze(cross_framework, medium)

        assert [(r.source_task, r.target_project, r.tasks_unblocked) for r in result.ripple_effects] == [
            ("US-1", "Kanban Board", 1),
            ("US-1", "GTD Next Actions", 2),
        ]

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            ProgressOrchestrator(ripple_mode="graph")


# =============================================================================
# User-facing output
# =============================================================================

class TestOutput:
    """Tests for recommendations and motivation amplifiers."""

    def test_momentum_alert(self, cross_framework, medium):
        result = ProgressOrchestrator().analyze(cross_framework, medium)

        assert result.recommendations[0] == (
            "Momentum Alert: Completing 'Feature: api docs' (Agile) also progresses "
            "'api client docs' on your Kanban Board."
        )
        assert "'api'" in result.recommendations[1]

    def test_energy_tailored_suggestion(self, cross_framework):
        low = ProgressOrchestrator().analyze(cross_framework, UserContext(energy_state="Low"))
        high = ProgressOrchestrator().analyze(cross_framework, UserContext(energy_state="Hyperfocus"))

        assert "smallest" in low.recommendations[1]
        assert "hyperfocus" in high.recommendations[1]

    def test_single_ripple_amplifiers(self, cross_framework, medium):
        amplifiers = ProgressOrchestrator().analyze(cross_framework, medium).motivation_amplifiers

        assert amplifiers.achievement_summary == "Working on this could advance 1 projects and unblock 1 tasks!"
        assert amplifiers.progress_metrics.momentum_multiplier == "1.1x"
        assert amplifiers.progress_metrics.efficiency_gain == "~5%"
        assert amplifiers.celebration_message.startswith("Task complete!")

    def test_multi_project_celebration(self, cross_framework, medium):
        result = ProgressOrchestrator(ripple_mode="all_relations").analyze(cross_framework, medium)
        metrics = result.motivation_amplifiers.progress_metrics

        assert metrics.projects_advanced == 2
        assert metrics.tasks_unblocked == 3
        assert metrics.momentum_multiplier == "1.2x"
        assert metrics.efficiency_gain == "~10%"
        assert "2 different areas" in result.motivation_amplifiers.celebration_message

    def test_no_ripple_amplifiers(self, medium):
        amplifiers = ProgressOrchestrator().analyze(FrameworkResponses(), medium).motivation_amplifiers
        assert amplifiers.progress_metrics.momentum_multiplier == "1.0x"
        assert amplifiers.progress_metrics.efficiency_gain == "~0%"

    def test_serialization(self, cross_framework, medium):
        data = ProgressOrchestrator().analyze(cross_framework, medium).to_dict()

        assert set(data) == {
            "crossProjectImpacts", "momentumScore", "rippleEffects", "recommendations", "motivationAmplifiers",
        }
        assert "progressGain" in data["crossProjectImpacts"][0]
        assert "momentumMultiplier" in data["motivationAmplifiers"]["progressMetrics"]
