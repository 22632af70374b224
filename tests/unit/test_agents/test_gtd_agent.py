"""
Unit tests for the GTDAgent.
Tests the capture, clarify, organize and reflect phases, plus the
history-informed Someday/Maybe routing.
"""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from synapse.agents.gtd_agent import GTDAgent, is_vague, someday_maybe_affinity
from synapse.core.models import EnergyState, ParsedInput, ParsedUnit, SimilarTask, UserContext


def make_input(tasks=(), ideas=(), concerns=(), projects=()):
    return ParsedInput(
        tasks=tuple(ParsedUnit(t) for t in tasks),
        ideas=tuple(ParsedUnit(i) for i in ideas),
        concerns=tuple(ParsedUnit(c) for c in concerns),
        projects=tuple(ParsedUnit(p) for p in projects),
    )


def history(*contents):
    return tuple(SimilarTask(content=c, similarity_score=0.9) for c in contents)


@pytest.fixture
def agent():
    return GTDAgent()


@pytest.fixture
def medium():
    return UserContext(energy_state="Medium")


# =============================================================================
# Clarify and organize
# =============================================================================

class TestClarify:
    """Tests for actionable/non-actionable routing."""

    def test_single_step_next_action(self, agent, medium):
        response = agent.process(make_input(tasks=["call the dentist"]), medium)

        action = response.next_actions[0]
        assert action.id == "NA-CAP-0"
        assert action.title == "call the dentist"
        assert action.context == "@phone"
        assert action.is_single_step is True
        assert action.time_estimate == "15 min"
        assert response.projects == []

    def test_ideas_and_concerns_go_to_someday(self, agent, medium):
        response = agent.process(
            make_input(tasks=["email the team"], ideas=["dark mode"], concerns=["the deadline"]), medium
        )

        assert [a.title for a in response.next_actions] == ["email the team"]
        assert [s.id for s in response.someday_maybe] == ["SM-CAP-1", "SM-CAP-2"]

    def test_deferral_keyword_not_actionable(self, agent, medium):
        response = agent.process(make_input(tasks=["maybe repaint the fence"]), medium)

        assert response.next_actions == []
        assert response.someday_maybe[0].title == "maybe repaint the fence"

    def test_project_spawns_first_step(self, agent, medium):
        response = agent.process(make_input(projects=["website relaunch"]), medium)

        project = response.projects[0]
        assert project.id == "PROJ-1"
        assert project.name == "Project: website relaunch..."
        action = response.next_actions[0]
        assert action.title == "First step for: website relaunch..."
        assert action.is_single_step is False
        assert action.project_id == "PROJ-1"
        assert project.next_actions == [action]

    def test_long_task_is_multi_step(self, agent, medium):
        response = agent.process(make_input(tasks=["a" * 101, "b" * 101]), medium)
        assert [p.id for p in response.projects] == ["PROJ-1", "PROJ-2"]

    def test_waiting_for(self, agent, medium):
        response = agent.process(make_input(tasks=["waiting for Bob to send the contract"]), medium)

        assert response.next_actions == []
        assert response.someday_maybe == []
        assert response.waiting_for[0].id == "WF-CAP-0"
        assert response.waiting_for[0].waiting_for == "Bob to send the contract"

    def test_empty_content_stays_in_inbox(self, agent, medium):
        response = agent.process(make_input(tasks=["", "call mom"]), medium)

        assert [item.id for item in response.inbox] == ["CAP-0"]
        assert response.inbox[0].processed is False
        assert len(response.next_actions) == 1


# =============================================================================
# History-informed Someday/Maybe
# =============================================================================

class TestHistory:
    """Tests for deferral affinity from similar past tasks."""

    def test_affinity(self):
        assert someday_maybe_affinity(()) == 0.0
        assert someday_maybe_affinity(history("do it later", "ship it", "someday")) == pytest.approx(2 / 3)

    def test_is_vague(self):
        assert is_vague("figure out the tax stuff")
        assert not is_vague("file the tax return")

    def test_vague_item_deferred_with_deferral_history(self, agent):
        context = UserContext(
            energy_state="Medium",
            historical_context=history("do it later", "eventually clean up", "ship it"),
        )
        response = agent.process(make_input(tasks=["figure out the tax stuff"]), context)

        assert response.next_actions == []
        assert response.someday_maybe[0].title == "figure out the tax stuff"

    def test_vague_item_actionable_without_history(self, agent, medium):
        response = agent.process(make_input(tasks=["figure out the tax stuff"]), medium)
        assert response.next_actions[0].context == "@anywhere"

    def test_specific_item_actionable_with_history(self, agent):
        context = UserContext(energy_state="Medium", historical_context=history("later", "someday"))
        response = agent.process(make_input(tasks=["file the tax return"]), context)
        assert len(response.next_actions) == 1


# =============================================================================
# Context and time helpers
# =============================================================================

class TestHelpers:
    """Tests for context inference and time estimates."""

    @pytest.mark.parametrize("content,expected", [
        ("phone the plumber", "@phone"),
        ("discuss roadmap", "@meeting"),
        ("buy milk", "@errands"),
        ("send a message", "@computer"),
    ])
    def test_keyword_contexts(self, agent, content, expected):
        assert agent.determine_context(content, EnergyState.MEDIUM) == expected

    @pytest.mark.parametrize("energy,expected", [
        (EnergyState.HYPERFOCUS, "@deep-work"),
        (EnergyState.HIGH, "@computer"),
        (EnergyState.MEDIUM, "@anywhere"),
        (EnergyState.LOW, "@easy-tasks"),
        (EnergyState.SCATTERED, "@quick-capture"),
    ])
    def test_energy_default_context(self, agent, energy, expected):
        assert agent.determine_context("plan the trip", energy) == expected

    @pytest.mark.parametrize("length,energy,expected", [
        (10, EnergyState.SCATTERED, "15 min"),
        (60, EnergyState.MEDIUM, "30 min"),
        (60, EnergyState.HYPERFOCUS, "2 hours"),
        (120, EnergyState.HIGH, "2 hours"),
        (120, EnergyState.HYPERFOCUS, "2+ hours"),
    ])
    def test_time_estimates(self, agent, length, energy, expected):
        assert agent.estimate_time("x" * length, energy) == expected


# =============================================================================
# Reflect
# =============================================================================

class TestReflect:
    """Tests for contexts and weekly review."""

    def test_base_contexts(self, agent, medium):
        response = agent.process(make_input(), medium)
        assert [c.name for c in response.contexts] == ["@computer", "@phone", "@errands", "@home"]

    def test_adhd_contexts(self, agent):
        response = agent.process(make_input(), UserContext(energy_state="Medium", cognitive_type="ADHD"))
        names = [c.name for c in response.contexts]
        assert names[-2:] == ["@hyperfocus", "@dopamine"]

    def test_weekly_review(self, agent, medium):
        response = agent.process(make_input(tasks=["call mom"], ideas=["a podcast"]), medium)
        review = response.weekly_review

        assert [r.id for r in review] == [f"review-{i}" for i in range(1, 7)]
        assert review[0].prompt == "Review all 0 outstanding inbox items."
        assert review[2].prompt == "Review your 1 next actions."
        assert review[4].prompt == "Review your 1 'Someday/Maybe' items."

    def test_inputs_not_mutated(self, agent, medium):
        parsed = make_input(tasks=["call mom"])
        agent.process(parsed, medium)
        assert parsed.tasks == (ParsedUnit("call mom"),)
