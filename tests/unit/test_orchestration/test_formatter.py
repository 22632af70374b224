"""
Unit tests for the BrainDumpFormatter.
Renders into a recording console and checks user text is shown literally.
"""

import io
import pytest
from pathlib import Path
from unittest.mock import MagicMock

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from rich.console import Console

from synapse.agents.agent_factory import AgentFactory
from synapse.agents.input_parser import InputParser
from synapse.agents.semantic_agent import SemanticResponse
from synapse.core.models import SimilarTask, UserContext
from synapse.orchestration.formatter import BrainDumpFormatter


TEXT = "I need to fix the [/b] api. Should fix the [red]api[/red] docs."


@pytest.fixture
def console():
    return Console(file=io.StringIO(), record=True, width=160)


class TestMarkupEscaping:
    """User text containing Rich markup must render as-is."""

    def test_parsed_input(self, console):
        BrainDumpFormatter(console).render_parsed(InputParser().analyze(TEXT))
        output = console.export_text()

        assert "[/b]" in output
        assert "[red]api[/red]" in output

    @pytest.mark.asyncio
    async def test_full_response(self, console):
        factory = AgentFactory()
        factory.semantic_agent = MagicMock()
        factory.semantic_agent.process.return_value = SemanticResponse(
            similar_past_tasks=[SimilarTask("old [/i] note", 0.9)],
            recommended_frameworks=["Agile", "Kanban", "GTD", "PARA", "Custom"],
            recommendation_reasoning="Matched [sprint] history",
        )
        response = await factory.process_input(TEXT, UserContext(energy_state="Medium", user_tier="pro"))

        BrainDumpFormatter(console).render_response(response, verbose=True)
        output = console.export_text()

        assert "[/b]" in output
        assert "old [/i] note" in output
        assert "Matched [sprint] history" in output
        assert "Momentum Alert" in output
