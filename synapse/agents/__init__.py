"""
Agent Layer for Synapse

Turns one unstructured brain dump into several productivity-framework views
at once.

Architecture Overview:
- InputParser: Rule-based sentence segmentation and classification
- FrameworkAgent: Abstract base class defining the agent interface
- AgileAgent: User stories, story points, epics, sprints and velocity
- KanbanAgent: Adaptive columns, WIP limits, card placement and flow
- GTDAgent: Capture, clarify, organize and reflect
- PARAAgent: Projects, Areas, Resources and Archives
- CustomAgent: Energy-state strategy advice
- SemanticAgent: Similar past tasks and framework recommendations
- AgentFactory: Runs the whole pipeline for one request

Usage:
    import asyncio
    from synapse.agents import AgentFactory
    from synapse.core import Config, UserContext

    factory = AgentFactory(Config())
    context = UserContext(energy_state="Medium", user_tier="pro")
    response = asyncio.run(factory.process_input("I need to fix the login bug.", context))
    print(response.to_dict()["metadata"])

    # Agents can also be used directly
    from synapse.agents import InputParser, KanbanAgent
    parsed = InputParser().analyze("I need to fix the login bug.")
    board = KanbanAgent().process(parsed, context)
"""

from .base_agent import FrameworkAgent, AgentResult
from .input_parser import InputParser
from .agile_agent import AgileAgent, AgileResponse
from .kanban_agent import KanbanAgent, KanbanResponse
from .gtd_agent import GTDAgent, GTDResponse
from .para_agent import PARAAgent, PARAResponse
from .custom_agent import CustomAgent, CustomResponse
from .semantic_agent import SemanticAgent, SemanticResponse
from .agent_factory import AgentFactory, MultiFrameworkResponse, ResponseMetadata

__all__ = [
    'FrameworkAgent',
    'AgentResult',
    'InputParser',
    'AgileAgent',
    'AgileResponse',
    'KanbanAgent',
    'KanbanResponse',
    'GTDAgent',
    'GTDResponse',
    'PARAAgent',
    'PARAResponse',
    'CustomAgent',
    'CustomResponse',
    'SemanticAgent',
    'SemanticResponse',
    'AgentFactory',
    'MultiFrameworkResponse',
    'ResponseMetadata',
]
