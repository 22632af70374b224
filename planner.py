#!/usr/bin/env python3
"""
Synapse - Command Line Interface
Turn a brain dump into Agile, Kanban, GTD, PARA and energy-aware views
"""

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typing import Optional
import asyncio
import json
import logging

from synapse.core import Config, SynapseError, UserContext, UserTier
from synapse.core.embeddings import build_embedding_service
from synapse.agents import AgentFactory, InputParser
from synapse.orchestration import BrainDumpFormatter

# Initialize CLI app and console
app = typer.Typer(help="Synapse - Organise a brain dump across productivity frameworks")

console = Console()

# Lazy-loaded singletons (initialized on first use)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or initialize the Config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def _read_input(text: Optional[str], file: Optional[Path]) -> str:
    if file is not None:
        return file.read_text()
    if text is None or text == "-":
        return sys.stdin.read()
    return text


async def _run_pipeline(factory: AgentFactory, text: str, context: UserContext):
    try:
        return await factory.process_input(text, context)
    finally:
        await factory.drain()


@app.command()
def dump(
    text: Optional[str] = typer.Argument(None, help="Brain-dump text ('-' or omitted reads stdin)"),
    energy: str = typer.Option("Medium", "--energy", "-e", help="Energy state (High, Medium, Low, Hyperfocus, Scattered)"),
    tier: Optional[str] = typer.Option(None, "--tier", "-t", help="User tier (free, pro, enterprise)"),
    cognitive_type: Optional[str] = typer.Option(None, "--cognitive-type", "-c", help="ADHD, ASD, MIXED, NEUROTYPICAL"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User id for history lookup"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read the brain dump from a file"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON response"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show logs and semantic details"),
):
    """
    Run a brain dump through the full pipeline

    Examples:
      planner dump "I need to fix the login bug. What if we added dark mode?" --tier pro
      planner dump --file notes.txt --energy Low
      echo "I should call the dentist" | planner dump --energy scattered
    """
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = get_config()
    try:
        user_id = user or config.get("default_user_id", section="preferences", default="demo-user")
        context = UserContext(
            energy_state=energy,
            cognitive_type=cognitive_type or config.get("default_cognitive_type", section="preferences"),
            user_id=user_id,
            user_tier=tier or config.resolve_user_tier(user_id),
        )
        factory = AgentFactory(config, build_embedding_service(config))
        response = asyncio.run(_run_pipeline(factory, _read_input(text, file), context))
    except SynapseError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(json.dumps(response.to_dict(), default=str))
        return

    BrainDumpFormatter(console).render_response(response, verbose=verbose)


@app.command()
def parse(
    text: Optional[str] = typer.Argument(None, help="Brain-dump text ('-' or omitted reads stdin)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result"),
):
    """
    Show how a brain dump is split and classified, without running agents

    Example:
      planner parse "Need to update the docs. Worried about the deadline."
    """
    parsed = InputParser().analyze(_read_input(text, None))

    if as_json:
        console.print_json(json.dumps(parsed.to_dict()))
        return

    BrainDumpFormatter(console).render_parsed(parsed)


@app.command()
def tiers():
    """
    Show which frameworks each tier may run
    """
    config = get_config()

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Tier", width=12)
    table.add_column("Frameworks", min_width=30)

    for user_tier in UserTier:
        frameworks = config.get_tier_frameworks(user_tier)
        table.add_row(user_tier.value, ", ".join(frameworks) or "[dim]none[/dim]")

    pinned = config.get("pinned_frameworks", default=[])
    console.print(table)
    if pinned:
        console.print(f"[dim]Always considered: {', '.join(pinned)}[/dim]")


if __name__ == "__main__":
    app()
