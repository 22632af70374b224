"""
Rich formatter module for Synapse.

Renders a MultiFrameworkResponse (or a bare ParsedInput) as terminal panels.
"""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.models import ParsedInput


# Priority colors for Agile stories
PRIORITY_COLORS = {
    "critical": "red bold",
    "high": "yellow",
    "medium": "white",
    "low": "dim",
}

PARA_COLORS = {
    "Project": "green",
    "Area": "cyan",
    "Resource": "magenta",
    "Archive": "dim",
}


def _truncate(text: str, width: int) -> str:
    """Clip user text and escape it for Rich markup."""
    return escape(text[:width] + "..." if len(text) > width else text)


class BrainDumpFormatter:
    """
    Rich-based formatter for brain-dump results.

    Each framework gets its own panel; absent frameworks are skipped.
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize formatter.

        Args:
            console: Rich Console instance (creates default if not provided)
        """
        self.console = console or Console()

    def _empty_panel(self, message: str, title: str, border_style: str) -> Panel:
        return Panel(
            Text(message, style="dim", justify="center"),
            title=f"[bold]{title}[/bold]",
            border_style=border_style,
            padding=(0, 1),
        )

    def format_parsed_input(self, parsed: ParsedInput) -> Panel:
        """Table of classified units plus the whole-input signals."""
        table = Table(show_header=True, box=None, padding=(0, 1), expand=True)
        table.add_column("Kind", width=8)
        table.add_column("Content", ratio=1)

        for kind, units in (("task", parsed.tasks), ("idea", parsed.ideas),
                            ("concern", parsed.concerns), ("project", parsed.projects)):
            for unit in units:
                table.add_row(f"[bold]{kind}[/bold]", escape(unit.content))

        subtitle = (
            f"complexity {parsed.complexity} │ tone {parsed.emotional_tone} │ "
            f"urgency {parsed.urgency_level}"
        )
        return Panel(
            table,
            title=f"[bold]Parsed Brain Dump ({parsed.total_units})[/bold]",
            subtitle=f"[dim]{subtitle}[/dim]",
            border_style="blue",
            padding=(0, 1),
        )

    def format_agile(self, agile) -> Panel:
        if not agile.user_stories:
            return self._empty_panel("No user stories", "Agile", "green")

        table = Table(show_header=True, box=None, padding=(0, 1), expand=True)
        table.add_column("ID", width=5)
        table.add_column("Story", ratio=1)
        table.add_column("Pts", width=3, justify="right")
        table.add_column("Priority", width=8, justify="right")

        for story in agile.backlog:
            color = PRIORITY_COLORS.get(story.priority, "white")
            table.add_row(
                f"[dim]{story.id}[/dim]",
                _truncate(story.title, 50),
                str(story.story_points),
                f"[{color}]{story.priority}[/{color}]",
            )

        return Panel(
            table,
            title=f"[bold]Agile ({len(agile.user_stories)} stories)[/bold]",
            subtitle=f"[dim]{agile.velocity_prediction}[/dim]",
            border_style="green",
            padding=(0, 1),
        )

    def format_kanban(self, kanban) -> Panel:
        table = Table(show_header=True, box=None, padding=(0, 1), expand=True)
        table.add_column("Column", width=20)
        table.add_column("WIP", width=4, justify="right")
        table.add_column("Cards", ratio=1)

        for column in kanban.board.columns:
            cards = [c for c in kanban.board.cards if c.column == column.name]
            table.add_row(
                column.name,
                "-" if column.wip_limit is None else str(column.wip_limit),
                ", ".join(_truncate(c.content, 30) for c in cards) or "[dim]---[/dim]",
            )

        return Panel(
            table,
            title=f"[bold]Kanban (WIP {kanban.flow_metrics.wip_count})[/bold]",
            border_style="cyan",
            padding=(0, 1),
        )

    def format_gtd(self, gtd) -> Panel:
        if not gtd.next_actions and not gtd.someday_maybe and not gtd.waiting_for:
            return self._empty_panel("Nothing to organize", "GTD", "yellow")

        table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
        table.add_column("Bucket", width=14)
        table.add_column("Item", ratio=1)
        table.add_column("Context", width=16, justify="right")

        for action in gtd.next_actions:
            table.add_row("Next action", _truncate(action.title, 45),
                          f"{action.context} ~{action.time_estimate}")
        for item in gtd.waiting_for:
            table.add_row("Waiting for", _truncate(item.title, 45), "")
        for item in gtd.someday_maybe:
            table.add_row("[dim]Someday[/dim]", f"[dim]{_truncate(item.title, 45)}[/dim]", "")

        return Panel(
            table,
            title=f"[bold]GTD ({len(gtd.projects)} projects)[/bold]",
            border_style="yellow",
            padding=(0, 1),
        )

    def format_para(self, para) -> Panel:
        lines = [f"[bold]{para.classification}[/bold]"]
        for item in para.items:
            color = PARA_COLORS.get(item.category, "white")
            lines.append(f"[{color}]{item.category:<8}[/{color}] {_truncate(item.title, 50)}")
        return Panel("\n".join(lines), title="[bold]PARA[/bold]", border_style="magenta", padding=(0, 1))

    def format_custom(self, custom) -> Panel:
        energy = custom.energy_optimized
        lines = [
            f"[bold]When:[/bold] {energy.recommended_time}",
            f"[bold]Strategy:[/bold] {energy.breakdown_strategy} "
            f"[dim](cognitive load {energy.cognitive_load})[/dim]",
        ]
        lines += [f"  • {tip}" for tip in energy.tips]
        return Panel("\n".join(lines), title="[bold]Energy Plan[/bold]", border_style="white", padding=(0, 1))

    def format_orchestration(self, orchestration) -> Panel:
        lines = [f"[bold]Momentum score:[/bold] {orchestration.momentum_score}/100"]
        for relation in orchestration.cross_project_impacts:
            lines.append(
                f"[cyan]{relation.skill}[/cyan] links {len(relation.tasks)} tasks "
                f"[dim]({relation.strength}, +{relation.progress_gain:.0f}%)[/dim]"
            )
        lines += [f"→ {escape(recommendation)}" for recommendation in orchestration.recommendations]
        lines.append(f"[green]{orchestration.motivation_amplifiers.celebration_message}[/green]")
        return Panel("\n".join(lines), title="[bold]Momentum[/bold]", border_style="red", padding=(0, 1))

    def format_metadata(self, metadata) -> str:
        parts = [
            f"[dim]{metadata.processing_time_ms}ms[/dim]",
            f"confidence {metadata.confidence_score:.2f}",
            f"ran {', '.join(metadata.agents_executed) or 'no agents'}",
        ]
        if metadata.failed_agents:
            parts.append(f"[red]⚠ failed {', '.join(metadata.failed_agents)}[/red]")
        parts.append(f"[dim]embedding {metadata.embedding_store_status}[/dim]")
        return " │ ".join(parts)

    def render_parsed(self, parsed: ParsedInput) -> None:
        if parsed.total_units == 0:
            self.console.print(self._empty_panel("Nothing recognised in this brain dump",
                                                 "Parsed Brain Dump", "blue"))
            return
        self.console.print(self.format_parsed_input(parsed))

    def render_response(self, response, verbose: bool = False) -> None:
        """
        Render a MultiFrameworkResponse to the console.

        Args:
            response: The factory's response
            verbose: Also show the semantic reasoning and similar past tasks
        """
        renderers = [
            ("agile", self.format_agile),
            ("kanban", self.format_kanban),
            ("gtd", self.format_gtd),
            ("para", self.format_para),
            ("custom", self.format_custom),
        ]
        panels: List[Panel] = [
            render(response.frameworks[key])
            for key, render in renderers if key in response.frameworks
        ]
        if not panels:
            panels.append(self._empty_panel(
                "No framework agents ran for this tier and recommendation", "Frameworks", "white"
            ))

        for panel in panels:
            self.console.print(panel)
            self.console.print()

        if response.orchestration is not None:
            self.console.print(self.format_orchestration(response.orchestration))
            self.console.print()

        if verbose:
            semantic = response.semantic
            self.console.print(f"[bold]Recommended:[/bold] {', '.join(semantic.recommended_frameworks)}")
            self.console.print(f"[dim]{escape(semantic.recommendation_reasoning)}[/dim]")
            for task in semantic.similar_past_tasks:
                self.console.print(f"  [dim]{task.similarity_score:.2f}[/dim] {_truncate(task.content, 60)}")
            self.console.print()

        self.console.print("─" * 60)
        self.console.print(self.format_metadata(response.metadata), justify="center")
        self.console.print("─" * 60)
