# src/kubeop/cli/formatter.py
from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table

from kubeop.core import catalog
from kubeop.core.models import ContainerStatus, ObjectOutcome

# Initialize the Rich console for high-quality terminal output
console = Console()


class KubeOpFormatter:
    """
    KubeOpFormatter: renders classification tables, per-object outcomes
    and container status for the CLI.
    """

    def __init__(self, out: Console = None):
        self.console = out or console

    def print_header(self, subtitle: str, version: str):
        self.console.print(Panel.fit(
            f"[bold cyan]KubeOp {version}[/bold cyan]\n"
            "══════════════════════════════════════════════════════════════════",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def show_classification(self, groups):
        """
        One row per object in install order, then the decoder's diagnostics.
        """
        table = Table(title="Operator Deployment Contents", show_lines=True, header_style="bold magenta")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Group", style="cyan")
        table.add_column("Kind", style="white")
        table.add_column("Name", style="bold")
        table.add_column("API Version", style="dim")

        row = 1
        for kind in list(catalog.BASE_KINDS) + [catalog.UNSTRUCTURED_KIND]:
            for obj in groups.get(kind):
                table.add_row(str(row), kind, obj.kind, obj.name, obj.api_version)
                row += 1

        self.console.print(table)
        for msg in groups.diagnostics:
            self.console.print(f"[bold yellow]⚠️  {msg}[/bold yellow]")

    def show_outcomes(self, title: str, outcomes: List[ObjectOutcome]):
        table = Table(title=title, show_header=True, header_style="bold magenta")
        table.add_column("Kind")
        table.add_column("Name", style="cyan")
        table.add_column("Result", justify="center")
        table.add_column("Error", style="red")

        for outcome in outcomes:
            # Choose icons based on success
            result_icon = "✅" if outcome.success else "❌"
            table.add_row(outcome.kind, outcome.name, result_icon, outcome.error or "")

        self.console.print(table)

    def show_status(self, statuses: List[ContainerStatus]):
        if not statuses:
            self.console.print("[dim]ℹ No operator pods found.[/dim]")
            return

        table = Table(title="Operator Containers", show_header=True, header_style="bold magenta")
        table.add_column("Container", style="cyan")
        table.add_column("Image", style="dim")
        table.add_column("State")
        table.add_column("Started", justify="right")

        colors = {"Running": "green", "Terminated": "red", "Waiting": "yellow"}
        for status in statuses:
            color = colors.get(status.state, "white")
            table.add_row(
                status.name, status.image,
                f"[{color}]{status.state}[/{color}]",
                str(status.created_time) if status.created_time else "-"
            )
        self.console.print(table)

    def show_raw(self, payload):
        data = payload.to_dict() if hasattr(payload, "to_dict") else payload
        self.console.print(Panel(Pretty(data), title="Operator Status", border_style="dim"))

    def show_error(self, message: str):
        self.console.print(f"[bold red]Error:[/bold red] {message}")
