"""Main CLI for jira-pm."""

import typer
from pathlib import Path
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from typing import Optional

from .config import JiraConfig, get_auth_help_message
from .errors import ConfigurationError, JiraError
from .jira_client import JiraClient
from .logging_config import configure_logging
from .models import ListQuery, TicketRequest, UpdateSpec, validate_ticket_key
from .output import OUTPUT_FORMATS, format_response, render_cli
from .output.render import (
    describe_filters,
    render_created,
    render_list,
    render_preview,
    render_ticket,
    render_updated,
)
from .services import get_client as svc_get_client
from .services.search import list_tickets as svc_list_tickets
from .services.tickets import (
    create_ticket as svc_create_ticket,
    read_ticket as svc_read_ticket,
    update_ticket as svc_update_ticket,
)

app = typer.Typer(
    name="jira-pm",
    help="Jira ticket management - create, read, update and list tickets",
)
console = Console()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
):
    configure_logging(level=log_level)


def get_client() -> JiraClient:
    """Get configured Jira client or exit with error."""
    try:
        return svc_get_client()
    except ConfigurationError as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        console.print("")
        console.print(get_auth_help_message())
        raise typer.Exit(1)


def _fail(error: JiraError) -> None:
    console.print(f"[red]Error:[/red] {error}")
    for suggestion in error.suggestions:
        console.print(f"  [dim]- {suggestion}[/dim]")
    raise typer.Exit(1)


def _read_text(value: Optional[str]) -> Optional[str]:
    """Support ``@filename`` for long text options."""
    if value and value.startswith("@"):
        filepath = Path(value[1:])
        if not filepath.exists():
            console.print(f"[red]Error:[/red] File not found: {filepath}")
            raise typer.Exit(1)
        return filepath.read_text()
    return value


def _check_format(value: str) -> str:
    if value.lower() not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"must be one of: {', '.join(OUTPUT_FORMATS)}")
    return value.lower()


def _print(payload, output_format: str, renderer) -> None:
    response = format_response(payload, output_format, text_renderer=renderer)
    if response["format"] == "json":
        console.print_json(render_cli(response))
    else:
        console.print(render_cli(response), markup=False, highlight=False)


# ============================================================================
# Server
# ============================================================================


@app.command("serve")
def serve():
    """Run the MCP server on stdio."""
    from .mcp_server import main as run_server

    run_server()


# ============================================================================
# Ticket Commands
# ============================================================================


@app.command("create")
def create(
    title: str = typer.Option(..., "--title", "-t", help="Ticket title, e.g. \"[DTMI] Fix login\""),
    current: str = typer.Option(..., "--current", "-c", help="Current state (use @filename to read from file)"),
    desired: str = typer.Option(..., "--desired", "-d", help="Desired state (use @filename to read from file)"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project key or alias"),
    labels: Optional[list[str]] = typer.Option(None, "--label", "-l", help="Label (repeatable)"),
    issue_type: str = typer.Option("Task", "--type", help="Task or Bug"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the preview without creating"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
    output_format: str = typer.Option("text", "--format", "-f", callback=_check_format, help="Output format (text|json)"),
):
    """Create a ticket with the Current/Desired description template.

    Shows a preview first and asks before creating.

    \b
    Example:
      jira-pm create -t "[DTMI] Fix login" -c "Login broken" -d "Login works" -l DTMI
    """
    client = get_client()
    try:
        request = TicketRequest.from_arguments(
            {
                "title": title,
                "current": _read_text(current),
                "desired": _read_text(desired),
                "project": project,
                "labels": labels,
                "issueType": issue_type,
            },
            client.config.default_project,
        )
    except JiraError as e:
        _fail(e)

    project_key = client.config.aliases.resolve(request.project)
    console.print(render_preview(request, project_key), markup=False, highlight=False)

    if dry_run:
        console.print("\n[yellow]Dry run - nothing created.[/yellow]")
        raise typer.Exit(0)

    if not yes and not typer.confirm("\nCreate this ticket?"):
        raise typer.Exit(0)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Creating ticket in {project_key}...", total=None)
            created = svc_create_ticket(client, request)
    except JiraError as e:
        _fail(e)

    _print(created, output_format, render_created)


@app.command("read")
def read(
    ticket_key: str = typer.Argument(..., help="Ticket key (e.g., FRON-1151)"),
    output_format: str = typer.Option("text", "--format", "-f", callback=_check_format, help="Output format (text|json)"),
):
    """Show a ticket with description and recent comments."""
    try:
        validate_ticket_key(ticket_key)
        ticket = svc_read_ticket(get_client(), ticket_key)
    except JiraError as e:
        _fail(e)

    _print(ticket, output_format, render_ticket)


@app.command("update")
def update(
    ticket_key: str = typer.Argument(..., help="Ticket key (e.g., FRON-1550)"),
    summary: Optional[str] = typer.Option(None, "--summary", "-s", help="New summary"),
    append: Optional[str] = typer.Option(None, "--append", "-a", help="Text to append to the description (use @filename to read from file)"),
    replace: Optional[str] = typer.Option(None, "--replace", "-r", help="Replacement description (use @filename to read from file)"),
    add_labels: Optional[list[str]] = typer.Option(None, "--add-label", help="Label to add (repeatable)"),
    remove_labels: Optional[list[str]] = typer.Option(None, "--remove-label", help="Label to remove (repeatable)"),
    output_format: str = typer.Option("text", "--format", "-f", callback=_check_format, help="Output format (text|json)"),
):
    """Update a ticket's summary, description or labels.

    \b
    Examples:
      jira-pm update FRON-1550 --append @testing-plan.md
      jira-pm update FRON-1550 --replace @notes.md
      jira-pm update FRON-1550 --add-label Security --remove-label triage
    """
    try:
        spec = UpdateSpec.from_arguments({
            "ticketKey": ticket_key,
            "summary": summary,
            "appendDescription": _read_text(append),
            "replaceDescription": _read_text(replace),
            "addLabels": add_labels,
            "removeLabels": remove_labels,
        })
        updated = svc_update_ticket(get_client(), spec)
    except JiraError as e:
        _fail(e)

    _print(updated, output_format, render_updated)


@app.command("list")
def list_cmd(
    project: str = typer.Argument(..., help="Project key or alias"),
    assignee: str = typer.Option("all", "--assignee", help="me, unassigned, all, or an email"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Status filter (e.g., \"To Do\")"),
    order_by: str = typer.Option("rank", "--order-by", "-o", help="rank, created, updated or priority"),
    max_results: int = typer.Option(50, "--max-results", "-n", help="Maximum results"),
    output_format: str = typer.Option("text", "--format", "-f", callback=_check_format, help="Output format (text|json)"),
):
    """List a project's tickets, in board order by default."""
    client = get_client()
    try:
        query = ListQuery.from_arguments({
            "project": project,
            "assignee": assignee,
            "status": status,
            "orderBy": order_by,
            "maxResults": max_results,
        })
        result = svc_list_tickets(client, query)
    except JiraError as e:
        _fail(e)

    filters = describe_filters(query.project, query.assignee, query.status, query.order_by)
    _print(result, output_format, lambda r: render_list(r, filters, client.browse_url))


@app.command("aliases")
def aliases():
    """Show project aliases."""
    try:
        config = JiraConfig.load()
    except ConfigurationError as e:
        _fail(e)

    table = Table(title="Project aliases")
    table.add_column("Alias")
    table.add_column("Project key", style="cyan")
    for alias, key in config.aliases.items():
        table.add_row(alias, key)
    console.print(table)
    console.print(f"Default project: [cyan]{config.default_project}[/cyan]")


# ============================================================================
# Auth Commands
# ============================================================================

auth_app = typer.Typer(help="Authentication commands")
app.add_typer(auth_app, name="auth")


@auth_app.command("status")
def auth_status():
    """Check that the configured credentials work."""
    client = get_client()
    try:
        me = client.get_myself()
    except JiraError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Authenticated to {client.config.base_url}")
    console.print(f"  User: {me.get('displayName', 'unknown')} ({me.get('emailAddress') or client.config.email})")


if __name__ == "__main__":
    app()
