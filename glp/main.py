"""GLP CLI: build GitLab issue update payloads."""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

import structlog
import tomlkit
import typer
from pydantic import ValidationError
from rich import print as rprint
from rich import print_json
from rich.table import Table

from glp.logging_config import configure_logging
from glp.models import UpdatedIssueState, UpdateIssueRequest
from glp.settings import CONFIG_PATH, GlpSettings, _list_profiles, get_settings

app = typer.Typer(help="glp: GitLab issue update payloads", no_args_is_help=True)

log = structlog.get_logger(__name__)

ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-k", help="Profile name from ~/.config/glp/config.toml"),
]

_NOT_SET = "[dim](not set)[/dim]"


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug events to stderr")] = False,
) -> None:
    configure_logging("DEBUG" if verbose else GlpSettings().log_level)


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "request"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def build_request(project_id: str, issue_iid: int, **fields: Any) -> UpdateIssueRequest:
    """Build an UpdateIssueRequest from the options that were actually given.

    None values are dropped so model_fields_set reflects what the caller set.
    Exits with a readable message on invalid input.
    """
    given = {name: value for name, value in fields.items() if value is not None}
    try:
        request = UpdateIssueRequest(project_id, issue_iid, **given)
    except ValidationError as exc:
        rprint(f"[red]Invalid update request: {_format_validation_error(exc)}[/red]")
        raise typer.Exit(1) from exc

    log.debug(
        "update_payload_built",
        project_id=request.project_id,
        issue_iid=request.issue_id,
        fields=sorted(request.model_fields_set - {"project_id", "issue_id"}),
    )
    return request


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("update-issue")
def update_issue(
    issue_iid: Annotated[int, typer.Argument(help="Project-scoped issue number (iid)")],
    profile: ProfileOpt = None,
    project: Annotated[
        str | None,
        typer.Option("--project", "-P", help="Project ID or path (e.g. group/app)"),
    ] = None,
    title: Annotated[str | None, typer.Option("--title", help="New issue title")] = None,
    description: Annotated[str | None, typer.Option("--description", help="New issue description")] = None,
    confidential: Annotated[
        bool | None, typer.Option("--confidential/--public", help="Mark the issue confidential")
    ] = None,
    assignee: Annotated[
        list[int] | None,
        typer.Option("--assignee", "-a", help="User ID to assign (repeatable)"),
    ] = None,
    milestone: Annotated[int | None, typer.Option("--milestone", help="Milestone ID")] = None,
    label: Annotated[
        list[str] | None,
        typer.Option("--label", "-l", help="Label name (repeatable)"),
    ] = None,
    state: Annotated[
        UpdatedIssueState | None,
        typer.Option("--state", case_sensitive=False, help="State event to apply"),
    ] = None,
    updated_at: Annotated[
        datetime | None,
        typer.Option("--updated-at", help="Override updated_at (admin or project owner only)"),
    ] = None,
    due_date: Annotated[str | None, typer.Option("--due-date", help="Due date as YYYY-MM-DD")] = None,
    skip_unset: Annotated[bool, typer.Option("--skip-unset", help="Omit null fields from the body")] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the JSON body to file instead of stdout"),
    ] = None,
) -> None:
    """Build the request body for updating an issue (nothing is sent)."""
    settings = get_settings(profile=profile)

    project_id = project or settings.project_id
    if not project_id:
        rprint(
            "[red]No project specified. Use --project or set project_id "
            "in your config profile.[/red]"
        )
        raise typer.Exit(1)

    request = build_request(
        project_id,
        issue_iid,
        title=title,
        description=description,
        confidential=confidential,
        assignees=assignee or None,
        milestone_id=milestone,
        labels=label or None,
        state=state,
        updated_at=updated_at,
        due_date=due_date,
    )
    body = request.to_json(exclude_none=skip_unset)

    if output:
        output.write_text(body)
        rprint(f"[green]✓[/green] Wrote update payload for issue {request.issue_id} to {output}")
        return

    rprint(f"[bold]PUT[/bold] {settings.gitlab_url.rstrip('/')}/{request.resource_path}")
    print_json(body)


@app.command("config-show")
def config_show(profile: ProfileOpt = None) -> None:
    """Show resolved configuration."""
    settings = get_settings(profile=profile)

    table = Table(title="GLP Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("default_profile", settings.default_profile or _NOT_SET)
    table.add_row("gitlab_url", settings.gitlab_url)
    table.add_row("project_id", settings.project_id or _NOT_SET)
    table.add_row("log_level", settings.log_level)

    rprint(table)


@app.command("set-default")
def set_default(
    profile: Annotated[str, typer.Argument(help="Profile name to set as default")],
) -> None:
    """Set the default profile in ~/.config/glp/config.toml."""
    if not CONFIG_PATH.exists():
        rprint(f"[red]No config file at {CONFIG_PATH}. Add a profile table first.[/red]")
        raise typer.Exit(1)

    with CONFIG_PATH.open() as fh:
        doc = tomlkit.load(fh)
    profiles = _list_profiles(doc)
    if profile not in profiles:
        rprint(f"[red]Profile '{profile}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}[/red]")
        raise typer.Exit(1)

    doc["default_profile"] = profile
    CONFIG_PATH.write_text(tomlkit.dumps(doc))
    rprint(f'[green]✓[/green] Default profile set to "{profile}" in {CONFIG_PATH}')
