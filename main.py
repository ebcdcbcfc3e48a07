from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Iterable, Optional, Set

import click
import schedule
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from models.email_message import EmailSummary, ThreadMessage
from services.auth_service import AuthService
from services.function_registry import (
    ArgumentValidationError,
    FunctionRegistry,
    UnknownFunctionError,
    build_registry,
)
from services.gmail_service import GmailService
from services.mailbox_operations import MailboxOperations
from utils.config import AppConfig, ConfigError, load_config
from utils.logger import configure_logging


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class AppContext:
    config: AppConfig
    auth: AuthService
    operations: MailboxOperations
    registry: FunctionRegistry
    console: Console
    seen_ids: Set[str] = field(default_factory=set)


def build_context(env_file: str) -> AppContext:
    config = load_config(env_file)
    configure_logging(config.log_dir, config.log_level)
    console = Console()

    auth_service = AuthService(config)
    gmail_service = GmailService(config, auth_service)
    operations = MailboxOperations(gmail_service)
    registry = build_registry(operations, service_name=config.service_name)
    return AppContext(
        config=config,
        auth=auth_service,
        operations=operations,
        registry=registry,
        console=console,
    )


def _require_mailbox(app: AppContext) -> None:
    try:
        app.config.ensure_complete()
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc


@click.group()
@click.option("--env-file", default=".env", show_default=True, help="Path to the .env file")
@click.pass_context
def cli(ctx: click.Context, env_file: str) -> None:
    """Gmail functions for an agent runtime: list, read, draft and categorize."""

    try:
        ctx.obj = build_context(env_file)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc


@cli.command("functions")
@click.pass_obj
def list_functions(app: AppContext) -> None:
    """Show the functions registered for the agent runtime."""

    table = Table(title=f"{app.registry.service_name} functions")
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Inputs")
    table.add_column("Description")
    for spec in app.registry:
        inputs = ", ".join(
            f"{name}{'' if required else '?'}: {kind}" for name, kind, required in spec.input_fields()
        )
        table.add_row(spec.name, inputs or "-", spec.description)
    app.console.print(table)


@cli.command("schema")
@click.option("--indent", type=int, default=2, show_default=True)
@click.pass_obj
def print_schema(app: AppContext, indent: int) -> None:
    """Print the registry as JSON schema for the hosting runtime."""

    click.echo(json.dumps(app.registry.to_json_schema(), indent=indent))


@cli.command("call")
@click.argument("name")
@click.option("--args", "raw_args", default="{}", show_default=True, help="JSON object of arguments")
@click.pass_obj
def call_function(app: AppContext, name: str, raw_args: str) -> None:
    """Invoke a registered function and print its JSON result."""

    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}", param_hint="--args") from exc
    if not isinstance(arguments, dict):
        raise click.BadParameter("Arguments must be a JSON object", param_hint="--args")

    try:
        spec = app.registry.get(name)
    except UnknownFunctionError as exc:
        raise click.BadParameter(exc.args[0], param_hint="NAME") from exc
    _require_mailbox(app)
    try:
        result = app.registry.call(spec.name, arguments)
    except ArgumentValidationError as exc:
        raise click.BadParameter(str(exc), param_hint="--args") from exc
    click.echo(json.dumps(result, indent=2))


@cli.command("unread")
@click.option("--limit", type=int, default=None, help="Number of emails to list (default 10, max 20)")
@click.pass_obj
def unread(app: AppContext, limit: Optional[int]) -> None:
    """List unread emails."""

    _require_mailbox(app)
    emails = app.operations.list_unread_emails(limit).emails
    if emails:
        app.console.print(_build_summary_table("Unread emails", emails))
    else:
        app.console.print("[bold green]No unread emails found.[/bold green]")


@cli.command("thread")
@click.argument("thread_id")
@click.pass_obj
def thread(app: AppContext, thread_id: str) -> None:
    """Print the messages of a thread."""

    _require_mailbox(app)
    messages = app.operations.get_thread_content(thread_id).messages
    if not messages:
        app.console.print(f"[yellow]No messages found for thread {escape(thread_id)}.[/yellow]")
        return
    for message in messages:
        app.console.print(_message_panel(message))


@cli.command("draft")
@click.argument("thread_id")
@click.option("--to", "to", required=True, help="Recipient email address")
@click.option("--subject", required=True, help="Subject of the reply")
@click.option("--body", required=True, help="Content of the reply")
@click.option("--message-id", default=None, help="Message being replied to")
@click.pass_obj
def draft(app: AppContext, thread_id: str, to: str, subject: str, body: str, message_id: Optional[str]) -> None:
    """Save a reply draft in a thread without sending it."""

    _require_mailbox(app)
    result = app.operations.draft_reply(thread_id, to, subject, body, message_id=message_id)
    if result.success:
        app.console.print(f"Draft saved (id: {result.draft_id or 'unknown'}).")
    else:
        app.console.print("[red]Could not create the draft. See the log for details.[/red]")


@cli.command("categorize")
@click.argument("thread_id")
@click.argument("label_name")
@click.pass_obj
def categorize(app: AppContext, thread_id: str, label_name: str) -> None:
    """Add an existing label to a thread."""

    _require_mailbox(app)
    if app.operations.categorize_thread(thread_id, label_name).success:
        app.console.print(f"Labelled thread {escape(thread_id)} with {escape(label_name)}.")
    else:
        app.console.print(f"[red]Could not label thread {escape(thread_id)} with {escape(label_name)}.[/red]")


@cli.command("watch")
@click.option("--interval", type=int, default=None, help="Interval in minutes (defaults to POLL_INTERVAL_MINUTES)")
@click.option("--limit", type=int, default=None, help="Emails to check per run")
@click.pass_obj
def watch(app: AppContext, interval: Optional[int], limit: Optional[int]) -> None:
    """Poll for unread emails using the schedule library and print new arrivals."""

    _require_mailbox(app)
    minutes = interval or app.config.poll_interval_minutes

    def job() -> None:
        emails = app.operations.list_unread_emails(limit).emails
        fresh = [email for email in emails if email.id not in app.seen_ids]
        # Only remember ids that are still unread.
        app.seen_ids = {email.id for email in emails}
        app.console.print(f"\\[watch] {len(fresh)} new unread email(s).")
        if fresh:
            app.console.print(_build_summary_table("New unread emails", fresh))

    schedule.every(minutes).minutes.do(job)
    LOGGER.info("Watching unread mail every %s minute(s)", minutes)
    app.console.print(f"Checking unread email every {minutes} minute(s). Press Ctrl+C to stop.")
    job()
    try:
        while True:
            schedule.run_pending()
            time.sleep(1)
    except KeyboardInterrupt:
        app.console.print("Watcher stopped.")
    finally:
        schedule.clear()


@cli.command("authorize")
@click.option("--port", type=int, default=0, show_default=True, help="Local port for the OAuth redirect")
@click.pass_obj
def authorize(app: AppContext, port: int) -> None:
    """Run the OAuth consent flow and print a refresh token for .env."""

    try:
        creds = app.auth.authorize(port=port)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc
    if not creds.refresh_token:
        app.console.print("[red]Google did not return a refresh token. Revoke access and try again.[/red]")
        return
    app.console.print("Add this line to your .env file:")
    click.echo(f"GOOGLE_REFRESH_TOKEN={creds.refresh_token}")


def _build_summary_table(title: str, emails: Iterable[EmailSummary]) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("ID", overflow="fold")
    table.add_column("Thread", overflow="fold")
    table.add_column("Subject")
    table.add_column("From")
    table.add_column("Date")
    table.add_column("Snippet")
    for email in emails:
        row = (email.id, email.thread_id, email.subject, email.sender, email.date, email.snippet)
        table.add_row(*(escape(value) for value in row))
    return table


def _message_panel(message: ThreadMessage) -> Panel:
    title = " | ".join(part for part in (message.sender, message.date) if part) or "Unknown sender"
    return Panel(Text(message.body or "(empty)"), title=escape(title), title_align="left")


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
