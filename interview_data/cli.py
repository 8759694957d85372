"""CLI interface for the Interview Data client."""

import asyncio
import sys
from typing import Any, Awaitable, Callable, Optional
from uuid import uuid4

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .models.enums import DifficultyLevel, QuestionType, SessionStatus
from .services.backend import BackendConnection
from .services.configuration_manager import ConfigurationManager
from .services.interview_data_client import InterviewDataClient
from .utils.exceptions import InterviewDataError
from .utils.logging import get_logger, log_error, set_correlation_id, setup_logging


console = Console()
logger = get_logger("cli")

DIFFICULTY_CHOICES = [level.value for level in DifficultyLevel]
STATUS_CHOICES = [status.value for status in SessionStatus]
TYPE_CHOICES = [question_type.value for question_type in QuestionType]


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", type=click.Path(file_okay=False), default="config", show_default=True, help="Configuration directory")
@click.option("--env-file", type=click.Path(dir_okay=False), default=".env", show_default=True, help="Environment file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str, env_file: str, verbose: bool):
    """Query and record interview-practice data in the hosted backend."""
    ctx.ensure_object(dict)

    try:
        config_manager = ConfigurationManager(config_path, env_file)
        config_manager.initialize()
    except InterviewDataError as e:
        console.print(f"[red]Failed to load configuration: {escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(1)

    logging_config = config_manager.get_logging_config()
    setup_logging(
        level="DEBUG" if verbose else logging_config.level,
        log_file=logging_config.file_path,
        enable_console=logging_config.console_output,
        enable_file=logging_config.file_output,
        structured=logging_config.format == "json",
        max_file_size=logging_config.max_file_size,
        backup_count=logging_config.backup_count,
    )
    set_correlation_id(uuid4().hex[:12])
    ctx.obj["config_manager"] = config_manager


def _run(ctx: click.Context, operation: Callable[[InterviewDataClient], Awaitable[Any]]) -> Any:
    """Open the backend connection, run one client operation and close it again."""
    config_manager: ConfigurationManager = ctx.obj["config_manager"]

    async def runner():
        async with BackendConnection(config_manager.get_backend_config()) as backend_client:
            return await operation(InterviewDataClient(backend_client))

    try:
        return asyncio.run(runner())
    except InterviewDataError as e:
        log_error(e, {"command": ctx.command.name})
        console.print(f"[red]{ctx.command.name} failed: {escape(str(e))}[/red]", soft_wrap=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def roles(ctx: click.Context):
    """List active job roles."""
    job_roles = _run(ctx, lambda client: client.list_active_job_roles())
    if not job_roles:
        console.print("[yellow]No active job roles.[/yellow]")
        return

    table = Table(title="Job Roles")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Category")
    for role in job_roles:
        table.add_row(role.id, role.title, role.category or "")
    console.print(table)


@cli.command()
@click.argument("job_role_id")
@click.option("--difficulty", "-d", type=click.Choice(DIFFICULTY_CHOICES), default=DifficultyLevel.MEDIUM.value, show_default=True)
@click.option("--limit", "-n", type=int, default=5, show_default=True, help="Maximum number of questions")
@click.option("--type", "-t", "question_type", type=click.Choice(TYPE_CHOICES), default=None, help="Only questions of this type")
@click.pass_context
def questions(ctx: click.Context, job_role_id: str, difficulty: str, limit: int, question_type: Optional[str]):
    """List active questions for JOB_ROLE_ID."""
    found = _run(ctx, lambda client: client.list_interview_questions(job_role_id, difficulty, limit, question_type=question_type))
    if not found:
        console.print(f"[yellow]No {difficulty} questions for job role {job_role_id}.[/yellow]")
        return

    table = Table(title=f"{difficulty.capitalize()} Questions")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Type")
    table.add_column("Question")
    for question in found:
        table.add_row(question.id, question.question_type.value if question.question_type else "", question.question_text)
    console.print(table)


@cli.command("create-session")
@click.option("--user-id", "-u", required=True, help="Owning user")
@click.option("--job-role-id", "-j", required=True, help="Job role to practice for")
@click.option("--resume-id", "-r", default=None, help="Resume to tailor the session to")
@click.option("--name", "session_name", default=None, help="Session name")
@click.option("--questions", "total_questions", type=int, default=5, show_default=True, help="Number of questions")
@click.option("--difficulty", "-d", type=click.Choice(DIFFICULTY_CHOICES), default=DifficultyLevel.MEDIUM.value, show_default=True)
@click.pass_context
def create_session(ctx: click.Context, user_id: str, job_role_id: str, resume_id: Optional[str],
                   session_name: Optional[str], total_questions: int, difficulty: str):
    """Create a scheduled interview session."""
    session = _run(ctx, lambda client: client.create_interview_session(
        user_id,
        job_role_id,
        resume_id=resume_id,
        session_name=session_name,
        total_questions=total_questions,
        difficulty_level=difficulty,
    ))
    content = "\n".join([
        f"Session: {session.id}",
        f"Name: {session.session_name}",
        f"Status: {session.status.value}",
        f"Questions: {session.total_questions} ({session.difficulty_level.value})",
    ])
    console.print(Panel(content, title="Interview Session Created", border_style="green"))


@cli.command()
@click.argument("session_id")
@click.argument("question_id")
@click.argument("answer_text")
@click.pass_context
def answer(ctx: click.Context, session_id: str, question_id: str, answer_text: str):
    """Save ANSWER_TEXT as an answer to QUESTION_ID in SESSION_ID."""
    _run(ctx, lambda client: client.save_answer(session_id, question_id, answer_text))
    console.print("[green]Answer saved.[/green]")


@cli.command()
@click.argument("session_id")
@click.pass_context
def transcript(ctx: click.Context, session_id: str):
    """Show the transcript of SESSION_ID."""
    entries = _run(ctx, lambda client: client.get_interview_transcript(session_id))
    if not entries:
        console.print(f"[yellow]Session {session_id} has no answers yet.[/yellow]")
        return

    for number, entry in enumerate(entries, start=1):
        console.print(Panel(entry.answer_text, title=f"Q{number}: {entry.question_text}", border_style="blue"))


@cli.command()
@click.argument("user_id")
@click.option("--status", "-s", type=click.Choice(STATUS_CHOICES), default=None, help="Only sessions in this status")
@click.option("--limit", "-n", type=int, default=None, help="Maximum number of sessions")
@click.pass_context
def sessions(ctx: click.Context, user_id: str, status: Optional[str], limit: Optional[int]):
    """List USER_ID's interview sessions, newest first."""
    found = _run(ctx, lambda client: client.list_user_sessions(user_id, status=status, limit=limit))
    if not found:
        console.print(f"[yellow]No sessions for user {user_id}.[/yellow]")
        return

    table = Table(title="Interview Sessions")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name")
    table.add_column("Job Role")
    table.add_column("Status")
    table.add_column("Difficulty")
    table.add_column("Answered", justify="right")
    for session in found:
        table.add_row(
            session.id,
            session.session_name,
            session.job_role_title,
            session.status.value,
            session.difficulty_level.value,
            f"{session.questions_answered}/{session.total_questions}",
        )
    console.print(table)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        logger.error(f"Unexpected CLI error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
