"""CLI entry point for the hotfix release workflow."""

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, NoReturn

import click
import structlog
from pydantic import SecretStr

from hotfix_release.config.settings import HotfixSettings
from hotfix_release.engine.context import HotfixContext
from hotfix_release.engine.pipeline import HotfixPipeline
from hotfix_release.engine.stages.context_extractor import validate_event
from hotfix_release.exceptions import ConfigurationError, HotfixReleaseError
from hotfix_release.models.domain import TriggerEvent
from hotfix_release.providers.factory import create_git_provider
from hotfix_release.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--config",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to YAML configuration file (defaults and HOTFIX_* variables when omitted)",
)
@click.option("--log-level", default=None, help="Logging level (overrides the configured one)")
@click.pass_context
def cli(ctx: click.Context, config: str | None, log_level: str | None) -> None:
    """hotfix-release: cut patch releases from merged pull requests."""
    try:
        settings = HotfixSettings.from_yaml(config) if config else HotfixSettings()
    except ConfigurationError as e:
        configure_logging(log_level or "INFO")
        _fail(e.message)
    except Exception as e:
        configure_logging(log_level or "INFO")
        click.echo(f"Unexpected error loading configuration: {e}", err=True)
        log.error("config_error_unexpected", exc_info=True)
        sys.exit(1)

    configure_logging(log_level or settings.log_level)
    ctx.obj = {"settings": settings}


@cli.command()
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    type=click.Path(dir_okay=False),
    required=True,
    help="Path to the triggering event's JSON payload [env: GITHUB_EVENT_PATH]",
)
@click.option(
    "--repository",
    envvar="GITHUB_REPOSITORY",
    default=None,
    help="owner/name, used when the payload has no repository section [env: GITHUB_REPOSITORY]",
)
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    default=None,
    help="API token (overrides git_provider.api_token) [env: GITHUB_TOKEN]",
)
@click.option("--mainline", default=None, help="Branch the release pull request targets")
@click.option("--dry-run", is_flag=True, help="Resolve the release version and branch without writing anything")
@click.pass_context
def run(
    ctx: click.Context,
    event_path: str,
    repository: str | None,
    token: str | None,
    mainline: str | None,
    dry_run: bool,
) -> None:
    """Run the hotfix workflow for one pull_request event."""
    settings: HotfixSettings = ctx.obj["settings"]
    if token:
        settings.git_provider.api_token = SecretStr(token)
    if mainline:
        settings.repository.mainline_branch = mainline

    try:
        owner, repo = _split_repository(repository, settings)
        event = TriggerEvent.from_payload(_read_event(event_path), owner=owner, repo=repo)
        validate_event(event)
        context = asyncio.run(_run_pipeline(settings, event, dry_run))
    except HotfixReleaseError as e:
        log.debug("run_error", exc_info=True)
        _fail(e.message)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        log.error("run_unexpected", exc_info=True)
        sys.exit(1)

    _print_summary(context)


async def _run_pipeline(settings: HotfixSettings, event: TriggerEvent, dry_run: bool) -> HotfixContext:
    git = create_git_provider(settings, event.owner, event.repo)
    await git.connect()
    try:
        pipeline = HotfixPipeline(git, settings)
        return await pipeline.run(event, dry_run=dry_run)
    finally:
        await git.disconnect()


def _read_event(event_path: str) -> Any:
    path = Path(event_path)
    try:
        with open(path) as f:
            return json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read event payload {event_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Event payload {event_path} is not valid JSON: {e}") from e


def _split_repository(repository: str | None, settings: HotfixSettings) -> tuple[str | None, str | None]:
    """Fallback coordinates: ``owner/name`` first, then the configured ones."""
    if repository:
        owner, sep, name = repository.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ConfigurationError(f"Invalid repository '{repository}', expected owner/name")
        return owner, name
    return settings.repository.owner, settings.repository.name


def _print_summary(context: HotfixContext) -> None:
    summary = context.summary()
    for key, value in summary.items():
        if value is not None:
            click.echo(f"{key}: {value}")

    conflict = summary.get("conflict_branch")
    if conflict:
        click.echo(
            f"Warning: cherry-pick conflicted; resolve it on {conflict} and merge into {summary['release_branch']}",
            err=True,
        )


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    if os.environ.get("GITHUB_ACTIONS") == "true":
        # Workflow command, surfaces the failure as a run annotation.
        click.echo(f"::error::{message}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
