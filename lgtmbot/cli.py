"""Command line entry point for lgtmbot."""

import logging

import click

from lgtmbot import __version__
from lgtmbot.config import BotConfig
from lgtmbot.exceptions import ConfigurationError
from lgtmbot.logging import configure_logging, get_logger
from lgtmbot.merge import RemoveSourceBranchPolicy
from lgtmbot.server import create_app

logger = get_logger()


def version_callback(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Show version and exit."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"lgtmbot {__version__}")
    ctx.exit()


@click.command(help="Merge GitLab merge requests once enough reviewers comment LGTM")
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
@click.option(
    "--private-token",
    help="GitLab private token used to accept merge requests [env: LGTMBOT_PRIVATE_TOKEN]",
)
@click.option("--gitlab-url", help="e.g. https://your.gitlab.com [env: LGTMBOT_GITLAB_URL]")
@click.option("--host", help="Address to listen on (default: 0.0.0.0)")
@click.option("--port", type=int, help="Port to listen on (default: 8989)")
@click.option("--hook-path", help="Webhook path (default: /gitlab/hook)")
@click.option("--keyword", help="Approval keyword (default: LGTM)")
@click.option("--quorum", "quorum_threshold", type=int, help="Approvals needed to merge (default: 2)")
@click.option("--api-version", help="GitLab API version (default: v3)")
@click.option(
    "--remove-source-branch",
    type=click.Choice([p.value for p in RemoveSourceBranchPolicy]),
    help="Value sent as should_remove_source_branch (default: always)",
)
@click.option(
    "--dedupe-merges/--no-dedupe-merges",
    default=None,
    help="Submit each merge request for merging at most once",
)
@click.option(
    "--distinct-approvers/--no-distinct-approvers",
    "require_distinct_approvers",
    default=None,
    help="Count each comment author once per merge request",
)
@click.option("--max-targets", type=int, help="Forget the least recently approved merge requests beyond this many")
@click.option("--shards", type=int, help="Number of independently locked counter shards (default: 1)")
@click.option("--webhook-secret", help="Expected X-Gitlab-Token header value")
@click.option("--merge-retries", type=int, help="Retries for failed merge calls (default: 0)")
@click.option("--timeout", type=float, help="GitLab request timeout in seconds (default: 30)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
def main(log_level: str, **options: object) -> None:
    """Start the webhook server."""
    configure_logging(level=getattr(logging, log_level.upper()))

    try:
        config = BotConfig.from_env(**options)
    except ConfigurationError as e:
        raise click.ClickException(e.message) from e

    app = create_app(config)
    logger.info("start http server on %s:%d%s", config.host, config.port, config.hook_path)
    try:
        app.run(host=config.host, port=config.port, threaded=True)
    finally:
        executor = app.extensions["lgtmbot"].executor
        if executor is not None:
            executor.shutdown(wait=True)


if __name__ == "__main__":
    main()
