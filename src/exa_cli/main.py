import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Any

import asyncclick as click
from asyncclick.shell_completion import get_completion_class
from dotenv import load_dotenv
from pydantic import BaseModel

from exa_cli.build_info import BuildInfo
from exa_cli.builder import ContentsFlags, SearchFlags, build_contents_request, build_search_request
from exa_cli.clients.exa import API_KEY_ENV_VAR, ExaClient, resolve_api_key
from exa_cli.config import Config, save_config
from exa_cli.errors import ExaCliError
from exa_cli.models.requests import Category, SearchType, TextVerbosity
from exa_cli.output import OutputFormat, RenderOptions, render
from exa_cli.utils.logging import configure_logging

logger = logging.getLogger(__name__)

PROG_NAME = "exa"
COMPLETE_VAR = "_EXA_COMPLETE"
COMPLETION_SHELLS = ["bash", "zsh", "fish"]

DEFAULT_COMMAND = "search"

COMMAND_ALIASES = {
    "s": "search",
    "c": "contents",
}

API_KEY_HELP = f"Exa API key (overrides the {API_KEY_ENV_VAR} environment variable and the config file)"
OUTPUT_HELP = "Output format: table, json, toon"
QUIET_HELP = "Quiet mode: output only URLs (search) or text (contents) for scripting"
VERBOSE_HELP = "Log request details to stderr"
VERSION_HELP = "Show the version and exit"
CATEGORY_HELP = f"Content category (e.g. {', '.join(Category)})"

SEARCH_EPILOG = """\b
Examples:
  exa "latest AI news"
  exa search -n 5 --summary "golang best practices"
  exa search -i github.com -i stackoverflow.com "error handling"
  exa search -c news --max-age-hours 24 "tech layoffs"
"""

CONTENTS_EPILOG = """\b
Examples:
  exa contents https://example.com
  exa contents --summary https://example.com https://another.com
  exa contents -q https://example.com | head -100
"""


class CliState(BaseModel):
    build_info: BuildInfo
    api_key: str | None = None
    output: OutputFormat = OutputFormat.TABLE
    quiet: bool = False

    def render_options(self, show_text: bool = False, show_summary: bool = False) -> RenderOptions:
        return RenderOptions(
            format=self.output,
            quiet=self.quiet,
            color=sys.stdout.isatty(),
            show_text=show_text,
            show_summary=show_summary,
        )


class AliasedGroup(click.Group):
    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        return super().get_command(ctx, COMMAND_ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args: list[str]) -> tuple[str | None, click.Command | None, list[str]]:
        """Anything that is not a command or an option is a search query."""
        if args and not args[0].startswith("-") and self.get_command(ctx, args[0]) is None:
            args = [DEFAULT_COMMAND, *args]

        return super().resolve_command(ctx, args)


def print_version(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return

    build_info = ctx.obj if isinstance(ctx.obj, BuildInfo) else BuildInfo.from_environment()
    click.echo(f"{PROG_NAME} version {build_info.version}")
    ctx.exit()


def content_options(text_flag: Callable[[Callable[..., Any]], Callable[..., Any]]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """The text, highlights and summary options shared by `search` and `contents`."""
    options = [
        text_flag,
        click.option("--text-max-chars", type=int, help="Maximum characters for text content"),
        click.option("--text-include-html", is_flag=True, help="Include HTML tags in text content"),
        click.option("--text-verbosity", type=click.Choice([v.value for v in TextVerbosity]), help="Text verbosity"),
        click.option("--highlights", "-H", is_flag=True, help="Include highlights"),
        click.option("--highlights-query", help="Custom query for highlight selection"),
        click.option("--highlights-sentences", type=int, help="Number of sentences per highlight"),
        click.option("--highlights-per-url", type=int, help="Number of highlights per URL"),
        click.option("--summary", "-s", is_flag=True, help="Include AI-generated summary"),
        click.option("--summary-query", help="Custom query for summary generation"),
        click.option("--summary-schema", help="JSON schema for structured summary extraction"),
    ]

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        for option in reversed(options):
            func = option(func)
        return func

    return decorator


@click.group(cls=AliasedGroup)
@click.option("--api-key", envvar=API_KEY_ENV_VAR, help=API_KEY_HELP)
@click.option("--output", "-o", type=click.Choice([f.value for f in OutputFormat]), default=OutputFormat.TABLE.value, help=OUTPUT_HELP)
@click.option("--quiet", "-q", is_flag=True, help=QUIET_HELP)
@click.option("--verbose", "-v", is_flag=True, help=VERBOSE_HELP)
@click.option("--version", is_flag=True, is_eager=True, expose_value=False, callback=print_version, help=VERSION_HELP)
@click.pass_context
async def cli(ctx: click.Context, api_key: str | None, output: str, quiet: bool, verbose: bool):
    """CLI tool for the Exa API."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    build_info = ctx.obj if isinstance(ctx.obj, BuildInfo) else BuildInfo.from_environment()

    ctx.obj = CliState(build_info=build_info, api_key=api_key, output=OutputFormat(output), quiet=quiet)


@cli.command(epilog=SEARCH_EPILOG)
@click.argument("query", required=True)
@click.option("--type", "-t", type=click.Choice([t.value for t in SearchType]), default=SearchType.AUTO.value, help="Search type")
@click.option("--num-results", "-n", type=click.IntRange(1, 100), default=10, help="Number of results (1-100)")
@content_options(click.option("--text", is_flag=True, help="Include full text content"))
@click.option("--include-domains", "-i", multiple=True, help="Only include results from these domains")
@click.option("--exclude-domains", "-x", multiple=True, help="Exclude results from these domains")
@click.option("--start-published-date", help="Filter by publish date (ISO 8601)")
@click.option("--end-published-date", help="Filter by publish date (ISO 8601)")
@click.option("--category", "-c", help=CATEGORY_HELP)
@click.option("--max-age-hours", type=int, help="Maximum age of content in hours (0=always livecrawl, -1=cache only)")
@click.pass_obj
async def search(state: CliState, query: str, **options: Any):
    """Search the web using Exa."""
    flags = SearchFlags.model_validate(options)

    try:
        request = build_search_request(query, flags)
        logger.debug("Search request: %s", request.to_payload())

        async with ExaClient(resolve_api_key(state.api_key)) as client:
            response = await client.search(request)

        output = render(response, state.render_options(show_text=flags.wants_text, show_summary=flags.wants_summary))
    except ExaCliError as e:
        raise click.ClickException(str(e)) from e

    click.echo(output, nl=False)


@cli.command(epilog=CONTENTS_EPILOG)
@click.argument("urls", nargs=-1, required=True)
@content_options(click.option("--text/--no-text", "-t", default=True, help="Include full text content"))
@click.option("--subpages", "-p", type=int, help="Number of subpages to crawl")
@click.option("--subpage-target", multiple=True, help="Keywords to target when crawling subpages")
@click.option("--max-age-hours", type=int, help="Maximum age of content in hours (0=always livecrawl, -1=cache only)")
@click.option("--livecrawl-timeout", type=int, help="Timeout in ms for live crawling")
@click.option("--context", "-C", is_flag=True, help="Return all results combined into a single string for RAG")
@click.option("--context-max-chars", type=int, help="Maximum characters for context string")
@click.pass_obj
async def contents(state: CliState, urls: tuple[str, ...], **options: Any):
    """Get contents from URLs."""
    flags = ContentsFlags.model_validate(options)

    try:
        request = build_contents_request(urls, flags)
        logger.debug("Contents request: %s", request.to_payload())

        async with ExaClient(resolve_api_key(state.api_key)) as client:
            response = await client.get_contents(request)

        output = render(response, state.render_options(show_text=flags.wants_text, show_summary=flags.wants_summary))
    except ExaCliError as e:
        raise click.ClickException(str(e)) from e

    click.echo(output, nl=False)


@cli.command()
@click.option("--key", prompt="Enter your Exa API key", hide_input=True, help="The API key to save")
async def configure(key: str):
    """Configure exa CLI settings (API key)."""
    if not (api_key := key.strip()):
        msg = "API key cannot be empty"
        raise click.ClickException(msg)

    try:
        path = save_config(Config(api_key=api_key))
    except ExaCliError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"API key saved to {path}")


@cli.command()
@click.argument("shell", type=click.Choice(COMPLETION_SHELLS))
@click.pass_context
async def completion(ctx: click.Context, shell: str):
    """Generate shell completion scripts."""
    completion_class = get_completion_class(shell)
    if completion_class is None:
        msg = f"Unsupported shell: {shell}"
        raise click.ClickException(msg)

    shell_complete = completion_class(ctx.find_root().command, {}, PROG_NAME, COMPLETE_VAR)

    click.echo(shell_complete.source())


@cli.command()
@click.pass_obj
async def version(state: CliState):
    """Show detailed version information."""
    click.echo(state.build_info.describe(PROG_NAME), nl=False)


def run_cli():
    load_dotenv()
    asyncio.run(cli.main(prog_name=PROG_NAME, obj=BuildInfo.from_environment()))


if __name__ == "__main__":
    run_cli()
