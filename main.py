"""
Command-line entry point for etymograph.
Looks up a word's etymological connections and prints them as a list or JSON.
"""

import asyncio
import json
import sys
from typing import Optional

import click
from click_help_colors import HelpColorsGroup, HelpColorsCommand
from click_option_group import optgroup, OptionGroup

from etymograph.config import SELECTOR_CONFIG
from etymograph.main import EtymologyPipeline
from etymograph.models import Connection
from etymograph.utils import setup_logging


def format_connection(connection: Connection) -> str:
    """One-line rendering of a connection for terminal output."""
    word = connection.word
    relationship = connection.relationship
    line = (
        click.style(f"  → {word.text}", fg='green', bold=True)
        + click.style(f" ({word.language})", fg='cyan')
        + f" [{relationship.type}, {relationship.confidence:.2f}, {relationship.source}]"
    )
    if relationship.notes:
        line += click.style(f"\n      {relationship.notes}", fg='white', dim=True)
    return line


def get_pipeline(ctx: click.Context) -> EtymologyPipeline:
    if ctx.obj is None:
        ctx.obj = EtymologyPipeline()
    return ctx.obj


class ColorGroup(HelpColorsGroup):
    def get_help(self, ctx):
        """Override to add custom formatting to help text."""
        return click.style("""
╭────────────────────────────────────────────╮
│      Etymology Connection Explorer CLI     │
╰────────────────────────────────────────────╯
        """, fg='blue') + super().get_help(ctx)


@click.group(
    cls=ColorGroup,
    help_headers_color='yellow',
    help_options_color='green'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default='WARNING',
    help='📝 Console logging level'
)
@click.option(
    '--log-file',
    type=click.Path(),
    help='📁 Path to log file (optional)'
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, log_file: Optional[str]):
    """
    Etymology Connection Explorer

    Finds words related to a given word through shared ancestry, cognates,
    borrowings and derivation, using Wiktionary, a dictionary API and
    etymonline.

    Examples:

    \b
    Basic usage:
        $ etymograph search water

    \b
    Another language, more neighbors, raw JSON:
        $ etymograph search madre -l es -n 8 --json

    \b
    Every ranked connection:
        $ etymograph details father
    """
    try:
        setup_logging(log_path=log_file, console_level=log_level)
    except ValueError as e:
        click.echo(click.style(f"\n❌ Logging setup failed: {str(e)}", fg='red'))
        sys.exit(1)


@cli.command(
    cls=HelpColorsCommand,
    help_headers_color='yellow',
    help_options_color='green'
)
@click.argument('word')
@optgroup.group('Lookup Options', cls=OptionGroup)
@optgroup.option(
    '--language', '-l',
    default='en',
    help='🌐 Language code or name of the word'
)
@optgroup.option(
    '--max-nodes', '-n',
    type=click.IntRange(1, 50),
    default=SELECTOR_CONFIG["default_initial_nodes"],
    help='🔢 Maximum number of connections to show'
)
@optgroup.option(
    '--bypass-cache',
    is_flag=True,
    help='♻️  Ignore cached results'
)
@optgroup.group('Output Options')
@optgroup.option(
    '--json', 'as_json',
    is_flag=True,
    help='📊 Print the graph response as JSON'
)
@click.pass_context
def search(ctx: click.Context, word: str, language: str, max_nodes: int, bypass_cache: bool, as_json: bool) -> None:
    """
    Show a selection of connections for WORD.

    Reconstructed roots are always included when available; the rest of the
    selection varies between runs.
    """
    pipeline = get_pipeline(ctx)
    try:
        response = asyncio.run(pipeline.initial_graph(word, language, max_nodes, bypass_cache))
    except ValueError as e:
        click.echo(click.style(f"\n❌ {str(e)}", fg='red'))
        sys.exit(1)
    except Exception as e:
        click.echo(click.style(f"\n💥 Unexpected error: {str(e)}", fg='red'))
        sys.exit(2)

    if as_json:
        click.echo(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
        sys.exit(0)

    source = response.source_node.word
    click.echo(click.style(f"\n📖 {source.text} ({source.language})", fg='blue', bold=True))
    click.echo(f"   {source.definition}")

    if not response.edges:
        click.echo(click.style("\nNo etymological connections found.", fg='yellow'))
        sys.exit(0)

    click.echo(click.style(
        f"\nShowing {response.total_selected} of {response.total_available} connections:", fg='yellow'
    ))
    for node, edge in zip(response.neighbors, response.edges):
        click.echo(format_connection(Connection(word=node.word, relationship=edge.relationship)))
    sys.exit(0)


@cli.command(
    cls=HelpColorsCommand,
    help_headers_color='yellow',
    help_options_color='green'
)
@click.argument('word')
@click.option('--language', '-l', default='en', help='🌐 Language code or name of the word')
@click.option('--json', 'as_json', is_flag=True, help='📊 Print the result as JSON')
@click.pass_context
def details(ctx: click.Context, word: str, language: str, as_json: bool) -> None:
    """Show every ranked connection for WORD."""
    pipeline = get_pipeline(ctx)
    try:
        result = asyncio.run(pipeline.word_details(word, language))
    except ValueError as e:
        click.echo(click.style(f"\n❌ {str(e)}", fg='red'))
        sys.exit(1)
    except Exception as e:
        click.echo(click.style(f"\n💥 Unexpected error: {str(e)}", fg='red'))
        sys.exit(2)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        sys.exit(0)

    source = result.source_word
    click.echo(click.style(f"\n📖 {source.text} ({source.language})", fg='blue', bold=True))
    if source.part_of_speech:
        click.echo(f"   {source.part_of_speech}")
    click.echo(f"   {source.definition}")

    click.echo(click.style(f"\n{len(result.connections)} ranked connections:", fg='yellow'))
    for connection in result.connections:
        click.echo(format_connection(connection))
    sys.exit(0)


@cli.command()
@click.pass_context
def health(ctx: click.Context) -> None:
    """Show cache and index statistics."""
    click.echo(json.dumps(get_pipeline(ctx).health(), indent=2))


if __name__ == '__main__':
    cli()
