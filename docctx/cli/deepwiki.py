"""
deepwiki commands for docctx CLI.
"""

import asyncio
import json

import click

from docctx.providers.deepwiki import DeepwikiProvider
from docctx.utils.helpers import Timer


@click.command()
@click.argument('query', nargs=-1, required=True)
@click.option('--max-items', '-n', type=int, help='Maximum number of pages to return')
@click.option('--max-tokens', '-t', type=int, help='Token budget per page')
@click.option('--no-navigation', is_flag=True, help='List matching pages instead of the navigation index')
@click.option('--json', 'as_json', is_flag=True, help='Print mentions as JSON')
@click.option('--max-content', type=int, default=0, help='Maximum content length to display (0 = all)')
@click.pass_context
def deepwiki_cmd(ctx, query, max_items, max_tokens, no_navigation, as_json, max_content):
    """Fetch deepwiki pages: USER/REPO [PAGE NUMBERS | SEARCH TEXT] or a chat URL."""
    config = ctx.obj['config']
    provider = DeepwikiProvider(config)

    settings = {
        'max_mention_items': max_items,
        'max_tokens': max_tokens,
        'enable_navigation': not no_navigation,
        'debounce_delay': 100,
    }

    text = " ".join(query)
    with Timer("deepwiki") as timer:
        mentions = asyncio.run(provider.mentions(text, settings))

    if as_json:
        click.echo(json.dumps([m.to_dict() for m in mentions], ensure_ascii=False, indent=2))
        return

    if not mentions:
        click.echo("No results found.")
        return

    if len(mentions) == 1 and mentions[0].is_error:
        raise click.ClickException(mentions[0].description)

    _print_mentions(mentions, max_content)
    click.echo(f"\nCompleted in {timer}")


def _print_mentions(mentions, max_content=0):
    """Print mentions in a formatted way."""
    for mention in mentions:
        click.echo(f"\n{'='*60}")
        click.echo(mention.title)
        if mention.uri:
            click.echo(f"URL: {mention.uri}")
        click.echo(mention.description)
        click.echo("-" * 60)

        content = mention.data.get('content', '')
        if max_content and len(content) > max_content:
            content = content[:max_content] + "..."
        click.echo(content)
