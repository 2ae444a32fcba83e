"""
context7 commands for docctx CLI.
"""

import asyncio
import json

import click

from docctx.providers.context7 import Context7Provider
from docctx.utils.helpers import Timer


@click.command()
@click.argument('query', nargs=-1, required=True)
@click.option('--limit', '-n', type=int, help='Number of libraries to list')
@click.option('--tokens', '-t', type=int, help='Token budget for fetched documentation')
@click.option('--fetch', '-f', is_flag=True, help='Fetch documentation for the best match')
@click.option('--json', 'as_json', is_flag=True, help='Print mentions as JSON')
@click.pass_context
def context7_cmd(ctx, query, limit, tokens, fetch, as_json):
    """Search context7 libraries: LIBRARY [TOPIC WORDS]."""
    config = ctx.obj['config']
    provider = Context7Provider(config)
    settings = {'mention_limit': limit, 'tokens': tokens}

    text = " ".join(query)
    with Timer("context7") as timer:
        mentions = asyncio.run(provider.mentions(text, settings))

    if as_json:
        click.echo(json.dumps([m.to_dict() for m in mentions], ensure_ascii=False, indent=2))
        return

    if not mentions:
        click.echo("No libraries found.")
        return

    if not fetch:
        for rank, mention in enumerate(mentions, 1):
            click.echo(f"{rank}. {mention.title}")
            click.echo(f"   {mention.uri}")
            click.echo(f"   {mention.description}")
        click.echo(f"\nCompleted in {timer}")
        return

    items = asyncio.run(provider.items(mentions[0], settings))
    if not items:
        raise click.ClickException(f"No documentation available for {mentions[0].data.get('id')}")

    for item in items:
        click.echo(f"# {item.title}")
        if item.url:
            click.echo(f"URL: {item.url}")
        click.echo()
        click.echo(item.content)
