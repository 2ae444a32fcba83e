"""
web2md commands for docctx CLI.
"""

from pathlib import Path

import click

from docctx.config.settings import Web2MdSettings
from docctx.exceptions import DocCtxError
from docctx.providers.web2md import ErrorType, Web2MdProvider, error_type_for
from docctx.utils.helpers import Timer, is_http_url


@click.command()
@click.argument('url')
@click.option('--output', '-o', help='Directory to save the markdown file in')
@click.option('--save', '-s', is_flag=True, help='Save into the configured output directory')
@click.option('--max-tokens', '-t', type=int, help='Token budget for the converted article')
@click.option('--timeout', type=int, help='Request timeout in milliseconds')
@click.pass_context
def web2md_cmd(ctx, url, output, save, max_tokens, timeout):
    """Convert the web article at URL to markdown."""
    config = ctx.obj['config']

    if not is_http_url(url):
        raise click.ClickException(f"{ErrorType.INVALID_URL.value}: {url} is not an http(s) URL")

    settings = Web2MdSettings.from_dict({
        'max_tokens': max_tokens,
        'request_timeout': timeout,
        'user_agent': config.user_agent,
    })
    provider = Web2MdProvider(config)

    try:
        with Timer("web2md") as timer:
            extracted, markdown = provider.convert(url, settings)
    except DocCtxError as e:
        raise click.ClickException(f"{error_type_for(e).value}: {e}")

    if output or save:
        directory = Path(output) if output else config.output_dir
        path = provider.save_markdown(url, markdown, directory)
        click.echo(f"Saved '{extracted.title}' to {path}")
        click.echo(f"Completed in {timer}")
    else:
        click.echo(markdown)
