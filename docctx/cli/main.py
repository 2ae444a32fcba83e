"""
Main CLI entry point for docctx.
"""

import click

from docctx.config.settings import Config
from docctx.utils.logging import setup_logging
from .context7 import context7_cmd
from .deepwiki import deepwiki_cmd
from .web2md import web2md_cmd


@click.group()
@click.option('--output-dir', '-d', help='Directory for saved markdown')
@click.option('--log-level', '-l', default=None, help='Logging level')
@click.option('--log-file', help='Log file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def cli(ctx, output_dir, log_level, log_file, verbose):
   """docctx - Documentation context for AI assistants"""

   # Initialize config
   config = Config(output_dir=output_dir)

   # Setup logging
   if verbose:
       log_level = 'DEBUG'

   setup_logging(log_level=log_level or config.log_level,
                 log_file=log_file or config.log_file)

   # Store config in context for subcommands
   ctx.ensure_object(dict)
   ctx.obj['config'] = config


@cli.command()
@click.pass_context
def version(ctx):
   """Show version information."""
   from docctx import __version__, __author__

   click.echo(f"docctx version {__version__}")
   click.echo(f"Author: {__author__}")


@cli.command()
@click.pass_context
def status(ctx):
   """Show docctx configuration."""
   config = ctx.obj['config']

   click.echo("docctx Status:")
   click.echo(f"  Output directory: {config.output_dir}")
   click.echo(f"  User agent: {config.user_agent}")
   click.echo(f"  Request timeout: {config.request_timeout}s")
   click.echo(f"  deepwiki timeout: {config.deepwiki_timeout}s")
   click.echo()

   click.echo("Endpoints:")
   click.echo(f"  deepwiki: {config.deepwiki_base_url}")
   click.echo(f"  deepwiki chat API: {config.deepwiki_chat_api_url}")
   click.echo(f"  context7 API: {config.context7_api_url}")
   click.echo()

   click.echo("Cache:")
   click.echo(f"  Max entries: {config.cache_max_size}")
   click.echo(f"  TTL: {config.cache_ttl:.0f}s (search: {config.search_cache_ttl:.0f}s)")

   if config.output_dir.exists():
       saved = list(config.output_dir.glob("*.md"))
       click.echo(f"  Saved markdown files: {len(saved)}")
   else:
       click.echo("  Saved markdown files: Not found")


# Add subcommands
cli.add_command(deepwiki_cmd, name='deepwiki')
cli.add_command(context7_cmd, name='context7')
cli.add_command(web2md_cmd, name='web2md')


def main():
   """Main entry point for the CLI."""
   cli()


if __name__ == '__main__':
   main()
