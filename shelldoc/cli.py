"""shelldoc CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click

from shelldoc import __version__


@click.group()
@click.version_option(version=__version__, prog_name="shelldoc")
@click.help_option("-h", "--help")
def cli():
    """shelldoc - Turn terminal history into documentation

    \b
    QUICK START:
      shelldoc filter process history.jsonl            # Keep documentation-worthy commands
      shelldoc filter process history.jsonl --validate # Also check command sequences
      shelldoc filter check "gti status"               # Explain a single decision"""
    pass


from shelldoc.commands.filter import filter_group

cli.add_command(filter_group)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
