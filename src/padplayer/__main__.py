"""Main entry point for padplayer."""

from padplayer.cli.main import cli

if __name__ == "__main__":
    cli()
