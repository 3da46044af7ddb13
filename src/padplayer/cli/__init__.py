"""Command-line interface for padplayer."""
