"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from .commands import audio_group, midi_group

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """Where file logs go: --log-file, ./padplayer-debug.log in debug mode, else ~/.padplayer/logs."""
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "padplayer-debug.log"
    return Path.home() / ".padplayer" / "logs" / "padplayer.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count for stderr (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log everything at DEBUG to ./padplayer-debug.log
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)

    Returns:
        Path of the log file
    """
    if debug or verbose >= 2:
        console_level = logging.DEBUG
    elif verbose == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    file_level = logging.DEBUG if debug else getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    # Rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(min(file_level, console_level))
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logger.info(
        f"Logging configured: file={log_path} ({logging.getLevelName(file_level)}), "
        f"console={logging.getLevelName(console_level)}"
    )
    return log_path


def run_app(
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str,
    config_path: Optional[Path],
    music_folder: Optional[Path],
) -> None:
    """Load config, start the app and block until Enter is pressed."""
    # Lazy imports keep `--help` and the list commands light
    from padplayer.app import PadPlayerApp
    from padplayer.exceptions import format_error_for_display
    from padplayer.models import AppConfig

    log_path = setup_logging(verbose, debug, log_file, log_level)
    logger.info("Starting Padplayer")

    app = None
    try:
        config = AppConfig.load_or_default(config_path)
        if music_folder is not None:
            config = config.model_copy(update={"music_folder": music_folder})

        app = PadPlayerApp(config)
        click.echo(f"Music folder: {config.music_folder.absolute()}")
        app.run()

    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.Abort:
        raise
    except Exception as e:
        logger.exception("Error running application")

        user_message, recovery_hint = format_error_for_display(e)

        click.echo("\n" + "=" * 70, err=True)
        click.echo(f"ERROR: {user_message}", err=True)
        click.echo("=" * 70, err=True)
        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)

        sys.exit(1)
    finally:
        if app is not None:
            app.stop()


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version="0.1.0", prog_name="padplayer")
@click.option(
    "-v", "--verbose",
    count=True,
    help="Increase verbosity (-v: INFO, -vv: DEBUG)",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode (DEBUG level, logs to ./padplayer-debug.log)",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Custom log file path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Log level for file logging (default: INFO)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.padplayer/config.json)",
)
@click.option(
    "--music-folder",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="MUSIC_FOLDER",
    default=None,
    help="Music root with one NN_name folder per pad (env: MUSIC_FOLDER)",
)
def cli(
    ctx,
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str,
    config_path: Optional[Path],
    music_folder: Optional[Path],
):
    """
    Padplayer - play music folders from an APC Key 25 with a live filter.

    Each pad plays the folder of the music root whose name starts with the
    pad's two-digit index (pad 3 plays '03_*'). Knob 1 sets the volume,
    knob 8 sweeps a low-pass filter toggled by Resume/Pause.

    \b
    Examples:
      # Play from ./music (or $MUSIC_FOLDER)
      padplayer

      # Play from another folder with INFO logs on the terminal
      padplayer -v --music-folder ~/Music/sets

      # List audio devices
      padplayer audio list

      # List MIDI devices
      padplayer midi list
    """
    ctx.obj = {
        "verbose": verbose,
        "debug": debug,
        "log_file": log_file,
        "log_level": log_level,
        "config_path": config_path,
        "music_folder": music_folder,
    }

    # Subcommands run on their own
    if ctx.invoked_subcommand is not None:
        return

    run_app(**ctx.obj)


@cli.command()
@click.pass_context
def run(ctx):
    """Start the player (same as running padplayer without a command)."""
    run_app(**ctx.obj)


cli.add_command(audio_group)
cli.add_command(midi_group)

if __name__ == "__main__":
    cli()
