"""MIDI command implementations."""

import click

from padplayer.midi import MidiManager


@click.group(name="midi")
def midi_group():
    """MIDI device commands."""
    pass


def _echo_ports(title: str, ports: list[str], port_filter: str) -> None:
    click.echo(f"{title}:\n")
    if not ports:
        click.echo("  (none)")
        return
    for i, port in enumerate(ports):
        marker = "  <- controller" if port_filter.lower() in port.lower() else ""
        click.echo(f"  [{i}] {port}{marker}")


@midi_group.command(name="list")
@click.option(
    "--filter",
    "port_filter",
    default="APC Key 25",
    show_default=True,
    help="Substring marking the controller's ports",
)
def list_midi(port_filter: str):
    """List MIDI ports, marking the ones the player would connect to."""
    ports = MidiManager.list_ports()

    _echo_ports("MIDI Input Ports", ports["input"], port_filter)
    click.echo()
    _echo_ports("MIDI Output Ports", ports["output"], port_filter)

    matched = [p for p in ports["input"] if port_filter.lower() in p.lower()]
    if not matched:
        click.echo(f"\nNo port matches '{port_filter}'. Is the controller plugged in?")
