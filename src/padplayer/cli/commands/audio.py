"""Audio command implementations."""

import click

from padplayer.audio import AudioDevice


@click.group(name="audio")
def audio_group():
    """Audio device commands."""
    pass


@audio_group.command(name="list")
def list_audio():
    """List available low-latency audio output devices."""
    devices, api_names = AudioDevice.list_output_devices()

    click.echo(f"Available low-latency audio output devices ({api_names}):\n")

    if not devices:
        click.echo(f"No {api_names} devices found.")
        return

    for device_id, name, host_api in devices:
        click.echo(f"[{device_id}] {name}")
        click.echo(f"    Host API: {host_api}")
