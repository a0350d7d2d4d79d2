# pstretch/cli/info_cmd.py

"""
CLI command that prints the header of a WAV file.
"""

import logging
from pathlib import Path

import click
import soundfile as sf

from pstretch.core.audio.io import UnsupportedFormatError, read_header

logger = logging.getLogger(__name__)


@click.command("info")
@click.argument("input_file", type=click.Path(dir_okay=False, resolve_path=True))
def info_cmd(input_file: str):
    """Show channel count, sample rate, bit depth and duration of INPUT_FILE."""
    input_path = Path(input_file)
    try:
        header = read_header(input_path)
        frames = sf.info(str(input_path)).frames
    except FileNotFoundError:
        raise click.ClickException(f"Input file not found: {input_path}")
    except UnsupportedFormatError as e:
        raise click.ClickException(str(e))
    except RuntimeError as e:
        raise click.ClickException(f"Could not read audio header: {e}")

    click.echo(f"file:        {input_path.name}")
    click.echo(f"channels:    {header.channels}")
    click.echo(f"sample_rate: {header.sample_rate}")
    click.echo(f"bit_depth:   {header.bit_depth}")
    click.echo(f"format:      {header.format.value}")
    click.echo(f"duration:    {frames / header.sample_rate:.3f}s")
