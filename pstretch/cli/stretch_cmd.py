# pstretch/cli/stretch_cmd.py

"""
CLI command that stretches a WAV file with the paulstretch engine.
"""

import logging
import math
from pathlib import Path
from typing import Optional

import click

from pstretch.config.models import PstretchConfig
from pstretch.core.audio.io import UnsupportedFormatError, Wave, load_wave, save_wave
from pstretch.core.stretch import paulstretch_multichannel
from pstretch.core.window import WINDOW_SHAPES
from pstretch.utils.progress import ChannelProgress

logger = logging.getLogger(__name__)


def derive_output_path(input_path: Path, suffix: str) -> Path:
    """input.wav -> input<suffix>.wav, next to the input file."""
    return input_path.with_name(f"{input_path.stem}{suffix}{input_path.suffix or '.wav'}")


@click.command("stretch")
@click.argument("input_file", type=click.Path(dir_okay=False, resolve_path=True))
@click.argument("output_file", type=click.Path(dir_okay=False, resolve_path=True), required=False)
@click.option("-s", "--stretch-factor", type=float, default=None,
              help="Output/input duration ratio (>1 stretches, <1 compresses). [default: 8.0]")
@click.option("-w", "--window-size-secs", type=float, default=None,
              help="Analysis window length in seconds. [default: 0.25]")
@click.option("--window", "window_shape", type=click.Choice(list(WINDOW_SHAPES), case_sensitive=False), default=None,
              help="Window table used for analysis and synthesis. [default: hann]")
@click.option("--seed", type=click.IntRange(min=0), default=None, help="Random seed for the phase randomizer (non-negative).")
@click.pass_context
def stretch_cmd(
    ctx,
    input_file: str,
    output_file: Optional[str],
    stretch_factor: Optional[float],
    window_size_secs: Optional[float],
    window_shape: Optional[str],
    seed: Optional[int]
):
    """
    Stretch INPUT_FILE in time without changing its pitch.

    OUTPUT_FILE defaults to the input name with the configured suffix
    (e.g. song.wav -> song_stretched.wav).
    """
    config: PstretchConfig = ctx.obj['config'] if isinstance(ctx.obj, dict) and 'config' in ctx.obj else PstretchConfig()
    defaults = config.stretch
    quiet = ctx.find_root().params.get("quiet", False)

    stretch_factor = defaults.stretch_factor if stretch_factor is None else stretch_factor
    window_size_secs = defaults.window_size_secs if window_size_secs is None else window_size_secs
    window_shape = defaults.window_shape if window_shape is None else window_shape.lower()
    seed = defaults.seed if seed is None else seed

    if not math.isfinite(stretch_factor) or stretch_factor <= 0:
        raise click.UsageError("Stretch factor must be a positive number.")
    if not math.isfinite(window_size_secs) or window_size_secs < 0:
        raise click.UsageError("Window size must be a non-negative number of seconds.")

    input_path = Path(input_file)
    output_path = Path(output_file) if output_file else derive_output_path(input_path, defaults.output_suffix)
    if output_path == input_path:
        raise click.UsageError("Output file must differ from the input file.")

    logger.info(f"Running 'stretch' on: {input_path}")
    logger.info(f"Output file: {output_path}")
    logger.info(f"Params: stretch_factor={stretch_factor}, window_size_secs={window_size_secs}, "
                f"window_shape='{window_shape}', seed={seed}")

    try:
        # 1. Read Input Audio
        wave = load_wave(input_path)
        header = wave.header
        if not quiet:
            click.echo(f"loaded file (channels: {header.channels}, bit_depth: {header.bit_depth}, "
                       f"sample_rate: {header.sample_rate})")

        # 2. Stretch every channel
        with ChannelProgress(hidden=quiet) as progress:
            stretched = paulstretch_multichannel(
                wave.data,
                header.sample_rate,
                window_size_secs,
                stretch_factor,
                progress=progress,
                seed=seed,
                window_shape=window_shape,
                on_channel=progress.start_channel,
            )

        # 3. Save with the input's header
        if not quiet:
            click.echo("exporting...")
        save_wave(output_path, Wave(header=header, data=stretched))

    except FileNotFoundError:
        raise click.ClickException(f"Input file not found: {input_path}")
    except UnsupportedFormatError as e:
        raise click.ClickException(str(e))
    except ValueError as e:
        raise click.ClickException(f"Error during stretching: {e}")
    except RuntimeError as e:
        # soundfile reports decoding/encoding failures as RuntimeError subclasses
        logger.error(f"Audio I/O failed: {e}", exc_info=True)
        raise click.ClickException(f"Could not read or write audio: {e}")

    if quiet:
        return
    out_seconds = len(stretched[0]) / header.sample_rate
    click.echo(f"Successfully stretched '{input_path.name}' by {stretch_factor}x "
               f"({wave.duration:.2f}s -> {out_seconds:.2f}s), saved to '{output_path.name}'.")
