# reverberance/cli/render_cmd.py

"""
CLI commands for rendering reverberated audio and exporting impulse responses.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click
import numpy as np
from tabulate import tabulate

from reverberance.config import ReverberanceConfig, ReverbParameters
from reverberance.core.analysis import compute_output_statistics
from reverberance.core.audio.effects import synthesize_impulse_response
from reverberance.core.audio.io import load_audio, save_audio
from reverberance.core.buffer import AudioBuffer
from reverberance.core.pipeline import render_reverb
from reverberance.errors import ReverbError

logger = logging.getLogger(__name__)

# --- Common Options ---
input_argument = click.argument("input_file", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
output_option = click.option("-o", "--output", type=click.Path(dir_okay=False, resolve_path=True), default=None,
                             help="Output audio file path (default: a file in paths.output_dir).")
seed_option = click.option("--seed", type=int, default=None, help="Random seed for impulse response synthesis.")

UNIT = click.FloatRange(0.0, 1.0)

_REVERB_OPTIONS = [
    click.option("--room-size", "room_size", type=UNIT, default=None, help="Room size (0=small room, 1=large hall)."),
    click.option("--pre-delay", "pre_delay_seconds", type=click.FloatRange(min=0.0), default=None, help="Pre-delay in seconds."),
    click.option("--decay-time", "decay_time_seconds", type=click.FloatRange(min=0.0, min_open=True), default=None, help="RT60 decay time in seconds."),
    click.option("--damping", type=UNIT, default=None, help="High frequency damping (0-1)."),
    click.option("--wet", "wet_level", type=UNIT, default=None, help="Wet signal level (0-1)."),
    click.option("--dry", "dry_level", type=UNIT, default=None, help="Dry signal level (0-1)."),
    click.option("--low-tone", type=UNIT, default=None, help="Bass emphasis (0.5 neutral)."),
    click.option("--high-tone", type=UNIT, default=None, help="Treble emphasis (0.5 neutral)."),
    click.option("--width", "stereo_width", type=UNIT, default=None, help="Stereo width (0=mono, 1=full)."),
    click.option("--stereo/--no-stereo", "enable_stereo", default=None, help="Enable stereo widening of the reverb."),
    click.option("--reverberation", type=UNIT, default=None, help="Overall reverberation amount (0-1)."),
    click.option("--early-reflections", "num_early_reflections", type=click.IntRange(min=0), default=None, help="Number of early reflections."),
    click.option("--early-gain", "early_reflection_gain", type=UNIT, default=None, help="Early reflection gain (0-1)."),
]


def reverb_options(func: Callable) -> Callable:
    """Adds one option per reverb parameter; unset options keep the configured preset."""
    for option in reversed(_REVERB_OPTIONS):
        func = option(func)
    return func


def _resolve_parameters(config: ReverberanceConfig, overrides: Dict[str, Any]) -> ReverbParameters:
    params = config.reverb.with_overrides(**overrides)
    logger.debug(f"Resolved reverb parameters: {params.model_dump()}")
    return params


def _format_report(params: ReverbParameters, stats: Optional[Dict[str, float]] = None) -> str:
    rows = [
        ("Room Size", f"{params.room_size:.2f}"),
        ("Pre-delay", f"{params.pre_delay_seconds * 1000:.0f} ms"),
        ("Decay Time (RT60)", f"{params.decay_time_seconds:.1f} s"),
        ("Damping", f"{params.damping:.2f}"),
        ("Wet/Dry Mix", f"{params.wet_level:.1f}/{params.dry_level:.1f}"),
        ("Early Reflections", str(params.num_early_reflections)),
        ("Low Tone", f"{params.low_tone:.2f}"),
        ("High Tone", f"{params.high_tone:.2f}"),
        ("Stereo Width", f"{params.stereo_width:.2f}"),
        ("Stereo Enabled", str(params.enable_stereo)),
        ("Reverberation", f"{params.reverberation:.2f}"),
    ]
    if stats is not None:
        rows += [
            ("Original RMS", f"{stats['original_rms']:.4f}"),
            ("Output RMS", f"{stats['output_rms']:.4f}"),
            ("Dynamic Range", f"{stats['dynamic_range_db']:.1f} dB"),
        ]
    return tabulate(rows, headers=["Parameter", "Value"], tablefmt="simple")


def _get_config(ctx: click.Context) -> ReverberanceConfig:
    if isinstance(ctx.obj, dict) and 'config' in ctx.obj:
        return ctx.obj['config']
    return ReverberanceConfig()


# --- Render Command ---
@click.command("render")
@input_argument
@output_option
@reverb_options
@seed_option
@click.option("--max-duration", type=click.FloatRange(min=0.0, min_open=True), default=None,
              help="Analysis window in seconds (default from config, 20 s).")
@click.option("--full-length", is_flag=True, default=False, help="Process the whole input, ignoring the analysis window.")
@click.option("--subtype", type=str, default=None, help="Soundfile subtype for the output (default from config).")
@click.pass_context
def render_cmd(ctx, input_file: str, output: Optional[str], seed: Optional[int], max_duration: Optional[float],
               full_length: bool, subtype: Optional[str], **overrides):
    """Add reverberation to INPUT_FILE and write the stereo result."""
    config = _get_config(ctx)
    input_path = Path(input_file)
    output_path = Path(output) if output else config.paths.output_dir / f"{input_path.stem}_reverb.wav"
    logger.info(f"Running 'render' on: {input_path}")

    window = None if full_length else (max_duration or config.defaults.max_duration)

    try:
        params = _resolve_parameters(config, overrides)
        data, sr = load_audio(input_path, sr=None, mono=False)
        if data.ndim == 2 and data.shape[0] > 2:
            logger.warning(f"Input has {data.shape[0]} channels. Converting to mono by averaging.")
            data = np.mean(data, axis=0)

        result = render_reverb(AudioBuffer(data, sr), params, seed=seed, max_duration=window)
        save_audio(result.output.data, sr, output_path, subtype=subtype or config.defaults.output_subtype)
        stats = compute_output_statistics(result.prepared.mono, result.output.data)

    except FileNotFoundError:
        raise click.UsageError(f"Input file not found: {input_path}")
    except (ReverbError, ValueError) as e:
        raise click.UsageError(f"Error during reverb rendering: {e}")
    except Exception as e:
        logger.error(f"An unexpected error occurred during rendering: {e}", exc_info=True)
        raise click.Abort()

    click.echo(_format_report(params, stats))
    click.echo(f"Reverberated audio saved as: {output_path}")


# --- Impulse Response Command ---
@click.command("impulse")
@output_option
@reverb_options
@seed_option
@click.option("--sample-rate", "sample_rate", type=click.IntRange(min=1), default=None,
              help="Sampling rate in Hz (default from config).")
@click.option("--subtype", type=str, default="FLOAT", show_default=True, help="Soundfile subtype for the output.")
@click.pass_context
def impulse_cmd(ctx, output: Optional[str], seed: Optional[int], sample_rate: Optional[int], subtype: str, **overrides):
    """Synthesize the reverb impulse response and write it as a mono file."""
    config = _get_config(ctx)
    output_path = Path(output) if output else config.paths.output_dir / "impulse_response.wav"
    sr = sample_rate or config.defaults.default_sample_rate

    try:
        params = _resolve_parameters(config, overrides)
        ir = synthesize_impulse_response(params, sr, seed=seed)
        save_audio(ir, sr, output_path, subtype=subtype)
    except (ReverbError, ValueError) as e:
        raise click.UsageError(f"Error during impulse response synthesis: {e}")
    except Exception as e:
        logger.error(f"An unexpected error occurred during impulse synthesis: {e}", exc_info=True)
        raise click.Abort()

    click.echo(_format_report(params))
    click.echo(f"Impulse response ({len(ir)} samples at {sr} Hz) saved as: {output_path}")
