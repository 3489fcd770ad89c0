"""Command-line interface using Click."""

import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from PIL import Image

from . import __version__
from .config import (
    DEFAULT_ART_AREA,
    FPS,
    MAX_FRAME_FAILURE_RATE,
    RENDER_WORKERS,
    VIDEO_HEIGHT,
    VIDEO_WIDTH,
    get_output_dir,
    parse_resolution,
)
from .exceptions import ExportCancelled, InputValidationError, LyricMVError
from .core.models import FontPreset, StyleConfig
from .core.serialization import load_backgrounds, load_timeline, save_backgrounds
from .utils.logging import setup_logging
from .utils.validation import validate_output_path

FONT_CHOICES = [preset.value for preset in FontPreset]


def build_style(art_size: int, font: str) -> StyleConfig:
    """Style from CLI options (art size in percent)."""
    return StyleConfig.from_percent(art_size, font)


def resolve_resolution(resolution: Optional[str]) -> Tuple[int, int]:
    if not resolution:
        return VIDEO_WIDTH, VIDEO_HEIGHT
    try:
        return parse_resolution(resolution)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--resolution'")


def resolve_output_path(output: Optional[str], title: str, artist: str) -> Path:
    from .core.components.render.video_writer import default_output_name

    if output:
        return validate_output_path(output)
    return validate_output_path(str(get_output_dir() / default_output_name(title, artist)))


def read_audio_duration(audio_path: str) -> float:
    """Length of the audio track in seconds."""
    from moviepy import AudioFileClip

    try:
        clip = AudioFileClip(audio_path)
    except (OSError, KeyError, IndexError) as e:
        raise InputValidationError(f"Cannot read audio file {audio_path}: {e}") from e
    try:
        return float(clip.duration)
    finally:
        clip.close()


def _run(ctx, fn):
    logger = ctx.obj['logger']
    try:
        return fn(logger)
    except ExportCancelled:
        logger.warning("Export cancelled")
        sys.exit(130)
    except LyricMVError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Write logs to this file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """lyricmv - Render lyric music videos from timed lyrics."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('lyrics_json', type=click.Path(exists=True))
@click.pass_context
def scenes(ctx, lyrics_json):
    """List the scenes the lyrics are grouped into."""
    from .core.components.scenes import segment

    def run(logger):
        timeline = load_timeline(lyrics_json)
        found = segment(timeline.lines)
        for i, scene in enumerate(found, start=1):
            click.echo(
                f"Scene {i}: {scene.start_time:.2f}s - {scene.end_time:.2f}s "
                f"({len(scene.lines)} lines)"
            )
            for line in scene.lines:
                click.echo(f"    {line.text}")
        click.echo(f"{len(found)} scenes")

    _run(ctx, run)


@cli.command()
@click.argument('lyrics_json', type=click.Path(exists=True))
@click.option('--title', required=True, help='Song title used in the image prompt')
@click.option('--artist', required=True, help='Artist name used in the image prompt')
@click.option('--audio', type=click.Path(exists=True), help='Audio file (used for track duration)')
@click.option('--duration', type=float, default=None, help='Track duration in seconds')
@click.option('--image-dir', type=click.Path(), default=None,
              help='Save generated images here instead of embedding them')
@click.option('-o', '--output', type=click.Path(), default='backgrounds.json',
              help='Where to write the background list')
@click.pass_context
def backgrounds(ctx, lyrics_json, title, artist, audio, duration, image_dir, output):
    """Generate one AI background per lyric scene."""
    from .core.components.scenes import GeminiImageGenerator, generate_backgrounds, segment

    def run(logger):
        timeline = load_timeline(lyrics_json)
        timeline.require_lyrics()
        track_duration = duration
        if track_duration is None and audio:
            track_duration = read_audio_duration(audio)
        if track_duration is None:
            track_duration = timeline.last_end_time

        generator = GeminiImageGenerator(output_dir=Path(image_dir) if image_dir else None)
        records = generate_backgrounds(
            segment(timeline.lines),
            generator,
            title,
            artist,
            track_duration,
            on_progress=lambda percent, message: logger.info(f"[{percent:3d}%] {message}"),
        )
        save_backgrounds(output, records)
        logger.info(f"✅ Wrote {len(records)} backgrounds to {output}")

    _run(ctx, run)


@cli.command()
@click.argument('lyrics_json', type=click.Path(exists=True))
@click.argument('cover', type=click.Path(exists=True))
@click.option('--at', 'at_time', type=float, required=True, help='Timestamp in seconds')
@click.option('--backgrounds', 'backgrounds_json', type=click.Path(exists=True),
              help='Background list from the backgrounds command')
@click.option('--art-size', type=int, default=int(DEFAULT_ART_AREA * 100),
              help='Cover art share of the frame width in percent (20-60)')
@click.option('--font', type=click.Choice(FONT_CHOICES), default='sans', help='Lyric font preset')
@click.option('--resolution', type=str, default=None,
              help="Frame resolution (e.g., '1280x720', '720p')")
@click.option('-o', '--output', type=click.Path(), default='frame.png', help='Output image path')
@click.pass_context
def snapshot(ctx, lyrics_json, cover, at_time, backgrounds_json, art_size, font, resolution, output):
    """Render the preview frame at one timestamp."""
    from .core.components.render import ImageCache, PreviewPlayer, collect_image_refs

    def run(logger):
        timeline = load_timeline(lyrics_json)
        records = load_backgrounds(backgrounds_json) if backgrounds_json else []
        style = build_style(art_size, font)
        width, height = resolve_resolution(resolution)

        with ImageCache(width, height) as images:
            images.preload(collect_image_refs(cover, records))
            player = PreviewPlayer(
                timeline, records, cover, style, images,
                duration=max(timeline.last_end_time, at_time),
                width=images.width, height=images.height,
            )
            frame = player.frame_at(at_time)
        Image.fromarray(frame.image).save(output)
        playback = frame.sample.playback
        logger.info(
            f"prev={playback.prev.text if playback.prev else '-'} | "
            f"current={playback.current.text if playback.current else '-'} | "
            f"next={playback.next.text if playback.next else '-'}"
        )
        logger.info(f"✅ Frame at {at_time:.2f}s written to {output}")

    _run(ctx, run)


@cli.command()
@click.argument('lyrics_json', type=click.Path(exists=True))
@click.argument('audio', type=click.Path(exists=True))
@click.argument('cover', type=click.Path(exists=True))
@click.option('--title', required=True, help='Song title')
@click.option('--artist', required=True, help='Artist name')
@click.option('--backgrounds', 'backgrounds_json', type=click.Path(exists=True),
              help='Background list from the backgrounds command')
@click.option('--art-size', type=int, default=int(DEFAULT_ART_AREA * 100),
              help='Cover art share of the frame width in percent (20-60)')
@click.option('--font', type=click.Choice(FONT_CHOICES), default='sans', help='Lyric font preset')
@click.option('--resolution', type=str, default=None,
              help="Video resolution (e.g., '1280x720', '720p', '1080p')")
@click.option('--fps', type=int, default=FPS, help='Video frame rate')
@click.option('--duration', type=float, default=None,
              help='Video duration in seconds (default: audio length)')
@click.option('--max-failure-rate', type=float, default=MAX_FRAME_FAILURE_RATE,
              help='Abort when more than this fraction of frames fail')
@click.option('--workers', type=int, default=RENDER_WORKERS, help='Frame render threads')
@click.option('-o', '--output', type=click.Path(), help='Output video path')
@click.option('--no-progress', is_flag=True, help='Disable progress bar during rendering')
@click.pass_context
def export(ctx, lyrics_json, audio, cover, title, artist, backgrounds_json, art_size,
           font, resolution, fps, duration, max_failure_rate, workers, output, no_progress):
    """Export the lyric video as an MP4 file."""
    from .core.components.render import ConsoleProgressBar, start_export

    def run(logger):
        timeline = load_timeline(lyrics_json)
        records = load_backgrounds(backgrounds_json) if backgrounds_json else []
        style = build_style(art_size, font)
        width, height = resolve_resolution(resolution)
        output_path = resolve_output_path(output, title, artist)
        video_duration = duration if duration is not None else read_audio_duration(audio)

        progress = None if no_progress else ConsoleProgressBar(prefix="Rendering")
        job = start_export(
            timeline, records, audio, video_duration, fps, style, cover, output_path,
            width=width, height=height,
            on_progress=progress,
            max_failure_rate=max_failure_rate,
            workers=workers,
        )
        try:
            result = job.result()
        except KeyboardInterrupt:
            job.cancel()
            result = job.result()
        finally:
            if progress is not None:
                progress.finish()

        if result.skipped_frames:
            logger.warning(f"{result.skipped_frames} frames were skipped")
        logger.info(f"✅ Lyric video exported: {result.output_path}")

    _run(ctx, run)


if __name__ == '__main__':
    cli()
